"""Typed failures raised by the membership and revenue services.

All of them derive from ``ValueError`` so callers that only care about
"the request was rejected" can keep catching ``ValueError``.
"""


class MembershipError(ValueError):
    """Base class for membership and revenue errors."""


class NotFoundError(MembershipError):
    """Member, plan or invoice is missing or belongs to another organization."""


class ConflictError(MembershipError):
    """The request conflicts with the freeze ledger or the membership state."""


class InvalidStateError(MembershipError):
    """The operation is not allowed from the current membership status."""


class ValidationError(MembershipError):
    """Malformed input: inverted date ranges, bad amounts, unknown units."""
