from gymcore.models.invoice import Invoice, InvoiceStatus
from gymcore.models.member import Member, MemberFreeze, MembershipStatus, MemberSource
from gymcore.models.organization import Organization
from gymcore.models.payment import Payment, PaymentStatus
from gymcore.models.plan import DurationUnit, Plan, PlanType

__all__ = [
    "DurationUnit",
    "Invoice",
    "InvoiceStatus",
    "Member",
    "MemberFreeze",
    "MemberSource",
    "MembershipStatus",
    "Organization",
    "Payment",
    "PaymentStatus",
    "Plan",
    "PlanType",
]
