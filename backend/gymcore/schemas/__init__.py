from gymcore.schemas.invoice import (
    InvoiceCreate,
    InvoiceLineItem,
    ItemFreezeRequest,
    ItemFreezeResponse,
)
from gymcore.schemas.member import (
    ChangePlanRequest,
    CheckInResponse,
    EnrollRequest,
    ExpiringMemberResponse,
    FreezeRequest,
    MemberCreate,
    MemberResponse,
    MembershipChangeResponse,
    RenewRequest,
    UnfreezeRequest,
)
from gymcore.schemas.payment import PaymentCreate
from gymcore.schemas.plan import PlanCreate, PlanResponse

__all__ = [
    "ChangePlanRequest",
    "CheckInResponse",
    "EnrollRequest",
    "ExpiringMemberResponse",
    "FreezeRequest",
    "InvoiceCreate",
    "InvoiceLineItem",
    "ItemFreezeRequest",
    "ItemFreezeResponse",
    "MemberCreate",
    "MemberResponse",
    "MembershipChangeResponse",
    "PaymentCreate",
    "PlanCreate",
    "PlanResponse",
    "RenewRequest",
    "UnfreezeRequest",
]
