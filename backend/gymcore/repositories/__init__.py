from gymcore.repositories.invoice_repository import InvoiceRepository
from gymcore.repositories.member_repository import MemberRepository
from gymcore.repositories.organization_repository import OrganizationRepository
from gymcore.repositories.payment_repository import PaymentRepository
from gymcore.repositories.plan_repository import PlanRepository

__all__ = [
    "InvoiceRepository",
    "MemberRepository",
    "OrganizationRepository",
    "PaymentRepository",
    "PlanRepository",
]
