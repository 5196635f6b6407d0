from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gymcore.core.auth import get_current_organization
from gymcore.core.database import get_db
from gymcore.core.errors import MembershipError
from gymcore.routers.members import raise_http_error
from gymcore.schemas.invoice import ItemFreezeRequest, ItemFreezeResponse
from gymcore.services.item_freeze import InvoiceItemFreezeService

router = APIRouter()


@router.post(
    "/{invoice_id}/items/{item_index}/freeze",
    response_model=ItemFreezeResponse,
    summary="Freeze an invoice item",
    responses={
        400: {"description": "Invalid freeze period, item or remaining allowance"},
        404: {"description": "Invoice not found"},
    },
)
async def freeze_invoice_item(
    invoice_id: UUID,
    item_index: int,
    data: ItemFreezeRequest,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> ItemFreezeResponse:
    """Extend the expiry of one billed service by the freeze length."""
    service = InvoiceItemFreezeService(db)
    try:
        result = service.freeze_item(
            organization_id,
            invoice_id,
            item_index,
            freeze_days=data.freeze_days,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=data.reason,
        )
    except MembershipError as e:
        raise_http_error(e)
    return ItemFreezeResponse(
        invoice_id=result.invoice_id,
        item_index=result.item_index,
        freeze_days=result.freeze_days,
        original_expiry_date=result.original_expiry_date,
        new_expiry_date=result.new_expiry_date,
        total_freeze_days_used=result.total_freeze_days_used,
    )
