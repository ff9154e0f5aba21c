"""
Invoice dashboard endpoints.

Form posts from the dashboard land here. A successful write answers with
303 See Other to the listing; a rejected one answers 200 with the
ActionState the form renders inline.
"""

import logging
from collections.abc import Mapping
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from invoicedesk.api.deps import (
    get_invoice_actions,
    get_invoice_gateway,
    get_path_cache,
    read_form,
)
from invoicedesk.api.schemas import ActionStateResponse, InvoiceResponse, InvoiceStatusEnum
from invoicedesk.domain.errors import PersistenceError
from invoicedesk.domain.models import ActionOutcome, Redirect
from invoicedesk.infrastructure.gateway import InvoiceGateway
from invoicedesk.services.actions import INVOICES_PATH, InvoiceActions
from invoicedesk.services.cache import PathCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix=INVOICES_PATH, tags=["invoices"])

FORM_RESPONSES = {
    303: {"description": "Saved; follow Location to the invoices listing"},
}


def to_response(outcome: ActionOutcome) -> Response:
    """Translate an action outcome into an HTTP response."""
    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.path, status_code=status.HTTP_303_SEE_OTHER)
    
    body = ActionStateResponse(errors=outcome.errors, message=outcome.message)
    return JSONResponse(content=body.model_dump(exclude_none=True))


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    gateway: Annotated[InvoiceGateway, Depends(get_invoice_gateway)],
    cache: Annotated[PathCache, Depends(get_path_cache)],
) -> list[InvoiceResponse]:
    """
    List invoices, newest first.
    
    Served from the view cache until a create, update or delete
    revalidates it.
    """
    try:
        invoices = await cache.get_or_render(INVOICES_PATH, gateway.list_invoices)
    except PersistenceError as e:
        logger.error(f"Failed to load invoices: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Invoices are temporarily unavailable",
        )
    
    return [
        InvoiceResponse(
            id=invoice.id,
            customer_id=invoice.customer_id,
            amount=invoice.amount,
            status=InvoiceStatusEnum(invoice.status.value),
            date=invoice.date,
        )
        for invoice in invoices
    ]


@router.post("/create", response_model=ActionStateResponse, responses=FORM_RESPONSES)
async def create_invoice(
    form: Annotated[Mapping[str, str], Depends(read_form)],
    actions: Annotated[InvoiceActions, Depends(get_invoice_actions)],
):
    """Create an invoice from the customerId, amount and status fields."""
    outcome = await actions.create_invoice(None, form)
    return to_response(outcome)


@router.post("/{invoice_id}/edit", response_model=ActionStateResponse, responses=FORM_RESPONSES)
async def update_invoice(
    invoice_id: str,
    form: Annotated[Mapping[str, str], Depends(read_form)],
    actions: Annotated[InvoiceActions, Depends(get_invoice_actions)],
):
    """Update customer, amount and status of an invoice."""
    outcome = await actions.update_invoice(invoice_id, None, form)
    return to_response(outcome)


@router.post("/{invoice_id}/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str,
    actions: Annotated[InvoiceActions, Depends(get_invoice_actions)],
) -> Response:
    """Delete an invoice. Deleting an unknown id is not an error."""
    await actions.delete_invoice(invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
