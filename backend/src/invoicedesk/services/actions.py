"""
Form actions for the invoice dashboard.

Every form-bound action follows the same sequence:
1. Validate the submitted fields
2. Run exactly one statement through the gateway
3. Revalidate the invoices listing and return a Redirect to it

Validation and database failures come back as an ActionState for the
form to render. A Redirect is a return value, so it can never be mistaken
for a database error by the except clause around the write.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime, timezone
from typing import Any

from invoicedesk.domain.errors import AuthError, PersistenceError
from invoicedesk.domain.models import (
    ActionOutcome,
    ActionState,
    Redirect,
    ValidationFailure,
)
from invoicedesk.infrastructure.gateway import InvoiceGateway
from invoicedesk.services.auth import CREDENTIALS_STRATEGY, CredentialVerifier
from invoicedesk.services.cache import PathCache
from invoicedesk.services.validation import safe_parse_invoice_form

logger = logging.getLogger(__name__)


INVOICES_PATH = "/dashboard/invoices"

CREATE_FAILED_MESSAGE = "Missing Fields. Failed to Create Invoice."
UPDATE_FAILED_MESSAGE = "Missing Fields. Failed to Update Invoices."

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."
SIGN_IN_FAILED_MESSAGE = "Something went wrong."


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class InvoiceActions:
    """
    Create, update and delete handlers bound to a gateway and a view cache.
    
    Holds no per-request state; one instance serves every request.
    """
    
    def __init__(
        self,
        gateway: InvoiceGateway,
        cache: PathCache,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self.gateway = gateway
        self.cache = cache
        self._today = today
    
    async def create_invoice(
        self,
        prev_state: ActionState | None,
        form: Mapping[str, Any],
    ) -> ActionOutcome:
        """
        Create an invoice from a submitted form.
        
        Args:
            prev_state: Previous form state, accepted for form-library compatibility
            form: Raw submitted fields (customerId, amount, status)
            
        Returns:
            Redirect to the listing on success, ActionState otherwise
        """
        validated = safe_parse_invoice_form(form)
        if isinstance(validated, ValidationFailure):
            return ActionState(errors=validated.field_errors, message=CREATE_FAILED_MESSAGE)
        
        amount_in_cents = validated.amount_in_cents
        created_on = self._today().isoformat()
        
        try:
            invoice_id = await self.gateway.insert_invoice(
                customer_id=validated.customer_id,
                amount=amount_in_cents,
                status=validated.status,
                date=created_on,
            )
        except PersistenceError as e:
            logger.error(f"Database Error: {e}")
            return ActionState(message=f"Database Error: {e}")
        
        logger.info(f"Created invoice {invoice_id} for customer {validated.customer_id}")
        return self._refresh_listing()
    
    async def update_invoice(
        self,
        invoice_id: str,
        prev_state: ActionState | None,
        form: Mapping[str, Any],
    ) -> ActionOutcome:
        """
        Update customer, amount and status of an existing invoice.
        
        The invoice's identifier and creation date are never changed.
        """
        validated = safe_parse_invoice_form(form)
        if isinstance(validated, ValidationFailure):
            return ActionState(errors=validated.field_errors, message=UPDATE_FAILED_MESSAGE)
        
        try:
            await self.gateway.update_invoice(
                invoice_id=invoice_id,
                customer_id=validated.customer_id,
                amount=validated.amount_in_cents,
                status=validated.status,
            )
        except PersistenceError as e:
            logger.error(f"Database Error: {e}")
            return ActionState(message=f"Database Error: {e}")
        
        logger.info(f"Updated invoice {invoice_id}")
        return self._refresh_listing()
    
    async def delete_invoice(self, invoice_id: str) -> None:
        """
        Delete an invoice and mark the listing stale.
        
        Store errors propagate; there is no redirect since this runs from
        the already rendered listing.
        """
        await self.gateway.delete_invoice(invoice_id)
        logger.info(f"Deleted invoice {invoice_id}")
        self.cache.revalidate_path(INVOICES_PATH)
    
    def _refresh_listing(self) -> Redirect:
        self.cache.revalidate_path(INVOICES_PATH)
        return Redirect(INVOICES_PATH)


async def authenticate(
    verifier: CredentialVerifier,
    prev_state: str | None,
    form: Mapping[str, Any],
) -> str | Redirect:
    """
    Sign a user in with the credentials strategy.
    
    Returns:
        The verifier's Redirect on success, or a user-facing error message
        
    Raises:
        Any non-AuthError raised by the verifier, unchanged
    """
    try:
        return await verifier.sign_in(CREDENTIALS_STRATEGY, form)
    except AuthError as error:
        if error.type == "CredentialsSignin":
            return INVALID_CREDENTIALS_MESSAGE
        logger.warning(f"Sign-in failed with {error.type}: {error}")
        return SIGN_IN_FAILED_MESSAGE
