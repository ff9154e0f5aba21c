"""
Invoice form validation.

Coerces raw form strings into an InvoiceDraft and reports field-level
errors keyed by the form's own field names (customerId, amount, status).

Design Decisions:
- One immutable pydantic model built at import time, no mutable state
- Every field is checked so a single submission can surface all errors
- Missing, blank and malformed values share the field's one message
"""

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, Overflow
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from invoicedesk.domain.models import (
    InvoiceDraft,
    InvoiceStatus,
    ValidationFailure,
    ValidationResult,
)


CUSTOMER_MESSAGE = "Please select a customer."
AMOUNT_MESSAGE = "Please enter an amount greater than $0."
STATUS_MESSAGE = "Please select an invoice status."

# Form field names read from a submission; anything else is ignored
FORM_FIELDS = ("customerId", "amount", "status")

_STATUS_VALUES = frozenset(status.value for status in InvoiceStatus)


class InvoiceForm(BaseModel):
    """Schema for the create and update invoice forms."""
    
    model_config = ConfigDict(frozen=True, extra="ignore")
    
    customer_id: str = Field(default=None, alias="customerId", validate_default=True)
    amount: Decimal = Field(default=None, validate_default=True)
    status: InvoiceStatus = Field(default=None, validate_default=True)
    
    @field_validator("customer_id", mode="before")
    @classmethod
    def require_customer(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("customer_required", CUSTOMER_MESSAGE)
        return value
    
    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> Decimal:
        """Coerce the raw amount and require at least one whole cent."""
        if value is None or isinstance(value, bool):
            raise PydanticCustomError("amount_positive", AMOUNT_MESSAGE)
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise PydanticCustomError("amount_positive", AMOUNT_MESSAGE) from None
        
        if not amount.is_finite():
            raise PydanticCustomError("amount_positive", AMOUNT_MESSAGE)
        
        # Positivity is judged on the stored cents so "0.001" cannot persist as 0
        try:
            cents = (amount * 100).to_integral_value(rounding=ROUND_HALF_UP)
        except (Overflow, InvalidOperation):
            raise PydanticCustomError("amount_positive", AMOUNT_MESSAGE) from None
        
        if cents < 1:
            raise PydanticCustomError("amount_positive", AMOUNT_MESSAGE)
        return amount
    
    @field_validator("status", mode="before")
    @classmethod
    def require_status(cls, value: Any) -> str:
        if not isinstance(value, str) or value not in _STATUS_VALUES:
            raise PydanticCustomError("status_choice", STATUS_MESSAGE)
        return value


def safe_parse_invoice_form(form: Mapping[str, Any]) -> ValidationResult:
    """
    Validate raw invoice form input without raising.
    
    Args:
        form: Raw field name -> raw value mapping, typically a submitted form
        
    Returns:
        InvoiceDraft on success, ValidationFailure with per-field messages otherwise
    """
    payload = {name: form.get(name) for name in FORM_FIELDS}
    
    try:
        parsed = InvoiceForm.model_validate(payload)
    except ValidationError as exc:
        return _to_failure(exc)
    
    return InvoiceDraft(
        customer_id=parsed.customer_id,
        amount=parsed.amount,
        status=parsed.status,
    )


def _to_failure(exc: ValidationError) -> ValidationFailure:
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        name = str(error["loc"][0]) if error["loc"] else "form"
        field_errors.setdefault(name, []).append(error["msg"])
    
    message = "; ".join(msg for messages in field_errors.values() for msg in messages)
    return ValidationFailure(field_errors=field_errors, message=message)
