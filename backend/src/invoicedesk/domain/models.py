"""
Domain models for the invoice dashboard actions.

Design Decisions:
- Frozen dataclasses for values that flow between layers
- Decimal for user-entered money, integer cents once persisted
- Redirect is a returned outcome, never raised, so no except clause
  around a database call can swallow it
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


class InvoiceStatus(Enum):
    """Lifecycle status of an invoice."""
    PENDING = "pending"
    PAID = "paid"


@dataclass(frozen=True)
class InvoiceDraft:
    """
    Validated invoice form input.
    
    Identifier and date are not part of the draft: the identifier is
    assigned by the store and the date by the create handler.
    """
    customer_id: str
    amount: Decimal
    status: InvoiceStatus
    
    @property
    def amount_in_cents(self) -> int:
        """Amount in integer cents, rounding half-cents up."""
        return int((self.amount * 100).to_integral_value(rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ValidationFailure:
    """Field-level validation errors keyed by form field name."""
    field_errors: dict[str, list[str]]
    message: str


ValidationResult = InvoiceDraft | ValidationFailure


@dataclass(frozen=True)
class Invoice:
    """A persisted invoice row."""
    id: str
    customer_id: str
    amount: int  # cents
    status: InvoiceStatus
    date: str  # YYYY-MM-DD


@dataclass(frozen=True)
class User:
    """A dashboard user as read by the credential verifier."""
    id: str
    name: str
    email: str
    password: str  # argon2 hash


@dataclass
class ActionState:
    """
    Result of a form-bound action that did not redirect.
    
    Consumed by the calling UI to render inline feedback.
    """
    errors: dict[str, list[str]] | None = None
    message: str | None = None


@dataclass(frozen=True)
class Redirect:
    """Instruction for the caller to navigate to ``path``."""
    path: str


ActionOutcome = ActionState | Redirect
