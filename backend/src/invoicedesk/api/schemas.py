"""
Pydantic schemas for API responses.

These schemas define the contract between the dashboard front end and
the backend. Amounts are integer cents.
"""

from enum import Enum

from pydantic import BaseModel


class InvoiceStatusEnum(str, Enum):
    """Invoice status for API responses."""
    PENDING = "pending"
    PAID = "paid"


# =============================================================================
# Response Schemas
# =============================================================================

class ActionStateResponse(BaseModel):
    """Inline feedback for a form submission that did not redirect."""
    errors: dict[str, list[str]] | None = None
    message: str | None = None


class LoginStateResponse(BaseModel):
    """Error message for a rejected sign-in."""
    message: str


class InvoiceResponse(BaseModel):
    """One row of the invoices listing."""
    id: str
    customer_id: str
    amount: int
    status: InvoiceStatusEnum
    date: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: str | None = None
