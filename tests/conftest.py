"""Shared fakes and fixtures for the invoicedesk test suite."""

from collections.abc import Mapping
from datetime import date
from typing import Any

import pytest

from invoicedesk.domain.errors import AuthError
from invoicedesk.domain.models import Invoice, InvoiceStatus, Redirect
from invoicedesk.services.actions import InvoiceActions
from invoicedesk.services.auth import CredentialVerifier
from invoicedesk.services.cache import PathCache

FIXED_DAY = date(2024, 3, 5)


# --- Mock Implementations ---


class FakeInvoiceGateway:
    """In-memory invoice gateway that records every call."""

    def __init__(self, events: list[str] | None = None) -> None:
        self.events = events if events is not None else []
        self.rows: dict[str, Invoice] = {}
        self.inserted: list[dict[str, Any]] = []
        self.updated: list[dict[str, Any]] = []
        self.deleted: list[str] = []
        self.list_calls = 0
        self.error: Exception | None = None
        self._next_id = 1

    async def insert_invoice(
        self, customer_id: str, amount: int, status: InvoiceStatus, date: str
    ) -> str:
        self.events.append("insert")
        if self.error:
            raise self.error
        invoice_id = f"inv-{self._next_id}"
        self._next_id += 1
        self.inserted.append(
            {"customer_id": customer_id, "amount": amount, "status": status, "date": date}
        )
        self.rows[invoice_id] = Invoice(invoice_id, customer_id, amount, status, date)
        return invoice_id

    async def update_invoice(
        self, invoice_id: str, customer_id: str, amount: int, status: InvoiceStatus
    ) -> None:
        self.events.append("update")
        if self.error:
            raise self.error
        self.updated.append(
            {"id": invoice_id, "customer_id": customer_id, "amount": amount, "status": status}
        )
        if invoice_id in self.rows:
            current = self.rows[invoice_id]
            self.rows[invoice_id] = Invoice(current.id, customer_id, amount, status, current.date)

    async def delete_invoice(self, invoice_id: str) -> None:
        self.events.append("delete")
        if self.error:
            raise self.error
        self.deleted.append(invoice_id)
        self.rows.pop(invoice_id, None)

    async def list_invoices(self) -> list[Invoice]:
        self.list_calls += 1
        if self.error:
            raise self.error
        return sorted(self.rows.values(), key=lambda invoice: invoice.date, reverse=True)


class RecordingCache(PathCache):
    """PathCache that logs revalidations into a shared event list."""

    def __init__(self, events: list[str] | None = None) -> None:
        super().__init__()
        self.events = events if events is not None else []
        self.revalidated: list[str] = []

    def revalidate_path(self, path: str) -> None:
        self.events.append(f"revalidate:{path}")
        self.revalidated.append(path)
        super().revalidate_path(path)


class StubVerifier(CredentialVerifier):
    """Verifier returning a fixed redirect or raising a fixed error."""

    def __init__(self, redirect: str = "/dashboard", error: Exception | None = None) -> None:
        self.redirect = redirect
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def sign_in(self, strategy: str, form: Mapping[str, Any]) -> Redirect:
        self.calls.append((strategy, dict(form)))
        if self.error:
            raise self.error
        return Redirect(self.redirect)


class UnknownAuthError(AuthError):
    type = "AccessDenied"


# --- Fixtures ---


@pytest.fixture
def events() -> list[str]:
    return []


@pytest.fixture
def gateway(events: list[str]) -> FakeInvoiceGateway:
    return FakeInvoiceGateway(events)


@pytest.fixture
def cache(events: list[str]) -> RecordingCache:
    return RecordingCache(events)


@pytest.fixture
def actions(gateway: FakeInvoiceGateway, cache: RecordingCache) -> InvoiceActions:
    return InvoiceActions(gateway=gateway, cache=cache, today=lambda: FIXED_DAY)
