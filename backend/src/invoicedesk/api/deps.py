"""
FastAPI dependencies.

Collaborators are built once in the application lifespan and stored on
``app.state``; routes receive them through these functions so tests can
swap in fakes without touching module globals.
"""

from collections.abc import Mapping

from fastapi import Request

from invoicedesk.infrastructure.gateway import InvoiceGateway
from invoicedesk.services.actions import InvoiceActions
from invoicedesk.services.auth import CredentialVerifier
from invoicedesk.services.cache import PathCache


def get_invoice_actions(request: Request) -> InvoiceActions:
    return request.app.state.invoice_actions


def get_invoice_gateway(request: Request) -> InvoiceGateway:
    return request.app.state.invoice_actions.gateway


def get_path_cache(request: Request) -> PathCache:
    return request.app.state.invoice_actions.cache


def get_credential_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.credential_verifier


async def read_form(request: Request) -> Mapping[str, str]:
    """Read a submitted form, keeping only text fields."""
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}
