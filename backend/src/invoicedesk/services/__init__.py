"""
Services package - Validation, form actions, sign-in and the view cache.
"""

from .actions import InvoiceActions, authenticate
from .auth import CredentialVerifier, UserCredentialVerifier
from .cache import PathCache
from .validation import safe_parse_invoice_form

__all__ = [
    "CredentialVerifier",
    "InvoiceActions",
    "PathCache",
    "UserCredentialVerifier",
    "authenticate",
    "safe_parse_invoice_form",
]
