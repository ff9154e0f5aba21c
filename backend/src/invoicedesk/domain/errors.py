"""
Error types raised across layer boundaries.

Handlers catch these by type; anything else is an unexpected condition
and propagates to the application-wide exception handler.
"""


class PersistenceError(Exception):
    """A statement against the backing store failed."""


class AuthError(Exception):
    """
    Authentication-domain failure.
    
    Callers classify failures by ``type`` rather than by class so that
    verifiers can report subtypes the caller has never heard of.
    """
    
    type: str = "AuthError"
    
    def __init__(self, message: str = "", *, type: str | None = None) -> None:
        super().__init__(message or self.type)
        if type is not None:
            self.type = type


class CredentialsSignin(AuthError):
    """The submitted credentials did not match a user."""
    
    type = "CredentialsSignin"
