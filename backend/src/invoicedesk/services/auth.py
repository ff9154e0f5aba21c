"""
Credential verification for dashboard sign-in.

Design Decisions:
- Verifiers are passed to the authenticate action, never looked up globally
- Failures are AuthError subtypes identified by ``type``
- Success returns a Redirect; the verifier decides where the user lands
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from pydantic import BaseModel, EmailStr, Field, ValidationError

from invoicedesk.domain.errors import AuthError, CredentialsSignin, PersistenceError
from invoicedesk.domain.models import Redirect
from invoicedesk.infrastructure.gateway import UserGateway

logger = logging.getLogger(__name__)


CREDENTIALS_STRATEGY = "credentials"


class CredentialVerifier(ABC):
    """Abstract interface for sign-in strategies."""
    
    @abstractmethod
    async def sign_in(self, strategy: str, form: Mapping[str, Any]) -> Redirect:
        """
        Verify the submitted form with the named strategy.
        
        Returns:
            Redirect to the post-login destination
            
        Raises:
            AuthError: With a ``type`` describing why sign-in failed
        """
        pass


class Credentials(BaseModel):
    """Email and password pair read from the login form."""
    email: EmailStr
    password: str = Field(min_length=6)


class UserCredentialVerifier(CredentialVerifier):
    """
    Verifies email and password against the users table.
    
    Passwords are stored as argon2 hashes.
    """
    
    def __init__(
        self,
        users: UserGateway,
        default_redirect: str = "/dashboard",
        hasher: PasswordHasher | None = None,
    ) -> None:
        self.users = users
        self.default_redirect = default_redirect
        self.hasher = hasher or PasswordHasher()
    
    async def sign_in(self, strategy: str, form: Mapping[str, Any]) -> Redirect:
        if strategy != CREDENTIALS_STRATEGY:
            raise AuthError(f"Unsupported sign-in strategy: {strategy}", type="InvalidProvider")
        
        try:
            credentials = Credentials.model_validate(
                {"email": form.get("email"), "password": form.get("password")}
            )
        except ValidationError:
            raise CredentialsSignin("Malformed credentials") from None
        
        try:
            user = await self.users.get_user_by_email(credentials.email)
        except PersistenceError as e:
            logger.error(f"User lookup failed: {e}")
            raise AuthError(str(e), type="CallbackRouteError") from e
        
        if user is None or not self._password_matches(user.password, credentials.password):
            logger.info(f"Rejected sign-in for {credentials.email}")
            raise CredentialsSignin()
        
        logger.info(f"User {user.id} signed in")
        return Redirect(self._destination(form.get("redirectTo")))
    
    def _password_matches(self, hashed: str, plain: str) -> bool:
        try:
            return self.hasher.verify(hashed, plain)
        except (VerificationError, InvalidHashError):
            return False
    
    def _destination(self, requested: Any) -> str:
        # Only same-site paths; "//host" would leave the site
        if isinstance(requested, str) and requested.startswith("/") and not requested.startswith("//"):
            return requested
        return self.default_redirect
