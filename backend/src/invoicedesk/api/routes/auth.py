"""
Sign-in endpoint.
"""

from collections.abc import Mapping
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, RedirectResponse

from invoicedesk.api.deps import get_credential_verifier, read_form
from invoicedesk.api.schemas import LoginStateResponse
from invoicedesk.domain.models import Redirect
from invoicedesk.services.actions import authenticate
from invoicedesk.services.auth import CredentialVerifier

router = APIRouter(tags=["auth"])


@router.post(
    "/login",
    response_model=LoginStateResponse,
    responses={303: {"description": "Signed in; follow Location"}},
)
async def login(
    form: Annotated[Mapping[str, str], Depends(read_form)],
    verifier: Annotated[CredentialVerifier, Depends(get_credential_verifier)],
):
    """
    Sign in with email and password.
    
    An optional ``redirectTo`` field chooses where a successful sign-in lands.
    """
    outcome = await authenticate(verifier, None, form)
    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.path, status_code=status.HTTP_303_SEE_OTHER)
    return JSONResponse(content=LoginStateResponse(message=outcome).model_dump())
