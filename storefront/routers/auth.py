# storefront/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, status

from storefront.dependencies import get_auth
from storefront.schemas.auth import Credentials, SessionRead, SessionStatus
from storefront.services.auth_service import AuthFailure, AuthResult, AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


def _session_or_error(result: AuthResult, failure_status: int) -> SessionRead | None:
    if isinstance(result, AuthFailure):
        raise HTTPException(
            status_code=failure_status,
            detail={"message": result.message, "code": result.code},
        )
    return result.session.to_read() if result.session else None


@router.get("/session", response_model=SessionStatus)
async def get_session(auth: AuthService = Depends(get_auth)):
    """
    Current session (or null) and whether an auth call is in flight.
    """
    session = auth.session
    return SessionStatus(
        session=session.to_read() if session else None,
        loading=auth.loading,
    )


@router.post("/sign-up", response_model=SessionRead | None)
async def sign_up(payload: Credentials, auth: AuthService = Depends(get_auth)):
    """
    Create an account with email/password.

    Returns the new session, or null while email confirmation is pending.
    """
    result = await auth.sign_up(payload.email, payload.password)
    return _session_or_error(result, status.HTTP_400_BAD_REQUEST)


@router.post("/sign-in", response_model=SessionRead)
async def sign_in(payload: Credentials, auth: AuthService = Depends(get_auth)):
    """
    Sign in with email/password.

    Raises 401 on invalid credentials; the failure toast is queued either way.
    """
    result = await auth.sign_in(payload.email, payload.password)
    return _session_or_error(result, status.HTTP_401_UNAUTHORIZED)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(auth: AuthService = Depends(get_auth)):
    """
    Sign out and drop the local session.
    """
    result = await auth.sign_out()
    _session_or_error(result, status.HTTP_502_BAD_GATEWAY)
    return None
