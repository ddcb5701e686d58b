# services/admin_api/app/routers/auth.py
from fastapi import APIRouter, HTTPException, Body, Request, Depends
from core.models import LoginRequest, AdminSession, AdminResponse
import asyncio
import logging

from ..main import get_auth_client, get_db_client, require_admin_session, _bearer_token

logger = logging.getLogger("TourAdmin_Core").getChild("AdminAPI").getChild("AuthRouter")

router = APIRouter()


@router.post("/login", response_model=AdminResponse)
async def login(
    auth_client=Depends(get_auth_client),
    payload: LoginRequest = Body(...)
):
    """Signs an admin in with email and password; returns the session tokens."""
    logger.info(f"Sign-in attempt for {payload.email}")
    try:
        auth_response = await asyncio.to_thread(
            auth_client.auth.sign_in_with_password,
            {"email": payload.email, "password": payload.password},
        )
    except Exception as e:
        logger.warning(f"Sign-in failed for {payload.email}: {e}")
        raise HTTPException(status_code=401, detail=str(e) or "Invalid login credentials")

    session = getattr(auth_response, "session", None)
    if not session or not session.access_token:
        logger.warning(f"Sign-in for {payload.email} returned no session.")
        raise HTTPException(status_code=401, detail="Invalid login credentials")

    user = getattr(auth_response, "user", None)
    admin_session = AdminSession(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        user_id=getattr(user, "id", None),
        email=getattr(user, "email", payload.email),
    )
    logger.info(f"Signed in {admin_session.email}")
    return AdminResponse(status="success", data=admin_session, message="Signed in")


@router.post("/logout", response_model=AdminResponse)
async def logout(
    request: Request,
    db_client=Depends(get_db_client),
    user=Depends(require_admin_session),
):
    """Revokes the caller's session."""
    token = _bearer_token(request)
    if not token:
        return AdminResponse(status="success", message="No active session")
    try:
        await asyncio.to_thread(db_client.auth.admin.sign_out, token)
    except Exception as e:
        logger.warning(f"Sign-out request failed: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to sign out: {e}")
    return AdminResponse(status="success", message="Signed out")


@router.get("/me", response_model=AdminResponse)
async def whoami(user=Depends(require_admin_session)):
    if user is None:
        return AdminResponse(status="success", data=None, message="Session checks disabled")
    return AdminResponse(status="success", data={"id": getattr(user, "id", None), "email": getattr(user, "email", None)})
