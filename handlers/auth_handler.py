"""
handlers/auth_handler.py
-------------------------
Registration, login and profile routes.
Login is where the recurring engine runs (inside AuthService.login).
"""

from fastapi import APIRouter, Depends

from handlers.schemas import ChangePasswordIn, LoginIn, ProfileIn, RegisterIn
from security.auth import current_user_id
from security.rate_limiter import rate_limited
from services.auth_service import AuthService
from utils.logger import get_logger

logger = get_logger(__name__)
auth_service = AuthService()

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=201, dependencies=[Depends(rate_limited)])
def register(body: RegisterIn) -> dict:
    """Create an account and return the user plus a session token."""
    data = auth_service.register(body.name, body.email, body.password)
    return {"status": "success", "data": data}


@router.post("/login", dependencies=[Depends(rate_limited)])
def login(body: LoginIn) -> dict:
    """Check credentials, run due recurring rules, return a session token."""
    data = auth_service.login(body.email, body.password)
    return {"status": "success", "data": data}


@router.get("/me")
def get_me(user_id: int = Depends(current_user_id)) -> dict:
    user = auth_service.get_profile(user_id)
    return {"status": "success", "data": {"user": user.to_public()}}


@router.put("/me")
def update_me(body: ProfileIn, user_id: int = Depends(current_user_id)) -> dict:
    user = auth_service.update_profile(user_id, name=body.name, avatar_color=body.avatar_color)
    return {"status": "success", "data": {"user": user.to_public()}}


@router.put("/change-password", dependencies=[Depends(rate_limited)])
def change_password(body: ChangePasswordIn, user_id: int = Depends(current_user_id)) -> dict:
    auth_service.change_password(user_id, body.current_password, body.new_password)
    return {"status": "success", "message": "Password changed successfully"}
