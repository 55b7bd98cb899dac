from fastapi import APIRouter, Depends
from app.modules.auth.schemas import LoginRequest, LoginResponse, MeResponse, CurrentUser, MessageResponse
from app.modules.auth.service import AuthService
from app.core.dependencies import (
    get_auth_service, get_login_service, get_current_user, get_optional_token, rate_limit
)
from typing import Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    _limit=Depends(rate_limit("login", "Too many login attempts. Please try again later.")),
    service: AuthService = Depends(get_login_service)
):
    """Login an admin; optionally require access to a specific tenant"""
    return service.login(login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: Optional[str] = Depends(get_optional_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and revoke the bearer token's session"""
    service.logout(token)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Current user with the tenants they administer"""
    return MeResponse(
        user=CurrentUser(id=current_user["id"], email=current_user.get("email")),
        tenants=service.get_user_tenants(current_user["id"])
    )
