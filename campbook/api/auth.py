"""
campbook/api/auth.py

Purpose: Authentication endpoints

- Register / login against the identity provider
- Current user, logout acknowledgement, password reset
- User lookup (admin or self)
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from campbook.api.deps import get_auth_service, get_current_user, get_verified_identity
from campbook.schemas.response import success_response
from campbook.schemas.user import LoginRequest, RegisterRequest, ResetPasswordRequest
from campbook.services.auth_service import AuthService
from campbook.services.identity_provider import IdentityProfile

router = APIRouter()


@router.post("/register", status_code=201)
async def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Create an account upstream and its local user record."""
    user = await service.register(payload)
    return success_response(data=user)


@router.post("/login")
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange email/password for the user's profile and a session token."""
    user = await service.login(payload.email, payload.password)
    return success_response(data=user)


@router.get("/me")
async def get_me(
    profile: IdentityProfile = Depends(get_verified_identity),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.get_current_user(profile)
    return success_response(data=user)


@router.get("/logout", dependencies=[Depends(get_current_user)])
async def logout(
    service: AuthService = Depends(get_auth_service),
):
    return success_response(message=service.logout())


@router.post("/reset-password")
async def reset_password(
    payload: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
):
    message = await service.reset_password(payload.email)
    return success_response(message=message)


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    requester: Dict[str, Any] = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Admins can fetch any user, users only themselves."""
    user = await service.get_user_by_id(user_id, requester)
    return success_response(data=user)
