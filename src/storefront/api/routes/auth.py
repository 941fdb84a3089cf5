"""
Authentication routes for registration, login, token refresh and logout.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_auth_service, get_current_user
from storefront.api.schemas import Envelope, ok
from storefront.database.models import User
from storefront.domain.schemas import (
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserProfile,
)
from storefront.services import AuthService


def register(data: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """Create a buyer or seller account."""
    return ok(auth.register(data.email, data.password, data.full_name, data.role))


def login(data: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Exchange email and password for an access/refresh pair."""
    return ok(auth.login(data.email, data.password))


def refresh(data: RefreshRequest, auth: AuthService = Depends(get_auth_service)):
    """Rotate the refresh token and mint a new access token."""
    return ok(auth.refresh(data.refresh_token))


def logout(
    data: LogoutRequest,
    user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    """Revoke one refresh token, or all of the caller's with all_devices."""
    revoked = auth.logout(
        refresh_token=data.refresh_token,
        user_id=user.id,
        all_devices=data.all_devices,
    )
    return ok({"revoked": revoked})


router = APIRouter()

router.add_api_route(
    "/register", register, methods=["POST"],
    response_model=Envelope[UserProfile], status_code=status.HTTP_201_CREATED,
)
router.add_api_route("/login", login, methods=["POST"], response_model=Envelope[TokenPair])
router.add_api_route("/refresh", refresh, methods=["POST"], response_model=Envelope[TokenPair])
router.add_api_route("/logout", logout, methods=["POST"], response_model=Envelope[Dict[str, Any]])
