"""
Profile routes for the authenticated user.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_current_user, get_user_service
from storefront.api.schemas import Envelope, ok
from storefront.database.models import User
from storefront.domain.schemas import PasswordChange, ProfileUpdate, UserProfile
from storefront.services import UserService


def get_me(user: User = Depends(get_current_user), users: UserService = Depends(get_user_service)):
    return ok(users.get_profile(user))


def update_me(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    return ok(users.update_profile(user, data.full_name))


def change_password(
    data: PasswordChange,
    user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """Change password; every refresh token of the user is revoked."""
    users.change_password(user, data.current_password, data.new_password)
    return ok({"password_changed": True})


def deactivate_me(user: User = Depends(get_current_user), users: UserService = Depends(get_user_service)):
    users.deactivate(user)
    return ok({"deactivated": True})


router = APIRouter()

router.add_api_route("/me", get_me, methods=["GET"], response_model=Envelope[UserProfile])
router.add_api_route("/me", update_me, methods=["PUT"], response_model=Envelope[UserProfile])
router.add_api_route("/me", deactivate_me, methods=["DELETE"], response_model=Envelope[Dict[str, Any]])
router.add_api_route(
    "/me/password", change_password, methods=["POST"], response_model=Envelope[Dict[str, Any]],
)
