"""
campbook/api/deps.py

Purpose: Request dependencies

- Bearer token authentication against the identity provider
- Role checks
- Repository and service wiring (overridable in tests)
"""

from typing import Any, Dict, Optional

from fastapi import Depends, Header, Request

from campbook.core.exceptions import AuthenticationError, ForbiddenError
from campbook.core.logging import get_logger
from campbook.db.mongo import (
    get_bookings_collection,
    get_campgrounds_collection,
    get_users_collection,
)
from campbook.db.mongo_repositories import (
    MongoBookingRepository,
    MongoCampgroundRepository,
    MongoUserRepository,
)
from campbook.db.repositories import BookingRepository, CampgroundRepository, UserRepository
from campbook.services.auth_service import AuthService
from campbook.services.booking_service import BookingService
from campbook.services.campground_service import CampgroundService
from campbook.services.identity_provider import (
    IdentityProfile,
    IdentityProvider,
    IdentityProviderError,
    get_identity_provider,
)
from campbook.services.user_service import resolve_or_provision_user

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


# ==============================================
# Repositories and services
# ==============================================

def get_user_repository() -> UserRepository:
    return MongoUserRepository(get_users_collection())


def get_campground_repository() -> CampgroundRepository:
    return MongoCampgroundRepository(get_campgrounds_collection())


def get_booking_repository() -> BookingRepository:
    return MongoBookingRepository(get_bookings_collection())


def get_identity() -> IdentityProvider:
    return get_identity_provider()


def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    identity: IdentityProvider = Depends(get_identity),
) -> AuthService:
    return AuthService(users, identity)


def get_campground_service(
    campgrounds: CampgroundRepository = Depends(get_campground_repository),
) -> CampgroundService:
    return CampgroundService(campgrounds)


def get_booking_service(
    bookings: BookingRepository = Depends(get_booking_repository),
    campgrounds: CampgroundRepository = Depends(get_campground_repository),
) -> BookingService:
    return BookingService(bookings, campgrounds)


# ==============================================
# Authentication and authorization
# ==============================================

async def get_verified_identity(
    authorization: Optional[str] = Header(default=None),
    identity: IdentityProvider = Depends(get_identity),
) -> IdentityProfile:
    """
    Verifies the `Authorization: Bearer <token>` header with the identity provider.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("No token provided")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("No token provided")

    try:
        return await identity.verify_token(token)
    except IdentityProviderError as e:
        logger.info(f"Token verification failed: {e.code}")
        raise AuthenticationError("Invalid token") from e


async def get_current_user(
    request: Request,
    profile: IdentityProfile = Depends(get_verified_identity),
    users: UserRepository = Depends(get_user_repository),
) -> Dict[str, Any]:
    """
    Resolves the caller's local user (provisioning it on first request)
    and attaches it to `request.state.user`.
    """
    user = await resolve_or_provision_user(users, profile)
    request.state.user = user
    return user


def require_roles(*roles: str):
    """
    Dependency factory restricting a route to the given roles.

    Usage:
        @router.post("/", dependencies=[Depends(require_roles("admin"))])
    """
    allowed = {getattr(role, "value", role) for role in roles}

    async def check_role(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if user.get("role") not in allowed:
            raise ForbiddenError(
                f"User role {user.get('role')} is not authorized to access this route"
            )
        return user

    return check_role
