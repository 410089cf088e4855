"""
campbook/services/auth_service.py

Purpose: Account registration and session handling

- Registers accounts with the identity provider and mirrors the profile locally
- Signs users in and hands back the provider's session token
- Password resets, current user, user lookup by id
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError

from campbook.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    ResourceNotFoundError,
    ValidationError,
)
from campbook.core.logging import get_logger, LogContext
from campbook.db.repositories import UserRepository
from campbook.schemas.user import RegisterRequest, UserRole, user_public_view
from campbook.services.identity_provider import (
    IdentityProfile,
    IdentityProvider,
    IdentityProviderError,
)
from campbook.services.user_service import resolve_or_provision_user
from campbook.utils.validation_utils import normalize_email, validate_phone_number

logger = get_logger(__name__)

PHONE_FORMAT_MESSAGE = "Phone number must be in E.164 format (e.g., +1234567890)"
LOGOUT_MESSAGE = "Logout handled on client by removing the identity token"


class AuthService:
    """Auth operations backed by the identity provider and the users collection."""

    def __init__(self, users: UserRepository, identity: IdentityProvider):
        self.users = users
        self.identity = identity

    async def register(self, payload: RegisterRequest) -> Dict[str, Any]:
        """
        Creates the provider account, then the local user with role `user`.

        Raises:
            ValidationError: malformed phone number or input rejected upstream
            ConflictError: email already registered
        """
        if not validate_phone_number(payload.phoneNumber):
            raise ValidationError(PHONE_FORMAT_MESSAGE)

        email = normalize_email(payload.email)

        try:
            account = await self.identity.create_account(
                email=email,
                password=payload.password,
                display_name=payload.name,
                phone_number=payload.phoneNumber,
            )
        except IdentityProviderError as e:
            if e.code == "EMAIL_EXISTS":
                raise ConflictError("Email is already registered") from e
            if e.code == "INVALID_PHONE_NUMBER":
                raise ValidationError("Invalid phone number format") from e
            raise ValidationError(e.message) from e

        with LogContext(user_id=account.uid):
            try:
                user = await self.users.create({
                    "firebase_uid": account.uid,
                    "name": payload.name,
                    "phone_number": payload.phoneNumber,
                    "email": email,
                    "role": UserRole.USER.value,
                    "created_at": datetime.now(timezone.utc),
                })
            except DuplicateKeyError as e:
                logger.warning("Provider account created but local email already taken")
                raise ConflictError("Email is already registered") from e

            logger.info("User registered")

        return user_public_view(user)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Returns the user's public view plus the provider session token.

        Raises:
            AuthenticationError: bad credentials (provider's message surfaced)
            ResourceNotFoundError: no local record for the email
        """
        try:
            session = await self.identity.sign_in(normalize_email(email), password)
        except IdentityProviderError as e:
            raise AuthenticationError(e.message or "Invalid credentials") from e

        user = await self.users.find_by_email(normalize_email(email))
        if not user:
            raise ResourceNotFoundError("User not found")

        logger.info("User logged in", extra={"user_id": user["id"]})

        view = user_public_view(user)
        view["token"] = session.id_token
        return view

    async def get_current_user(self, profile: IdentityProfile) -> Dict[str, Any]:
        """Public view of the caller, provisioning the local record if needed."""
        user = await resolve_or_provision_user(self.users, profile)
        return user_public_view(user)

    def logout(self) -> str:
        return LOGOUT_MESSAGE

    async def reset_password(self, email: Optional[str]) -> str:
        if not email or not email.strip():
            raise ValidationError("Email is required")

        email = normalize_email(email)
        try:
            await self.identity.send_password_reset(email)
        except IdentityProviderError as e:
            raise ValidationError(e.message or "Unable to send reset email") from e

        return f"Password reset email sent to {email}"

    async def get_user_by_id(self, user_id: str, requester: Dict[str, Any]) -> Dict[str, Any]:
        """
        Admins may fetch anyone; other users only themselves.
        """
        user = await self.users.find_by_id(user_id)
        if not user:
            raise ResourceNotFoundError("User not found")

        if requester.get("role") != UserRole.ADMIN.value and requester["id"] != user["id"]:
            raise ForbiddenError("Not authorized to access this user's details")

        return user_public_view(user)
