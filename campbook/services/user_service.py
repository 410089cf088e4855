"""
campbook/services/user_service.py

Purpose: Local user records linked to identity provider accounts

- Resolves a verified identity to its local user
- Provisions the local record on first sight (role `user`)
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pymongo.errors import DuplicateKeyError

from campbook.core.exceptions import ConflictError
from campbook.core.logging import get_logger, LogContext
from campbook.db.repositories import UserRepository
from campbook.schemas.user import UserRole
from campbook.services.identity_provider import IdentityProfile
from campbook.utils.validation_utils import normalize_email

logger = get_logger(__name__)

DEFAULT_DISPLAY_NAME = "No Name"


async def resolve_or_provision_user(users: UserRepository, profile: IdentityProfile) -> Dict[str, Any]:
    """
    Retrieves the local user for an identity, creating it if absent.

    Safe to call concurrently for the same identity: a lost insert race
    falls back to reading the record the other request created.

    Args:
        users: User repository
        profile: Verified identity provider profile

    Returns:
        User document

    Raises:
        ConflictError: if the profile's email belongs to another local user
    """
    with LogContext(user_id=profile.uid):
        user = await users.find_by_firebase_uid(profile.uid)
        if user:
            return user

        logger.info("Provisioning local user for identity")

        record = {
            "firebase_uid": profile.uid,
            "name": profile.display_name or DEFAULT_DISPLAY_NAME,
            "role": UserRole.USER.value,
            "created_at": datetime.now(timezone.utc),
        }
        # Missing fields stay out of the document so sparse unique indexes skip them
        if profile.email:
            record["email"] = normalize_email(profile.email)
        if profile.phone_number:
            record["phone_number"] = profile.phone_number

        try:
            return await users.create(record)
        except DuplicateKeyError:
            user = await users.find_by_firebase_uid(profile.uid)
            if user:
                return user
            logger.warning("Email already linked to a different identity")
            raise ConflictError("Email is already registered to another account")
