"""
campbook/schemas/user.py

Purpose: User roles, auth request bodies and the public user view

- Register / login / reset-password payloads
- Phone numbers are checked against E.164 in the auth service so the
  error surfaces with the API's own message
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """Roles a local user record can carry."""

    USER = "user"
    ADMIN = "admin"


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Display name")
    phoneNumber: str = Field(..., description="Phone number in E.164 format")
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "Jane Camper",
            "phoneNumber": "+14155550123",
            "email": "jane@example.com",
            "password": "s3cret-pass"
        }
    })


class LoginRequest(BaseModel):
    email: str
    password: str


class ResetPasswordRequest(BaseModel):
    email: Optional[str] = None


def user_public_view(user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Maps a stored user document to the fields safe to return to callers.
    """
    return {
        "id": user["id"],
        "name": user.get("name"),
        "email": user.get("email"),
        "phone": user.get("phone_number"),
        "role": user.get("role", UserRole.USER.value),
        "uid": user.get("firebase_uid"),
    }
