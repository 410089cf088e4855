"""
campbook/schemas/campground.py

Purpose: Campground payloads and views

- Create requires name and address, update is partial
- Names are trimmed and capped at 50 characters
- `telephone` is accepted as `tel` too and exposed as `tel`
"""

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

NAME_MAX_LENGTH = 50


def _clean_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Please add a name")
    if len(value) > NAME_MAX_LENGTH:
        raise ValueError(f"Name cannot be more than {NAME_MAX_LENGTH} characters")
    return value


def _clean_address(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Please add an address")
    return value


class CampgroundCreate(BaseModel):
    name: str
    address: str
    telephone: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("telephone", "tel")
    )

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return _clean_name(v)

    @field_validator("address")
    @classmethod
    def check_address(cls, v):
        return _clean_address(v)


class CampgroundUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    telephone: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("telephone", "tel")
    )

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return _clean_name(v)

    @field_validator("address")
    @classmethod
    def check_address(cls, v):
        return _clean_address(v)

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


def campground_view(campground: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": campground["id"],
        "name": campground.get("name"),
        "address": campground.get("address"),
        "tel": campground.get("telephone"),
    }
