"""
campbook/schemas/booking.py

Purpose: Booking payloads and views

- Bookings are exposed with the owning campground's summary joined in
- A campground deleted after booking renders as `campground: null`
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from campbook.schemas.campground import campground_view


class BookingCreate(BaseModel):
    bookingDate: datetime
    campground: Optional[str] = Field(
        default=None,
        description="Campground id; taken from the URL on nested routes"
    )


class BookingUpdate(BaseModel):
    bookingDate: Optional[datetime] = None
    campground: Optional[str] = None
    user: Optional[str] = Field(
        default=None,
        description="New owner id (admins only)"
    )


def booking_view(booking: Dict[str, Any], campground: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "id": booking["id"],
        "bookingDate": booking.get("booking_date"),
        "user": booking.get("user"),
        "campground": campground_view(campground) if campground else None,
        "createdAt": booking.get("created_at"),
    }


def dashboard_entry_view(entry: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "campgroundId": entry["campground_id"],
        "campgroundName": entry.get("campground_name"),
        "bookingCount": entry["booking_count"],
    }
