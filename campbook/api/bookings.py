"""
campbook/api/bookings.py

Purpose: Booking endpoints (all authenticated)

- Owners see and manage their own bookings, admins see everything
- /dashboard is admin only and must be declared before /{booking_id}
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from campbook.api.deps import get_booking_service, get_current_user, require_roles
from campbook.schemas.booking import BookingCreate, BookingUpdate
from campbook.schemas.response import success_response
from campbook.schemas.user import UserRole
from campbook.services.booking_service import BookingService

router = APIRouter()

booking_roles = require_roles(UserRole.ADMIN, UserRole.USER)


@router.get("")
async def list_bookings(
    campground: Optional[str] = Query(default=None, description="Filter by campground id"),
    requester: Dict[str, Any] = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    bookings = await service.list_bookings(requester, campground_id=campground)
    return success_response(data=bookings, count=len(bookings))


@router.post("")
async def create_booking(
    payload: BookingCreate,
    requester: Dict[str, Any] = Depends(booking_roles),
    service: BookingService = Depends(get_booking_service),
):
    booking = await service.create_booking(requester, payload.campground, payload.bookingDate)
    return success_response(data=booking)


@router.get("/dashboard")
async def dashboard_summary(
    requester: Dict[str, Any] = Depends(require_roles(UserRole.ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    return success_response(data=await service.dashboard_summary(requester))


@router.get("/{booking_id}")
async def get_booking(
    booking_id: str,
    requester: Dict[str, Any] = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return success_response(data=await service.get_booking(booking_id, requester))


@router.put("/{booking_id}")
async def update_booking(
    booking_id: str,
    payload: BookingUpdate,
    requester: Dict[str, Any] = Depends(booking_roles),
    service: BookingService = Depends(get_booking_service),
):
    return success_response(data=await service.update_booking(booking_id, requester, payload))


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: str,
    requester: Dict[str, Any] = Depends(booking_roles),
    service: BookingService = Depends(get_booking_service),
):
    return success_response(data=await service.delete_booking(booking_id, requester))
