"""
campbook/api/campgrounds.py

Purpose: Campground endpoints

- Public listing and lookup
- Admin-only create / update / delete
- Nested booking routes: /campgrounds/{campground_id}/bookings
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from campbook.api.deps import (
    get_booking_service,
    get_campground_service,
    get_current_user,
    require_roles,
)
from campbook.schemas.booking import BookingCreate
from campbook.schemas.campground import CampgroundCreate, CampgroundUpdate
from campbook.schemas.response import success_response
from campbook.schemas.user import UserRole
from campbook.services.booking_service import BookingService
from campbook.services.campground_service import CampgroundService

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


@router.get("")
async def list_campgrounds(service: CampgroundService = Depends(get_campground_service)):
    campgrounds = await service.list_campgrounds()
    return success_response(data=campgrounds, count=len(campgrounds))


@router.get("/{campground_id}")
async def get_campground(
    campground_id: str,
    service: CampgroundService = Depends(get_campground_service),
):
    return success_response(data=await service.get_campground(campground_id))


@router.post("", dependencies=[Depends(admin_only)])
async def create_campground(
    payload: CampgroundCreate,
    service: CampgroundService = Depends(get_campground_service),
):
    return success_response(data=await service.create_campground(payload))


@router.put("/{campground_id}", dependencies=[Depends(admin_only)])
async def update_campground(
    campground_id: str,
    payload: CampgroundUpdate,
    service: CampgroundService = Depends(get_campground_service),
):
    return success_response(data=await service.update_campground(campground_id, payload))


@router.delete("/{campground_id}", dependencies=[Depends(admin_only)])
async def delete_campground(
    campground_id: str,
    service: CampgroundService = Depends(get_campground_service),
):
    """Hard delete. Existing bookings keep their (now dangling) reference."""
    await service.delete_campground(campground_id)
    return success_response(data={})


@router.get("/{campground_id}/bookings")
async def list_campground_bookings(
    campground_id: str,
    requester: Dict[str, Any] = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    bookings = await service.list_bookings(requester, campground_id=campground_id)
    return success_response(data=bookings, count=len(bookings))


@router.post("/{campground_id}/bookings")
async def create_campground_booking(
    campground_id: str,
    payload: BookingCreate,
    requester: Dict[str, Any] = Depends(require_roles(UserRole.ADMIN, UserRole.USER)),
    service: BookingService = Depends(get_booking_service),
):
    booking = await service.create_booking(requester, campground_id, payload.bookingDate)
    return success_response(data=booking)
