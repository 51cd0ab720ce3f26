# advisor_booking/routes/v1/admin.py
"""
Admin routes (bearer token required)

Endpoints:
    GET /bookings - Filtered booking list
    GET /bookings/{booking_id} - Booking detail with email history
    PUT /bookings/{booking_id}/status - Status transition
    DELETE /bookings/{booking_id} - Cancel (no physical delete)
    POST /bookings/{booking_id}/resend-email - Resend confirmation
    GET /stats - Dashboard counters
    GET /email-logs - Recent email audit rows
"""

import asyncio
from datetime import date
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query

from ...api.dependencies import (
    get_admin_service,
    get_booking_status_service,
    get_current_admin,
)
from ...core.constants import EMAIL_LOG_QUERY_LIMIT
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...schemas.admin import (
    AdminStats,
    BookingDetail,
    BookingStatusUpdate,
    EmailLogListEntry,
    ResendResult,
    StatusTransitionResponse,
)
from ...schemas.base import ApiResponse, ErrorResponse, ok
from ...schemas.booking import BookingSummary
from ...services.admin_service import AdminService
from ...services.booking_status_service import BookingStatusService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(get_current_admin)],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)


@router.get("/bookings", response_model=ApiResponse[List[BookingSummary]])
async def list_bookings(
    advisor_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None, description="confirmed, cancelled or completed"),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    admin_service: AdminService = Depends(get_admin_service),
) -> Dict[str, Any]:
    try:
        bookings = await asyncio.to_thread(
            lambda: admin_service.list_bookings(
                advisor_id=advisor_id, status=status, from_date=from_date, to_date=to_date
            )
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ok(bookings)


@router.get("/bookings/{booking_id}", response_model=ApiResponse[BookingDetail])
async def get_booking(
    booking_id: int = Path(..., ge=1),
    admin_service: AdminService = Depends(get_admin_service),
) -> Dict[str, Any]:
    try:
        booking = await asyncio.to_thread(admin_service.get_booking, booking_id)
    except DomainException as e:
        handle_domain_exception(e)
    return ok(booking)


@router.put(
    "/bookings/{booking_id}/status", response_model=ApiResponse[StatusTransitionResponse]
)
async def update_booking_status(
    payload: BookingStatusUpdate,
    booking_id: int = Path(..., ge=1),
    status_service: BookingStatusService = Depends(get_booking_status_service),
) -> Dict[str, Any]:
    try:
        transition = await asyncio.to_thread(
            status_service.update_booking_status, booking_id, payload.status
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ok(transition.to_dict(), message="Booking status updated")


@router.delete("/bookings/{booking_id}", response_model=ApiResponse[StatusTransitionResponse])
async def delete_booking(
    booking_id: int = Path(..., ge=1),
    admin_service: AdminService = Depends(get_admin_service),
) -> Dict[str, Any]:
    try:
        transition = await asyncio.to_thread(admin_service.delete_booking, booking_id)
    except DomainException as e:
        handle_domain_exception(e)
    return ok(transition.to_dict(), message="Booking cancelled")


@router.post("/bookings/{booking_id}/resend-email", response_model=ApiResponse[ResendResult])
async def resend_confirmation(
    booking_id: int = Path(..., ge=1),
    admin_service: AdminService = Depends(get_admin_service),
) -> Dict[str, Any]:
    try:
        delivered = await asyncio.to_thread(admin_service.resend_confirmation, booking_id)
    except DomainException as e:
        handle_domain_exception(e)
    message = "Confirmation email sent" if delivered else "Confirmation email could not be sent"
    return ok({"booking_id": booking_id, "delivered": delivered}, message=message)


@router.get("/stats", response_model=ApiResponse[AdminStats])
async def get_stats(admin_service: AdminService = Depends(get_admin_service)) -> Dict[str, Any]:
    try:
        stats = await asyncio.to_thread(admin_service.get_stats)
    except DomainException as e:
        handle_domain_exception(e)
    return ok(stats)


@router.get("/email-logs", response_model=ApiResponse[List[EmailLogListEntry]])
async def list_email_logs(
    type: Optional[str] = Query(None, description="confirmation, reminder_24h or reminder_1h"),
    status: Optional[str] = Query(None, description="pending, sent or failed"),
    limit: int = Query(EMAIL_LOG_QUERY_LIMIT, ge=1, le=EMAIL_LOG_QUERY_LIMIT),
    admin_service: AdminService = Depends(get_admin_service),
) -> Dict[str, Any]:
    try:
        logs = await asyncio.to_thread(
            lambda: admin_service.list_email_logs(email_type=type, status=status, limit=limit)
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ok(logs)
