# advisor_booking/routes/v1/bookings.py
"""
Client booking routes

Endpoints:
    GET /advisors - Advisor directory
    GET /availability - Free slots of one advisor within a range
    POST / - Reserve a slot (confirmation email sent after the response)
    GET /my-bookings - Bookings of one client email
"""

import asyncio
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import sessionmaker

from ...api.dependencies import (
    get_advisor_service,
    get_booking_service,
    get_notifier,
    get_session_factory,
)
from ...core.exceptions import DomainException, ValidationException
from ...core.time_window import parse_iso_datetime
from ...errors import handle_domain_exception
from ...schemas.base import ApiResponse, ErrorResponse, ok
from ...schemas.booking import (
    AdvisorResponse,
    AvailabilityResponse,
    BookingCreate,
    BookingCreatedResponse,
    BookingSummary,
)
from ...services.advisor_service import AdvisorService
from ...services.booking_service import BookingService
from ...services.notifier import Notifier
from ...tasks.jobs import send_confirmation_email

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/bookings",
    tags=["bookings"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)


@router.get("/advisors", response_model=ApiResponse[List[AdvisorResponse]])
async def list_advisors(
    advisor_service: AdvisorService = Depends(get_advisor_service),
) -> Dict[str, Any]:
    try:
        advisors = await asyncio.to_thread(advisor_service.list_advisors)
    except DomainException as e:
        handle_domain_exception(e)
    return ok([advisor.to_dict() for advisor in advisors])


@router.get("/availability", response_model=ApiResponse[AvailabilityResponse])
async def get_availability(
    advisor_id: int = Query(..., description="Advisor id"),
    range_from: str = Query(..., alias="from", description="ISO-8601 start of range"),
    range_to: str = Query(..., alias="to", description="ISO-8601 end of range"),
    advisor_service: AdvisorService = Depends(get_advisor_service),
) -> Dict[str, Any]:
    try:
        try:
            start, end = parse_iso_datetime(range_from), parse_iso_datetime(range_to)
        except ValueError as exc:
            raise ValidationException(
                "'from' and 'to' must be ISO-8601 datetimes", details={"reason": str(exc)}
            ) from exc
        availability = await asyncio.to_thread(
            advisor_service.get_availability, advisor_id, start, end
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ok(availability)


@router.post(
    "",
    response_model=ApiResponse[BookingCreatedResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: BookingCreate,
    background_tasks: BackgroundTasks,
    booking_service: BookingService = Depends(get_booking_service),
    notifier: Notifier = Depends(get_notifier),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> Dict[str, Any]:
    try:
        created = await asyncio.to_thread(
            booking_service.create_booking,
            payload.slot_id,
            payload.client_name,
            str(payload.client_email),
        )
    except DomainException as e:
        handle_domain_exception(e)

    background_tasks.add_task(
        send_confirmation_email, session_factory, created.booking_id, notifier
    )
    return ok(created.to_dict(), message="Booking created successfully")


@router.get("/my-bookings", response_model=ApiResponse[List[BookingSummary]])
async def get_my_bookings(
    email: str = Query(..., description="Client email"),
    advisor_service: AdvisorService = Depends(get_advisor_service),
) -> Dict[str, Any]:
    try:
        bookings = await asyncio.to_thread(advisor_service.get_client_bookings, email)
    except DomainException as e:
        handle_domain_exception(e)
    return ok(bookings)
