# tutorlink/routes/v1/sessions.py
"""
Session routes - API v1

Versioned session endpoints under /api/v1/sessions.
All business logic delegated to BookingService and EarningsService.

Endpoints:
    POST /                      → Book a session (student)
    GET /                       → Sessions visible to the caller
    GET /earnings               → Earnings summary for the calling tutor
    GET /{session_id}           → Session detail (participants and admins)
    PUT /{session_id}/status    → Drive the session lifecycle
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from fastapi.params import Path

from ...api.dependencies import get_booking_service, get_current_actor, get_earnings_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...principal import Actor
from ...schemas.earnings import EarningsResponse
from ...schemas.session import SessionCreate, SessionResponse, SessionStatusUpdate
from ...services.booking_service import BookingService
from ...services.earnings_service import EarningsService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["sessions-v1"])

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    booking_data: SessionCreate,
    current_actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> SessionResponse:
    """
    Request a session with a tutor.

    The session starts as pending; the tutor is notified.

    Raises:
        HTTPException: 403 for non-students, 404 for unknown or unverified
            tutors, 422 outside availability, 409 on overlapping bookings
    """
    try:
        session = await asyncio.to_thread(
            booking_service.create_booking, current_actor, booking_data
        )
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=List[SessionResponse])
async def list_sessions(
    upcoming: bool = Query(False, description="Only sessions that have not started yet"),
    current_actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[SessionResponse]:
    """Sessions of the caller: own bookings for students and tutors, all for admins."""
    try:
        sessions = await asyncio.to_thread(
            booking_service.list_sessions, current_actor, upcoming_only=upcoming
        )
        return [SessionResponse.from_session(s) for s in sessions]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/earnings", response_model=EarningsResponse)
async def get_my_earnings(
    current_actor: Actor = Depends(get_current_actor),
    earnings_service: EarningsService = Depends(get_earnings_service),
) -> EarningsResponse:
    """Earnings of the calling tutor."""
    try:
        summary = await asyncio.to_thread(earnings_service.get_earnings, current_actor)
        return EarningsResponse.from_summary(summary)
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Routes with a session id
# ============================================================================


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> SessionResponse:
    try:
        session = await asyncio.to_thread(booking_service.get_session, current_actor, session_id)
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{session_id}/status", response_model=SessionResponse)
async def update_session_status(
    status_update: SessionStatusUpdate,
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> SessionResponse:
    """
    Confirm, complete or cancel a session.

    Raises:
        HTTPException: 409 for transitions the lifecycle does not allow,
            403 when the caller may not perform this transition
    """
    try:
        session = await asyncio.to_thread(
            booking_service.update_status, current_actor, session_id, status_update.status
        )
        return SessionResponse.from_session(session)
    except DomainException as e:
        handle_domain_exception(e)
