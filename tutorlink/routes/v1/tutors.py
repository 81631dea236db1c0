# tutorlink/routes/v1/tutors.py
"""
Tutor routes - API v1

Versioned tutor endpoints under /api/v1/tutors.

Endpoints:
    GET /                               → Verified tutor directory with filters
    GET /profile/me                     → Own tutor profile (tutor)
    POST /profile                       → Create own tutor profile (tutor)
    PUT /profile                        → Update own tutor profile (tutor)
    GET /verifications/pending          → Tutors awaiting verification (admin)
    GET /verifications/stats            → Verification counts (admin)
    GET /{tutor_id}                     → Public tutor detail
    GET /{tutor_id}/available-slots     → Bookable start times on a date
    GET /{tutor_id}/sessions            → Booked times (no participant data)
    GET /{tutor_id}/availability        → Weekly availability
    PUT /{tutor_id}/availability        → Replace weekly availability (owner/admin)
    PUT /{tutor_id}/verify              → Verify or reject a tutor (admin)
    GET /{tutor_id}/earnings            → Earnings summary (owner/admin)
"""

import asyncio
from datetime import date
from decimal import Decimal
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.params import Path

from ...api.dependencies import (
    get_availability_service,
    get_booking_service,
    get_current_actor,
    get_earnings_service,
    get_tutor_profile_service,
    get_verification_service,
)
from ...core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...core.exceptions import DomainException
from ...domain.availability import format_hhmm
from ...errors import handle_domain_exception
from ...principal import Actor
from ...schemas.availability import (
    AvailabilityResponse,
    AvailabilityUpdate,
    AvailabilityWindowOut,
    AvailableSlotsResponse,
)
from ...schemas.earnings import EarningsResponse
from ...schemas.session import BookedTimeResponse, BookedTimesResponse
from ...schemas.tutor import (
    TutorDetailResponse,
    TutorProfileCreate,
    TutorProfileResponse,
    TutorProfileUpdate,
    TutorSearchResponse,
    TutorSummaryResponse,
    TutorVerificationResponse,
    VerificationStatsResponse,
    VerificationUpdate,
)
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.earnings_service import EarningsService
from ...services.tutor_profile_service import TutorProfileService
from ...services.verification_service import VerificationService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["tutors-v1"])

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"


# ============================================================================
# SECTION 1: Static routes (must precede /{tutor_id})
# ============================================================================


@router.get("", response_model=TutorSearchResponse)
async def search_tutors(
    subject: Optional[str] = Query(None, max_length=100, description="Subject name contains"),
    city: Optional[str] = Query(None, max_length=120),
    min_rate: Optional[Decimal] = Query(None, ge=0),
    max_rate: Optional[Decimal] = Query(None, ge=0),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    tutor_profile_service: TutorProfileService = Depends(get_tutor_profile_service),
) -> TutorSearchResponse:
    """
    Browse verified tutors.

    Highest rated first; ties go to the tutor with more reviews.
    """
    try:
        tutors, total = await asyncio.to_thread(
            tutor_profile_service.search_tutors,
            subject,
            city,
            min_rate,
            max_rate,
            min_rating,
            page,
            limit,
        )
        return TutorSearchResponse(
            tutors=[TutorSummaryResponse.from_profile(t) for t in tutors],
            total=total,
            page=page,
            limit=limit,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/profile/me", response_model=TutorProfileResponse)
async def get_my_profile(
    current_actor: Actor = Depends(get_current_actor),
    tutor_profile_service: TutorProfileService = Depends(get_tutor_profile_service),
) -> TutorProfileResponse:
    try:
        tutor = await asyncio.to_thread(tutor_profile_service.get_my_profile, current_actor)
        return TutorProfileResponse.from_profile(tutor)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/profile", response_model=TutorProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_my_profile(
    data: TutorProfileCreate,
    current_actor: Actor = Depends(get_current_actor),
    tutor_profile_service: TutorProfileService = Depends(get_tutor_profile_service),
) -> TutorProfileResponse:
    try:
        tutor = await asyncio.to_thread(
            tutor_profile_service.create_profile, current_actor, data
        )
        return TutorProfileResponse.from_profile(tutor)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/profile", response_model=TutorProfileResponse)
async def update_my_profile(
    data: TutorProfileUpdate,
    current_actor: Actor = Depends(get_current_actor),
    tutor_profile_service: TutorProfileService = Depends(get_tutor_profile_service),
) -> TutorProfileResponse:
    """Partial update; subjects, when sent, replace the current list."""
    try:
        tutor = await asyncio.to_thread(
            tutor_profile_service.update_profile, current_actor, data
        )
        return TutorProfileResponse.from_profile(tutor)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/verifications/pending", response_model=List[TutorVerificationResponse])
async def list_pending_verifications(
    current_actor: Actor = Depends(get_current_actor),
    verification_service: VerificationService = Depends(get_verification_service),
) -> List[TutorVerificationResponse]:
    try:
        tutors = await asyncio.to_thread(
            verification_service.pending_verifications, current_actor
        )
        return [TutorVerificationResponse.from_profile(t) for t in tutors]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/verifications/stats", response_model=VerificationStatsResponse)
async def get_verification_stats(
    current_actor: Actor = Depends(get_current_actor),
    verification_service: VerificationService = Depends(get_verification_service),
) -> VerificationStatsResponse:
    try:
        stats = await asyncio.to_thread(verification_service.verification_stats, current_actor)
        return VerificationStatsResponse(**stats)
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Public tutor lookups
# ============================================================================


@router.get("/{tutor_id}", response_model=TutorDetailResponse)
async def get_tutor(
    tutor_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    tutor_profile_service: TutorProfileService = Depends(get_tutor_profile_service),
) -> TutorDetailResponse:
    try:
        tutor = await asyncio.to_thread(tutor_profile_service.get_tutor, tutor_id)
        return TutorDetailResponse.from_profile(tutor)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{tutor_id}/available-slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    tutor_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    target_date: date = Query(..., alias="date", description="Date to check, YYYY-MM-DD"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailableSlotsResponse:
    """
    Start times that can still be booked on ``date``.

    Returns an empty list when the tutor does not work that weekday.
    """
    try:
        slots = await asyncio.to_thread(
            availability_service.get_available_slots, tutor_id, target_date
        )
        return AvailableSlotsResponse(date=target_date, slots=slots)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{tutor_id}/sessions", response_model=BookedTimesResponse)
async def get_booked_times(
    tutor_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookedTimesResponse:
    """Pending and confirmed sessions of a tutor, timing only."""
    try:
        sessions = await asyncio.to_thread(booking_service.get_booked_times, tutor_id)
        return BookedTimesResponse(
            tutor_id=tutor_id,
            sessions=[
                BookedTimeResponse(
                    session_date=s.session_date,
                    start_time=format_hhmm(s.start_time),
                    end_time=format_hhmm(s.end_time),
                    duration_minutes=s.duration_minutes,
                )
                for s in sessions
            ],
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{tutor_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    tutor_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    try:
        windows = await asyncio.to_thread(availability_service.get_availability, tutor_id)
        return AvailabilityResponse(
            tutor_id=tutor_id,
            availability=[AvailabilityWindowOut.from_window(w) for w in windows],
        )
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 3: Owner and admin operations
# ============================================================================


@router.put("/{tutor_id}/availability", response_model=AvailabilityResponse)
async def replace_availability(
    update: AvailabilityUpdate,
    tutor_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_actor: Actor = Depends(get_current_actor),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    """
    Replace the tutor's weekly availability.

    Entries missing a start or end time are ignored.
    """
    try:
        windows = await asyncio.to_thread(
            availability_service.replace_availability,
            current_actor,
            tutor_id,
            [entry.to_window() for entry in update.availability],
        )
        return AvailabilityResponse(
            tutor_id=tutor_id,
            availability=[AvailabilityWindowOut.from_window(w) for w in windows],
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{tutor_id}/verify", response_model=TutorVerificationResponse)
async def verify_tutor(
    update: VerificationUpdate,
    tutor_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_actor: Actor = Depends(get_current_actor),
    verification_service: VerificationService = Depends(get_verification_service),
) -> TutorVerificationResponse:
    try:
        tutor = await asyncio.to_thread(
            verification_service.verify_tutor,
            current_actor,
            tutor_id,
            update.status,
            update.comment,
        )
        return TutorVerificationResponse.from_profile(tutor)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{tutor_id}/earnings", response_model=EarningsResponse)
async def get_tutor_earnings(
    tutor_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_actor: Actor = Depends(get_current_actor),
    earnings_service: EarningsService = Depends(get_earnings_service),
) -> EarningsResponse:
    try:
        summary = await asyncio.to_thread(
            earnings_service.get_earnings, current_actor, tutor_id
        )
        return EarningsResponse.from_summary(summary)
    except DomainException as e:
        handle_domain_exception(e)
