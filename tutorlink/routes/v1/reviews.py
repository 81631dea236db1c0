# tutorlink/routes/v1/reviews.py
"""
Review routes - API v1

Endpoints:
    POST /                  → Review a completed session (its student)
    GET /pending            → Completed sessions the caller has not reviewed
    GET /tutor/{tutor_id}   → Reviews of a tutor, newest first
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.params import Path

from ...api.dependencies import get_current_actor, get_review_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...principal import Actor
from ...schemas.review import ReviewCreate, ReviewResponse
from ...schemas.session import SessionResponse
from ...services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews-v1"])

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    review_data: ReviewCreate,
    current_actor: Actor = Depends(get_current_actor),
    review_service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    try:
        review = await asyncio.to_thread(
            review_service.create_review,
            current_actor,
            review_data.session_id,
            review_data.rating,
            review_data.comment,
        )
        return ReviewResponse.model_validate(review)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/pending", response_model=List[SessionResponse])
async def list_pending_reviews(
    current_actor: Actor = Depends(get_current_actor),
    review_service: ReviewService = Depends(get_review_service),
) -> List[SessionResponse]:
    try:
        sessions = await asyncio.to_thread(review_service.pending_reviews, current_actor)
        return [SessionResponse.from_session(s) for s in sessions]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/tutor/{tutor_id}", response_model=List[ReviewResponse])
async def list_tutor_reviews(
    tutor_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    review_service: ReviewService = Depends(get_review_service),
) -> List[ReviewResponse]:
    try:
        reviews = await asyncio.to_thread(review_service.reviews_for_tutor, tutor_id)
        return [ReviewResponse.model_validate(r) for r in reviews]
    except DomainException as e:
        handle_domain_exception(e)
