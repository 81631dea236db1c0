# tutorlink/routes/v1/wishlist.py
"""
Wishlist routes - API v1

Endpoints:
    GET /              → Caller's saved tutors, newest first
    POST /             → Save a tutor
    DELETE /{tutor_id} → Remove a saved tutor
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from fastapi.params import Path

from ...api.dependencies import get_current_actor, get_wishlist_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...models.wishlist import WishlistItem
from ...principal import Actor
from ...schemas.tutor import TutorSummaryResponse
from ...schemas.wishlist import WishlistAdd, WishlistResponse
from ...services.wishlist_service import WishlistService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["wishlist-v1"])

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"


def _to_response(items: List[WishlistItem]) -> WishlistResponse:
    tutors = [TutorSummaryResponse.from_profile(item.tutor) for item in items]
    return WishlistResponse(tutors=tutors, count=len(tutors))


@router.get("", response_model=WishlistResponse)
async def get_wishlist(
    current_actor: Actor = Depends(get_current_actor),
    wishlist_service: WishlistService = Depends(get_wishlist_service),
) -> WishlistResponse:
    try:
        items = await asyncio.to_thread(wishlist_service.list_items, current_actor)
        return _to_response(items)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=WishlistResponse, status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(
    data: WishlistAdd,
    current_actor: Actor = Depends(get_current_actor),
    wishlist_service: WishlistService = Depends(get_wishlist_service),
) -> WishlistResponse:
    """Save a tutor and return the updated wishlist."""
    try:
        await asyncio.to_thread(wishlist_service.add_tutor, current_actor, data.tutor_id)
        items = await asyncio.to_thread(wishlist_service.list_items, current_actor)
        return _to_response(items)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{tutor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_wishlist(
    tutor_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_actor: Actor = Depends(get_current_actor),
    wishlist_service: WishlistService = Depends(get_wishlist_service),
) -> Response:
    try:
        await asyncio.to_thread(wishlist_service.remove_tutor, current_actor, tutor_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)
