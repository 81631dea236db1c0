# tutorlink/routes/v1/admin.py
"""
Admin reporting routes - API v1

Endpoints:
    GET /users            → Paginated users, filter by role and name/email
    GET /stats/users      → Users by role, top cities, monthly signups
    GET /stats/sessions   → Status counts, top subjects, monthly volume
    GET /stats/platform   → Users by role, session totals, revenue, rating
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_reporting_service, require_admin
from ...core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...core.enums import RoleName
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...principal import Actor
from ...schemas.reports import (
    PlatformStatsResponse,
    SessionStatsResponse,
    UserListResponse,
    UserResponse,
    UserStatsResponse,
)
from ...services.reporting_service import ReportingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"])


@router.get("/stats/sessions", response_model=SessionStatsResponse)
async def get_session_stats(
    current_actor: Actor = Depends(require_admin),
    reporting_service: ReportingService = Depends(get_reporting_service),
) -> SessionStatsResponse:
    try:
        stats = await asyncio.to_thread(reporting_service.session_stats, current_actor)
        return SessionStatsResponse(**stats)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/stats/platform", response_model=PlatformStatsResponse)
async def get_platform_stats(
    current_actor: Actor = Depends(require_admin),
    reporting_service: ReportingService = Depends(get_reporting_service),
) -> PlatformStatsResponse:
    try:
        stats = await asyncio.to_thread(reporting_service.platform_stats, current_actor)
        return PlatformStatsResponse(**stats)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: Optional[RoleName] = Query(None),
    search: Optional[str] = Query(None, max_length=100, description="Name or email contains"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_actor: Actor = Depends(require_admin),
    reporting_service: ReportingService = Depends(get_reporting_service),
) -> UserListResponse:
    try:
        users, total = await asyncio.to_thread(
            reporting_service.list_users, current_actor, role, search, page, limit
        )
        return UserListResponse(
            users=[UserResponse.model_validate(u) for u in users],
            total=total,
            page=page,
            limit=limit,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/stats/users", response_model=UserStatsResponse)
async def get_user_stats(
    current_actor: Actor = Depends(require_admin),
    reporting_service: ReportingService = Depends(get_reporting_service),
) -> UserStatsResponse:
    try:
        stats = await asyncio.to_thread(reporting_service.user_stats, current_actor)
        return UserStatsResponse(**stats)
    except DomainException as e:
        handle_domain_exception(e)
