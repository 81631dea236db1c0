from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ..core.enums import RoleName


class SubjectCount(BaseModel):
    name: str
    count: int


class MonthCount(BaseModel):
    month: str  # YYYY-MM
    count: int


class SessionStatsResponse(BaseModel):
    status_counts: Dict[str, int]
    top_subjects: List[SubjectCount]
    sessions_by_month: List[MonthCount]
    completion_rate: float


class PlatformStatsResponse(BaseModel):
    users_by_role: Dict[str, int]
    total_sessions: int
    total_revenue: float
    average_rating: float


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: RoleName
    city: Optional[str] = None
    created_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int
    page: int
    limit: int


class CityCount(BaseModel):
    name: str
    count: int


class UserStatsResponse(BaseModel):
    users_by_role: Dict[str, int]
    top_cities: List[CityCount]
    signups_by_month: List[MonthCount]
    total_users: int
