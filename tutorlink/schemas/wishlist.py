from typing import List

from pydantic import BaseModel, Field

from ._strict_base import StrictRequestModel
from .tutor import TutorSummaryResponse


class WishlistAdd(StrictRequestModel):
    tutor_id: str = Field(..., description="Tutor profile to save")


class WishlistResponse(BaseModel):
    tutors: List[TutorSummaryResponse]
    count: int
