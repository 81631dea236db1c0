from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.constants import MAX_COMMENT_LENGTH
from ._strict_base import StrictRequestModel


class ReviewCreate(StrictRequestModel):
    session_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., max_length=MAX_COMMENT_LENGTH)

    @field_validator("comment")
    @classmethod
    def clean_comment(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Comment cannot be empty")
        return cleaned


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: str
    student_id: str
    tutor_id: str
    rating: int
    comment: str
    created_at: Optional[datetime] = None
