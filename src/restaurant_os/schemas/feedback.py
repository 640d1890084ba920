from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class FeedbackCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class FeedbackRead(BaseModel):
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FeedbackSummary(BaseModel):
    average_rating: float
    total_feedback: int
    recent_comments: List[FeedbackRead] = []
