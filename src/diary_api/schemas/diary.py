"""Pydantic schemas for diary entries."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class DiaryCreate(BaseModel):
    text: str = Field(..., min_length=1)


class DiaryRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    text: str
    created_at: datetime

    model_config = {"from_attributes": True}
