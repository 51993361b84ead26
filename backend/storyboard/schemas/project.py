from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List

from .scene import Scene


class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    input: str = Field(..., min_length=1, max_length=5000)

    class Config:
        str_strip_whitespace = True


class Project(BaseModel):
    id: int
    user_id: int
    title: str
    original_input: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectDetail(BaseModel):
    project: Project
    scenes: List[Scene]


class MessageResponse(BaseModel):
    message: str
