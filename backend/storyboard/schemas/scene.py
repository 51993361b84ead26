from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional


class SceneUpdate(BaseModel):
    """Editable narrative fields. The image fields are not editable."""
    title: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    action: Optional[str] = None
    mood: Optional[str] = Field(None, max_length=100)


class Scene(BaseModel):
    id: int
    project_id: int
    scene_number: int

    title: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    action: Optional[str] = None
    mood: Optional[str] = None

    image_prompt: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
