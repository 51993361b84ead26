# storyboard/schemas/script.py

from typing import List, Optional
from pydantic import BaseModel, Field, PositiveInt


class SceneDraft(BaseModel):
    """One scene as produced by the script generator, before it is stored."""
    scene_number: PositiveInt
    title: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    action: Optional[str] = None
    mood: Optional[str] = None
    image_prompt: Optional[str] = None


class ScriptOutput(BaseModel):
    scenes: List[SceneDraft] = Field(..., min_length=1)
