# storyboard/services/script_generation.py

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any, List

from openai import OpenAI
from pydantic import ValidationError

from storyboard.core.config import Settings
from storyboard.core.exceptions import ScriptGenerationError
from storyboard.core.logging import get_logger
from storyboard.schemas.script import SceneDraft, ScriptOutput

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class ScriptGenerator(ABC):

    @abstractmethod
    def generate_script(self, idea: str) -> List[SceneDraft]:
        """
        Returns: scene drafts sorted by scene_number
        """
        pass


def parse_script_output(raw: str) -> List[SceneDraft]:
    """
    Parse raw model text into validated scene drafts.

    Accepts {"scenes": [...]} or a bare JSON array, optionally wrapped in
    Markdown code fences.
    """
    text = _FENCE_RE.sub("", (raw or "").strip()).strip()
    if not text:
        raise ScriptGenerationError("Empty response from script generator")

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScriptGenerationError(f"Invalid JSON from script generator: {e}", original_error=e)

    if isinstance(data, list):
        data = {"scenes": data}
    if not isinstance(data, dict) or "scenes" not in data:
        raise ScriptGenerationError("Missing 'scenes' in script generator output")

    try:
        output = ScriptOutput.model_validate(data)
    except ValidationError as e:
        raise ScriptGenerationError(f"Malformed scene data: {e}", original_error=e)

    return sorted(output.scenes, key=lambda s: s.scene_number)


class OpenAIScriptGenerator(ScriptGenerator):
    """
    Turn a short movie idea into structured scenes using an OpenAI chat model.
    """

    def __init__(self, api_key: str, model: str = "gpt-4o", timeout: float = 60.0):
        self.model = model
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def generate_script(self, idea: str) -> List[SceneDraft]:
        if not idea or not idea.strip():
            raise ScriptGenerationError("Idea text is empty")

        logger.info(f"Generating script | model={self.model} | idea={idea[:60]!r}")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": self._system_prompt()},
                    {"role": "user", "content": json.dumps({"idea": idea.strip()})},
                ],
                temperature=0.7,
                max_tokens=4000,
            )
            content = response.choices[0].message.content
        except Exception as e:
            raise ScriptGenerationError(f"OpenAI API error: {e}", original_error=e)

        scenes = parse_script_output(content)
        logger.info(f"Script generated | scenes={len(scenes)}")
        return scenes

    def _system_prompt(self) -> str:
        return """
You are a professional screenwriter. Convert the user's idea into a structured
movie script for a storyboard.
Return ONLY valid JSON. No text outside JSON.

--- RULES ---
• ALWAYS produce at least 1 scene.
• Number scenes from 1 in chronological order.
• Every scene MUST specify:
    - scene_number  (integer)
    - title
    - location      (e.g. "Attic - Day")
    - description
    - action
    - mood
    - image_prompt  (a vivid visual description for an image generator such
                     as Stable Diffusion: composition, lighting, atmosphere)

--- OUTPUT JSON FORMAT ---
{
  "scenes": [
    {
      "scene_number": 1,
      "title": "string",
      "location": "string",
      "description": "string",
      "action": "string",
      "mood": "string",
      "image_prompt": "string"
    }
  ]
}

Return ONLY valid JSON.
"""


MOCK_SCRIPT = [
    {
        "scene_number": 1,
        "title": "The Mysterious Discovery",
        "location": "Attic - Day",
        "description": "A dusty attic filled with old trunks. Sunlight streams through a small window.",
        "action": "A young boy, SAM (10), opens an old wooden chest and finds a glowing blue key.",
        "mood": "Mysterious, Wonder",
        "image_prompt": (
            "A cinematic shot of a young boy opening an old wooden chest in a dusty attic, "
            "glowing blue light emitting from within, dust particles in sunlight, mysterious atmosphere"
        ),
    },
    {
        "scene_number": 2,
        "title": "The Key's Power",
        "location": "Attic - Day",
        "description": "The key pulses with light. Sam picks it up, amazed.",
        "action": "Sam lifts the key. The room slightly vibrates.",
        "mood": "Magical",
        "image_prompt": (
            "A close up of a glowing blue key in a child's hand, magical energy emanating, "
            "dusty attic background, cinematic lighting"
        ),
    },
]


class MockScriptGenerator(ScriptGenerator):
    """Fixed script used when no LLM key is configured."""

    def generate_script(self, idea: str) -> List[SceneDraft]:
        if not idea or not idea.strip():
            raise ScriptGenerationError("Idea text is empty")
        logger.info("Using mock script generator")
        return [SceneDraft(**scene) for scene in MOCK_SCRIPT]


def create_script_generator(settings: Settings) -> ScriptGenerator:
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set - script generation uses the mock script")
        return MockScriptGenerator()
    return OpenAIScriptGenerator(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        timeout=settings.SCRIPT_TIMEOUT_SECONDS,
    )
