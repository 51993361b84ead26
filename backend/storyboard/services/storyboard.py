"""Storyboard illustration: generate images for every scene still missing one.

One task per candidate scene, all started together and joined before the
caller gets the result. A failing scene is logged and returned unchanged; it
never affects the other scenes. Scenes that already have an image are never
sent to the generator again.
"""
import asyncio
import enum
from dataclasses import dataclass
from typing import Dict, List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storyboard import models
from storyboard.core.logging import get_logger
from storyboard.services.image_generation import ImageGenerator
from storyboard.services.prompt_builder import PromptBuilder

logger = get_logger(__name__)


class OutcomeStatus(str, enum.Enum):
    updated = "updated"
    unchanged = "unchanged"


@dataclass
class SceneOutcome:
    scene: models.Scene
    status: OutcomeStatus
    error: Optional[str] = None


@dataclass
class ImageBatchResult:
    outcomes: List[SceneOutcome]

    @property
    def scenes(self) -> List[models.Scene]:
        return [o.scene for o in self.outcomes]

    @property
    def updated_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == OutcomeStatus.updated)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.error is not None)


def list_scenes(db: Session, project_id: int) -> List[models.Scene]:
    return (
        db.query(models.Scene)
        .filter(models.Scene.project_id == project_id)
        .order_by(models.Scene.scene_number.asc(), models.Scene.id.asc())
        .all()
    )


async def generate_missing_images(
    db: Session,
    project: models.Project,
    generator: ImageGenerator,
    max_concurrency: int = 0,
) -> ImageBatchResult:
    """Illustrate every scene of an already ownership-checked project."""
    project_id = project.id
    scenes = await run_in_threadpool(list_scenes, db, project_id)
    candidates = [s for s in scenes if not s.image_url]

    logger.info(
        f"Image generation | project={project_id} | scenes={len(scenes)} | missing={len(candidates)}"
    )

    outcomes: Dict[int, SceneOutcome] = {
        s.id: SceneOutcome(scene=s, status=OutcomeStatus.unchanged) for s in scenes
    }
    if not candidates:
        return ImageBatchResult(outcomes=list(outcomes.values()))

    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None
    # the session is shared by every task: one writer at a time, one row per commit
    save_lock = asyncio.Lock()
    # read everything the tasks need before any commit expires the instances
    jobs = [(s, s.id, s.scene_number, PromptBuilder.build_scene_prompt(s)) for s in candidates]

    async def _call_generator(prompt: str) -> str:
        if semaphore is None:
            return await run_in_threadpool(generator.generate_image, prompt)
        async with semaphore:
            return await run_in_threadpool(generator.generate_image, prompt)

    def _save(scene: models.Scene, image_url: str):
        try:
            scene.image_url = image_url
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

    async def _illustrate(scene: models.Scene, scene_id: int, scene_number: int, prompt: str) -> SceneOutcome:
        try:
            image_url = await _call_generator(prompt)
        except Exception as e:
            logger.error(f"Failed scene {scene_number} (id={scene_id}): {type(e).__name__}: {e}")
            return SceneOutcome(scene=scene, status=OutcomeStatus.unchanged, error=str(e))

        try:
            async with save_lock:
                await run_in_threadpool(_save, scene, image_url)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save image for scene {scene_number} (id={scene_id}): {e}")
            return SceneOutcome(scene=scene, status=OutcomeStatus.unchanged, error=str(e))

        return SceneOutcome(scene=scene, status=OutcomeStatus.updated)

    results = await asyncio.gather(*(_illustrate(*job) for job in jobs))
    for (_, scene_id, _, _), outcome in zip(jobs, results):
        outcomes[scene_id] = outcome

    result = ImageBatchResult(outcomes=list(outcomes.values()))
    logger.info(
        f"Image generation done | project={project_id} | "
        f"updated={result.updated_count} | failed={result.failed_count}"
    )
    return result
