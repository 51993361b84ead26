from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from storyboard.api.dependencies import get_current_user, get_db
from storyboard import models, schemas
from storyboard.core.exceptions import NotFoundException, ValidationException
from storyboard.core.logging import get_logger
from storyboard.core.rate_limit import RateLimits

logger = get_logger(__name__)


def update_scene(
    request: Request,
    scene_id: int,
    scene_in: schemas.SceneUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # ownership always goes through the parent project
    scene = (
        db.query(models.Scene)
        .join(models.Project, models.Scene.project_id == models.Project.id)
        .filter(models.Scene.id == scene_id, models.Project.user_id == user.id)
        .first()
    )
    if not scene:
        raise NotFoundException("Scene")

    data = scene_in.model_dump(exclude_unset=True)
    if not data:
        raise ValidationException("No updates provided")

    for field, value in data.items():
        setattr(scene, field, value)

    db.add(scene)
    db.commit()
    db.refresh(scene)

    logger.info(f"Scene updated | scene={scene.id} | fields={sorted(data)}")
    return scene


def create_router(limits: RateLimits) -> APIRouter:
    router = APIRouter(prefix="/projects/scenes", tags=["scenes"])
    router.add_api_route(
        "/{scene_id}", limits.api(update_scene),
        methods=["PUT"], response_model=schemas.Scene,
    )
    return router
