from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storyboard.api.dependencies import (
    get_current_user,
    get_db,
    get_image_generator,
    get_owned_project,
    get_script_generator,
    get_settings,
)
from storyboard import models, schemas
from storyboard.core.config import Settings
from storyboard.core.exceptions import NotFoundException
from storyboard.core.logging import get_logger
from storyboard.core.rate_limit import RateLimits
from storyboard.services.image_generation import ImageGenerator
from storyboard.services.script_generation import ScriptGenerator
from storyboard.services.storyboard import generate_missing_images, list_scenes

logger = get_logger(__name__)


def list_projects(
    request: Request,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(models.Project)
        .filter(models.Project.user_id == user.id)
        .order_by(models.Project.created_at.desc(), models.Project.id.desc())
        .all()
    )


def create_project(
    request: Request,
    project_in: schemas.ProjectCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
    script_generator: ScriptGenerator = Depends(get_script_generator),
):
    # 1. Generate the script first: a failure here writes nothing
    drafts = script_generator.generate_script(project_in.input)

    # 2. Project row and all scene rows go in one transaction
    project = models.Project(
        user_id=user.id,
        title=project_in.title,
        original_input=project_in.input,
    )
    project.scenes = [
        models.Scene(
            scene_number=draft.scene_number,
            title=draft.title,
            location=draft.location,
            description=draft.description,
            action=draft.action,
            mood=draft.mood,
            image_prompt=draft.image_prompt,
        )
        for draft in drafts
    ]
    db.add(project)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(project)

    logger.info(f"Project created | project={project.id} | user={user.id} | scenes={len(drafts)}")
    return _to_project_detail(project, list_scenes(db, project.id))


def get_project(
    request: Request,
    project_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = get_owned_project(db, project_id, user)
    if not project:
        raise NotFoundException("Project")

    return _to_project_detail(project, list_scenes(db, project.id))


def delete_project(
    request: Request,
    project_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = get_owned_project(db, project_id, user)
    if not project:
        raise NotFoundException("Project")

    db.delete(project)
    db.commit()

    logger.info(f"Project deleted | project={project_id} | user={user.id}")
    return schemas.MessageResponse(message="Project deleted successfully")


async def generate_images(
    request: Request,
    project_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
    image_generator: ImageGenerator = Depends(get_image_generator),
    settings: Settings = Depends(get_settings),
):
    project = await run_in_threadpool(get_owned_project, db, project_id, user)
    if not project:
        raise NotFoundException("Project")

    result = await generate_missing_images(
        db,
        project,
        image_generator,
        max_concurrency=settings.IMAGE_MAX_CONCURRENCY,
    )
    # committed rows are expired; reloading them touches the database
    return await run_in_threadpool(_to_scene_list, result.scenes)


def _to_project_detail(project: models.Project, scenes: List[models.Scene]) -> schemas.ProjectDetail:
    return schemas.ProjectDetail(
        project=schemas.Project.model_validate(project),
        scenes=_to_scene_list(scenes),
    )


def _to_scene_list(scenes: List[models.Scene]) -> List[schemas.Scene]:
    return [schemas.Scene.model_validate(s) for s in scenes]


def create_router(limits: RateLimits) -> APIRouter:
    """Project routes wired to one app's rate limits."""
    router = APIRouter(prefix="/projects", tags=["projects"])

    router.add_api_route(
        "", limits.api(list_projects),
        methods=["GET"], response_model=List[schemas.Project],
    )
    router.add_api_route(
        "", limits.api(limits.ai(create_project)),
        methods=["POST"], response_model=schemas.ProjectDetail,
    )
    router.add_api_route(
        "/{project_id}", limits.api(get_project),
        methods=["GET"], response_model=schemas.ProjectDetail,
    )
    router.add_api_route(
        "/{project_id}", limits.api(delete_project),
        methods=["DELETE"], response_model=schemas.MessageResponse,
    )
    router.add_api_route(
        "/{project_id}/generate-images", limits.api(limits.ai(generate_images)),
        methods=["POST"], response_model=List[schemas.Scene],
    )
    return router
