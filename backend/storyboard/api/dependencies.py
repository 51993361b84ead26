from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storyboard import models
from storyboard.core.config import Settings
from storyboard.core.exceptions import AuthenticationException
from storyboard.core.security import decode_access_token
from storyboard.services.image_generation import ImageGenerator
from storyboard.services.script_generation import ScriptGenerator

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_script_generator(request: Request) -> ScriptGenerator:
    return request.app.state.script_generator


def get_image_generator(request: Request) -> ImageGenerator:
    return request.app.state.image_generator


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> models.User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Access denied: no token provided")

    user_id = decode_access_token(credentials.credentials, settings)
    if user_id is None:
        raise AuthenticationException("Invalid or expired token")

    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise AuthenticationException("Invalid or expired token")
    return user


def get_owned_project(db: Session, project_id: int, user: models.User) -> Optional[models.Project]:
    """Project lookup that treats somebody else's project as missing."""
    return (
        db.query(models.Project)
        .filter(models.Project.id == project_id, models.Project.user_id == user.id)
        .first()
    )
