from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storyboard.api.dependencies import get_current_user, get_db, get_settings
from storyboard import models, schemas
from storyboard.core.config import Settings
from storyboard.core.exceptions import ConflictException, InvalidCredentialsException
from storyboard.core.logging import get_logger
from storyboard.core.security import create_access_token, get_password_hash, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    """Emails are stored and compared trimmed and lowercased."""
    return email.strip().lower()


@router.post("/register", response_model=schemas.UserPublic)
def register(
    user_in: schemas.UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    email = normalize_email(user_in.email)

    existing = db.query(models.User).filter(models.User.email == email).first()
    if existing:
        raise ConflictException("Email already exists")

    user = models.User(
        email=email,
        password_hash=get_password_hash(user_in.password, rounds=settings.BCRYPT_ROUNDS),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration of the same email
        db.rollback()
        raise ConflictException("Email already exists")
    db.refresh(user)

    logger.info(f"User registered | user_id={user.id}")
    return user


@router.post("/login", response_model=schemas.LoginResponse)
def login(
    credentials: schemas.UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    email = normalize_email(credentials.email)
    user = db.query(models.User).filter(models.User.email == email).first()

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.info("Login rejected")
        raise InvalidCredentialsException()

    token = create_access_token(user.id, settings)
    logger.info(f"User logged in | user_id={user.id}")
    return schemas.LoginResponse(token=token, user=schemas.UserPublic.model_validate(user))


@router.get("/me", response_model=schemas.User)
def me(user: models.User = Depends(get_current_user)):
    return user
