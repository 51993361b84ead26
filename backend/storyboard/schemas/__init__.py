from .auth import User, UserCreate, UserLogin, UserPublic, LoginResponse
from .project import Project, ProjectCreate, ProjectDetail, MessageResponse
from .scene import Scene, SceneUpdate
from .script import SceneDraft, ScriptOutput

__all__ = [
    "User",
    "UserCreate",
    "UserLogin",
    "UserPublic",
    "LoginResponse",
    "Project",
    "ProjectCreate",
    "ProjectDetail",
    "MessageResponse",
    "Scene",
    "SceneUpdate",
    "SceneDraft",
    "ScriptOutput",
]
