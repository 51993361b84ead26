from storyboard.db.base import Base
from .user import User
from .project import Project
from .scene import Scene

__all__ = ["Base", "User", "Project", "Scene"]
