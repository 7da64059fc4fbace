from .membership import Membership
from .project import Project
from .task import Task
from .user import User

__all__ = [
    "User",
    "Project",
    "Membership",
    "Task",
]
