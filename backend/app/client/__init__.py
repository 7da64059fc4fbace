from .api import ApiError, TaskboardClient
from .board import BoardView, UnknownColumn
from .state import (
    ProjectMembersStore,
    ProjectsStore,
    ProjectTasksStore,
    QueryState,
    ResourceCache,
    UserSearchStore,
)

__all__ = [
    "ApiError",
    "TaskboardClient",
    "BoardView",
    "UnknownColumn",
    "ProjectMembersStore",
    "ProjectsStore",
    "ProjectTasksStore",
    "QueryState",
    "ResourceCache",
    "UserSearchStore",
]
