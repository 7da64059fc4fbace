from .common import MessageResponse
from .enums import BOARD_COLUMN_TITLES, LEGACY_TASK_STATUSES, TaskStatus
from .membership import MemberAddRequest, MemberRead, MemberRemovalResponse
from .pagination import PaginatedResponse
from .project import (
    BoardColumn,
    BoardResponse,
    ProjectBase,
    ProjectCounts,
    ProjectCreate,
    ProjectDetail,
    ProjectListItem,
    ProjectMembersResponse,
    ProjectRead,
    ProjectUpdate,
    TaskListResponse,
)
from .task import TaskCreate, TaskRead, TaskStatusUpdate, TaskUpdate
from .user import (
    ChangePasswordRequest,
    Token,
    UserBase,
    UserCreate,
    UserLogin,
    UserPublic,
    UserRead,
    UserSearchResponse,
    normalize_email,
)

__all__ = [
    "MessageResponse",
    "TaskStatus",
    "BOARD_COLUMN_TITLES",
    "LEGACY_TASK_STATUSES",
    "MemberAddRequest",
    "MemberRead",
    "MemberRemovalResponse",
    "PaginatedResponse",
    "BoardColumn",
    "BoardResponse",
    "ProjectBase",
    "ProjectCounts",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectListItem",
    "ProjectMembersResponse",
    "ProjectRead",
    "ProjectUpdate",
    "TaskListResponse",
    "TaskCreate",
    "TaskRead",
    "TaskStatusUpdate",
    "TaskUpdate",
    "ChangePasswordRequest",
    "Token",
    "UserBase",
    "UserCreate",
    "UserLogin",
    "UserPublic",
    "UserRead",
    "UserSearchResponse",
    "normalize_email",
]
