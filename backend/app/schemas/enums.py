# Enums for Taskboard
from enum import Enum


class TaskStatus(str, Enum):
    """Kanban board columns, in display order"""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


BOARD_COLUMN_TITLES = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}

# Written by the older task list screen. Still accepted as free-form status by
# create/update, but no board column shows them.
LEGACY_TASK_STATUSES = ("pending", "in_progress", "completed", "cancelled")


__all__ = [
    "TaskStatus",
    "BOARD_COLUMN_TITLES",
    "LEGACY_TASK_STATUSES",
]
