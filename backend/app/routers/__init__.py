from . import auth, members, projects, tasks, users

__all__ = [
    "auth",
    "members",
    "projects",
    "tasks",
    "users",
]
