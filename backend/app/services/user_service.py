from __future__ import annotations

from sqlalchemy.orm import Session

from app import models
from app.core.exceptions import InvalidInput

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 10


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_users(db: Session, requester: models.User, q: str | None) -> list[models.User]:
    """
    Email autocomplete for the invite form.

    Case-insensitive substring match, the requester excluded, at most
    SEARCH_LIMIT rows ordered by email.
    """
    term = (q or "").strip()
    if len(term) < SEARCH_MIN_LENGTH:
        raise InvalidInput(
            f"Query must be at least {SEARCH_MIN_LENGTH} characters",
            {"q": [f"Query must be at least {SEARCH_MIN_LENGTH} characters"]},
        )

    pattern = f"%{_escape_like(term.lower())}%"
    return (
        db.query(models.User)
        .filter(
            models.User.email.ilike(pattern, escape="\\"),
            models.User.id != requester.id,
        )
        .order_by(models.User.email.asc())
        .limit(SEARCH_LIMIT)
        .all()
    )
