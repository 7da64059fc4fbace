from app import models
from app.core.rate_limit import RATE_LIMITS, limiter
from app.db import get_db
from app.routers.auth import get_current_user
from app.schemas import UserPublic, UserSearchResponse
from app.services.user_service import search_users
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/search", response_model=UserSearchResponse)
@limiter.limit(RATE_LIMITS["search_operations"])
def search(
    request: Request,
    q: str | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> UserSearchResponse:
    """Email autocomplete: at least 2 characters, excludes the caller, max 10 results."""
    users = search_users(db, current_user, q)
    return UserSearchResponse(items=[UserPublic.model_validate(u, from_attributes=True) for u in users])
