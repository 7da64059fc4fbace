import uuid

import jwt
from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app import models
from app.core.exceptions import AuthenticationRequired, Conflict, InvalidInput, StoreFailure
from app.core.logging import get_logger
from app.core.rate_limit import RATE_LIMITS, limiter
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.db import get_db
from app.schemas import (
    ChangePasswordRequest,
    MessageResponse,
    Token,
    UserCreate,
    UserLogin,
    UserRead,
    normalize_email,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)
logger = get_logger(__name__)


def _authenticate(db: Session, email: str, password: str) -> models.User:
    user = db.query(models.User).filter(models.User.email == normalize_email(email)).first()
    if not user or not verify_password(password, user.hashed_password):
        raise AuthenticationRequired("Incorrect email or password")
    return user


def _issue_token(user: models.User) -> Token:
    access_token = create_access_token(data={"sub": str(user.id)})
    return Token(access_token=access_token, token_type="bearer")


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["auth_operations"])
def register_user(request: Request, payload: UserCreate, db: Session = Depends(get_db)) -> UserRead:
    existing = db.query(models.User).filter(models.User.email == payload.email).first()
    if existing:
        raise Conflict("Email is already registered")

    user = models.User(
        email=payload.email,
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("Email is already registered") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure.wrap("register user", exc) from exc
    db.refresh(user)
    logger.info("user_registered", user_id=str(user.id))
    return UserRead.model_validate(user, from_attributes=True)


@router.post("/login", response_model=Token)
@limiter.limit(RATE_LIMITS["auth_operations"])
def login_user(request: Request, payload: UserLogin, db: Session = Depends(get_db)) -> Token:
    return _issue_token(_authenticate(db, payload.email, payload.password))


@router.post("/token", response_model=Token)
@limiter.limit(RATE_LIMITS["auth_operations"])
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
) -> Token:
    return _issue_token(_authenticate(db, form_data.username, form_data.password))


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.User:
    if not token:
        raise AuthenticationRequired("Authentication required - please log in first")
    credentials_exception = AuthenticationRequired("Could not validate credentials")
    try:
        payload = decode_access_token(token)
        user_id: str | None = payload.get("sub")
        if user_id is None:
            raise credentials_exception
        user_uuid = uuid.UUID(user_id)
    except (jwt.PyJWTError, ValueError):
        raise credentials_exception

    user = db.get(models.User, user_uuid)
    if user is None:
        raise credentials_exception
    return user


@router.get("/me", response_model=UserRead)
async def read_users_me(current_user: models.User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user, from_attributes=True)


@router.post("/change-password", response_model=MessageResponse)
@limiter.limit(RATE_LIMITS["auth_operations"])
def change_password(
    request: Request,
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> MessageResponse:
    if not verify_password(payload.old_password, current_user.hashed_password):
        raise InvalidInput("Incorrect old password", {"old_password": ["Incorrect old password"]})

    current_user.hashed_password = hash_password(payload.new_password)
    db.add(current_user)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure.wrap("change password", exc) from exc
    logger.info("password_changed", user_id=str(current_user.id))
    return MessageResponse(detail="Password changed successfully")
