from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.middleware import SlowAPIMiddleware

from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging, get_logger
from app.core.middleware import REQUEST_ID_HEADER, RequestLoggingMiddleware
from app.core.rate_limit import limiter
from app.core.settings import settings
from app.db import Base, check_connection, engine, get_db, get_db_path
from app.routers import auth, members, projects, tasks, users

configure_logging()
logger = get_logger(__name__)

SERVICE_NAME = "taskboard-backend"


@asynccontextmanager
async def lifespan(app: FastAPI):
    import app.models  # noqa: F401 - register user/project/membership/task on Base.metadata

    logger.info(
        "application_starting",
        environment=settings.environment,
        database=get_db_path() or engine.url.render_as_string(hide_password=True),
    )
    # Managed databases are migrated with alembic; create_all only fills in missing tables
    Base.metadata.create_all(bind=engine)
    yield
    logger.info("application_shutdown")


app = FastAPI(title="Taskboard Backend", version="0.1.0", lifespan=lifespan)

# Order matters: the last middleware added runs first, so request logging
# wraps CORS and rate limiting and sees their responses too.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", REQUEST_ID_HEADER],
    expose_headers=[REQUEST_ID_HEADER],
)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": SERVICE_NAME}


@app.get("/health/ready")
def readiness_check(db=Depends(get_db)):
    """Readiness probe: 200 once the database answers, 503 otherwise."""
    error = check_connection(db)
    if error is not None:
        logger.warning("readiness_check_failed", error=error)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "database": "disconnected"},
        )
    return {"status": "ready", "database": "connected"}


for router in (auth.router, projects.router, members.router, tasks.router, users.router):
    app.include_router(router)
