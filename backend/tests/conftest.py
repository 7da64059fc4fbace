import os

import pytest
from fastapi.testclient import TestClient

# Тесты работают с отдельным файлом SQLite, задать его нужно до импорта app.db
os.environ.setdefault("DB_URL", "sqlite:///./test_taskboard.db")

from app.core.rate_limit import limiter  # noqa: E402
from app.core.settings import settings  # noqa: E402
from app.db import Base, engine  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_schema():
    """Пустые таблицы и обнулённые счётчики rate limiter в каждом тесте."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    limiter.reset()
    yield


@pytest.fixture()
def client() -> TestClient:
    # Контекстный менеджер запускает lifespan приложения
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def production_errors():
    """Ответы 500 без текста исключения, как при APP_DEBUG=false."""
    previous = settings.app_debug
    settings.app_debug = False
    try:
        yield
    finally:
        settings.app_debug = previous
