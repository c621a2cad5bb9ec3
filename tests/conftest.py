"""Shared fixtures: an in-memory database for service tests, a file-backed app for API tests."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789-abcdefghij")
os.environ.setdefault("LOG_FILE", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from taskboard.core.config import Settings
from taskboard.main import create_app
from taskboard.models.db import create_engine, create_session_factory, init_models
from taskboard.schemas.board import BoardCreate
from taskboard.schemas.task import TaskCreate
from taskboard.schemas.task_list import ListCreate
from taskboard.schemas.user import UserRegister
from taskboard.services.container import build_services

SECRET_KEY = os.environ["SECRET_KEY"]
PASSWORD = "Passw0rd!"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        secret_key=SECRET_KEY,
        db_path=str(tmp_path / "taskboard.db"),
        cookie_secure=False,
        log_file="",
        realtime_queue_size=5,
    )


@pytest.fixture
async def engine(settings):
    engine = create_engine(
        settings.model_copy(update={"database_url": "sqlite+aiosqlite://"}),
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def services(session_factory, settings):
    container = build_services(session_factory, settings)
    yield container
    await container.close()


@pytest.fixture
def register(services):
    async def _register(name: str, email: str | None = None, password: str = PASSWORD):
        email = email or f"{name.lower()}@example.com"
        return await services.auth.register(
            UserRegister(name=name, email=email, password=password)
        )

    return _register


@pytest.fixture
async def alice(register):
    return await register("Alice")


@pytest.fixture
async def bob(register):
    return await register("Bob")


@pytest.fixture
async def board(services, alice):
    return await services.boards.create_board(alice, BoardCreate(title="Sprint"))


@pytest.fixture
async def todo(services, alice, board):
    return await services.lists.create_list(alice, ListCreate(title="Todo", board_id=board.id))


@pytest.fixture
def make_task(services, alice):
    async def _make_task(task_list, title: str, *, actor=None, order: int | None = None):
        return await services.tasks.create_task(
            actor or alice, TaskCreate(title=title, list_id=task_list.id, order=order)
        )

    return _make_task


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
