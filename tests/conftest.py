"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from app.database import dispose_engine, get_session  # noqa: E402
from app.models import KeyValueEntry  # noqa: E402
from app.services.converter_session import init_converter  # noqa: E402
from app.services.currency_registry import registry  # noqa: E402
from app.services.kv_store import InMemoryKeyValueStore  # noqa: E402
from tests.fixtures.providers import FakeProvider  # noqa: E402


@pytest.fixture(scope="session")
def app(tmp_path_factory: pytest.TempPathFactory) -> Iterator:
    """Session-wide Flask application configured with a temporary database."""

    db_dir = tmp_path_factory.mktemp("db")
    database_url = f"sqlite:///{db_dir / 'test.db'}"

    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(alembic_cfg, "head")

    flask_app = create_app(
        "development",
        SQLALCHEMY_DATABASE_URI=database_url,
        FX_RATE_PROVIDER="mock",
        STORE_BACKEND="sql",
        CORS_ALLOWED_ORIGINS="http://localhost:5173",
        TESTING=True,
    )

    yield flask_app

    dispose_engine()
    command.downgrade(alembic_cfg, "base")
    registry.codes = []


@pytest.fixture()
def clean_state(app) -> Iterator:
    """Empty the key/value table and start a fresh converter session."""

    def _wipe() -> None:
        session = get_session()
        session.query(KeyValueEntry).delete()
        session.commit()

    with app.app_context():
        _wipe()
        init_converter(app)
    yield app
    with app.app_context():
        _wipe()


@pytest.fixture()
def client(clean_state):
    """Provide a Flask test client."""

    with clean_state.test_client() as client:
        yield client


@pytest.fixture()
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def fake_provider() -> FakeProvider:
    return FakeProvider()
