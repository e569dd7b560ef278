"""Shared fixtures: in-memory database, API client, fake MCP and Gemini backends."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hrbuddy.api.app import app
from hrbuddy.api.deps import get_mcp_service
from hrbuddy.api.limiter import limiter
from hrbuddy.config import Settings, settings
from hrbuddy.db import Base, get_db
from hrbuddy.db.base import _enable_sqlite_foreign_keys
from hrbuddy.services import ai_service
from hrbuddy.services.mcp_service import McpService
from hrbuddy.tools import mcp_client
from tests.fakes import FakeMcpFactory, FakeModel

ADMIN_EMAIL = "admin@myhrbuddy.com"
ADMIN_PASSWORD = "correct-horse"
WEBHOOK_SECRET = "zap-secret"


@pytest.fixture
def mcp_factory(monkeypatch):
    factory = FakeMcpFactory()
    monkeypatch.setattr(mcp_client, "_build_client", factory)
    return factory


@pytest.fixture
def mcp_settings():
    return Settings(
        clickup_mcp_url="https://clickup.example/mcp",
        clickup_mcp_token="cu-token",
        neon_mcp_url="https://neon.example/mcp",
        neon_mcp_token="neon-token",
    )


@pytest.fixture
def mcp_service(mcp_factory, mcp_settings):
    return McpService(mcp_settings)


@pytest.fixture
def fake_model(monkeypatch):
    """Install a fake Gemini model; set ``.reply`` to control its answer."""
    model = FakeModel("{}")
    monkeypatch.setattr(ai_service, "get_model", lambda model_name=None: model)
    return model


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, mcp_service, monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "admin_email", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "admin_password", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "zapier_webhook_secret", WEBHOOK_SECRET)
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(limiter, "enabled", False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mcp_service] = lambda: mcp_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client):
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client


@pytest.fixture
def webhook_headers():
    return {"Authorization": f"Bearer {WEBHOOK_SECRET}"}
