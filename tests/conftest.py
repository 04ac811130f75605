"""Shared fixtures: a throwaway SQLite database and upload directory."""

import io
import os
import shutil
import tempfile

_workdir = tempfile.mkdtemp(prefix="catalog-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_workdir, 'catalog.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_workdir, "uploads")
os.environ["BASE_URL"] = "http://localhost:5000"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402

from app.core import config  # noqa: E402
from app.database import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    shutil.rmtree(_workdir, ignore_errors=True)


@pytest.fixture(autouse=True)
def reset_database():
    """Recreate tables before each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def upload_dir() -> str:
    return config.UPLOAD_DIR


def make_png(size=(4, 4), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def category(client: TestClient) -> dict:
    response = client.post("/api/categories", json={"name": "Electronics"})
    assert response.status_code == 200
    return response.json()["result"]
