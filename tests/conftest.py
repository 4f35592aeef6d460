"""Test configuration for xmlrelay."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from xmlrelay.config import reset_settings_cache  # noqa: E402
from xmlrelay.database import reset_database_state  # noqa: E402

API_KEY = "secure-api-key"


@pytest.fixture(autouse=True)
def _isolate_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Provide isolated configuration for each test."""

    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("STAGING_DIR", str(tmp_path / "staging"))
    monkeypatch.setenv("PROCESSED_FILES_API_KEY", API_KEY)
    monkeypatch.setenv("STORAGE_SERVICE_URL", "http://storage.test")
    monkeypatch.delenv("STORAGE_RECEIVE_PATH", raising=False)
    monkeypatch.delenv("MAX_UPLOAD_SIZE", raising=False)
    reset_settings_cache()
    reset_database_state()
    yield
    reset_settings_cache()
    reset_database_state()


@pytest.fixture()
def staging_dir(tmp_path: Path) -> Path:
    return tmp_path / "staging"


@pytest.fixture()
def storage_client() -> Generator[TestClient, None, None]:
    """Return a test client for the Storage Service."""

    from xmlrelay.main import storage_app

    with TestClient(storage_app) as test_client:
        yield test_client


@pytest.fixture()
def ingestion_client() -> Generator[TestClient, None, None]:
    """Return a test client for the Ingestion Service."""

    from xmlrelay.main import ingestion_app

    with TestClient(ingestion_app) as test_client:
        yield test_client
