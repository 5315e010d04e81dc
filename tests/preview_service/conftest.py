"""
Fixtures for preview service endpoint tests.

Collaborators (paginator, exporter, text service, payments) are replaced
on the app module; persistence goes to a per-test JSON file.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from curriculo.common.config import Config
from curriculo.common.repositories import reset_resume_repository


@pytest.fixture(autouse=True)
def isolate_storage(monkeypatch, tmp_path):
    monkeypatch.setattr(Config, "STORAGE_BACKEND", "file")
    monkeypatch.setattr(Config, "STORAGE_PATH", str(tmp_path / "store.json"))
    reset_resume_repository()
    yield
    reset_resume_repository()


@pytest.fixture
def app_module(monkeypatch):
    """The app module with Chromium marked ready and collaborators mocked."""
    import preview_service.app as module

    paginator = MagicMock()
    paginator.paginate = AsyncMock(return_value=[])
    exporter = MagicMock()
    exporter.export = AsyncMock(return_value=b"%PDF-1.4 test")
    exporter.is_processing = False

    monkeypatch.setattr(module, "_browser_ready", True)
    monkeypatch.setattr(module, "_browser_error", None)
    monkeypatch.setattr(module, "_paginator", paginator)
    monkeypatch.setattr(module, "_exporter", exporter)
    monkeypatch.setattr(module, "_text_service", MagicMock())
    monkeypatch.setattr(module, "_payments", MagicMock())
    return module


@pytest.fixture
def client(app_module):
    """Create test client (startup hooks are not run, so no browser launches)."""
    return TestClient(app_module.app)
