"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that prevent real external service calls:
- MongoDB connection attempts (would cause 5-30s timeout per test)
- Environment variable isolation (prevents credential leakage)
- Repository singleton reset between tests

These fixtures apply automatically to ALL tests in tests/unit/.
"""

import pytest
from unittest.mock import patch, MagicMock

from curriculo.common.config import Config
from curriculo.common.repositories import reset_resume_repository
from curriculo.common.types import ResumeData


@pytest.fixture(autouse=True)
def mock_mongodb():
    """
    Prevent MongoDB connection attempts in all unit tests.

    MongoClient("") defaults to localhost:27017, causing 5-30s timeout per test.
    """
    with patch("curriculo.common.repositories.mongo_repository.MongoClient") as mock_client:
        mock_instance = MagicMock()
        mock_db = MagicMock()
        mock_collection = MagicMock()

        # Setup chain: client["db"]["collection"]
        mock_instance.__getitem__ = MagicMock(return_value=mock_db)
        mock_db.__getitem__ = MagicMock(return_value=mock_collection)
        mock_collection.find_one = MagicMock(return_value=None)
        mock_collection.find = MagicMock(return_value=[])

        mock_client.return_value = mock_instance
        yield mock_client

    from curriculo.common.repositories.mongo_repository import MongoResumeRepository
    MongoResumeRepository._client = None


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """
    Isolate test environment from real credentials and configurations.

    Config reads the environment once at import, so the class attributes
    are patched directly.
    """
    monkeypatch.setattr(Config, "GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setattr(Config, "MERCADO_PAGO_ACCESS_TOKEN", "TEST-mp-token")
    monkeypatch.setattr(Config, "PRICE_STANDARD", 5.0)
    monkeypatch.setattr(Config, "PRICE_DISCOUNTED", 2.5)
    monkeypatch.setattr(Config, "STORAGE_BACKEND", "file")
    monkeypatch.setattr(Config, "STORAGE_PATH", str(tmp_path / "store.json"))
    monkeypatch.setattr(Config, "MONGODB_URI", "")

    reset_resume_repository()
    yield
    reset_resume_repository()


@pytest.fixture
def sample_document():
    """Small Document with one item in every list section."""
    return ResumeData.model_validate({
        "personalInfo": {
            "name": "Ana Maria Silva",
            "jobTitle": "Desenvolvedora Front-End",
            "email": "ana.silva@email.com",
            "phone": "(11) 98765-4321",
        },
        "summary": "Desenvolvedora com experiência em React.",
        "experiences": [
            {
                "id": "exp-1",
                "jobTitle": "Desenvolvedora Pleno",
                "company": "Tech Solutions",
                "startDate": "Jan 2022",
                "endDate": "Atual",
                "description": "Desenvolvimento do portal do cliente.",
            },
            {
                "id": "exp-2",
                "jobTitle": "Desenvolvedora Júnior",
                "company": "Web Agil",
                "startDate": "Mar 2020",
                "endDate": "Dez 2021",
                "description": "Landing pages em Vue.js.",
            },
        ],
        "education": [{"id": "edu-1", "degree": "ADS", "institution": "Estácio"}],
        "courses": [{"id": "course-1", "name": "React Avançado", "institution": "Udemy"}],
        "languages": [{"id": "lang-1", "language": "Inglês", "proficiency": "Avançado"}],
        "skills": ["React", "TypeScript"],
    })
