"""
Repository Pattern for resume persistence

Public API:
- get_resume_repository(): Factory returning the configured backend
- reset_resume_repository(): Drop the cached instance (tests, reconfiguration)
- ResumeRepositoryInterface: Abstract interface
- InProgressResume: Wizard state record

Usage:
    from curriculo.common.repositories import get_resume_repository

    repo = get_resume_repository()
    repo.save_progress(InProgressResume(resume_data=document, current_step=2))
"""

import logging
from typing import Optional

from curriculo.common.config import Config
from curriculo.common.repositories.base import (
    InProgressResume,
    ResumeRepositoryInterface,
    build_saved_resume,
    replace_or_append,
)
from curriculo.common.repositories.json_file_repository import JsonFileResumeRepository

logger = logging.getLogger(__name__)

_repository_instance: Optional[ResumeRepositoryInterface] = None


def get_resume_repository() -> ResumeRepositoryInterface:
    """
    Get the resume repository instance (singleton).

    STORAGE_BACKEND selects the implementation: "file" (default) or
    "mongodb".
    """
    global _repository_instance

    if _repository_instance is None:
        if Config.STORAGE_BACKEND == "mongodb":
            from curriculo.common.repositories.mongo_repository import MongoResumeRepository

            _repository_instance = MongoResumeRepository(
                mongodb_uri=Config.MONGODB_URI,
                database=Config.MONGODB_DATABASE,
            )
        else:
            _repository_instance = JsonFileResumeRepository(Config.get_storage_path())
        logger.info(f"Initialized resume repository ({Config.STORAGE_BACKEND})")

    return _repository_instance


def reset_resume_repository() -> None:
    """Reset the singleton (primarily for testing)."""
    global _repository_instance
    _repository_instance = None


__all__ = [
    "get_resume_repository",
    "reset_resume_repository",
    "ResumeRepositoryInterface",
    "InProgressResume",
    "JsonFileResumeRepository",
    "build_saved_resume",
    "replace_or_append",
]
