"""
JSON File Resume Repository

Keeps all resume state in one JSON document on disk:

    {
        "inProgressResume": {"resumeData": {...}, "currentStep": 2, "isFinished": false},
        "savedResumes": [{..., "savedAt": "2024-05-01T12:30:00.000Z"}]
    }

Writes go through a temporary file and an atomic rename so a crash never
leaves a half-written store behind. A store that cannot be parsed is renamed
to `<name>.corrupt-<ms>` and never overwritten.
"""

import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from curriculo.common.error_handling import StorageError, log_on_exception, safe_execute
from curriculo.common.repositories.base import (
    InProgressResume,
    ResumeRepositoryInterface,
    build_saved_resume,
    replace_or_append,
)
from curriculo.common.types import ResumeData, SavedResume

logger = logging.getLogger(__name__)

PROGRESS_KEY = "inProgressResume"
SAVED_KEY = "savedResumes"


class JsonFileResumeRepository(ResumeRepositoryInterface):
    """File-backed implementation of ResumeRepositoryInterface."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def _read_store(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        store = safe_execute(
            lambda: json.loads(self.path.read_text(encoding="utf-8")),
            operation_name=f"read {self.path}",
            logger=logger,
        )
        if isinstance(store, dict):
            return store
        # Unreadable store: keep it for recovery and start over with an empty one
        self._set_aside()
        return {}

    def _set_aside(self) -> Path:
        backup = self.path.with_name(f"{self.path.name}.corrupt-{int(time.time() * 1000)}")
        try:
            os.replace(self.path, backup)
        except OSError as e:
            raise StorageError(f"Could not move unreadable store {self.path} aside: {e}") from e
        logger.error(f"Unreadable store moved to {backup}")
        return backup

    def _write_store(self, store: Dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with log_on_exception(logger, f"write {self.path}", level=logging.ERROR):
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(json.dumps(store, ensure_ascii=False, indent=2), encoding="utf-8")
                os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    # ------------------------------------------------------------------
    # In-progress resume
    # ------------------------------------------------------------------

    def get_progress(self) -> Optional[InProgressResume]:
        with self._lock:
            raw = self._read_store().get(PROGRESS_KEY)
        if not raw:
            return None
        try:
            return InProgressResume.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable in-progress resume: {e}")
            return None

    def save_progress(self, progress: InProgressResume) -> None:
        with self._lock:
            store = self._read_store()
            store[PROGRESS_KEY] = progress.model_dump(by_alias=True)
            self._write_store(store)

    def clear_progress(self) -> bool:
        with self._lock:
            store = self._read_store()
            if store.pop(PROGRESS_KEY, None) is None:
                return False
            self._write_store(store)
            return True

    # ------------------------------------------------------------------
    # Saved resumes
    # ------------------------------------------------------------------

    def list_saved(self) -> List[SavedResume]:
        with self._lock:
            raw_list = self._read_store().get(SAVED_KEY) or []
        return self._parse_saved(raw_list)

    def save_resume(self, document: ResumeData, editing_id: Optional[str] = None) -> SavedResume:
        saved = build_saved_resume(document)
        with self._lock:
            store = self._read_store()
            resumes = replace_or_append(self._parse_saved(store.get(SAVED_KEY) or []), saved, editing_id)
            store[SAVED_KEY] = [resume.model_dump(by_alias=True) for resume in resumes]
            self._write_store(store)
        logger.info(f"Saved resume {saved.saved_at} (editing={editing_id})")
        return saved

    def delete_saved(self, saved_at: str) -> bool:
        with self._lock:
            store = self._read_store()
            resumes = self._parse_saved(store.get(SAVED_KEY) or [])
            remaining = [resume for resume in resumes if resume.saved_at != saved_at]
            if len(remaining) == len(resumes):
                return False
            store[SAVED_KEY] = [resume.model_dump(by_alias=True) for resume in remaining]
            self._write_store(store)
        logger.info(f"Deleted saved resume {saved_at}")
        return True

    @staticmethod
    def _parse_saved(raw_list: List[Any]) -> List[SavedResume]:
        resumes = []
        for raw in raw_list:
            try:
                resumes.append(SavedResume.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable saved resume: {e}")
        return resumes
