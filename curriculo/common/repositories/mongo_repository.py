"""
MongoDB Resume Repository

Collections:
- resume_progress: a single document with _id "current"
- saved_resumes: one document per saved resume, _id = savedAt
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from curriculo.common.error_handling import StorageError
from curriculo.common.repositories.base import (
    InProgressResume,
    ResumeRepositoryInterface,
    build_saved_resume,
)
from curriculo.common.types import ResumeData, SavedResume

logger = logging.getLogger(__name__)

PROGRESS_ID = "current"


class MongoResumeRepository(ResumeRepositoryInterface):
    """MongoDB implementation of ResumeRepositoryInterface."""

    _client: Optional[MongoClient] = None

    def __init__(
        self,
        mongodb_uri: str,
        database: str = "curriculo",
        progress_collection: str = "resume_progress",
        saved_collection: str = "saved_resumes",
    ):
        if not mongodb_uri:
            raise ValueError("MongoDB URI is required")
        self._mongodb_uri = mongodb_uri
        self._database = database
        self._progress_collection = progress_collection
        self._saved_collection = saved_collection

    def _get_client(self) -> MongoClient:
        """Get or create the MongoDB client (singleton)."""
        if MongoResumeRepository._client is None:
            MongoResumeRepository._client = MongoClient(self._mongodb_uri)
            logger.info("Created new MongoDB client for resume repository")
        return MongoResumeRepository._client

    def _collection(self, name: str):
        return self._get_client()[self._database][name]

    @classmethod
    def reset_connection(cls) -> None:
        """Reset the MongoDB client connection."""
        if cls._client is not None:
            cls._client.close()
            cls._client = None
            logger.info("Resume repository connection reset")

    @staticmethod
    @contextmanager
    def _storage_errors(action: str):
        """Re-raise driver failures as StorageError."""
        try:
            yield
        except PyMongoError as e:
            logger.error(f"Error trying to {action}: {e}")
            raise StorageError(f"Could not {action}: {e}") from e

    # ------------------------------------------------------------------
    # In-progress resume
    # ------------------------------------------------------------------

    def get_progress(self) -> Optional[InProgressResume]:
        with self._storage_errors("read progress"):
            doc = self._collection(self._progress_collection).find_one({"_id": PROGRESS_ID})
        if not doc:
            return None
        doc.pop("_id", None)
        return InProgressResume.model_validate(doc)

    def save_progress(self, progress: InProgressResume) -> None:
        with self._storage_errors("save progress"):
            self._collection(self._progress_collection).replace_one(
                {"_id": PROGRESS_ID},
                progress.model_dump(by_alias=True),
                upsert=True,
            )

    def clear_progress(self) -> bool:
        with self._storage_errors("clear progress"):
            result = self._collection(self._progress_collection).delete_one({"_id": PROGRESS_ID})
        return result.deleted_count > 0

    # ------------------------------------------------------------------
    # Saved resumes
    # ------------------------------------------------------------------

    def list_saved(self) -> List[SavedResume]:
        with self._storage_errors("list saved resumes"):
            docs = list(self._collection(self._saved_collection).find({}).sort("position", ASCENDING))
        resumes = []
        for doc in docs:
            doc.pop("_id", None)
            doc.pop("position", None)
            resumes.append(SavedResume.model_validate(doc))
        return resumes

    def save_resume(self, document: ResumeData, editing_id: Optional[str] = None) -> SavedResume:
        saved = build_saved_resume(document)
        collection = self._collection(self._saved_collection)
        with self._storage_errors("save resume"):
            existing = collection.find_one({"_id": editing_id}) if editing_id else None
            if existing:
                position = existing.get("position", 0)
            else:
                last = collection.find_one({}, sort=[("position", -1)])
                position = (last.get("position", 0) + 1) if last else 0

            # The new copy is written before the edited one is removed, so a
            # failed write leaves the old entry in place
            collection.replace_one(
                {"_id": saved.saved_at},
                {"position": position, **saved.model_dump(by_alias=True)},
                upsert=True,
            )
            if existing and editing_id != saved.saved_at:
                collection.delete_one({"_id": editing_id})

        logger.info(f"Saved resume {saved.saved_at} (editing={editing_id})")
        return saved

    def delete_saved(self, saved_at: str) -> bool:
        with self._storage_errors("delete resume"):
            result = self._collection(self._saved_collection).delete_one({"_id": saved_at})
        return result.deleted_count > 0
