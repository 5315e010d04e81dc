"""
Repository Interface Definitions

Defines the abstract interface for resume persistence so the storage
backend (JSON file, MongoDB) can be swapped without changing the service.

Two kinds of records are kept:
- the in-progress resume (Document + wizard step + finished flag)
- the list of saved (paid) resumes, each keyed by its savedAt timestamp
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import Field

from curriculo.common.types import CamelModel, ResumeData, SavedResume, iso_timestamp


class InProgressResume(CamelModel):
    """Wizard state restored when the user comes back."""

    resume_data: ResumeData = Field(default_factory=ResumeData)
    current_step: int = 0
    is_finished: bool = False


def build_saved_resume(document: ResumeData, saved_at: Optional[str] = None) -> SavedResume:
    """Snapshot a Document as a saved resume stamped with the save time."""
    return SavedResume(**document.model_dump(), saved_at=saved_at or iso_timestamp())


def replace_or_append(
    resumes: List[SavedResume],
    saved: SavedResume,
    editing_id: Optional[str],
) -> List[SavedResume]:
    """
    Insert a freshly saved resume into the saved list.

    When editing_id matches an entry, that entry is replaced in place;
    otherwise the resume is appended.
    """
    if editing_id and any(resume.saved_at == editing_id for resume in resumes):
        return [saved if resume.saved_at == editing_id else resume for resume in resumes]
    return [*resumes, saved]


class ResumeRepositoryInterface(ABC):
    """
    Abstract interface for resume persistence.

    Implementations:
    - JsonFileResumeRepository: single JSON document on disk (default)
    - MongoResumeRepository: MongoDB collections
    """

    @abstractmethod
    def get_progress(self) -> Optional[InProgressResume]:
        """
        Load the in-progress resume.

        Returns:
            InProgressResume, or None when nothing was saved
        """
        pass

    @abstractmethod
    def save_progress(self, progress: InProgressResume) -> None:
        """
        Persist the in-progress resume, replacing the previous one.

        Raises:
            StorageError: If the backend cannot write
        """
        pass

    @abstractmethod
    def clear_progress(self) -> bool:
        """
        Remove the in-progress resume.

        Returns:
            True if a record was removed
        """
        pass

    @abstractmethod
    def list_saved(self) -> List[SavedResume]:
        """
        List saved resumes in save order.
        """
        pass

    @abstractmethod
    def save_resume(self, document: ResumeData, editing_id: Optional[str] = None) -> SavedResume:
        """
        Save a paid resume.

        Args:
            document: The Document to keep
            editing_id: savedAt of the entry being re-exported after an edit;
                that entry is replaced instead of adding a new one

        Returns:
            The SavedResume with its new savedAt timestamp

        Raises:
            StorageError: If the backend cannot write
        """
        pass

    @abstractmethod
    def delete_saved(self, saved_at: str) -> bool:
        """
        Delete a saved resume by its savedAt key.

        Returns:
            True if deleted, False if not found
        """
        pass
