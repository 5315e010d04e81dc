"""
Centralized error handling for the resume builder.

Defines the exception taxonomy shared by the pagination engine and the
external collaborators, plus small helpers for consistent logging and
fallback behavior.

Taxonomy:
- PaginationError: MeasurementTimeout, ExtractionFailure (fail-soft to one page)
- UpstreamServiceError: payment gateway / text service failures (shown to user)
- RateLimitedError: retried transparently, then surfaced as UpstreamServiceError
- ExportInProgressError: re-entrant export request rejected
- StorageError: persistence backend failure
"""

import logging
from typing import Any, Callable, Optional, TypeVar

# Type variable for generic return types
T = TypeVar("T")


class CurriculoError(Exception):
    """Base class for all application errors."""


class PaginationError(CurriculoError):
    """Raised when a pagination pass cannot complete."""


class MeasurementTimeout(PaginationError):
    """Raised when the measurement render does not settle in time."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Pagination render timeout after {timeout_ms}ms")


class ExtractionFailure(PaginationError):
    """Raised when the rendered document lacks the expected structure."""


class UpstreamServiceError(CurriculoError):
    """
    Raised when an external collaborator fails.

    Carries a user-facing message and the HTTP status the service layer
    should answer with.
    """

    def __init__(self, service: str, message: str, status_code: int = 502):
        self.service = service
        self.message = message
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class RateLimitedError(UpstreamServiceError):
    """Raised when the upstream answered HTTP 429."""

    def __init__(self, service: str, message: str = "RESOURCE_EXHAUSTED"):
        super().__init__(service, message, status_code=429)


class ExportInProgressError(CurriculoError):
    """Raised when a PDF export is requested while another one runs."""

    def __init__(self):
        super().__init__("A PDF export is already in progress")


class StorageError(CurriculoError):
    """Raised when the persistence backend cannot read or write."""


def log_on_exception(
    logger: logging.Logger,
    operation: str,
    level: int = logging.WARNING,
    include_traceback: bool = False,
):
    """
    Context manager for logging exceptions without swallowing them silently.

    Usage:
        with log_on_exception(logger, "saved resumes write", level=logging.ERROR):
            path.write_text(...)
    """

    class ExceptionLogger:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None:
                if include_traceback:
                    logger.log(level, f"[{operation}] Failed: {exc_val}", exc_info=True)
                else:
                    logger.log(level, f"[{operation}] Failed: {exc_val}")
            # Return False to not suppress the exception
            return False

    return ExceptionLogger()


def safe_execute(
    func: Callable[..., T],
    *args,
    operation_name: str = "operation",
    logger: Optional[logging.Logger] = None,
    fallback: Any = None,
    critical: bool = False,
    **kwargs,
) -> T:
    """
    Execute a function safely with error handling and logging.

    Args:
        func: Function to execute
        *args: Positional arguments for func
        operation_name: Name for logging
        logger: Logger instance (uses module logger if None)
        fallback: Value to return on failure
        critical: If True, log at ERROR level with traceback
        **kwargs: Keyword arguments for func

    Returns:
        Function result or fallback value on error
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    try:
        return func(*args, **kwargs)
    except Exception as e:
        log_level = logging.ERROR if critical else logging.WARNING
        logger.log(
            log_level,
            f"[{operation_name}] Failed: {e}",
            exc_info=critical,
        )
        return fallback
