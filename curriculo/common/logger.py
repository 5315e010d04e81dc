"""
Logging setup for the preview service.

Pagination runs overlap (a debounced run may still be measuring while the
next one starts), so log lines that belong to a run carry its id. The id and
component are stored on the LogRecord as well as in the message prefix; the
json formatter emits them as separate fields.
"""

import json
import logging
import os
import sys
from typing import Any, MutableMapping, Optional, Tuple, Union

RunId = Union[int, str]

# Global debug mode flag - can be set via environment or API
_GLOBAL_DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"


def set_global_debug_mode(enabled: bool) -> None:
    """Set global debug mode."""
    global _GLOBAL_DEBUG_MODE
    _GLOBAL_DEBUG_MODE = enabled


def is_debug_mode() -> bool:
    return _GLOBAL_DEBUG_MODE


class RunLogger(logging.LoggerAdapter):
    """
    Logger bound to one unit of work: a pagination run or a PDF export.

    Messages are prefixed with ``[run:<id>]`` (and ``[<component>]`` when
    given); ``run_id`` and ``component`` are also set on every record.
    """

    def __init__(self, logger: logging.Logger, run_id: RunId, component: Optional[str] = None):
        super().__init__(logger, {"run_id": run_id, "component": component})
        self.run_id = run_id
        self.component = component

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        prefix = f"[run:{self.run_id}]"
        if self.component:
            prefix += f" [{self.component}]"
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return f"{prefix} {msg}", kwargs


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with run context when the record has it."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        run_id = getattr(record, "run_id", None)
        if run_id is not None:
            entry["run_id"] = run_id
            entry["component"] = getattr(record, "component", None)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure global logging settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Log format ("simple" or "json")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_run_logger(
    name: str,
    run_id: RunId,
    component: Optional[str] = None,
    debug_mode: Optional[bool] = None
) -> RunLogger:
    """
    Get a logger tagged with a run id.

    Args:
        name: Logger name (usually __name__)
        run_id: Pagination run number, or a label for one-off work
        component: Optional stage name (e.g. "paginate", "scheduler", "export")
        debug_mode: If True, enables DEBUG level. If None, uses global setting.
    """
    logger = logging.getLogger(name)
    if debug_mode if debug_mode is not None else is_debug_mode():
        logger.setLevel(logging.DEBUG)
    return RunLogger(logger, run_id, component)
