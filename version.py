"""
Version information for the curriculo application.

This file is the single source of truth for version numbers.
The preview service reports it on /health.
"""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)

# Build metadata (set by CI/CD or manually)
BUILD_DATE = "2026-10-19"
GIT_COMMIT = None  # Will be set at runtime if available
