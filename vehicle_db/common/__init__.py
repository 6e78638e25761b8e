# Common utilities and shared modules
"""
Shared components used by the collectors, seed generator and writer:
- Data models (Pydantic schemas)
- Identifier normalization
- Error taxonomy
- Logging configuration
- Project configuration
"""

from .config import settings, Settings, PROJECT_ROOT, DIST_DIR
from .identifiers import normalize_id, slugify
from .logging import setup_logging

__all__ = [
    "settings",
    "Settings",
    "PROJECT_ROOT",
    "DIST_DIR",
    "normalize_id",
    "slugify",
    "setup_logging",
]
