"""Core app configuration, database, security primitives and errors."""

from bookcircle.core.config import get_settings, settings
from bookcircle.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
