"""Services module - Business logic layer"""

from .change_gutter import ChangeGutter
from .config_manager import ConfigManager
from .diff_engine import DiffEngine
from .session_manager import SessionManager, SessionNotFoundError

__all__ = [
    "ChangeGutter",
    "ConfigManager",
    "DiffEngine",
    "SessionManager",
    "SessionNotFoundError",
]
