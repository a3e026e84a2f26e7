"""Core module - settings-bound infrastructure shared by all resource modules."""

from app.core.database import get_db
from app.core.exceptions import AppException
from app.core.logging import get_logger
from app.core.security import Actor, Role, get_current_actor

__all__ = ["get_db", "AppException", "get_logger", "Actor", "Role", "get_current_actor"]
