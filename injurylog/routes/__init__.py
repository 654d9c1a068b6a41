"""API routes module."""
from . import health
from . import log
from . import config
from . import actions

__all__ = ["health", "log", "config", "actions"]
