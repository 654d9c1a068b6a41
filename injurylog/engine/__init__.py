"""Status log engine."""
from injurylog.engine.carry_forward import project, resolve_status, LOOKBACK_DAYS

__all__ = ["project", "resolve_status", "LOOKBACK_DAYS"]
