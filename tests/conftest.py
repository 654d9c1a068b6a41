"""Configure pytest for the injury log."""
import os

from passlib.hash import pbkdf2_sha256

# Set environment for tests BEFORE any injurylog imports
os.environ["ENVIRONMENT"] = "test"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["TZ"] = "UTC"
os.environ["EDITOR_USERNAME"] = "physio"
os.environ["EDITOR_PASSWORD_HASH"] = pbkdf2_sha256.hash("physio-pass")
os.environ["VIEWER_USERNAME"] = "coach"
os.environ["VIEWER_PASSWORD_HASH"] = pbkdf2_sha256.hash("coach-pass")
os.environ.pop("REDIS_URL", None)

import pytest

from injurylog.adapters.memory_adapter import MemoryAdapter
from injurylog.context import LogContext

LOG_PATH = "data/injury_log.csv"
CONFIG_PATH = "data/app_info.csv"

CONFIG_CSV = """athlete,injurySite,injury,severity,status,statusColor
Alice,Knee,ACL,Low,Available,green
Al,Ankle,Sprain,Moderate,Modified,orange
Bob,,,High,Injured,red
"""

LOG_CSV = """key,status,injurySite,injury,severity,comment
Alice-2024-01-01,Injured,Knee,ACL,High,Surgery booked
Al-2024-01-01,Modified,Ankle,Sprain,Moderate,
"""

EDITOR = ("physio", "physio-pass")
VIEWER = ("coach", "coach-pass")


@pytest.fixture
def adapter():
    return MemoryAdapter({CONFIG_PATH: CONFIG_CSV, LOG_PATH: LOG_CSV})


@pytest.fixture
def empty_adapter():
    return MemoryAdapter()


@pytest.fixture
def ctx(adapter):
    return LogContext(adapter=adapter, max_retries=3)
