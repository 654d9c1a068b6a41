"""Explicit storage context passed into every engine operation."""
from dataclasses import dataclass, field
from typing import Optional

from injurylog.adapters.base import AdapterRegistry, StorageAdapter
from injurylog.config import Settings, settings as default_settings
from injurylog.storage.coordinator import UpdateCoordinator
from injurylog.storage.roster import RosterProvider


@dataclass
class LogContext:
    """Adapter, file locations and retry policy for one caller."""

    adapter: StorageAdapter
    log_path: str = "data/injury_log.csv"
    config_path: str = "data/app_info.csv"
    season_dates_path: str = "data/season_dates.csv"
    season_rounds_path: str = "data/season_rounds.csv"
    max_retries: int = 3
    coordinator: UpdateCoordinator = field(init=False, repr=False)

    def __post_init__(self):
        self.coordinator = UpdateCoordinator(self.adapter, self.max_retries)

    @property
    def roster(self) -> RosterProvider:
        return RosterProvider(self.adapter, self.config_path)

    def season_path(self, kind: str) -> str:
        paths = {"dates": self.season_dates_path, "rounds": self.season_rounds_path}
        if kind not in paths:
            raise ValueError(f"Unknown season table: {kind}")
        return paths[kind]

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **adapter_kwargs) -> "LogContext":
        """Build a context with the storage backend named in settings."""
        settings = settings or default_settings
        if settings.STORAGE_BACKEND == "github":
            adapter_kwargs = {
                "token": settings.GITHUB_TOKEN,
                "owner": settings.GITHUB_USER,
                "repo": settings.GITHUB_REPO,
                "branch": settings.GITHUB_BRANCH,
                "api_url": settings.GITHUB_API_URL,
                "timeout": settings.GITHUB_TIMEOUT,
                **adapter_kwargs,
            }
        adapter = AdapterRegistry.get_adapter(settings.STORAGE_BACKEND, **adapter_kwargs)
        return cls(
            adapter=adapter,
            log_path=settings.LOG_PATH,
            config_path=settings.CONFIG_PATH,
            season_dates_path=settings.SEASON_DATES_PATH,
            season_rounds_path=settings.SEASON_ROUNDS_PATH,
            max_retries=settings.COMMIT_MAX_RETRIES,
        )
