"""Configuration handling."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml

from confsync.errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path("confsync.yml")
CONFIG_ENV_VAR = "CONFSYNC_CONFIG"


class ScheduleType(Enum):
    FIXED_RATE = "FIXED_RATE"
    FIXED_DELAY = "FIXED_DELAY"


@dataclass(frozen=True)
class ConferenceSettings:
    event_base_uri: str = ""
    event_stats_base_uri: str | None = None
    event_stats_token: str | None = None
    event_slug: str = "dvbe25"
    name: str = "DEVOXX_XYZ"
    random_rated_talks: bool = False
    timeout: float = 30.0

    @property
    def rating_enabled(self) -> bool:
        """The statistics API is only used when both its URI and token are set."""
        return bool(self.event_stats_base_uri) and bool(self.event_stats_token)


@dataclass(frozen=True)
class PhotoSharingSettings:
    query_url: str = ""
    page_size: int = 10
    cache_size: int = 100
    schedule_type: ScheduleType = ScheduleType.FIXED_RATE
    initial_delay: int = 0
    schedule_duration: int = 30 * 60

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ConfigurationError("property 'page_size' must be larger than zero")
        if self.cache_size <= 0:
            raise ConfigurationError("property 'cache_size' must be larger than zero")
        if not isinstance(self.schedule_type, ScheduleType):
            try:
                object.__setattr__(self, "schedule_type", ScheduleType(str(self.schedule_type).upper()))
            except ValueError:
                raise ConfigurationError(f"unknown schedule_type {self.schedule_type!r}") from None
        if self.initial_delay < 0 or self.schedule_duration <= 0:
            raise ConfigurationError("schedule delays must not be negative and the duration must be positive")


@dataclass(frozen=True)
class Config:
    conference: ConferenceSettings = field(default_factory=ConferenceSettings)
    photo_sharing: PhotoSharingSettings = field(default_factory=PhotoSharingSettings)
    log_dir: str = "logs"


def _section(data: dict, key: str) -> dict:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"section {key!r} must be a mapping")
    return {k: v for k, v in section.items() if v is not None}


def load_config(path: str | Path) -> Config:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    try:
        conference = ConferenceSettings(**_section(data, "conference"))
        photo_sharing = PhotoSharingSettings(**_section(data, "photo_sharing"))
    except TypeError as e:
        raise ConfigurationError(str(e)) from None

    return Config(
        conference=conference,
        photo_sharing=photo_sharing,
        log_dir=data.get("log_dir", "logs"),
    )


def default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))
