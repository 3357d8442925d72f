from dataclasses import dataclass, field
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class SessionType:
    """A kind of session (talk, lab, break...)."""

    id: str
    name: str | None = None
    description: str | None = None
    color: str | None = None
    duration: timedelta | None = None
    pause: bool | None = None


@dataclass(frozen=True)
class Room:
    """A conference room."""

    id: str
    name: str | None = None
    capacity: int | None = None
    weight: float | None = None


@dataclass(frozen=True)
class Track:
    """A conference track."""

    id: str
    name: str | None = None
    description: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True)
class DateTimeRange:
    """Start and end instant of a schedule slot."""

    start: datetime | None
    end: datetime | None

    def __post_init__(self) -> None:
        if self.start and self.end and self.end < self.start:
            raise ValueError("DateTimeRange end must not be before start")


@dataclass(frozen=True)
class Speaker:
    """A conference speaker."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    full_name: str | None = None
    company: str | None = None
    avatar_url: str | None = None
    social_media: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    talks: tuple["Talk", ...] = ()


@dataclass(frozen=True)
class Talk:
    """A conference talk."""

    id: str
    name: str | None = None
    audience_level: str | None = None
    language: str | None = None
    favorite_count: int | None = None
    session_type: SessionType | None = None
    track: Track | None = None
    schedule_slots: tuple["ScheduleSlot", ...] = ()
    speakers: tuple[Speaker, ...] = ()
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScheduleSlot:
    """A talk placed in a room at a given time."""

    id: str
    overflow: bool | None = None
    date_time_range: DateTimeRange | None = None
    favorite_count: int | None = None
    room: Room | None = None
    talk: Talk | None = None


@dataclass(frozen=True)
class RatedTalk:
    """Audience voting result for a talk."""

    average_rating: float
    total_rating: int
    talk: Talk


@dataclass(frozen=True)
class SharedPhoto:
    """A photo shared through the photo feed."""

    id: str
    url: str
    created_at: datetime | None = None
    likes: int = 0
    flagged_as_spam: bool = False


@dataclass(frozen=True)
class PageInfo:
    """Pagination state returned with a page of shared photos."""

    page_size: int = 0
    last_visible: str | None = None
    has_more: bool = False


@dataclass(frozen=True)
class SharedPhotos:
    """One page of the shared photo feed."""

    photos: tuple[SharedPhoto, ...] = ()
    page_info: PageInfo | None = None
