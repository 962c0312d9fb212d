"""Game-related data models."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class NamedItem:
    """A lookup table entry (platform, company, genre, tag, ...)."""
    id: str
    name: str


@dataclass(frozen=True)
class GameLink:
    """A named URL attached to a game."""
    name: str
    url: str


@dataclass(frozen=True)
class SourceGame:
    """A game as stored in the library database.

    Reference fields hold lookup table ids. Id lists may be None when the
    database never populated them, which is not the same as an empty list
    but is projected identically.
    """
    id: str
    name: str | None = None
    description: str | None = None
    install_directory: str | None = None
    is_installed: bool = False
    hidden: bool = False
    favorite: bool = False
    community_score: int | None = None
    critic_score: int | None = None
    user_score: int | None = None
    release_date: date | None = None
    last_activity: datetime | None = None
    added: datetime | None = None
    modified: datetime | None = None
    playtime: int | float | timedelta = 0  # Seconds unless given as a timedelta
    platform_ids: list[str] | None = None
    developer_ids: list[str] | None = None
    publisher_ids: list[str] | None = None
    genre_ids: list[str] | None = None
    tag_ids: list[str] | None = None
    feature_ids: list[str] | None = None
    series_ids: list[str] | None = None
    age_rating_ids: list[str] | None = None
    source_id: str | None = None
    completion_status_id: str | None = None
    links: list[GameLink] | None = None
    cover_image: str | None = None  # Relative to the content store
    background_image: str | None = None
    icon: str | None = None


@dataclass(frozen=True)
class ExportRecord:
    """Denormalized, self-contained representation of one game.

    Field order is the manifest field order.
    """
    id: str
    name: str | None = None
    description: str | None = None
    playtime: int = 0
    last_played: datetime | None = None
    added: datetime | None = None
    modified: datetime | None = None
    release_date: date | None = None
    hidden: bool = False
    favorite: bool = False
    is_installed: bool = False
    install_directory: str | None = None
    source: str | None = None
    completion_status: str | None = None
    platform: list[str] = field(default_factory=list)
    developers: list[str] = field(default_factory=list)
    publishers: list[str] = field(default_factory=list)
    genres: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    series: list[str] = field(default_factory=list)
    age_rating: list[str] = field(default_factory=list)
    links: dict[str, str] = field(default_factory=dict)
    cover_image: str | None = None  # Bundle-relative path
    background_image: str | None = None
    icon: str | None = None
    community_score: int | None = None
    critic_score: int | None = None
    user_score: int | None = None
