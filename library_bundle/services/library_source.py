"""Read-only access to the library database.

The exporter only ever enumerates games and looks entities up by id, so the
database is modelled as a narrow capability interface. ``InMemoryLibrary``
implements it over plain dictionaries and can be built from a JSON snapshot.
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from pathlib import Path
from typing import Any, Protocol

import structlog

from ..models import GameLink, NamedItem, SourceGame
from .errors import SourceReadError

log = structlog.stdlib.get_logger()

NIL_ID = "00000000-0000-0000-0000-000000000000"

LOOKUP_CATEGORIES: tuple[str, ...] = (
    "platforms",
    "companies",
    "genres",
    "tags",
    "features",
    "series",
    "age_ratings",
    "sources",
    "completion_statuses",
)

_ID_LIST_FIELDS = (
    "platform_ids",
    "developer_ids",
    "publisher_ids",
    "genre_ids",
    "tag_ids",
    "feature_ids",
    "series_ids",
    "age_rating_ids",
)
_DATETIME_FIELDS = ("last_activity", "added", "modified")


def is_empty_id(value: object) -> bool:
    """Return True for ids that mean "no reference"."""
    if value is None:
        return True
    text = str(value).strip()
    return not text or text == NIL_ID


class LookupTable(Protocol):
    """Read-only id to entity mapping for one metadata category."""

    def get(self, item_id: str) -> NamedItem | None: ...


class LibrarySource(Protocol):
    """Read-only view of a game library database."""

    platforms: LookupTable
    companies: LookupTable
    genres: LookupTable
    tags: LookupTable
    features: LookupTable
    series: LookupTable
    age_ratings: LookupTable
    sources: LookupTable
    completion_statuses: LookupTable

    def games(self) -> Iterable[SourceGame]: ...


class DictLookupTable:
    """Lookup table backed by a dictionary keyed by id."""

    def __init__(self, items: Iterable[NamedItem] = ()) -> None:
        self._items: dict[str, NamedItem] = {item.id: item for item in items}

    def get(self, item_id: str) -> NamedItem | None:
        return self._items.get(str(item_id))

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class InMemoryLibrary:
    """A complete library held in memory."""

    game_list: list[SourceGame] = field(default_factory=list)
    platforms: DictLookupTable = field(default_factory=DictLookupTable)
    companies: DictLookupTable = field(default_factory=DictLookupTable)
    genres: DictLookupTable = field(default_factory=DictLookupTable)
    tags: DictLookupTable = field(default_factory=DictLookupTable)
    features: DictLookupTable = field(default_factory=DictLookupTable)
    series: DictLookupTable = field(default_factory=DictLookupTable)
    age_ratings: DictLookupTable = field(default_factory=DictLookupTable)
    sources: DictLookupTable = field(default_factory=DictLookupTable)
    completion_statuses: DictLookupTable = field(default_factory=DictLookupTable)

    def games(self) -> Iterable[SourceGame]:
        return iter(self.game_list)


class SnapshotLibrary:
    """Library source backed by a snapshot file that is re-read on every enumeration.

    Lookup tables come from the snapshot loaded by the latest ``games()``
    call, so an export always sees one consistent state of the file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._library: InMemoryLibrary | None = None

    def games(self) -> Iterable[SourceGame]:
        self._library = load_library_snapshot(self.path)
        return self._library.games()

    def __getattr__(self, name: str) -> LookupTable:
        if name in LOOKUP_CATEGORIES:
            if self._library is None:
                self._library = load_library_snapshot(self.path)
            return getattr(self._library, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")


def read_games(source: LibrarySource) -> list[SourceGame]:
    """Enumerate every game in the library.

    Raises:
        SourceReadError: If the source cannot be enumerated
    """
    try:
        games = list(source.games())
    except SourceReadError:
        raise
    except Exception as e:
        log.error("Failed to enumerate library games", error=str(e))
        raise SourceReadError("Could not read games from the library database.", original_error=e) from e

    log.info("Library games enumerated", game_count=len(games))
    return games


def load_library_snapshot(path: Path) -> InMemoryLibrary:
    """Load a library snapshot from a JSON document.

    Args:
        path: Path to the snapshot file

    Returns:
        The library held in memory

    Raises:
        SourceReadError: If the file is missing, unreadable or malformed
    """
    log.debug("Loading library snapshot", path=str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.error("Failed to read library snapshot", path=str(path), error=str(e))
        raise SourceReadError("Could not read the library snapshot.", original_error=e, path=str(path)) from e

    if not isinstance(data, dict):
        raise SourceReadError(
            f"Expected a JSON object in library snapshot, got {type(data).__name__}",
            path=str(path),
        )

    try:
        tables = {
            category: DictLookupTable(_parse_named_item(item) for item in data.get(category) or [])
            for category in LOOKUP_CATEGORIES
        }
        games = [parse_source_game(entry) for entry in data.get("games") or []]
    except (KeyError, TypeError, ValueError) as e:
        log.error("Malformed library snapshot", path=str(path), error=str(e))
        raise SourceReadError("The library snapshot is malformed.", original_error=e, path=str(path)) from e

    log.info(
        "Library snapshot loaded",
        path=str(path),
        game_count=len(games),
        **{f"{category}_count": len(table) for category, table in tables.items()},
    )
    return InMemoryLibrary(game_list=games, **tables)


def _parse_named_item(entry: Mapping[str, Any]) -> NamedItem:
    return NamedItem(id=str(entry["id"]), name=str(entry["name"]))


def _parse_datetime(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    return datetime.fromisoformat(str(value))


def _parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    text = str(value)
    # Accept full timestamps and keep only the calendar date
    if len(text) > 10:
        return datetime.fromisoformat(text).date()
    return date.fromisoformat(text)


def parse_source_game(entry: Mapping[str, Any]) -> SourceGame:
    """Build a SourceGame from one snapshot entry.

    Unknown keys are ignored. Raises KeyError when ``id`` is missing and
    ValueError/TypeError for values of the wrong shape.
    """
    known = {f.name for f in fields(SourceGame)}
    values: dict[str, Any] = {key: value for key, value in entry.items() if key in known}
    values["id"] = str(entry["id"])

    for name in _ID_LIST_FIELDS:
        if values.get(name) is not None:
            values[name] = [str(item_id) for item_id in values[name]]

    for name in _DATETIME_FIELDS:
        values[name] = _parse_datetime(values.get(name))
    values["release_date"] = _parse_date(values.get("release_date"))

    if values.get("links") is not None:
        values["links"] = [GameLink(name=str(link["name"]), url=str(link["url"])) for link in values["links"]]

    return SourceGame(**values)
