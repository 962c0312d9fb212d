"""Projection of library games into denormalized export records."""

from collections.abc import Iterable
from datetime import timedelta

import structlog

from ..models import ExportRecord, GameLink, SourceGame
from .library_source import LibrarySource, LookupTable, is_empty_id

log = structlog.stdlib.get_logger()


def normalize_playtime(playtime: int | float | timedelta | None) -> int:
    """Normalize a playtime value to whole seconds."""
    if playtime is None:
        return 0
    if isinstance(playtime, timedelta):
        seconds = int(playtime.total_seconds())
    else:
        seconds = int(playtime)
    return max(seconds, 0)


def collect_links(links: Iterable[GameLink] | None) -> dict[str, str]:
    """Collapse link pairs into a mapping; a later link wins over an earlier one with the same name."""
    result: dict[str, str] = {}
    for link in links or ():
        result[link.name] = link.url
    return result


class RecordProjector:
    """Builds ExportRecords by resolving every id reference to its display name.

    Unresolved ids are dropped without a warning. The projector keeps a
    running count of them for the export summary.
    """

    def __init__(self) -> None:
        self.unresolved_references: int = 0

    def resolve_names(self, ids: Iterable[str] | None, table: LookupTable) -> list[str]:
        """Resolve ids to names, keeping source order and duplicates."""
        names: list[str] = []
        for item_id in ids or ():
            item = table.get(item_id)
            if item is None or item.name is None:
                self.unresolved_references += 1
                continue
            names.append(item.name)
        return names

    def resolve_name(self, item_id: str | None, table: LookupTable) -> str | None:
        """Resolve a single id; empty and nil ids are not looked up."""
        if is_empty_id(item_id):
            return None
        item = table.get(item_id)
        if item is None:
            self.unresolved_references += 1
            return None
        return item.name

    def project(self, game: SourceGame, lookups: LibrarySource) -> ExportRecord:
        """Project one game. Image fields are left unset for the asset stager."""
        record = ExportRecord(
            id=game.id,
            name=game.name,
            description=game.description,
            playtime=normalize_playtime(game.playtime),
            last_played=game.last_activity,
            added=game.added,
            modified=game.modified,
            release_date=game.release_date,
            hidden=game.hidden,
            favorite=game.favorite,
            is_installed=game.is_installed,
            install_directory=game.install_directory,
            source=self.resolve_name(game.source_id, lookups.sources),
            completion_status=self.resolve_name(game.completion_status_id, lookups.completion_statuses),
            platform=self.resolve_names(game.platform_ids, lookups.platforms),
            developers=self.resolve_names(game.developer_ids, lookups.companies),
            publishers=self.resolve_names(game.publisher_ids, lookups.companies),
            genres=self.resolve_names(game.genre_ids, lookups.genres),
            tags=self.resolve_names(game.tag_ids, lookups.tags),
            features=self.resolve_names(game.feature_ids, lookups.features),
            series=self.resolve_names(game.series_ids, lookups.series),
            age_rating=self.resolve_names(game.age_rating_ids, lookups.age_ratings),
            links=collect_links(game.links),
            community_score=game.community_score,
            critic_score=game.critic_score,
            user_score=game.user_score,
        )
        log.debug("Game projected", game_id=game.id, name=game.name)
        return record
