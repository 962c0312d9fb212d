"""Progress tracking data models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ExportProgress:
    """Progress information for a running export."""
    current_game: str
    games_processed: int
    total_games: int


@dataclass(frozen=True)
class ExportSummary:
    """Outcome of a completed export run."""
    games_exported: int
    images_staged: int
    images_missing: int
    images_failed: int
    unresolved_references: int
    archive_path: Path
    duration_seconds: float = 0.0
