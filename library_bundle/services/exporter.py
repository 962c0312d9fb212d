"""Export service driving one read, project, stage and pack run."""

import dataclasses
import threading
import time
from collections.abc import Callable
from pathlib import Path

import structlog

from ..models import ExportConfig, ExportProgress, ExportRecord, ExportSummary
from .asset_stager import IMAGES_DIR_NAME, AssetStager
from .errors import ExportInProgressError, FileSystemError
from .filesystem import FileSystemService
from .library_source import LibrarySource, read_games
from .packager import BundlePackager
from .projector import RecordProjector

log = structlog.stdlib.get_logger()

ProgressCallback = Callable[[ExportProgress], None]


class LibraryExportService:
    """Exports a whole library into a single bundle archive.

    Only one run may be active per service; a second call to ``run`` while
    one is in flight raises ExportInProgressError instead of waiting.
    """

    def __init__(
        self,
        source: LibrarySource,
        content_root: Path,
        destination: Path,
        staging_root: Path,
        archive_format: str = "zip",
        filesystem: FileSystemService | None = None,
    ) -> None:
        self.source = source
        self.destination = destination
        self.staging_root = staging_root
        self.filesystem = filesystem or FileSystemService()
        self.stager = AssetStager(content_root, self.filesystem)
        self.packager = BundlePackager(self.filesystem, archive_format=archive_format)
        self._run_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: ExportConfig,
        source: LibrarySource,
        filesystem: FileSystemService | None = None,
    ) -> "LibraryExportService":
        return cls(
            source=source,
            content_root=config.content_root,
            destination=config.destination_archive_path,
            staging_root=config.staging_root,
            archive_format=config.archive_format,
            filesystem=filesystem,
        )

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    def run(self, progress_callback: ProgressCallback | None = None) -> ExportSummary:
        """Run one export.

        Args:
            progress_callback: Called after each game with the run's progress

        Returns:
            Summary of the completed run

        Raises:
            ExportInProgressError: If another run is active
            SourceReadError: If the library cannot be enumerated
            SerializationError: If the manifest cannot be produced
            PackagingError: If the archive cannot be created
            FileSystemError: If the previous output cannot be cleared
        """
        if not self._run_lock.acquire(blocking=False):
            log.warning("Export requested while another export is running")
            raise ExportInProgressError()

        try:
            return self._run(progress_callback)
        finally:
            self._run_lock.release()

    def _run(self, progress_callback: ProgressCallback | None) -> ExportSummary:
        started = time.monotonic()
        log.info("Library export started", destination=str(self.destination), staging_root=str(self.staging_root))

        self._prepare_output()

        games = read_games(self.source)
        projector = RecordProjector()
        records: list[ExportRecord] = []
        images_staged = images_missing = images_failed = 0

        for index, game in enumerate(games, start=1):
            record = projector.project(game, self.source)
            images = self.stager.stage(game, self.staging_root)
            records.append(dataclasses.replace(
                record,
                cover_image=images.cover_image,
                background_image=images.background_image,
                icon=images.icon,
            ))
            images_staged += images.staged
            images_missing += images.missing
            images_failed += images.failed

            if progress_callback is not None:
                progress_callback(ExportProgress(
                    current_game=game.name or game.id,
                    games_processed=index,
                    total_games=len(games),
                ))

        archive_path = self.packager.pack(records, self.staging_root, self.destination)

        summary = ExportSummary(
            games_exported=len(records),
            images_staged=images_staged,
            images_missing=images_missing,
            images_failed=images_failed,
            unresolved_references=projector.unresolved_references,
            archive_path=archive_path,
            duration_seconds=time.monotonic() - started,
        )
        log.info(
            "Library export completed",
            games_exported=summary.games_exported,
            images_staged=summary.images_staged,
            images_missing=summary.images_missing,
            images_failed=summary.images_failed,
            unresolved_references=summary.unresolved_references,
            archive_path=str(summary.archive_path),
            duration_seconds=round(summary.duration_seconds, 3),
        )
        return summary

    def _prepare_output(self) -> None:
        """Remove the previous archive and start from an empty staging tree."""
        try:
            if self.filesystem.delete_file(self.destination):
                log.info("Previous archive removed", path=str(self.destination))
            self.filesystem.reset_directory(self.staging_root)
            self.filesystem.ensure_directory(self.staging_root / IMAGES_DIR_NAME)
        except OSError as e:
            raise FileSystemError(
                "Could not prepare the export location.",
                original_error=e,
                path=str(self.staging_root),
                operation="prepare_output",
            ) from e
