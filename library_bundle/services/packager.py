"""Manifest serialization and archive packaging for export bundles."""

import json
import zipfile
from collections.abc import Sequence
from dataclasses import fields
from datetime import date, datetime
from pathlib import Path
from typing import Any

import py7zr
import structlog

from ..models import ExportRecord
from .errors import PackagingError, SerializationError
from .filesystem import FileSystemService

log = structlog.stdlib.get_logger()

MANIFEST_NAME = "library.json"
ARCHIVE_FORMATS: tuple[str, ...] = ("zip", "7z")
PARTIAL_SUFFIX = ".partial"

# ExportRecord attribute -> manifest key, in record field order
MANIFEST_KEYS: dict[str, str] = {
    "id": "Id",
    "name": "Name",
    "description": "Description",
    "playtime": "Playtime",
    "last_played": "LastPlayed",
    "added": "Added",
    "modified": "Modified",
    "release_date": "ReleaseDate",
    "hidden": "Hidden",
    "favorite": "Favorite",
    "is_installed": "IsInstalled",
    "install_directory": "InstallDirectory",
    "source": "Source",
    "completion_status": "CompletionStatus",
    "platform": "Platform",
    "developers": "Developers",
    "publishers": "Publishers",
    "genres": "Genres",
    "tags": "Tags",
    "features": "Features",
    "series": "Series",
    "age_rating": "AgeRating",
    "links": "Links",
    "cover_image": "CoverImage",
    "background_image": "BackgroundImage",
    "icon": "Icon",
    "community_score": "CommunityScore",
    "critic_score": "CriticScore",
    "user_score": "UserScore",
}


def _manifest_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value


def record_to_manifest_entry(record: ExportRecord) -> dict[str, Any]:
    """Convert a record to its manifest object, keys in record field order."""
    return {MANIFEST_KEYS[f.name]: _manifest_value(getattr(record, f.name)) for f in fields(record)}


def serialize_manifest(records: Sequence[ExportRecord]) -> str:
    """Serialize records to the manifest document.

    Raises:
        SerializationError: If a record holds a value JSON cannot represent
    """
    try:
        document = json.dumps(
            [record_to_manifest_entry(record) for record in records],
            indent=2,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        log.error("Failed to serialize manifest", error=str(e))
        raise SerializationError("The library manifest could not be serialized.", original_error=e) from e
    return document + "\n"


class BundlePackager:
    """Writes the manifest into the staging tree and compresses the tree into one archive."""

    def __init__(
        self,
        filesystem: FileSystemService | None = None,
        archive_format: str = "zip",
        manifest_name: str = MANIFEST_NAME,
    ) -> None:
        if archive_format not in ARCHIVE_FORMATS:
            raise ValueError(f"Unsupported archive format: {archive_format}")
        self.filesystem = filesystem or FileSystemService()
        self.archive_format = archive_format
        self.manifest_name = manifest_name

    def pack(self, records: Sequence[ExportRecord], staging_root: Path, destination: Path) -> Path:
        """Package records and staged images into an archive at ``destination``.

        On success the staging root is deleted. On failure it is left in place
        and no archive remains at ``destination``.

        Raises:
            SerializationError: If the manifest cannot be produced
            PackagingError: If the archive cannot be created
        """
        manifest_path = staging_root / self.manifest_name
        document = serialize_manifest(records)
        try:
            self.filesystem.write_text_atomic(manifest_path, document)
        except OSError as e:
            raise SerializationError(
                "The library manifest could not be written.", original_error=e, path=str(manifest_path)
            ) from e

        partial_path = destination.with_name(destination.name + PARTIAL_SUFFIX)
        try:
            self.filesystem.ensure_directory(destination.parent)
            self.filesystem.delete_file(destination)
            self.filesystem.delete_file(partial_path)

            files = self.filesystem.list_files(staging_root)
            log.info(
                "Creating archive",
                destination=str(destination),
                format=self.archive_format,
                file_count=len(files),
            )
            self._write_archive(partial_path, staging_root, files)
            partial_path.replace(destination)
        except (OSError, ValueError, zipfile.BadZipFile, py7zr.Bad7zFile) as e:
            log.error("Failed to create archive", destination=str(destination), error=str(e))
            partial_path.unlink(missing_ok=True)
            raise PackagingError(
                "The export archive could not be created.",
                original_error=e,
                archive_path=str(destination),
                staging_root=str(staging_root),
            ) from e

        try:
            self.filesystem.remove_tree(staging_root)
        except OSError as e:
            # The archive is complete; a leftover staging tree is cleared by the next run
            log.warning("Failed to remove staging directory", staging_root=str(staging_root), error=str(e))

        log.info("Archive created", destination=str(destination), size=destination.stat().st_size)
        return destination

    def _write_archive(self, archive_path: Path, base_dir: Path, files: Sequence[Path]) -> None:
        if self.archive_format == "7z":
            with py7zr.SevenZipFile(archive_path, mode="w") as archive:
                for full in files:
                    archive.write(full, arcname=full.relative_to(base_dir).as_posix())
            return

        with zipfile.ZipFile(archive_path, "w", zipfile.ZIP_DEFLATED) as zf:
            for full in files:
                zf.write(full, full.relative_to(base_dir).as_posix())
