"""Configuration data models."""

from dataclasses import dataclass
from pathlib import Path

CONTENT_STORE_SUBPATH = Path("library") / "files"
STAGING_DIR_NAME = "LibraryExportTemp"


@dataclass(frozen=True)
class ExportConfig:
    """Application configuration settings."""
    library_path: Path  # JSON snapshot of the library database
    configuration_path: Path  # Host configuration directory holding the content store
    application_path: Path  # Directory receiving the archive and the staging tree
    archive_name: str = "LibraryExport.zip"
    archive_format: str = "zip"  # "zip" or "7z"
    log_level: str = "INFO"

    @property
    def content_root(self) -> Path:
        """Root of the media content store image paths are relative to."""
        return self.configuration_path / CONTENT_STORE_SUBPATH

    @property
    def destination_archive_path(self) -> Path:
        return self.application_path / self.archive_name

    @property
    def staging_root(self) -> Path:
        return self.application_path / STAGING_DIR_NAME
