"""Service layer: the export pipeline and its supporting services."""

from .asset_stager import AssetStager, StagedImages
from .config import ConfigurationService, ValidationResult
from .errors import (
    AppError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    ExportInProgressError,
    FileSystemError,
    PackagingError,
    SerializationError,
    SourceReadError,
    UserFriendlyError,
    ValidationError,
    get_error_service,
    handle_error,
)
from .exporter import LibraryExportService
from .filesystem import FileSystemService
from .library_source import (
    DictLookupTable,
    InMemoryLibrary,
    LibrarySource,
    LookupTable,
    SnapshotLibrary,
    load_library_snapshot,
    read_games,
)
from .packager import BundlePackager, serialize_manifest
from .projector import RecordProjector

__all__ = [
    "AppError",
    "AssetStager",
    "BundlePackager",
    "ConfigurationError",
    "ConfigurationService",
    "DictLookupTable",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "ExportInProgressError",
    "FileSystemError",
    "FileSystemService",
    "InMemoryLibrary",
    "LibraryExportService",
    "LibrarySource",
    "LookupTable",
    "PackagingError",
    "RecordProjector",
    "SerializationError",
    "SnapshotLibrary",
    "SourceReadError",
    "StagedImages",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
    "get_error_service",
    "handle_error",
    "load_library_snapshot",
    "read_games",
    "serialize_manifest",
]
