"""Configuration service for managing application settings."""

import json
from pathlib import Path

import structlog

from ..models import ExportConfig
from .errors import ConfigurationError
from .packager import ARCHIVE_FORMATS

log = structlog.stdlib.get_logger()

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "library-bundle" / "config.json"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for managing application configuration."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or DEFAULT_CONFIG_PATH
        log.info("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> ExportConfig:
        """Load configuration from file or return default configuration."""
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return self._get_default_config()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data: dict[str, str] = json.load(f)

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return self._get_default_config()

            log.info("Configuration loaded successfully")
            return config

        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return self._get_default_config()

    def save_config(self, config: ExportConfig) -> None:
        """Save configuration to file.

        Raises:
            ConfigurationError: If the configuration does not validate
        """
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ConfigurationError(
                f"Invalid configuration: {', '.join(validation_result.errors)}",
                setting=str(self.config_path),
            )

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            data = self._config_to_dict(config)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            log.info("Configuration saved successfully")

        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

    def validate_config(self, config: ExportConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        for name in ("library_path", "configuration_path", "application_path"):
            value = getattr(config, name)
            if not isinstance(value, Path):
                errors.append(f"{name} must be a Path object")
            elif not value.is_absolute():
                errors.append(f"{name} must be an absolute path")

        # Validate archive format and name
        if config.archive_format not in ARCHIVE_FORMATS:
            errors.append(f"archive_format must be one of: {', '.join(ARCHIVE_FORMATS)}")
        if not config.archive_name or Path(config.archive_name).name != config.archive_name:
            errors.append("archive_name must be a plain file name")
        elif config.archive_format in ARCHIVE_FORMATS and not config.archive_name.lower().endswith(f".{config.archive_format}"):
            errors.append(f"archive_name must end with .{config.archive_format}")

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        return ValidationResult(len(errors) == 0, errors)

    def _get_default_config(self) -> ExportConfig:
        """Get default configuration."""
        data_root = Path.home() / ".local" / "share" / "library-bundle"
        return ExportConfig(
            library_path=data_root / "library.json",
            configuration_path=data_root,
            application_path=data_root,
            archive_name="LibraryExport.zip",
            archive_format="zip",
            log_level="INFO",
        )

    def _config_to_dict(self, config: ExportConfig) -> dict[str, str]:
        """Convert ExportConfig to dictionary for JSON serialization."""
        return {
            "library_path": str(config.library_path),
            "configuration_path": str(config.configuration_path),
            "application_path": str(config.application_path),
            "archive_name": config.archive_name,
            "archive_format": config.archive_format,
            "log_level": config.log_level,
        }

    def _dict_to_config(self, data: dict[str, str]) -> ExportConfig:
        """Convert dictionary to ExportConfig."""
        archive_format = str(data.get("archive_format", "zip")).lower()
        default_name = f"LibraryExport.{archive_format}"

        return ExportConfig(
            library_path=Path(str(data["library_path"])),
            configuration_path=Path(str(data["configuration_path"])),
            application_path=Path(str(data["application_path"])),
            archive_name=str(data.get("archive_name") or default_name),
            archive_format=archive_format,
            log_level=str(data.get("log_level", "INFO")).upper(),
        )
