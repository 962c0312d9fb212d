"""Main entry point for the library bundle exporter.

This module provides the application entry point with:
- Command-line argument parsing
- Application initialization and dependency injection
- A headless mode running a single export without the TUI
"""

import argparse
import sys
from pathlib import Path

import structlog

from library_bundle import __version__
from library_bundle.models import ExportConfig, ExportSummary
from library_bundle.services.config import ConfigurationService, VALID_LOG_LEVELS
from library_bundle.services.errors import get_error_service
from library_bundle.services.exporter import LibraryExportService
from library_bundle.services.filesystem import FileSystemService
from library_bundle.services.library_source import SnapshotLibrary
from library_bundle.services.logging import setup_logging

log = structlog.stdlib.get_logger()


class ApplicationContext:
    """Container for application services.

    Services are created lazily so that a broken configuration only
    surfaces when something actually needs it.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path: Path | None = config_path

        self._config_service: ConfigurationService | None = None
        self._config: ExportConfig | None = None
        self._filesystem: FileSystemService | None = None
        self._export_service: LibraryExportService | None = None

    @property
    def config_service(self) -> ConfigurationService:
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> ExportConfig:
        if self._config is None:
            self._config = self.config_service.load_config()
        return self._config

    @property
    def filesystem(self) -> FileSystemService:
        if self._filesystem is None:
            self._filesystem = FileSystemService()
        return self._filesystem

    @property
    def export_service(self) -> LibraryExportService:
        """Get the export service (lazy initialization)."""
        if self._export_service is None:
            self._export_service = LibraryExportService.from_config(
                self.config,
                source=SnapshotLibrary(self.config.library_path),
                filesystem=self.filesystem,
            )
        return self._export_service


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(
        self,
        config: Path | None,
        log_level: str | None,
        log_dir: Path | None,
        no_tui: bool,
    ) -> None:
        self.config: Path | None = config
        self.log_level: str | None = log_level
        self.log_dir: Path | None = log_dir
        self.no_tui: bool = no_tui


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="library-bundle",
        description="Export a game library and its media into a single archive for the mobile app",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  library-bundle                          Start the TUI application
  library-bundle --no-tui                 Run one export and exit
  library-bundle --config ./config.json   Use a custom config file
        """,
    )

    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/library-bundle/config.json)",
    )

    _ = parser.add_argument(
        "--log-level",
        choices=list(VALID_LOG_LEVELS),
        default=None,
        help="Override the logging level from the configuration file",
    )

    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: ./logs when running the TUI)",
    )

    _ = parser.add_argument(
        "--no-tui",
        action="store_true",
        help="Run a single export without the TUI",
    )

    ns = parser.parse_args(argv)

    return ParsedArgs(
        config=ns.config,
        log_level=ns.log_level,
        log_dir=ns.log_dir,
        no_tui=bool(ns.no_tui),
    )


def run_headless(context: ApplicationContext) -> int:
    """Run one export and report the outcome on stdout/stderr.

    Returns:
        Exit code (0 for success, 1 for a failed export)
    """
    print(f"Exporting library from {context.config.library_path}")
    try:
        summary = context.export_service.run()
    except Exception as e:
        user_error = get_error_service().handle_error(e, operation="export_library", component="cli")
        print(f"Export failed: {user_error.message}", file=sys.stderr)
        return 1

    print(format_summary(summary))
    return 0


def format_summary(summary: ExportSummary) -> str:
    return (
        f"Library exported successfully to '{summary.archive_path}'\n"
        f"  Games:  {summary.games_exported}\n"
        f"  Images: {summary.images_staged} staged, "
        f"{summary.images_missing} missing, {summary.images_failed} failed\n"
        f"  Unresolved references dropped: {summary.unresolved_references}"
    )


def run_tui(context: ApplicationContext) -> int:
    """Run the TUI application."""
    from library_bundle.ui.app import LibraryExportApp

    log.info("Starting TUI application")
    try:
        app = LibraryExportApp(export_service=context.export_service, config=context.config)
        app.run()
    except Exception as e:
        log.error("TUI application error", error=str(e), exc_info=True)
        return 1

    log.info("TUI application exited normally")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)
    context = ApplicationContext(config_path=args.config)

    log_dir = args.log_dir
    if log_dir is None and not args.no_tui:
        log_dir = Path("logs")

    _ = setup_logging(
        log_level=args.log_level or context.config.log_level,
        log_dir=log_dir,
        tui_mode=not args.no_tui,
    )

    log.info(
        "Starting library bundle exporter",
        version=__version__,
        config_path=str(context.config_service.config_path),
        headless=args.no_tui,
    )

    try:
        if args.no_tui:
            exit_code = run_headless(context)
        else:
            exit_code = run_tui(context)

    except KeyboardInterrupt:
        log.info("Application interrupted by user")
        exit_code = 130

    error_counts = {
        category.value: count
        for category, count in get_error_service().get_error_count_by_category().items()
    }
    log.info("Application exiting", exit_code=exit_code, errors_by_category=error_counts)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
