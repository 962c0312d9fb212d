"""Main Textual application hosting the library export action."""

from typing import ClassVar, override

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Footer, Header

import structlog

from library_bundle.models import ExportConfig
from library_bundle.services.exporter import LibraryExportService

log = structlog.stdlib.get_logger()


class LibraryExportApp(App[None]):
    """Thin host around the export pipeline.

    The application owns no export logic: it asks for confirmation, runs
    ``LibraryExportService.run`` in a worker and shows notifications.
    """

    CSS: ClassVar[str] = """
    Screen {
        background: $surface;
    }

    .title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True, priority=True),
    ]

    _export_service: LibraryExportService
    _config: ExportConfig | None

    def __init__(
        self,
        export_service: LibraryExportService,
        config: ExportConfig | None = None,
    ) -> None:
        """Initialize the application.

        Args:
            export_service: Service running the export pipeline
            config: Active configuration, used for display only
        """
        super().__init__()
        self.title = "Library Bundle"  # type: ignore[assignment]
        self.sub_title = "Export your game library for the mobile app"  # type: ignore[assignment]
        self._export_service = export_service
        self._config = config

        log.info("LibraryExportApp initialized")

    @property
    def export_service(self) -> LibraryExportService:
        return self._export_service

    @property
    def destination_label(self) -> str:
        if self._config is None:
            return str(self._export_service.destination)
        return str(self._config.destination_archive_path)

    @override
    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    async def on_mount(self) -> None:
        from library_bundle.ui.screens import ExportScreen

        await self.push_screen(ExportScreen())
        log.info("Export screen pushed")
