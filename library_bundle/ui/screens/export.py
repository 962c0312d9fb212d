"""Export screen: starts a library export and reports its outcome."""

from typing import ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding, BindingType
from textual.containers import Container, Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, ProgressBar, Static
from textual.worker import Worker, WorkerState

import structlog

from library_bundle.models import ExportProgress, ExportSummary
from library_bundle.services.errors import ExportInProgressError

from .base import BaseScreen
from .confirm import ConfirmExportScreen

log = structlog.stdlib.get_logger()

EXPORT_WORKER_NAME = "export_worker"


class ExportScreen(BaseScreen):
    """Root screen of the exporter.

    Asks for confirmation, runs the export in a single background thread
    worker and reports started, succeeded and failed through notifications.
    The export button stays disabled while a run is in flight.
    """

    class ProgressUpdate(Message):
        """Progress posted by the export worker after each game."""

        progress: ExportProgress

        def __init__(self, progress: ExportProgress) -> None:
            super().__init__()
            self.progress = progress

    class ExportFinished(Message):
        """Posted when the export completed successfully."""

        summary: ExportSummary

        def __init__(self, summary: ExportSummary) -> None:
            super().__init__()
            self.summary = summary

    class ExportFailed(Message):
        """Posted when the export failed."""

        error: Exception

        def __init__(self, error: Exception) -> None:
            super().__init__()
            self.error = error

    SCREEN_TITLE: ClassVar[str] = "Library Export"
    SCREEN_NAME: ClassVar[str] = "export"

    CSS: ClassVar[str] = """
    ExportScreen {
        align: center middle;
    }

    #export-container {
        width: 80;
        height: auto;
        padding: 1 2;
        border: solid $primary;
        background: $surface;
    }

    #export-destination {
        color: $text-muted;
        margin-bottom: 1;
    }

    #progress-section {
        padding: 1;
        border: solid $primary-darken-2;
        height: auto;
    }

    #progress-details {
        color: $text-muted;
    }

    #button-row {
        margin-top: 1;
        height: auto;
        align: center middle;
    }

    #button-row Button {
        margin: 0 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("e", "export", "Export", show=True),
        Binding("escape", "go_back", "Quit", show=True),
    ]

    _is_exporting: bool

    def __init__(self) -> None:
        super().__init__()
        self._is_exporting = False

    @property
    def is_exporting(self) -> bool:
        return self._is_exporting

    @override
    def compose(self) -> ComposeResult:
        destination = self.export_app.destination_label
        with Container(id="export-container"):
            yield self.create_title_widget("📦 Library Export")
            yield Static(f"Destination: {destination}", id="export-destination")
            with Vertical(id="progress-section"):
                yield Static("Ready to export", id="progress-status")
                yield ProgressBar(id="progress-bar", total=100, show_eta=False)
                yield Static("", id="progress-details")
            with Horizontal(id="button-row"):
                yield Button("Export Library", id="btn-export", variant="primary")
                yield Button("Quit", id="btn-quit", variant="default")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-export":
            self.action_export()
        elif event.button.id == "btn-quit":
            await self.action_go_back()

    def action_export(self) -> None:
        """Ask for confirmation, then start the export."""
        if self._is_exporting:
            self.notify_warning("An export is already in progress")
            return
        self.app.push_screen(ConfirmExportScreen(), self._on_export_confirmed)

    def _on_export_confirmed(self, confirmed: bool | None) -> None:
        if not confirmed:
            return
        if self._is_exporting:
            self.notify_warning("An export is already in progress")
            return

        self._set_exporting(True)
        self._update_status("Exporting library...", details="")
        self.notify_success("Library export started...")

        self.run_worker(
            self._run_export,
            name=EXPORT_WORKER_NAME,
            thread=True,
            exclusive=True,
        )

    def _run_export(self) -> None:
        """Run the export (executed in a thread worker)."""
        service = self.export_app.export_service
        try:
            summary = service.run(progress_callback=lambda progress: self.post_message(self.ProgressUpdate(progress)))
        except Exception as e:
            log.error("Library export failed", error=str(e), exc_info=True)
            self.post_message(self.ExportFailed(e))
            return
        self.post_message(self.ExportFinished(summary))

    def on_export_screen_progress_update(self, event: ProgressUpdate) -> None:
        progress = event.progress
        progress_bar = self.query_one("#progress-bar", ProgressBar)
        progress_bar.update(total=max(progress.total_games, 1), progress=progress.games_processed)
        self._update_status(
            "Exporting library...",
            details=f"Processed {progress.games_processed}/{progress.total_games}: {progress.current_game}",
        )

    def on_export_screen_export_finished(self, event: ExportFinished) -> None:
        summary = event.summary
        self._set_exporting(False)
        self._update_status(
            "✓ Export completed",
            details=(
                f"{summary.games_exported} games, {summary.images_staged} images "
                f"({summary.images_missing} missing, {summary.images_failed} failed)"
            ),
        )
        self.notify_success(f"Library exported successfully to '{summary.archive_path.name}'!")

    def on_export_screen_export_failed(self, event: ExportFailed) -> None:
        # A rejected run must not reset the state of the run still in flight
        if not isinstance(event.error, ExportInProgressError):
            self._set_exporting(False)
            self._update_status("✗ Export failed", details="")
        self.handle_exception(event.error, operation="export_library", prefix="Export failed: ")

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.worker.name == EXPORT_WORKER_NAME:
            log.debug("Export worker state changed", state=event.state)
            if event.state == WorkerState.CANCELLED:
                self._set_exporting(False)

    def _set_exporting(self, active: bool) -> None:
        self._is_exporting = active
        self.query_one("#btn-export", Button).disabled = active

    def _update_status(self, status: str, details: str) -> None:
        self.query_one("#progress-status", Static).update(status)
        self.query_one("#progress-details", Static).update(details)
