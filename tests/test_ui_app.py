"""Tests for the export TUI."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from textual.widgets import Button, Static

from library_bundle.models import ExportProgress, ExportSummary
from library_bundle.services.errors import PackagingError
from library_bundle.services.exporter import LibraryExportService
from library_bundle.ui.app import LibraryExportApp
from library_bundle.ui.screens import ConfirmExportScreen, ExportScreen

SUMMARY = ExportSummary(
    games_exported=2,
    images_staged=3,
    images_missing=1,
    images_failed=0,
    unresolved_references=0,
    archive_path=Path("/tmp/app/LibraryExport.zip"),
)


def _mock_service(**kwargs: object) -> MagicMock:
    service = MagicMock(spec=LibraryExportService)
    service.destination = Path("/tmp/app/LibraryExport.zip")
    service.is_running = False
    service.run.configure_mock(**kwargs)
    return service


class TestBindings:
    def test_export_screen_bindings(self) -> None:
        keys = {binding.key for binding in ExportScreen.BINDINGS}  # type: ignore[union-attr]

        assert {"e", "escape"} <= keys

    def test_confirm_screen_bindings(self) -> None:
        actions = {binding.key: binding.action for binding in ConfirmExportScreen.BINDINGS}  # type: ignore[union-attr]

        assert actions["y"] == "confirm"
        assert actions["n"] == "cancel"
        assert actions["escape"] == "cancel"

    def test_destination_label_defaults_to_service_destination(self) -> None:
        app = LibraryExportApp(export_service=_mock_service())

        assert app.destination_label == "/tmp/app/LibraryExport.zip"


@pytest.mark.asyncio
async def test_declining_confirmation_does_not_export() -> None:
    service = _mock_service(return_value=SUMMARY)
    app = LibraryExportApp(export_service=service)

    async with app.run_test() as pilot:
        await pilot.pause()
        assert isinstance(app.screen, ExportScreen)

        await pilot.press("e")
        await pilot.pause()
        assert isinstance(app.screen, ConfirmExportScreen)

        await pilot.press("n")
        await pilot.pause()

        assert isinstance(app.screen, ExportScreen)
        assert not app.screen.is_exporting
        service.run.assert_not_called()


@pytest.mark.asyncio
async def test_confirmed_export_runs_once_and_reports_success() -> None:
    def run(progress_callback=None):
        progress_callback(ExportProgress(current_game="Half-Life 2", games_processed=1, total_games=2))
        progress_callback(ExportProgress(current_game="Portal", games_processed=2, total_games=2))
        return SUMMARY

    service = _mock_service(side_effect=run)
    app = LibraryExportApp(export_service=service)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("e")
        await pilot.pause()
        await pilot.press("y")
        await app.workers.wait_for_complete()
        await pilot.pause()

        screen = app.screen
        assert isinstance(screen, ExportScreen)
        service.run.assert_called_once()
        assert not screen.is_exporting
        assert not screen.query_one("#btn-export", Button).disabled
        status = screen.query_one("#progress-status", Static)
        assert "Export completed" in str(status.render())


@pytest.mark.asyncio
async def test_failed_export_reenables_export() -> None:
    service = _mock_service(side_effect=PackagingError("The export archive could not be created."))
    app = LibraryExportApp(export_service=service)

    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("e")
        await pilot.pause()
        await pilot.press("y")
        await app.workers.wait_for_complete()
        await pilot.pause()

        screen = app.screen
        assert isinstance(screen, ExportScreen)
        assert not screen.is_exporting
        assert not screen.query_one("#btn-export", Button).disabled
        assert "Export failed" in str(screen.query_one("#progress-status", Static).render())
