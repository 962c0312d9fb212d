"""Confirmation dialog shown before an export starts."""

from typing import ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding, BindingType
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static

import structlog

log = structlog.stdlib.get_logger()

CONFIRM_TITLE = "Start Library Export?"
CONFIRM_MESSAGE = (
    "This will export your library metadata and images to a single archive "
    "for the mobile app.\nThis may take a while depending on your library size."
)


class ConfirmExportScreen(ModalScreen[bool]):
    """Yes/No prompt; dismisses with True only when the user confirms."""

    CSS: ClassVar[str] = """
    ConfirmExportScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 64;
        height: auto;
        padding: 1 2;
        border: thick $primary;
        background: $surface;
    }

    #confirm-title {
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    #confirm-buttons {
        margin-top: 1;
        height: auto;
        align: center middle;
    }

    #confirm-buttons Button {
        margin: 0 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("y", "confirm", "Yes", show=True),
        Binding("n", "cancel", "No", show=True),
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    @override
    def compose(self) -> ComposeResult:
        with Container(id="confirm-dialog"):
            yield Static(CONFIRM_TITLE, id="confirm-title")
            yield Static(CONFIRM_MESSAGE, id="confirm-message")
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes", id="btn-yes", variant="primary")
                yield Button("No", id="btn-no", variant="default")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-yes":
            self.action_confirm()
        elif event.button.id == "btn-no":
            self.action_cancel()

    def action_confirm(self) -> None:
        log.info("Export confirmed by user")
        self.dismiss(True)

    def action_cancel(self) -> None:
        log.info("Export declined by user")
        self.dismiss(False)
