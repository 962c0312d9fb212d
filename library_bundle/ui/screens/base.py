"""Base screen class with common functionality for all screens."""

from typing import TYPE_CHECKING, ClassVar

from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Static

import structlog

from library_bundle.services.errors import (
    ErrorSeverity,
    UserFriendlyError,
    get_error_service,
    handle_error,
)

if TYPE_CHECKING:
    from library_bundle.ui.app import LibraryExportApp

log = structlog.stdlib.get_logger()


class BaseScreen(Screen[None]):
    """Base screen class providing common functionality for application screens.

    This class provides:
    - Access to the parent application and its services
    - Notification helpers that also log what the user was told
    - Conversion of exceptions into user-friendly notifications
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
    ]

    SCREEN_TITLE: ClassVar[str] = "Screen"
    SCREEN_NAME: ClassVar[str] = "base"

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name=name or self.SCREEN_NAME)

    @property
    def export_app(self) -> "LibraryExportApp":
        """Get the parent LibraryExportApp instance.

        Raises:
            RuntimeError: If the screen is not attached to a LibraryExportApp
        """
        from library_bundle.ui.app import LibraryExportApp

        if isinstance(self.app, LibraryExportApp):
            return self.app
        raise RuntimeError("Screen is not attached to a LibraryExportApp")

    async def on_mount(self) -> None:
        log.info("Screen mounted", screen=self.SCREEN_NAME, title=self.SCREEN_TITLE)

    async def action_go_back(self) -> None:
        """Leave the screen; the root screen quits the application."""
        if len(self.app.screen_stack) > 2:
            self.app.pop_screen()
        else:
            self.app.exit()

    def create_title_widget(self, title: str | None = None) -> Static:
        return Static(title or self.SCREEN_TITLE, classes="title")

    def notify_error(self, message: str) -> None:
        self.notify(message, severity="error")
        log.error("User notification", message=message, screen=self.SCREEN_NAME)

    def notify_success(self, message: str) -> None:
        self.notify(message, severity="information")
        log.info("User notification", message=message, screen=self.SCREEN_NAME)

    def notify_warning(self, message: str) -> None:
        self.notify(message, severity="warning")
        log.warning("User notification", message=message, screen=self.SCREEN_NAME)

    def handle_exception(
        self,
        error: Exception,
        operation: str,
        context: dict[str, str | int | float | bool] | None = None,
        prefix: str = "",
    ) -> UserFriendlyError:
        """Handle an exception and display a single user-friendly notification.

        Args:
            error: The exception that occurred
            operation: Description of the operation that failed
            context: Additional context information
            prefix: Text placed before the error message in the notification

        Returns:
            UserFriendlyError with message and suggested actions
        """
        user_error = handle_error(
            error=error,
            operation=operation,
            component=self.SCREEN_NAME,
            context=context,
        )

        message = get_error_service().create_user_message(user_error, include_suggestions=False)
        if user_error.severity == ErrorSeverity.WARNING:
            self.notify_warning(f"{prefix}{message}")
        else:
            self.notify_error(f"{prefix}{message}")

        return user_error
