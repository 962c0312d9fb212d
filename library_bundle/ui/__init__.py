"""User interface components using the Textual framework."""

from .app import LibraryExportApp
from .screens import BaseScreen, ConfirmExportScreen, ExportScreen

__all__ = [
    "BaseScreen",
    "ConfirmExportScreen",
    "ExportScreen",
    "LibraryExportApp",
]
