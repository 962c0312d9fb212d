"""Screen components for the TUI application."""

from .base import BaseScreen
from .confirm import ConfirmExportScreen
from .export import ExportScreen

__all__ = [
    "BaseScreen",
    "ConfirmExportScreen",
    "ExportScreen",
]
