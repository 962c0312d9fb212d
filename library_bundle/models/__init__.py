"""Data models for the library bundle exporter."""

from .config import ExportConfig
from .game import ExportRecord, GameLink, NamedItem, SourceGame
from .progress import ExportProgress, ExportSummary

__all__ = [
    "ExportConfig",
    "ExportProgress",
    "ExportRecord",
    "ExportSummary",
    "GameLink",
    "NamedItem",
    "SourceGame",
]
