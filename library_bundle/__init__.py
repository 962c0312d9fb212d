"""Export a game library database into a portable bundle archive."""

__version__ = "0.1.0"
