"""Staging of game media files into the export bundle."""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

import structlog

from ..models import SourceGame
from .filesystem import FileSystemService

log = structlog.stdlib.get_logger()

IMAGES_DIR_NAME = "images"

# (image kind, SourceGame attribute) in staging order
IMAGE_KINDS: tuple[tuple[str, str], ...] = (
    ("cover", "cover_image"),
    ("background", "background_image"),
    ("icon", "icon"),
)


@dataclass(frozen=True)
class StagedImages:
    """Bundle-relative image paths for one game plus per-game counters."""
    cover_image: str | None = None
    background_image: str | None = None
    icon: str | None = None
    staged: int = 0
    missing: int = 0
    failed: int = 0


def is_safe_directory_name(game_id: str) -> bool:
    """Whether a game id can be used as one directory name inside the bundle."""
    if not game_id or game_id in (".", ".."):
        return False
    if "/" in game_id or "\\" in game_id or "\0" in game_id:
        return False
    return Path(game_id).name == game_id


def _relative_source_path(stored_path: str) -> Path:
    # Stored paths may come from a Windows host
    return Path(*PurePosixPath(stored_path.replace("\\", "/")).parts)


class AssetStager:
    """Copies a game's cover, background and icon into the staging tree.

    Each image kind is handled independently. A missing or uncopyable file
    leaves that field unset and never affects the other kinds.
    """

    def __init__(self, content_root: Path, filesystem: FileSystemService | None = None) -> None:
        self.content_root = content_root
        self.filesystem = filesystem or FileSystemService()

    def stage(self, game: SourceGame, staging_root: Path) -> StagedImages:
        """Stage all images of one game.

        Args:
            game: The game whose images are copied
            staging_root: Root of the bundle staging tree

        Returns:
            The bundle-relative paths of the staged images
        """
        requested = [attribute for _, attribute in IMAGE_KINDS if getattr(game, attribute)]
        if requested and not is_safe_directory_name(game.id):
            log.warning("Game id is not a safe directory name, images skipped", game_id=game.id)
            return StagedImages(failed=len(requested))

        game_dir = staging_root / IMAGES_DIR_NAME / game.id
        dir_created = False
        paths: dict[str, str | None] = {}
        staged = missing = failed = 0

        for kind, attribute in IMAGE_KINDS:
            stored_path: str | None = getattr(game, attribute)
            paths[attribute] = None
            if not stored_path:
                continue

            source = self.content_root / _relative_source_path(stored_path)
            try:
                exists = source.is_file()
            except OSError as e:
                log.warning("Image path cannot be checked", game_id=game.id, kind=kind, path=str(source), error=str(e))
                failed += 1
                continue
            if not exists:
                log.warning("Image file not found", game_id=game.id, kind=kind, path=str(source))
                missing += 1
                continue

            extension = source.suffix
            file_name = f"{kind}{extension}"
            try:
                if not dir_created:
                    self.filesystem.ensure_directory(game_dir)
                    dir_created = True
                self.filesystem.copy_file(source, game_dir / file_name)
            except OSError as e:
                log.warning("Failed to copy image", game_id=game.id, kind=kind, path=str(source), error=str(e))
                failed += 1
                continue

            paths[attribute] = f"{IMAGES_DIR_NAME}/{game.id}/{file_name}"
            staged += 1

        if dir_created and staged == 0:
            # Nothing made it into the directory created for this game
            try:
                self.filesystem.remove_empty_directory(game_dir)
            except OSError as e:
                log.warning("Failed to remove empty image directory", game_id=game.id, error=str(e))

        if staged or missing or failed:
            log.debug("Game images staged", game_id=game.id, staged=staged, missing=missing, failed=failed)

        return StagedImages(
            cover_image=paths["cover_image"],
            background_image=paths["background_image"],
            icon=paths["icon"],
            staged=staged,
            missing=missing,
            failed=failed,
        )
