"""File system service for staging, copying and cleaning up export files."""

import shutil
from pathlib import Path

import structlog

log = structlog.stdlib.get_logger()


class FileSystemService:
    """Service for file system operations with logging and validation."""

    def ensure_directory(self, path: Path) -> None:
        """Ensure that a directory exists, creating it if necessary.

        Args:
            path: Directory path to ensure exists

        Raises:
            OSError: If directory cannot be created or the path is a file
        """
        try:
            if path.exists():
                if not path.is_dir():
                    log.error("Path exists but is not a directory", path=str(path))
                    raise OSError(f"Path exists but is not a directory: {path}")
                return

            log.debug("Creating directory", path=str(path))
            path.mkdir(parents=True, exist_ok=True)

        except OSError as e:
            log.error("Failed to create directory", path=str(path), error=str(e))
            raise

    def reset_directory(self, path: Path) -> None:
        """Remove a directory tree if present and recreate it empty."""
        self.remove_tree(path)
        self.ensure_directory(path)

    def write_text_atomic(self, path: Path, content: str) -> None:
        """Write text to a file through a temporary sibling, then rename it into place.

        Args:
            path: Final path of the file
            content: Text to write (UTF-8)

        Raises:
            OSError: If the file cannot be written
        """
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self.ensure_directory(path.parent)
            log.debug("Writing file", path=str(path), temp_path=str(temp_path))

            with open(temp_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)

            temp_path.replace(path)
            log.info("File written successfully", path=str(path), size=path.stat().st_size)

        except OSError as e:
            log.error("Failed to write file", path=str(path), error=str(e))
            temp_path.unlink(missing_ok=True)
            raise

    def copy_file(self, source: Path, destination: Path) -> None:
        """Copy a file, overwriting the destination.

        A partially written destination is removed if the copy fails.

        Raises:
            FileNotFoundError: If the source does not exist
            OSError: If the file cannot be copied
        """
        if not source.is_file():
            raise FileNotFoundError(f"Source file not found: {source}")

        try:
            log.debug("Copying file", source=str(source), destination=str(destination))
            shutil.copyfile(source, destination)
        except OSError:
            destination.unlink(missing_ok=True)
            raise

    def delete_file(self, path: Path) -> bool:
        """Delete a file if it exists.

        Returns:
            True if a file was deleted, False if nothing was there

        Raises:
            OSError: If the path is not a file or cannot be deleted
        """
        if not path.exists():
            return False

        if not path.is_file():
            log.error("Attempted to delete non-file", path=str(path))
            raise OSError(f"Path is not a file: {path}")

        try:
            path.unlink()
            log.info("File deleted successfully", path=str(path))
            return True
        except OSError as e:
            log.error("Failed to delete file", path=str(path), error=str(e))
            raise

    def remove_tree(self, path: Path) -> None:
        """Remove a directory tree if it exists.

        Raises:
            OSError: If the tree cannot be removed
        """
        if not path.exists():
            return

        try:
            shutil.rmtree(path)
            log.debug("Directory tree removed", path=str(path))
        except OSError as e:
            log.error("Failed to remove directory tree", path=str(path), error=str(e))
            raise

    def remove_empty_directory(self, path: Path) -> bool:
        """Remove a directory only if it is empty.

        Returns:
            True if the directory was removed
        """
        if not path.is_dir() or any(path.iterdir()):
            return False
        path.rmdir()
        return True

    def list_files(self, directory: Path) -> list[Path]:
        """List all files under a directory, sorted by their relative POSIX path.

        Raises:
            FileNotFoundError: If directory does not exist
            OSError: If the path is not a directory
        """
        if not directory.exists():
            log.error("Directory not found for listing", directory=str(directory))
            raise FileNotFoundError(f"Directory not found: {directory}")

        if not directory.is_dir():
            raise OSError(f"Path is not a directory: {directory}")

        files = [f for f in directory.rglob("*") if f.is_file()]
        files.sort(key=lambda f: f.relative_to(directory).as_posix())

        log.debug("Listed files in directory", directory=str(directory), count=len(files))
        return files
