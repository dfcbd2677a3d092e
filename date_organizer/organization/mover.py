import logging
from pathlib import Path

from ..exceptions import FileOperationError


class FileMover:
    """Filesystem mutations for a single file. Each failure raises FileOperationError."""

    def ensure_directory(self, directory: Path):
        """Creates directory (and its year parent) if absent."""
        if directory.is_dir():
            return
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"Cannot create folder {directory}: {e}") from e
        logging.debug(f"Created folder {directory}")

    def move(self, src: Path, dest: Path):
        """
        Renames src to dest. Never copies, so both must be on the same volume.
        """
        try:
            src.rename(dest)
        except OSError as e:
            raise FileOperationError(f"Cannot move {src} -> {dest}: {e}") from e
