import os
import logging
from datetime import datetime, UTC
from pathlib import Path
from typing import Iterator, Optional, Set, AbstractSet

from ..exceptions import SourceDirectoryError
from ..models import FileRecord


class DiskScanner:
    def scan(self,
             root: Path,
             allowed_extensions: AbstractSet[str] = frozenset(),
             skip_dirs: Optional[Set[Path]] = None) -> Iterator[FileRecord]:
        """
        Generator that yields FileRecords for every eligible regular file in root.

        Args:
            allowed_extensions: Lowercased suffixes (with dot). Empty means no filtering.
            skip_dirs: Directories never descended into (e.g. a destination nested in root).

        Raises SourceDirectoryError if root itself cannot be listed.
        """
        skip_dirs = skip_dirs or set()

        for entry in self._iter_files(root, skip_dirs):
            path = Path(entry.path)
            if allowed_extensions and path.suffix.lower() not in allowed_extensions:
                logging.debug(f"Skipping {path}: extension not allowed")
                continue

            try:
                st = entry.stat(follow_symlinks=False)
            except OSError as e:
                # Vanished between listing and stat
                logging.warning(f"Cannot stat {path}: {e}")
                continue

            yield FileRecord(
                path=path.absolute(),
                name=entry.name,
                mtime=datetime.fromtimestamp(st.st_mtime, UTC),
            )

    def _iter_files(self, root: Path, skip_dirs: Set[Path]) -> Iterator[os.DirEntry]:
        """Depth-first walker using os.scandir for speed."""
        if not root.is_dir():
            raise SourceDirectoryError(f"Source directory {root} does not exist or is not a directory.")

        stack = [root]
        while stack:
            current = stack.pop()
            if skip_dirs and any(sd == current or sd in current.parents for sd in skip_dirs):
                continue

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                if current == root:
                    raise SourceDirectoryError(f"Cannot read source directory {root}: {e}") from e
                logging.warning(f"Permission denied: {current}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            files = []
            for e in entries:
                if e.is_dir(follow_symlinks=False):
                    dirs.append(Path(e.path))
                elif e.is_file(follow_symlinks=False):
                    files.append(e)

            # Push dirs to stack (reversed so we process A before Z)
            for d in reversed(dirs):
                stack.append(d)

            for f in files:
                yield f
