import logging
from datetime import datetime, UTC
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import TimestampResolutionError
from ..models import ResolvedTimestamp, TimestampSource
from .extract import CaptureDateExtractor, ExifDateExtractor


class TimestampResolver:
    """
    Produces one authoritative capture time per file.

    Embedded metadata wins when an extractor can read it. Otherwise the
    file's modification time is used. Both are returned as UTC-aware
    datetimes. Metadata values are taken as UTC wall-clock time with no
    timezone shift.
    """

    def __init__(self, extractors: Optional[Sequence[CaptureDateExtractor]] = None):
        if extractors is None:
            extractors = [ExifDateExtractor()]
        self.extractors = list(extractors)

    def resolve(self, path: Path, fallback_mtime: datetime) -> ResolvedTimestamp:
        """
        Raises TimestampResolutionError only when the file cannot be opened.
        Metadata problems silently fall back to `fallback_mtime`.
        """
        candidates = [e for e in self.extractors if e.handles(path)]

        try:
            with path.open('rb') as f:
                for extractor in candidates:
                    f.seek(0)
                    dt = extractor.extract(f, path)
                    if dt is not None:
                        return ResolvedTimestamp(_as_utc(dt), TimestampSource.METADATA)
        except OSError as e:
            raise TimestampResolutionError(f"Cannot read {path}: {e}") from e

        if candidates:
            logging.debug(f"No embedded capture date for {path}; using modification time")
        return ResolvedTimestamp(_as_utc(fallback_mtime), TimestampSource.MODIFICATION_TIME)


def _as_utc(dt: datetime) -> datetime:
    # Naive values are already UTC wall-clock time
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
