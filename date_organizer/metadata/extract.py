import logging
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, BinaryIO, Optional, Protocol

import exifread
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import MetadataExtractionError


class CaptureDateExtractor(Protocol):
    """
    Capability interface: given an open stream, optionally produce a capture date.

    Implementations return a naive datetime (read as UTC wall-clock time) or
    None. They must not raise for malformed or missing metadata.
    """

    def handles(self, path: Path) -> bool:
        ...

    def extract(self, stream: BinaryIO, path: Path) -> Optional[datetime]:
        ...


class ExifDateExtractor:
    """
    Reads 'EXIF DateTimeOriginal' with exifread (fast, Python-native).
    """

    def __init__(self, extensions=config.EXIF_EXTS):
        self.extensions = frozenset(extensions)

    def handles(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    def extract(self, stream: BinaryIO, path: Path) -> Optional[datetime]:
        try:
            # details=False skips makernotes and thumbnails
            tags = exifread.process_file(stream, details=False)
        except Exception as e:
            logging.debug(f"ExifRead failed for {path}: {e}")
            return None

        if not tags:
            # No EXIF segment at all; not an error.
            logging.debug(f"No EXIF tags found for {path}")
            return None

        if config.DATE_TAG not in tags:
            logging.debug(f"EXIF present but no {config.DATE_TAG} for {path}")
            return None

        try:
            return parse_exif_date(tags[config.DATE_TAG])
        except MetadataExtractionError as e:
            logging.debug(f"Unusable capture date in {path}: {e}")
            return None


class MediaInfoDateExtractor:
    """
    Reads container dates from the General track of video files via pymediainfo.

    MediaInfo reports these in UTC ("UTC 2023-01-01 12:00:00" or
    "2023-01-01 12:00:00 UTC").
    """

    def __init__(self, extensions=config.VIDEO_EXTS):
        self.extensions = frozenset(extensions)
        self.available = MediaInfo.can_parse()
        if not self.available:
            logging.warning("MediaInfo library not found. Video metadata will fall back to file times.")

    def handles(self, path: Path) -> bool:
        return self.available and path.suffix.lower() in self.extensions

    def extract(self, stream: BinaryIO, path: Path) -> Optional[datetime]:
        try:
            mi = MediaInfo.parse(stream)
        except Exception as e:
            logging.debug(f"MediaInfo failed for {path}: {e}")
            return None

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            for field in config.VIDEO_DATE_FIELDS:
                val = getattr(track, field, None)
                if not val:
                    continue
                try:
                    return parse_mediainfo_date(val)
                except MetadataExtractionError as e:
                    logging.debug(f"Skipping {field} for {path}: {e}")

        logging.debug(f"No usable container date found for {path}")
        return None


def parse_exif_date(value: Any) -> datetime:
    """
    Parses an EXIF "YYYY:MM:DD HH:MM:SS" value into a naive datetime.

    Cameras without a set clock write zeros or blanks; those are rejected.
    Anything after the seconds field (sub-seconds, NULs) is ignored.
    """
    text = str(value).strip().strip('\x00')[:19]
    if not text.strip(' :0'):
        raise MetadataExtractionError(f"empty date value {value!r}")
    try:
        return datetime.strptime(text, config.EXIF_DATE_FORMAT)
    except ValueError as e:
        raise MetadataExtractionError(f"bad date value {value!r}") from e


def parse_mediainfo_date(value: str) -> datetime:
    """Parses a MediaInfo date string into a naive UTC datetime."""
    clean = value.replace("UTC", "").strip()
    if not clean.strip(' -:0'):
        raise MetadataExtractionError(f"empty date value {value!r}")
    try:
        dt = datetime.fromisoformat(clean)
    except ValueError as e:
        raise MetadataExtractionError(f"bad date value {value!r}") from e

    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC).replace(tzinfo=None)
    return dt
