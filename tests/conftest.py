import os
import struct
from datetime import datetime, UTC

import pytest
from PIL import Image

from date_organizer.settings import Settings


def exif_payload(date_original: str) -> bytes:
    """
    Minimal little-endian EXIF block: IFD0 -> ExifIFD -> DateTimeOriginal.
    Prefixed with the APP1 'Exif' header Pillow expects for raw bytes.
    """
    value = date_original.encode("ascii") + b"\x00"
    header = b"II" + struct.pack("<HI", 42, 8)
    # IFD0 at 8: one entry (ExifOffset, LONG) pointing at the Exif IFD
    ifd0 = struct.pack("<H", 1) + struct.pack("<HHII", 0x8769, 4, 1, 26) + struct.pack("<I", 0)
    # Exif IFD at 26: one entry (DateTimeOriginal, ASCII), value stored at 44
    exif_ifd = struct.pack("<H", 1) + struct.pack("<HHII", 0x9003, 2, len(value), 44) + struct.pack("<I", 0)
    return b"Exif\x00\x00" + header + ifd0 + exif_ifd + value


def set_mtime(path, dt: datetime):
    ts = dt.timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture
def make_jpeg():
    """Factory: writes a small real JPEG, optionally carrying DateTimeOriginal."""
    def _make(path, date_original=None, mtime=None):
        path.parent.mkdir(parents=True, exist_ok=True)
        with Image.new("RGB", (16, 16), color="red") as im:
            if date_original is not None:
                im.save(path, "JPEG", exif=exif_payload(date_original))
            else:
                im.save(path, "JPEG")
        if mtime is not None:
            set_mtime(path, mtime)
        return path
    return _make


@pytest.fixture
def make_file():
    """Factory: writes an arbitrary file with a fixed modification time."""
    def _make(path, data=b"data", mtime=datetime(2021, 5, 4, 10, 0, tzinfo=UTC)):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        set_mtime(path, mtime)
        return path
    return _make


@pytest.fixture
def src(tmp_path):
    p = tmp_path / "inbox"
    p.mkdir()
    return p


@pytest.fixture
def dest(tmp_path):
    return tmp_path / "library"


@pytest.fixture
def settings(src, dest):
    return Settings(
        source=src,
        destination=dest,
        allowed_extensions=frozenset({'.jpg', '.png', '.mp4', '.avi'}),
        dry_run=False,
        show_progress=False,
    )


def snapshot(root):
    """Every path under root, relative, for before/after comparisons."""
    return sorted(str(p.relative_to(root)) for p in root.rglob("*"))
