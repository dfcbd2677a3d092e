import pytest
from pathlib import Path
from datetime import datetime, UTC

from conftest import exif_payload
from date_organizer.exceptions import MetadataExtractionError, TimestampResolutionError
from date_organizer.metadata.extract import (
    ExifDateExtractor,
    MediaInfoDateExtractor,
    parse_exif_date,
    parse_mediainfo_date,
)
from date_organizer.metadata.resolver import TimestampResolver
from date_organizer.models import TimestampSource

MTIME = datetime(2021, 5, 4, 10, 0, tzinfo=UTC)


# Mock MediaInfo class structure
class MockTrack:
    def __init__(self, **kwargs):
        self.track_type = "General"
        for k, v in kwargs.items():
            setattr(self, k, v)


class MockMediaInfo:
    def __init__(self, tracks):
        self.tracks = tracks

    @classmethod
    def can_parse(cls):
        return True

    @classmethod
    def parse(cls, stream):
        return cls([MockTrack(
            duration=5000,
            recorded_date=None,
            encoded_date="UTC 2023-01-01 12:00:00",
        )])


def test_exif_date_resolves_as_utc(make_jpeg, tmp_path):
    img = make_jpeg(tmp_path / "shot.jpg", date_original="2023:11:02 08:15:00", mtime=MTIME)

    resolved = TimestampResolver().resolve(img, MTIME)

    assert resolved.timestamp == datetime(2023, 11, 2, 8, 15, 0, tzinfo=UTC)
    assert resolved.source is TimestampSource.METADATA


def test_jpeg_without_exif_falls_back_to_mtime(make_jpeg, tmp_path):
    img = make_jpeg(tmp_path / "stripped.jpg", mtime=MTIME)

    resolved = TimestampResolver().resolve(img, MTIME)

    assert resolved.timestamp == MTIME
    assert resolved.source is TimestampSource.MODIFICATION_TIME


@pytest.mark.parametrize("value", ["0000:00:00 00:00:00", "    :  :     :  :  "])
def test_zero_or_blank_exif_date_falls_back(make_jpeg, tmp_path, value):
    img = make_jpeg(tmp_path / "noclock.jpg", date_original=value)

    resolved = TimestampResolver().resolve(img, MTIME)

    assert resolved.timestamp == MTIME
    assert resolved.source is TimestampSource.MODIFICATION_TIME


def test_corrupt_and_truncated_images_fall_back(tmp_path):
    garbage = tmp_path / "garbage.jpg"
    garbage.write_bytes(b"definitely not a jpeg")

    # SOI + APP1 header promising more EXIF than the file contains
    payload = exif_payload("2023:11:02 08:15:00")
    truncated = tmp_path / "truncated.jpg"
    truncated.write_bytes(b"\xff\xd8\xff\xe1\x00\x40" + payload[:20])

    resolver = TimestampResolver()
    for path in (garbage, truncated):
        resolved = resolver.resolve(path, MTIME)
        assert resolved.timestamp == MTIME
        assert resolved.source is TimestampSource.MODIFICATION_TIME


def test_non_image_always_uses_mtime(tmp_path):
    vid = tmp_path / "clip.mp4"
    vid.write_bytes(b"\x00\x00\x00\x18ftypmp42")

    resolved = TimestampResolver().resolve(vid, MTIME)

    assert resolved.timestamp == MTIME
    assert resolved.source is TimestampSource.MODIFICATION_TIME


def test_naive_fallback_is_treated_as_utc(tmp_path):
    f = tmp_path / "notes.avi"
    f.write_bytes(b"x")

    resolved = TimestampResolver().resolve(f, datetime(2020, 1, 1, 23, 30))

    assert resolved.timestamp == datetime(2020, 1, 1, 23, 30, tzinfo=UTC)


def test_unopenable_file_raises(tmp_path):
    with pytest.raises(TimestampResolutionError) as excinfo:
        TimestampResolver().resolve(tmp_path / "gone.jpg", MTIME)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_extractors_tried_in_order():
    calls = []

    class Fake:
        def __init__(self, name, result):
            self.name = name
            self.result = result

        def handles(self, path):
            return True

        def extract(self, stream, path):
            calls.append((self.name, stream.tell()))
            stream.read()
            return self.result

    resolver = TimestampResolver([Fake("first", None), Fake("second", datetime(2019, 7, 1)), Fake("third", None)])
    resolved = resolver.resolve(Path(__file__), MTIME)

    assert resolved.timestamp == datetime(2019, 7, 1, tzinfo=UTC)
    # each extractor starts from the beginning; later ones are never consulted
    assert calls == [("first", 0), ("second", 0)]


def test_video_metadata_extraction(monkeypatch, tmp_path):
    # Mock the MediaInfo import inside the module
    import date_organizer.metadata.extract as extract_module
    monkeypatch.setattr(extract_module, "MediaInfo", MockMediaInfo)

    vid = tmp_path / "test.mp4"
    vid.touch()

    extractor = MediaInfoDateExtractor()
    assert extractor.handles(vid)
    assert not extractor.handles(tmp_path / "test.jpg")

    with vid.open("rb") as f:
        dt = extractor.extract(f, vid)
    assert dt == datetime(2023, 1, 1, 12, 0, 0)

    resolved = TimestampResolver([ExifDateExtractor(), extractor]).resolve(vid, MTIME)
    assert resolved.source is TimestampSource.METADATA
    assert resolved.timestamp == datetime(2023, 1, 1, 12, 0, 0, tzinfo=UTC)


def test_mediainfo_unavailable_handles_nothing(monkeypatch, tmp_path):
    import date_organizer.metadata.extract as extract_module

    class NoLibrary(MockMediaInfo):
        @classmethod
        def can_parse(cls):
            return False

    monkeypatch.setattr(extract_module, "MediaInfo", NoLibrary)
    assert not MediaInfoDateExtractor().handles(tmp_path / "clip.mov")


def test_parse_exif_date():
    assert parse_exif_date("2023:11:02 08:15:00") == datetime(2023, 11, 2, 8, 15)
    assert parse_exif_date("2023:11:02 08:15:00.123") == datetime(2023, 11, 2, 8, 15)
    for bad in ["", "0000:00:00 00:00:00", "2023:13:45 99:00:00", "yesterday"]:
        with pytest.raises(MetadataExtractionError):
            parse_exif_date(bad)


def test_parse_mediainfo_date():
    assert parse_mediainfo_date("UTC 2023-01-01 12:00:00") == datetime(2023, 1, 1, 12)
    assert parse_mediainfo_date("2023-01-01 12:00:00 UTC") == datetime(2023, 1, 1, 12)
    assert parse_mediainfo_date("2023-01-01T14:00:00+02:00") == datetime(2023, 1, 1, 12)
    with pytest.raises(MetadataExtractionError):
        parse_mediainfo_date("0000-00-00 00:00:00")
