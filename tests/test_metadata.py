import pytest
from datetime import datetime

import dirpic.metadata.extract as extract_module
from dirpic.metadata.extract import MetadataExtractor
from dirpic.metadata.filename import FILENAME_CONVENTIONS, FilenameConvention, parse_from_filename


# --- File name conventions ---

@pytest.mark.parametrize(
    "name,expected",
    [
        ("20230615_143000.jpg", datetime(2023, 6, 15, 14, 30, 0)),
        ("20230615_143000", datetime(2023, 6, 15, 14, 30, 0)),
        ("20230615_143000(1).mp4", datetime(2023, 6, 15, 14, 30, 0)),
        ("signal-2022-11-03-09-15-00-video.mp4", datetime(2022, 11, 3, 9, 15, 0)),
        ("signal-2022-11-03-09-15-00.jpg", datetime(2022, 11, 3, 9, 15, 0)),
        ("IMG_20210704_201500.jpg", datetime(2021, 7, 4, 20, 15, 0)),
        ("VID_20210704_201500.mp4", datetime(2021, 7, 4, 20, 15, 0)),
        ("PXL_20240101_000130123.jpg", datetime(2024, 1, 1, 0, 1, 30)),
    ],
)
def test_parse_from_filename(name, expected):
    assert parse_from_filename(name) == expected


@pytest.mark.parametrize(
    "name",
    [
        "IMG_0001.jpg",
        "2023.jpg",
        "",
        "20231345_143000.jpg",      # month 13
        "signal-2022-11-03.jpg",    # too short for the signal slice
        "Signal-2022-11-03-09-15-00.jpg",
        "00000000_000000.jpg",
        "holiday 20230615_143000.jpg",
    ],
)
def test_parse_from_filename_no_match(name):
    assert parse_from_filename(name) is None


def test_first_matching_convention_wins():
    conventions = [
        FilenameConvention("first", "x", 8, "%Y%m%d"),
        FilenameConvention("second", "x", 15, "%Y%m%d_%H%M%S"),
    ]
    assert parse_from_filename("x20230615_143000.jpg", conventions) == datetime(2023, 6, 15)
    assert parse_from_filename("x20230615_143000.jpg", list(reversed(conventions))) == datetime(2023, 6, 15, 14, 30)


def test_required_conventions_come_first():
    names = [c.name for c in FILENAME_CONVENTIONS]
    assert names[:2] == ["timestamp", "signal"]


# --- Embedded metadata ---

def test_exif_date_from_jpeg(jpeg, tmp_path):
    p = jpeg(tmp_path / "a.jpg", "2023:01:01 10:00:00")
    assert MetadataExtractor().extract(p) == datetime(2023, 1, 1, 10, 0, 0)


def test_jpeg_without_exif(jpeg, tmp_path):
    p = jpeg(tmp_path / "plain.jpg")
    assert MetadataExtractor().extract(p) is None


def test_zeroed_exif_date_counts_as_absent(jpeg, tmp_path):
    p = jpeg(tmp_path / "zero.jpg", "0000:00:00 00:00:00")
    assert MetadataExtractor().extract(p) is None


def test_garbage_bytes(tmp_path):
    p = tmp_path / "broken.jpg"
    p.write_bytes(b"\x00\x01not a jpeg at all" * 10)
    assert MetadataExtractor().extract(p) is None


def test_missing_file(tmp_path):
    assert MetadataExtractor().extract(tmp_path / "gone.jpg") is None


def test_exifread_crash_degrades_to_none(monkeypatch, jpeg, tmp_path):
    p = jpeg(tmp_path / "a.jpg")

    def boom(fh, **kwargs):
        raise IndexError("truncated IFD")

    monkeypatch.setattr(extract_module.exifread, "process_file", boom)
    assert MetadataExtractor().extract(p) is None


def test_pillow_fallback_when_exifread_finds_nothing(monkeypatch, jpeg, tmp_path):
    p = jpeg(tmp_path / "a.jpg", "2020:02:29 23:59:59")
    monkeypatch.setattr(extract_module.exifread, "process_file", lambda fh, **kw: {})
    assert MetadataExtractor().extract(p) == datetime(2020, 2, 29, 23, 59, 59)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2023:01:01 10:00:00", datetime(2023, 1, 1, 10, 0, 0)),
        ("2023:01:01 10:00:00.123", datetime(2023, 1, 1, 10, 0, 0)),
        ("2023-01-01 12:00:00 UTC", datetime(2023, 1, 1, 12, 0, 0)),
        ("UTC 2023-01-01 12:00:00", datetime(2023, 1, 1, 12, 0, 0)),
        ("2023-01-01T12:00:00+02:00", datetime(2023, 1, 1, 12, 0, 0)),
        ("1904-01-01 00:00:00 UTC", None),
        ("    :  :     :  :  ", None),
        ("", None),
    ],
)
def test_parse_flexible_date(raw, expected):
    assert MetadataExtractor()._parse_flexible_date(raw) == expected


# Mock MediaInfo class structure
class MockTrack:
    def __init__(self, track_type="General", **kwargs):
        self.track_type = track_type
        for k, v in kwargs.items():
            setattr(self, k, v)


class MockMediaInfo:
    tracks_for_test = []

    def __init__(self, tracks):
        self.tracks = tracks

    @classmethod
    def parse(cls, path):
        return cls(cls.tracks_for_test)


def test_video_metadata_extraction(monkeypatch, tmp_path):
    MockMediaInfo.tracks_for_test = [
        MockTrack("Video", encoded_date="2001-01-01 00:00:00 UTC"),
        MockTrack(encoded_date="2023-01-01 12:00:00 UTC", recorded_date="2022-12-31 08:00:00"),
    ]
    monkeypatch.setattr(extract_module, "MediaInfo", MockMediaInfo)

    vid = tmp_path / "clip.mp4"
    vid.touch()

    assert MetadataExtractor().extract(vid) == datetime(2022, 12, 31, 8, 0, 0)


def test_video_without_dates(monkeypatch, tmp_path):
    MockMediaInfo.tracks_for_test = [MockTrack(file_last_modification_date="2023-01-01 12:00:00 UTC")]
    monkeypatch.setattr(extract_module, "MediaInfo", MockMediaInfo)

    vid = tmp_path / "clip.MOV"
    vid.touch()

    assert MetadataExtractor().extract(vid) is None


def test_mediainfo_failure_degrades_to_none(monkeypatch, tmp_path):
    class BrokenMediaInfo:
        @classmethod
        def parse(cls, path):
            raise OSError("libmediainfo not found")

    monkeypatch.setattr(extract_module, "MediaInfo", BrokenMediaInfo)
    vid = tmp_path / "clip.mp4"
    vid.touch()

    assert MetadataExtractor().extract(vid) is None
