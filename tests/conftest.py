import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import pytest
from PIL import Image

from dirpic.config import OrganizerConfig


def make_jpeg(path: Path, exif_datetime: Optional[str] = None) -> Path:
    """Writes a tiny real JPEG, optionally carrying an EXIF 'Image DateTime' tag."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with Image.new("RGB", (8, 8), color="red") as im:
        if exif_datetime:
            exif = Image.Exif()
            exif[0x0132] = exif_datetime
            im.save(path, exif=exif)
        else:
            im.save(path)
    return path


def set_mtime(path: Path, when: datetime):
    ts = when.timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture
def cfg():
    return OrganizerConfig()


@pytest.fixture
def src(tmp_path):
    d = tmp_path / "src"
    d.mkdir()
    return d


@pytest.fixture
def dest(tmp_path):
    return tmp_path / "dest"


@pytest.fixture
def jpeg():
    return make_jpeg


@pytest.fixture
def touch_mtime():
    return set_mtime
