"""
Configuration constants for dirpic.
"""
import errno
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Iterable

from .exceptions import ConfigurationError

# --- File Type Definitions ---
IMAGE_EXTS = {'.jpg', '.jpeg', '.heic', '.heif', '.tiff', '.tif'}
VIDEO_EXTS = {'.avi', '.mpg', '.mp4', '.mov'}
MEDIA_EXTS = frozenset(IMAGE_EXTS | VIDEO_EXTS)

# --- Metadata Parsing ---
DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'EXIF DateTimeDigitized',
    'Image DateTime',
]

# Pillow tag ids for the same fields (Exif IFD, then IFD0)
EXIF_IFD_POINTER = 0x8769
PILLOW_EXIF_DATE_TAGS = [0x9003, 0x9004]
PILLOW_IFD0_DATE_TAGS = [0x0132]

# MediaInfo "General" track fields, most to least specific
VIDEO_DATE_FIELDS = ["recorded_date", "encoded_date", "tagged_date"]

# Cameras with a reset clock write zeroed or 1904-based dates
MIN_PLAUSIBLE_YEAR = 1970

# --- Date Resolution ---
# Pictures taken before this hour belong to the previous day's album.
# e.g.: a picture taken during a party at 3am goes to the previous day.
PREVIOUS_NIGHT_HOUR = 6
SENTINEL_DATE = datetime(1970, 1, 1)

# --- Organization ---
FOLDER_PATTERN = "{year:04d}/{month:02d}/{year:04d}-{month:02d}-{day:02d}_"
LINK_MODES = ("link", "copy")

# Link failures that mean "this volume pair cannot hard-link", not "broken"
COPY_FALLBACK_ERRNOS = frozenset(
    code for code in (
        errno.EXDEV,
        errno.EMLINK,
        getattr(errno, "ENOTSUP", None),
        getattr(errno, "EOPNOTSUPP", None),
    ) if code is not None
)


def normalize_ext(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith('.'):
        ext = '.' + ext
    return ext


@dataclass(frozen=True)
class OrganizerConfig:
    """
    Run-time settings shared by the classifier, the date resolver and the
    placement engine.
    """
    boundary_hour: int = PREVIOUS_NIGHT_HOUR
    extensions: FrozenSet[str] = field(default_factory=lambda: MEDIA_EXTS)
    link_mode: str = "link"
    dry_run: bool = False
    fail_fast: bool = False
    mtime_tolerance: float = 0.0    # seconds; FAT/exFAT store mtimes in 2 s steps

    def __post_init__(self):
        if self.mtime_tolerance < 0:
            raise ConfigurationError(f"mtime tolerance must not be negative, got {self.mtime_tolerance}")
        if not 0 <= self.boundary_hour <= 23:
            raise ConfigurationError(f"boundary hour must be within 0..23, got {self.boundary_hour}")
        if self.link_mode not in LINK_MODES:
            raise ConfigurationError(f"unknown link mode {self.link_mode!r} (expected one of {LINK_MODES})")
        exts = frozenset(normalize_ext(e) for e in self.extensions if e and e.strip())
        # frozen dataclass: bypass __setattr__ to store the normalized set
        object.__setattr__(self, "extensions", exts)

    def with_extra_extensions(self, extra: Iterable[str]) -> "OrganizerConfig":
        return OrganizerConfig(
            boundary_hour=self.boundary_hour,
            extensions=self.extensions | frozenset(extra),
            link_mode=self.link_mode,
            dry_run=self.dry_run,
            fail_fast=self.fail_fast,
            mtime_tolerance=self.mtime_tolerance,
        )
