"""
Capture dates encoded in file names by cameras and messaging apps.

Each convention checks the prefix and minimum length before parsing a
fixed-width slice with `datetime.strptime`. Conventions are tried in list
order and the first one that parses wins.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .. import config


@dataclass(frozen=True)
class FilenameConvention:
    name: str
    prefix: str
    width: int              # length of the date slice following the prefix
    fmt: str

    @property
    def min_length(self) -> int:
        return len(self.prefix) + self.width

    def parse(self, filename: str) -> Optional[datetime]:
        if len(filename) < self.min_length or not filename.startswith(self.prefix):
            return None
        date_str = filename[len(self.prefix):self.min_length]
        try:
            dt = datetime.strptime(date_str, self.fmt)
        except ValueError:
            return None
        if dt.year < config.MIN_PLAUSIBLE_YEAR:
            return None
        return dt


FILENAME_CONVENTIONS = [
    # 20230615_143000.jpg (Samsung, many Android camera apps)
    FilenameConvention("timestamp", "", 15, "%Y%m%d_%H%M%S"),
    # signal-2022-11-03-09-15-00-video.mp4
    FilenameConvention("signal", "signal-", 19, "%Y-%m-%d-%H-%M-%S"),
    FilenameConvention("android_img", "IMG_", 15, "%Y%m%d_%H%M%S"),
    FilenameConvention("android_vid", "VID_", 15, "%Y%m%d_%H%M%S"),
    FilenameConvention("pixel", "PXL_", 15, "%Y%m%d_%H%M%S"),
]


def parse_from_filename(filename: str, conventions=None) -> Optional[datetime]:
    """
    Returns the capture date implied by `filename` (a base name, not a path),
    or None if no known convention matches.
    """
    for convention in conventions if conventions is not None else FILENAME_CONVENTIONS:
        dt = convention.parse(filename)
        if dt is not None:
            logging.debug(f"{filename}: date {dt} from '{convention.name}' naming convention")
            return dt
    return None
