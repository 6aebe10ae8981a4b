from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from .. import config
from ..models import DateSource, ResolvedDate


def resolve_date(metadata_dt: Optional[datetime],
                 filename_dt: Optional[datetime],
                 boundary_hour: int = config.PREVIOUS_NIGHT_HOUR) -> ResolvedDate:
    """
    Picks the capture date for a file: embedded metadata, then the file
    name, then a sentinel at the boundary hour.

    Anything earlier than `boundary_hour` is shifted back by `boundary_hour`
    hours so that after-midnight pictures land in the previous day's album.
    """
    if metadata_dt is not None:
        captured, source = metadata_dt, DateSource.METADATA
    elif filename_dt is not None:
        captured, source = filename_dt, DateSource.FILENAME
    else:
        captured = config.SENTINEL_DATE.replace(hour=boundary_hour)
        source = DateSource.DEFAULT

    timestamp = captured
    if captured.hour < boundary_hour:
        timestamp = captured - timedelta(hours=boundary_hour)

    return ResolvedDate(captured=captured, timestamp=timestamp, source=source)


def build_destination_dir(dest_root: Path, timestamp: datetime) -> Path:
    """
    dest_root/YYYY/MM/YYYY-MM-DD_

    The day folder keeps its trailing underscore; files are placed inside it
    under their original names. No filesystem access.
    """
    sub_dir = config.FOLDER_PATTERN.format(
        year=timestamp.year, month=timestamp.month, day=timestamp.day
    )
    # Path() converts the '/' separators to the host convention
    return Path(dest_root).joinpath(*sub_dir.split("/"))
