import logging
from pathlib import Path
from datetime import datetime
from typing import BinaryIO, Optional

import exifread
from PIL import Image
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import MetadataExtractionError


class MetadataExtractor:
    """
    Reads the capture date embedded in a media file.

    Strategies:
      - Images: 'exifread' tags, then Pillow's EXIF reader.
      - Video: 'pymediainfo' General track dates.

    A file without usable metadata is normal (videos, screenshots, files
    stripped by messaging apps), so every failure degrades to None. A date
    block that exists but does not parse is treated the same as no block.
    """

    def extract(self, path: Path) -> Optional[datetime]:
        if path.suffix.lower() in config.VIDEO_EXTS:
            try:
                return self.get_video_date(path)
            except MetadataExtractionError as e:
                logging.debug(f"No metadata date for {path}: {e}")
                return None

        dt = None
        try:
            with path.open('rb') as f:
                dt = self.extract_from_stream(f)
        except (OSError, MetadataExtractionError) as e:
            logging.debug(f"No EXIF date for {path}: {e}")
        if dt is None:
            dt = self.get_pillow_date(path)
        return dt

    def extract_from_stream(self, fh: BinaryIO) -> Optional[datetime]:
        """Decodes EXIF from an open binary stream using exifread."""
        try:
            # details=False speeds up processing significantly
            tags = exifread.process_file(fh, details=False)
        except Exception as e:
            raise MetadataExtractionError(f"exifread: {e}") from e
        return self._parse_exif_date(tags)

    def get_pillow_date(self, path: Path) -> Optional[datetime]:
        try:
            with Image.open(path) as im:
                exif = im.getexif()
                exif_ifd = exif.get_ifd(config.EXIF_IFD_POINTER)
                candidates = [exif_ifd.get(tag) for tag in config.PILLOW_EXIF_DATE_TAGS]
                candidates += [exif.get(tag) for tag in config.PILLOW_IFD0_DATE_TAGS]
        except Exception as e:
            # Pillow cannot open HEIC or unknown formats; not an error here.
            logging.debug(f"Pillow could not read EXIF from {path}: {e}")
            return None

        for value in candidates:
            if value:
                dt = self._parse_flexible_date(str(value))
                if dt:
                    return dt
        return None

    def get_video_date(self, path: Path) -> Optional[datetime]:
        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            raise MetadataExtractionError(f"mediainfo: {e}") from e

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            for field in config.VIDEO_DATE_FIELDS:
                val = getattr(track, field, None)
                if val:
                    dt = self._parse_flexible_date(str(val))
                    if dt:
                        return dt
        return None

    # --- Internal Parsing Helpers ---

    def _parse_exif_date(self, tags) -> Optional[datetime]:
        """Helper to parse standard EXIF date strings from exifread."""
        for tag in config.DATE_TAGS:
            if tag in tags:
                dt = self._parse_flexible_date(str(tags[tag]))
                if dt:
                    return dt
        return None

    def _parse_flexible_date(self, dt_str: str) -> Optional[datetime]:
        """
        Handles EXIF "YYYY:MM:DD HH:MM:SS", ISO, and MediaInfo "UTC" forms.
        Returns a naive datetime, or None for unparseable or zeroed dates.
        """
        if not dt_str:
            return None

        clean = dt_str.replace("UTC", "").strip().rstrip("\x00").strip()
        dt = None

        # 1. Standard EXIF style "YYYY:MM:DD HH:MM:SS"
        try:
            clean_exif = clean.replace(":", "-", 2)
            # Sub-second precision is not needed for bucketing
            if "." in clean_exif:
                clean_exif = clean_exif.split(".")[0]
            dt = datetime.strptime(clean_exif, "%Y-%m-%d %H:%M:%S")
        except ValueError:
            pass

        # 2. ISO format (e.g. 2020-01-01T12:00:00+02:00)
        if dt is None:
            try:
                dt = datetime.fromisoformat(clean).replace(tzinfo=None)
            except ValueError:
                return None

        if dt.year < config.MIN_PLAUSIBLE_YEAR:
            return None
        return dt
