import logging
from pathlib import Path
from typing import Optional

from .. import config
from ..exceptions import PlacementError
from ..models import PlacementOutcome, PlacementResult
from .fsops import LocalFileSystem


class PlacementEngine:
    """
    Makes `dest_dir/filename` reflect a source file, by hard link when
    possible and by copy otherwise. The source is never modified.

    Re-running over a destination tree built by a previous run is a no-op:
    an existing entry that is the same inode, or carries the same mtime
    (copies keep it, within `mtime_tolerance_ns`), counts as already placed.
    Any other regular file at the destination is out of date: copies replace
    it, while hard links refuse to clobber it and report SKIPPED.
    """

    def __init__(self,
                 fs: Optional[LocalFileSystem] = None,
                 link_mode: str = "link",
                 dry_run: bool = False,
                 mtime_tolerance_ns: int = 0):
        self.fs = fs or LocalFileSystem()
        self.link_mode = link_mode
        self.dry_run = dry_run
        self.mtime_tolerance_ns = mtime_tolerance_ns

    def place(self, source: Path, dest_dir: Path, filename: str) -> PlacementResult:
        dest = Path(dest_dir) / filename

        if self.fs.exists(dest):
            if not self.fs.is_regular_file(dest):
                logging.warning(f"Destination {dest} exists and is not a regular file; skipping {source}")
                return PlacementResult(PlacementOutcome.SKIPPED, dest, "destination is not a regular file")
            try:
                if self.fs.same_file(source, dest):
                    return PlacementResult(PlacementOutcome.ALREADY_LINKED, dest)
                if abs(self.fs.mtime_ns(dest) - self.fs.mtime_ns(source)) <= self.mtime_tolerance_ns:
                    return PlacementResult(PlacementOutcome.ALREADY_UP_TO_DATE, dest)
            except OSError as e:
                raise PlacementError(source, dest, e) from e
            logging.debug(f"{dest} exists but is not {source}; replacing it")

        if self.dry_run:
            verb = "Copy" if self.link_mode == "copy" else "Link"
            logging.info(f"[DRY RUN] {verb} {source} -> {dest}")
            return PlacementResult(PlacementOutcome.SKIPPED, dest, "dry run")

        try:
            self.fs.make_dirs(dest_dir)
        except OSError as e:
            raise PlacementError(source, dest_dir, e) from e

        if self.link_mode == "copy":
            return self._copy(source, dest)

        try:
            self.fs.link(source, dest)
        except FileExistsError:
            logging.warning(f"Destination {dest} already exists and differs from {source}; skipping")
            return PlacementResult(PlacementOutcome.SKIPPED, dest, "destination exists")
        except OSError as e:
            if e.errno in config.COPY_FALLBACK_ERRNOS:
                logging.warning(f"Cannot hard link {source} -> {dest} ({e.strerror}); copying instead")
                return self._copy(source, dest)
            raise PlacementError(source, dest, e) from e

        logging.debug(f"Linked {source} -> {dest}")
        return PlacementResult(PlacementOutcome.LINKED, dest)

    def _copy(self, source: Path, dest: Path) -> PlacementResult:
        # An out-of-date dest is replaced atomically by fs.copy
        try:
            self.fs.copy(source, dest)
        except OSError as e:
            logging.error(f"Failed to copy {source} -> {dest}: {e}")
            return PlacementResult(PlacementOutcome.FAILED, dest, f"copy failed: {e}")

        logging.debug(f"Copied {source} -> {dest}")
        return PlacementResult(PlacementOutcome.COPIED, dest)
