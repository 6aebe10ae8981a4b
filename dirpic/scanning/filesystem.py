import os
import logging
from pathlib import Path
from typing import Iterator, Optional, Set

from ..exceptions import SourceRootError
from ..models import MediaFile


class MediaScanner:
    def __init__(self, skip_dirs: Optional[Set[Path]] = None):
        self.skip_dirs = {Path(p).resolve() for p in (skip_dirs or set())}

    def scan(self, root: Path) -> Iterator[MediaFile]:
        """
        Generator that yields a MediaFile for every regular file under root.

        Files are yielded regardless of type; eligibility is decided by the
        caller. Raises SourceRootError if root itself cannot be listed.
        """
        root = Path(root)
        if not root.is_dir():
            raise SourceRootError(f"Source root {root} is not a readable directory.")

        for path in self._iter_files(root):
            try:
                yield MediaFile.from_path(path)
            except OSError as e:
                logging.warning(f"Cannot stat {path}: {e}")

    def _iter_files(self, root: Path) -> Iterator[Path]:
        """Depth-first walker using os.scandir for speed."""
        stack = [root]
        while stack:
            current = stack.pop()
            if current != root and self._is_skipped(current):
                logging.debug(f"Skipping directory {current}")
                continue

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                if current == root:
                    raise SourceRootError(f"Cannot read source root {root}: {e}") from e
                logging.warning(f"Cannot read directory {current}: {e}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            files = []
            for e in entries:
                if e.is_dir(follow_symlinks=False):
                    dirs.append(Path(e.path))
                elif e.is_file(follow_symlinks=False):
                    # AppleDouble resource forks are not media
                    if e.name.startswith("._"):
                        continue
                    files.append(Path(e.path))

            # Push dirs to stack (reversed so we process A before Z)
            for d in reversed(dirs):
                stack.append(d)

            for f in files:
                yield f

    def _is_skipped(self, directory: Path) -> bool:
        if not self.skip_dirs:
            return False
        return directory.resolve() in self.skip_dirs
