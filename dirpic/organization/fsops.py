"""
Thin wrapper over the file-system calls the placement engine needs.

Tests substitute a fake to simulate cross-device links and I/O failures.
"""
import os
import stat
import shutil
import logging
import tempfile
from pathlib import Path


class LocalFileSystem:
    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def is_regular_file(self, path: Path) -> bool:
        """True for a regular file; False for symlinks (dangling or not), dirs and the rest."""
        try:
            return stat.S_ISREG(os.lstat(path).st_mode)
        except FileNotFoundError:
            return False

    def same_file(self, a: Path, b: Path) -> bool:
        """True if both paths are hard links to the same inode on the same device."""
        sa = os.lstat(a)
        sb = os.lstat(b)
        return (sa.st_dev, sa.st_ino) == (sb.st_dev, sb.st_ino)

    def mtime_ns(self, path: Path) -> int:
        return os.lstat(path).st_mtime_ns

    def make_dirs(self, path: Path):
        Path(path).mkdir(parents=True, exist_ok=True)

    def link(self, src: Path, dst: Path):
        os.link(src, dst)

    def copy(self, src: Path, dst: Path):
        """
        Byte copy with timestamps preserved. Writes to a short-named temp file
        beside dst and renames it into place, so dst is either complete or
        untouched. An existing dst is replaced.
        """
        fd, tmp_name = tempfile.mkstemp(prefix=".dp-", suffix=".part", dir=Path(dst).parent)
        os.close(fd)
        tmp = Path(tmp_name)
        try:
            shutil.copy2(src, tmp)
            os.replace(tmp, dst)
        except BaseException:
            if os.path.lexists(tmp):
                try:
                    tmp.unlink()
                except OSError as e:
                    logging.debug(f"Could not remove partial copy {tmp}: {e}")
            raise
