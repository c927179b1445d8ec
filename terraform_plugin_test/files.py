"""Filesystem helpers for preparing working directories."""

import os
import stat
from pathlib import Path


def symlink_file(src: Path, dest: Path) -> None:
    """Symlink dest to src and give the link target the permissions of src.

    Raises:
        OSError: If the link cannot be created or the permissions copied

    """
    os.symlink(src, dest)
    src_info = os.stat(src)
    os.chmod(dest, stat.S_IMODE(src_info.st_mode))
