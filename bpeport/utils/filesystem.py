# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers for bpeport.

The converter produces exactly one file per run, and that file is the thing
a tokenizer runtime memory-maps later. A half-written model is worse than no
model, so the write goes to a temporary file in the destination directory and
is renamed into place once every byte is on disk. Rename within one
filesystem is atomic on POSIX.
"""

import os
import stat
import tempfile
from pathlib import Path

TEMP_PREFIX = ".bpeport_tmp_"


def _current_umask() -> int:
    # os.umask can only be read by setting it, so put it straight back.
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _final_mode(target_path: Path) -> int:
    """
    Permission bits the written file should end up with.

    An existing file keeps its mode. A new one gets the usual 0666 minus the
    process umask, the same as a plain open(). NamedTemporaryFile on its own
    would leave 0600.
    """
    try:
        return stat.S_IMODE(target_path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def atomic_write_bytes(target_path: Path, data: bytes) -> None:
    """
    Write binary data to a file atomically, replacing whatever was there.

    The parent directory must already exist. Creating it is the caller's
    decision (the pipeline does it explicitly so the failure can be reported
    as a directory problem rather than a write problem).

    Args:
        target_path: Where the final file should end up. An existing file's
            permission bits are carried over to the new one.
        data: The raw bytes to write.

    Raises:
        OSError: If the write or rename fails. The temp file is removed first.
    """
    # delete=False because the file has to survive close() so we can rename it.
    temp_fd = tempfile.NamedTemporaryFile(
        mode="wb",
        dir=str(target_path.parent),
        prefix=TEMP_PREFIX,
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(data)
        temp_fd.flush()
        os.fsync(temp_fd.fileno())
        temp_fd.close()
        os.chmod(temp_path, _final_mode(target_path))
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def safe_read(file_path: Path, encoding: str = "utf-8") -> str:
    """
    Read a text file with proper error context.

    Raises:
        FileNotFoundError: If the path doesn't exist.
        IsADirectoryError: If the path is a directory.
        OSError: For other I/O errors (permissions, bad encoding is a ValueError).
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if not file_path.is_file():
        raise IsADirectoryError(f"Expected a file, got a directory: {file_path}")
    return file_path.read_text(encoding=encoding)


def safe_read_bytes(file_path: Path) -> bytes:
    """Binary twin of safe_read, used for reading back written models."""
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if not file_path.is_file():
        raise IsADirectoryError(f"Expected a file, got a directory: {file_path}")
    return file_path.read_bytes()
