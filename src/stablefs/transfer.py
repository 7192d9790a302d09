"""Guarded copy and rename-only move.

copy_file waits for the source size to settle before streaming it to the
destination. The destination is created/truncated in place: a failure
mid-copy leaves it partially written.
"""

import os
import shutil
from pathlib import Path

from loguru import logger

from .config import CopyConfig
from .errors import DurabilityError, NotStableError
from .stability import is_stable

log = logger.bind(op="copy")


def copy_file(
    src: Path | str,
    dst: Path | str,
    config: CopyConfig | None = None,
) -> Path:
    """Copy src to dst once src has stopped growing.

    When config is None a fresh CopyConfig is built, so FILEUTILS_* env vars
    are re-read on every call. Raises NotStableError without touching dst if
    the source never settles. OSError from open/read/write propagates as-is;
    shutil.SameFileError (an OSError) if src and dst are the same file.
    Raises DurabilityError if the final fsync fails (dst is fully written).
    Returns the destination path.
    """
    if config is None:
        config = CopyConfig()
    src = Path(src)
    dst = Path(dst)
    log.debug(
        f"copy_file(src={src}, dst={dst}, attempts={config.stable_attempts}, "
        f"settle_ms={config.stable_settle_ms})"
    )

    if not is_stable(src, config.stable_attempts, config.settle):
        log.warning(f"Source not stable, skipping copy: {src}")
        raise NotStableError(str(src))

    # Truncating dst would wipe src before a single byte is read
    if dst.exists() and os.path.samefile(src, dst):
        raise shutil.SameFileError(f"{src} and {dst} are the same file")

    with open(src, "rb") as fin:
        with open(dst, "wb") as fout:  # overwrite if exists
            shutil.copyfileobj(fin, fout)
            fout.flush()
            copied = fout.tell()
            try:
                os.fsync(fout.fileno())
            except OSError as e:
                log.warning(f"fsync failed for {dst}: {e}")
                raise DurabilityError(str(dst), str(e)) from e

    log.info(f"Copy {src} -> {dst} ({copied:,} bytes)")
    return dst


def move_file(src: Path | str, dst: Path | str) -> Path:
    """Rename src to dst on the same filesystem.

    No copy+delete fallback: a cross-device move raises OSError (EXDEV),
    as do a missing source and permission problems.
    """
    src = Path(src)
    dst = Path(dst)
    log.info(f"Move {src} -> {dst}")
    os.rename(src, dst)
    return dst
