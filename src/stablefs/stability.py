"""Size stability prober -- decides whether a file has stopped growing."""

import os
import stat
import time
from pathlib import Path

from loguru import logger

from .models import MIN_ATTEMPTS, StabilityObservation

log = logger.bind(op="probe")


def probe_stability(
    path: Path | str, attempts: int, settle: float
) -> StabilityObservation:
    """Sample the size of path until two consecutive samples match.

    Takes at most max(attempts, 3) samples, sleeping settle seconds between
    one sample and the next. Returns as soon as a sample equals the one
    before it. A missing, unreadable or non-regular path ends the probe
    immediately as unstable.
    """
    attempts = max(attempts, MIN_ATTEMPTS)
    obs = StabilityObservation(path=str(path), attempts=attempts)
    log.debug(f"probe_stability(path={path}, attempts={attempts}, settle={settle})")

    for i in range(attempts):
        try:
            st = os.stat(path)
        except OSError as e:
            log.debug(f"Sample {i} failed for {path}: {e}")
            return obs
        if not stat.S_ISREG(st.st_mode):
            log.debug(f"Not a regular file: {path}")
            return obs

        size = st.st_size
        if obs.samples and obs.samples[-1][1] == size:
            obs.samples.append((i, size))
            obs.stable = True
            log.debug(f"Stable after {obs.sample_count} samples: size={size:,}")
            return obs
        obs.samples.append((i, size))

        if i < attempts - 1:
            time.sleep(settle)

    log.debug(f"Still changing after {attempts} samples: {path}")
    return obs


def is_stable(path: Path | str, attempts: int, settle: float) -> bool:
    """Return True once two consecutive size samples of path are equal."""
    return probe_stability(path, attempts, settle).stable
