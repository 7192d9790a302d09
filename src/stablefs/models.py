"""Constants and small data types shared across stablefs modules."""

from dataclasses import dataclass, field

# Environment prefix read by CopyConfig (FILEUTILS_STABLE_ATTEMPTS, ...)
ENV_PREFIX = "FILEUTILS_"

DEFAULT_ATTEMPTS = 5
DEFAULT_SETTLE_MS = 500

MIN_ATTEMPTS = 3
MAX_ATTEMPTS = 20
MIN_SETTLE_MS = 100
MAX_SETTLE_MS = 1000

# One decoded data record: header column name -> cell value
CsvRow = dict[str, str]


@dataclass
class StabilityObservation:
    """Size samples taken for one path during one probing session.

    samples holds (index, size) pairs in the order they were taken.
    """

    path: str
    attempts: int
    samples: list[tuple[int, int]] = field(default_factory=list)
    stable: bool = False

    @property
    def sample_count(self) -> int:
        return len(self.samples)
