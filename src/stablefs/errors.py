"""Exception hierarchy for stablefs.

Missing files, permission problems and mid-copy I/O failures are not wrapped:
the builtin OSError subclasses already carry the offending path and are
raised to the caller as-is.
"""


class FileUtilsError(Exception):
    """Base exception for errors raised by stablefs itself."""


class NotStableError(FileUtilsError):
    """Source size kept changing (or vanished) while it was being probed."""

    def __init__(self, path: str) -> None:
        super().__init__(f"source not stable: {path}")
        self.path = path


class DurabilityError(FileUtilsError):
    """Bytes were copied but flushing them to stable storage failed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"copy to {path} not durable: {reason}")
        self.path = path
        self.reason = reason


class CsvDecodeError(FileUtilsError):
    """A delimited text file contained a malformed record."""

    def __init__(self, path: str, line: int, message: str) -> None:
        super().__init__(f"{path}:{line}: {message}")
        self.path = path
        self.line = line
