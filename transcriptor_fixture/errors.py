"""Fatal error taxonomy for a transcription run.

Every error here aborts the run; the CLI reports it and exits with status 1.
"""


class TranscriptorError(Exception):
    """Base class for all fatal transcription errors."""


class UsageError(TranscriptorError):
    """Raised when required command-line arguments are missing or inconsistent."""


class LoadError(TranscriptorError):
    """Raised when the saved-variables file is missing or malformed."""


class ConfigError(TranscriptorError):
    """Raised when settings from the environment or .env file are invalid."""


class SelectionError(TranscriptorError):
    """Raised when the entry prefix matches zero or several logs."""


class RangeError(TranscriptorError):
    """Raised when the encounter range cannot be determined."""

    def __init__(
        self,
        message: str,
        starts: list[int] | None = None,
        ends: list[int] | None = None,
    ) -> None:
        super().__init__(message)
        self.starts = starts or []
        self.ends = ends or []


class ParseError(TranscriptorError):
    """Raised when a line inside the selected range does not match the line grammar."""

    def __init__(self, offset: int, line: str) -> None:
        super().__init__(f"unparseable line {offset}: {line}")
        self.offset = offset
        self.line = line
