"""Custom exceptions for batch subtitle burn-in.

All exceptions inherit from HardsubError so the CLI can report any expected
failure with a single except clause. Per-file conversion errors are never
raised past the conversion runner; they are turned into BatchResult entries.
"""

from __future__ import annotations


class HardsubError(Exception):
    """Base exception for all hardsub errors."""


# Run-level exceptions


class MatchingError(HardsubError, OSError):
    """Raised when the input directory cannot be read.

    Inherits from OSError so callers catching filesystem errors still see it.
    """


class OutputDirectoryError(HardsubError, OSError):
    """Raised when the output directory cannot be created."""


# Per-file exceptions


class ConversionError(HardsubError):
    """Base class for failures converting a single matched pair."""

    def __init__(self, file: str, message: str) -> None:
        self.file = file
        super().__init__(message)


class EncoderExitError(ConversionError):
    """Raised when the encoder exits with a non-zero status."""

    def __init__(self, file: str, returncode: int) -> None:
        self.returncode = returncode
        super().__init__(file, f"Conversion failed for {file} (encoder exit code {returncode})")


class EncoderLaunchError(ConversionError):
    """Raised when the encoder process cannot be started.

    This can occur due to:
    - Encoder binary not installed or not on PATH
    - Missing execute permission
    """

    def __init__(self, file: str, reason: str) -> None:
        self.reason = reason
        super().__init__(file, f"Encoder error for {file}: {reason}")
