"""Custom exception hierarchy for rankbpe dictionary and processing errors."""

import regex as re

from ._sanitise import render_bytes
from .types import Rank, Token


class RankBPEError(Exception):
    """Base exception for all rankbpe errors."""


class LoadError(RankBPEError):
    """Raised when reading a vocabulary resource fails."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        line_no: int | None = None,
        line: str | None = None,
    ) -> None:
        """Initialize with optional resource location that gets appended to the message."""
        extra = " "
        if path:
            extra += f"(path: {path}) "
        if line_no is not None:
            extra += f"(line {line_no}) "
        if line is not None:
            extra += f"(entry: {line!r}) "
        super().__init__(message + extra)
        self.path = path
        self.line_no = line_no
        self.line = line


class ConfigError(RankBPEError):
    """Raised when processor construction parameters are inconsistent."""

    def __init__(
        self,
        message: str,
        *,
        token: Token | None = None,
        rank: Rank | None = None,
    ) -> None:
        """Initialize with optional token and rank that get appended to the message."""
        extra = " "
        if token is not None:
            extra += f"(token: {render_bytes(token)!r}) "
        if rank is not None:
            extra += f"(rank: {rank}) "
        super().__init__(message + extra)
        self.token = token
        self.rank = rank


class PatternError(ConfigError):
    """Raised when compiling and/or validating regex patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | bytes | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        Args:
            message: Error message.
            pattern: The regex pattern that failed.
            regex_err: The underlying regex error from the regex library.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__(message + extra.rstrip())
        self.pattern = pattern
        self.regex_err = regex_err


class DecodeError(RankBPEError):
    """Raised when a rank sequence cannot be decoded."""


class InvalidRankError(DecodeError):
    """Raised when a rank has no token in the dictionary."""

    def __init__(self, rank: Rank, *, position: int | None = None) -> None:
        message = f"invalid rank {rank}"
        if position is not None:
            message += f" (position: {position})"
        super().__init__(message)
        self.rank = rank
        self.position = position
