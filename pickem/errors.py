from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class BracketError(Exception):
    """Structured error for bracket progression/scoring.

    The server layer maps these to HTTP 400 while keeping a stable
    machine-readable code for the client.
    """

    code: str
    message: str
    details: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"


# Error codes (stable API surface)
INVALID_SELECTION = "INVALID_SELECTION"
INVALID_SERIES_LENGTH = "INVALID_SERIES_LENGTH"
ROUND_NOT_FOUND = "ROUND_NOT_FOUND"
PLAY_IN_NOT_ENABLED = "PLAY_IN_NOT_ENABLED"
MATCHUP_INDEX_OUT_OF_RANGE = "MATCHUP_INDEX_OUT_OF_RANGE"
INCOMPLETE_FINAL = "INCOMPLETE_FINAL"
INVALID_BRACKET = "INVALID_BRACKET"


class InvalidSelection(BracketError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(INVALID_SELECTION, message, details)


class InvalidSeriesLength(BracketError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(INVALID_SERIES_LENGTH, message, details)


class RoundNotFound(BracketError):
    def __init__(self, message: str, details: Optional[Any] = None, *, code: str = ROUND_NOT_FOUND) -> None:
        super().__init__(code, message, details)


class PlayInNotEnabled(RoundNotFound):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message, details, code=PLAY_IN_NOT_ENABLED)


class MatchupIndexOutOfRange(BracketError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(MATCHUP_INDEX_OUT_OF_RANGE, message, details)


class IncompleteFinal(BracketError):
    """Champion requested before the Finals matchup is resolved (query-time check)."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(INCOMPLETE_FINAL, message, details)


class InvalidBracket(BracketError):
    """Malformed bracket record; `details` lists every problem found."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(INVALID_BRACKET, message, details)
