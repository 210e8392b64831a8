from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


@dataclass(frozen=True, order=True)
class PeriodUnit:
    """A unit of time, ordered by its estimated length and then by name."""
    estimated_seconds: int
    name: str

    def __str__(self) -> str:
        return self.name


class TextStyle(Enum):
    FULL = "full"
    SHORT = "short"
    NARROW = "narrow"


class MatchStatus(Enum):
    MATCHED = "matched"
    NO_MATCH = "no_match"
    UNSUPPORTED = "unsupported"  # the store can never parse


@dataclass(frozen=True)
class TextMatch:
    """Outcome of a longest-match lookup against a text store."""
    status: MatchStatus
    length: int = 0
    value: Optional[int] = None

    NO_MATCH: ClassVar["TextMatch"]
    UNSUPPORTED: ClassVar["TextMatch"]

    @classmethod
    def matched(cls, length: int, value: int) -> "TextMatch":
        return cls(MatchStatus.MATCHED, length, value)

    @property
    def is_matched(self) -> bool:
        return self.status is MatchStatus.MATCHED

    @property
    def is_supported(self) -> bool:
        return self.status is not MatchStatus.UNSUPPORTED

    def __bool__(self) -> bool:
        return self.is_matched


TextMatch.NO_MATCH = TextMatch(MatchStatus.NO_MATCH)
TextMatch.UNSUPPORTED = TextMatch(MatchStatus.UNSUPPORTED)
