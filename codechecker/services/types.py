"""Shared dataclasses used across services."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple


class TokenKind(str, Enum):
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    DELIMITER = "delimiter"
    LITERAL = "literal"


@dataclass(frozen=True, slots=True)
class Token:
    """A classified lexical token.

    ``position`` is the token index within its sequence, ``line`` the 1-based
    source line the token starts on.
    """

    kind: TokenKind
    text: str
    position: int
    line: int


@dataclass(frozen=True, slots=True)
class Submission:
    """A submission as handed over by the report workflow."""

    submission_id: str
    source: str
    student_id: Optional[str] = None
    submitted_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class SimilarityResult:
    """Jaccard, LCS and combined scores, each a percentage in [0, 100].

    ``exact`` is False when the scores are an upper bound produced by the
    fast-compare path for a pair already known to fall below its threshold.
    """

    jaccard: float
    lcs: float
    combined: float
    exact: bool = True

    @classmethod
    def zero(cls) -> "SimilarityResult":
        return cls(jaccard=0.0, lcs=0.0, combined=0.0)


class MatchType(str, Enum):
    EXACT = "EXACT_MATCH"
    STRUCTURAL = "STRUCTURAL_MATCH"


@dataclass(frozen=True, slots=True)
class MatchRegion:
    """Inclusive, 1-based line ranges of a matched region in both submissions."""

    a_line_start: int
    a_line_end: int
    b_line_start: int
    b_line_end: int
    match_type: MatchType


@dataclass(frozen=True, slots=True)
class HighlightData:
    """Match regions ordered by their position in the first submission."""

    matches: Tuple[MatchRegion, ...] = ()

    def __len__(self) -> int:
        return len(self.matches)


class PairStatus(str, Enum):
    COMPARED = "compared"
    BOUNDED = "bounded"
    SKIPPED = "skipped"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def from_score(cls, combined: float) -> "RiskLevel":
        if combined >= 80.0:
            return cls.HIGH
        if combined >= 60.0:
            return cls.MEDIUM
        return cls.LOW


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Similarity:
    """Result record for one compared pair within one report run.

    ``left_id`` always sorts before ``right_id``.
    """

    left_id: str
    right_id: str
    status: PairStatus
    result: Optional[SimilarityResult] = None
    highlight: HighlightData = field(default_factory=HighlightData)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def pair_key(self) -> Tuple[str, str]:
        return (self.left_id, self.right_id)

    @property
    def combined_score(self) -> float:
        return self.result.combined if self.result else 0.0

    @property
    def risk_level(self) -> Optional[RiskLevel]:
        """Band of an exact score; None for bounded and skipped pairs."""
        if self.status != PairStatus.COMPARED:
            return None
        return RiskLevel.from_score(self.combined_score)

    def meets_threshold(self, threshold: float) -> bool:
        return self.status == PairStatus.COMPARED and self.combined_score >= threshold
