"""
Request/response models for the comparison API.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from codechecker.services.pair_planner import ReportScope
from codechecker.services.types import (
    MatchRegion,
    MatchType,
    PairStatus,
    RiskLevel,
    Similarity,
    Submission,
    Token,
    TokenKind,
)


class TokenizeRequest(BaseModel):
    source: str


class TokenModel(BaseModel):
    kind: TokenKind
    text: str
    position: int
    line: int

    @classmethod
    def from_token(cls, token: Token) -> "TokenModel":
        return cls(kind=token.kind, text=token.text, position=token.position, line=token.line)


class TokenizeResponse(BaseModel):
    count: int
    tokens: List[TokenModel]


class CompareRequest(BaseModel):
    left_source: str
    right_source: str
    threshold: Optional[float] = Field(default=None, ge=0.0, le=100.0, description="Overrides the configured threshold")
    fast_compare: Optional[bool] = Field(default=None, description="Overrides the configured fast compare mode")


class MatchRegionModel(BaseModel):
    """Inclusive 1-based line ranges."""
    a_line_start: int
    a_line_end: int
    b_line_start: int
    b_line_end: int
    match_type: MatchType

    @classmethod
    def from_region(cls, region: MatchRegion) -> "MatchRegionModel":
        return cls(
            a_line_start=region.a_line_start,
            a_line_end=region.a_line_end,
            b_line_start=region.b_line_start,
            b_line_end=region.b_line_end,
            match_type=region.match_type,
        )


class SimilarityModel(BaseModel):
    left_id: str
    right_id: str
    status: PairStatus
    jaccard_score: Optional[float] = None
    lcs_score: Optional[float] = None
    combined_score: Optional[float] = None
    exact: bool = True
    risk_level: Optional[RiskLevel] = None
    matches: List[MatchRegionModel] = Field(default_factory=list)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_similarity(cls, similarity: Similarity) -> "SimilarityModel":
        result = similarity.result
        return cls(
            left_id=similarity.left_id,
            right_id=similarity.right_id,
            status=similarity.status,
            jaccard_score=result.jaccard if result else None,
            lcs_score=result.lcs if result else None,
            combined_score=result.combined if result else None,
            exact=result.exact if result else True,
            risk_level=similarity.risk_level,
            matches=[MatchRegionModel.from_region(r) for r in similarity.highlight.matches],
            error_code=similarity.error_code,
            error_message=similarity.error_message,
            created_at=similarity.created_at,
        )


class SubmissionModel(BaseModel):
    submission_id: str = Field(..., min_length=1)
    source: str
    student_id: Optional[str] = None
    submitted_at: Optional[datetime] = None

    def to_submission(self) -> Submission:
        return Submission(
            submission_id=self.submission_id,
            source=self.source,
            student_id=self.student_id,
            submitted_at=self.submitted_at,
        )


class ReportRequest(BaseModel):
    submissions: List[SubmissionModel] = Field(..., min_length=2)
    scope: ReportScope = ReportScope.LATEST_PER_STUDENT
    target_submission_id: Optional[str] = None
    threshold: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    fast_compare: Optional[bool] = None


class ReportResponse(BaseModel):
    threshold: float
    total_pairs: int
    cancelled: bool
    similarities: List[SimilarityModel]
    high_similarity: List[SimilarityModel]
    metrics: dict
