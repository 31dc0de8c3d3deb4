"""Tokenize, pairwise compare and report APIs."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from codechecker.api.deps import get_comparison_service
from codechecker.core.logging import LogEvent, get_logger
from codechecker.models.comparison import (
    CompareRequest,
    ReportRequest,
    ReportResponse,
    SimilarityModel,
    TokenizeRequest,
    TokenizeResponse,
    TokenModel,
)
from codechecker.services.comparison_service import ComparisonService

logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1", tags=["Comparison"])


@router.post("/tokenize", response_model=TokenizeResponse, summary="Tokenize a Python source")
async def tokenize_source(
    payload: TokenizeRequest,
    service: ComparisonService = Depends(get_comparison_service),
) -> TokenizeResponse:
    tokens = service.tokenize(payload.source)
    return TokenizeResponse(count=len(tokens), tokens=[TokenModel.from_token(t) for t in tokens])


@router.post("/compare", response_model=SimilarityModel, summary="Compare two sources")
async def compare_sources(
    payload: CompareRequest,
    service: ComparisonService = Depends(get_comparison_service),
) -> SimilarityModel:
    similarity = await service.compare_sources(
        payload.left_source,
        payload.right_source,
        threshold=payload.threshold,
        fast_compare=payload.fast_compare,
    )
    return SimilarityModel.from_similarity(similarity)


@router.post("/reports", response_model=ReportResponse, summary="Compare a submission set")
async def run_report(
    payload: ReportRequest,
    service: ComparisonService = Depends(get_comparison_service),
) -> ReportResponse:
    report = await service.run_report(
        [s.to_submission() for s in payload.submissions],
        scope=payload.scope,
        target_id=payload.target_submission_id,
        threshold=payload.threshold,
        fast_compare=payload.fast_compare,
    )
    logger.info(
        LogEvent.REPORT_SERVED,
        scope=payload.scope.value,
        total_pairs=len(report.similarities),
        high_similarity=len(report.high_similarity()),
    )
    return ReportResponse(
        threshold=report.threshold,
        total_pairs=len(report.similarities),
        cancelled=report.cancelled,
        similarities=[SimilarityModel.from_similarity(s) for s in report.similarities],
        high_similarity=[SimilarityModel.from_similarity(s) for s in report.high_similarity()],
        metrics=report.metrics.to_dict(),
    )
