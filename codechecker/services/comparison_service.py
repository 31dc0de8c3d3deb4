"""Application service wiring settings into the comparison engine."""
from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from codechecker.core.errors import InputTooLargeError, InvalidRequestError
from codechecker.core.logging import LogEvent
from codechecker.services.base_service import BaseService, singleton
from codechecker.services.comparison_engine import (
    ComparisonConfig,
    ComparisonReport,
    PairwiseComparisonEngine,
)
from codechecker.services.pair_planner import ReportScope, plan_pairs
from codechecker.services.tokenizer import PythonTokenizer
from codechecker.services.types import Similarity, Submission, Token


@singleton
class ComparisonService(BaseService):
    """Runs tokenize / compare / report requests with the configured limits."""

    def _initialize(self) -> None:
        self.tokenizer = PythonTokenizer()
        self.engine = PairwiseComparisonEngine(self.tokenizer)

    def build_config(
        self,
        threshold: Optional[float] = None,
        fast_compare: Optional[bool] = None,
    ) -> ComparisonConfig:
        """Engine parameters from settings, with per-request overrides."""
        return ComparisonConfig(
            threshold=self.settings.similarity_threshold if threshold is None else threshold,
            fast_compare=self.settings.fast_compare_mode if fast_compare is None else fast_compare,
            max_cells=self.settings.max_lcs_cells,
            min_match_tokens=self.settings.min_match_tokens,
            max_gap_tokens=self.settings.max_gap_tokens,
            max_workers=self.settings.max_workers,
        )

    def tokenize(self, source: str) -> List[Token]:
        self._ensure_initialized()
        self._check_source_size(source)
        return self.tokenizer.tokenize(source)

    async def compare_sources(
        self,
        left_source: str,
        right_source: str,
        threshold: Optional[float] = None,
        fast_compare: Optional[bool] = None,
    ) -> Similarity:
        self._ensure_initialized()
        self._check_source_size(left_source)
        self._check_source_size(right_source)
        config = self.build_config(threshold, fast_compare)
        return await asyncio.to_thread(self.engine.compare_sources, left_source, right_source, config)

    async def run_report(
        self,
        submissions: Sequence[Submission],
        scope: ReportScope = ReportScope.LATEST_PER_STUDENT,
        target_id: Optional[str] = None,
        threshold: Optional[float] = None,
        fast_compare: Optional[bool] = None,
    ) -> ComparisonReport:
        self._ensure_initialized()
        if scope == ReportScope.SINGLE_TARGET and not target_id:
            raise InvalidRequestError("A single target report needs target_submission_id")
        for submission in submissions:
            self._check_source_size(submission.source, submission.submission_id)

        pairs = plan_pairs(submissions, scope, target_id)
        self.logger.info(
            LogEvent.REPORT_PLANNED,
            scope=scope.value,
            submissions=len(submissions),
            pairs=len(pairs),
        )
        return await self.engine.run_async(submissions, pairs, self.build_config(threshold, fast_compare))

    def _check_source_size(self, source: str, submission_id: Optional[str] = None) -> None:
        limit = self.settings.max_source_chars
        if len(source) > limit:
            label = f"Submission '{submission_id}'" if submission_id else "Source"
            raise InputTooLargeError(f"{label} exceeds {limit} characters", size=len(source), limit=limit)
