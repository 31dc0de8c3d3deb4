"""Pairwise comparison of a submission set: tokenize, score, highlight."""
from __future__ import annotations

import asyncio
import contextvars
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from codechecker.core.errors import BaseApplicationError, ComparisonError, InvalidInputError
from codechecker.core.logging import LogEvent, get_logger
from codechecker.services.pair_planner import PairKey, all_pairs, pair_key
from codechecker.services.pipeline_metrics import ReportMetrics
from codechecker.services.similarity_scorer import DEFAULT_MAX_CELLS, SimilarityScorer
from codechecker.services.text_alignment import TextAlignmentService
from codechecker.services.token_cache import TokenCache
from codechecker.services.tokenizer import PythonTokenizer
from codechecker.services.types import HighlightData, PairStatus, Similarity, Submission

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComparisonConfig:
    """Parameters of one report run, supplied by the caller."""
    threshold: float = 60.0
    fast_compare: bool = False
    max_cells: int = DEFAULT_MAX_CELLS
    min_match_tokens: int = 3
    max_gap_tokens: int = 2
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 100.0:
            raise InvalidInputError("Threshold must be between 0 and 100", field="threshold", value=self.threshold)


@dataclass(frozen=True)
class ComparisonProgress:
    current: int
    total: int


@dataclass
class ComparisonReport:
    """Similarity records of one run in canonical pair order."""
    similarities: List[Similarity]
    threshold: float
    cancelled: bool = False
    metrics: ReportMetrics = field(default_factory=ReportMetrics)

    def high_similarity(self) -> List[Similarity]:
        """Pairs whose combined score reaches the threshold, highest first."""
        selected = [s for s in self.similarities if s.meets_threshold(self.threshold)]
        return sorted(selected, key=lambda s: (-s.combined_score, s.pair_key))

    def get(self, left_id: str, right_id: str) -> Optional[Similarity]:
        key = pair_key(left_id, right_id)
        return next((s for s in self.similarities if s.pair_key == key), None)


@dataclass
class _RunContext:
    config: ComparisonConfig
    scorer: SimilarityScorer
    aligner: TextAlignmentService
    cache: TokenCache


ProgressCallback = Callable[[ComparisonProgress], None]


class PairwiseComparisonEngine:
    """Compare submissions pairwise on a bounded worker pool.

    The engine is scope-agnostic: callers pass the pairs to evaluate (all
    unordered pairs by default) and the run parameters.
    """

    def __init__(self, tokenizer: Optional[PythonTokenizer] = None):
        self.tokenizer = tokenizer or PythonTokenizer()

    def run(
        self,
        submissions: Sequence[Submission],
        pairs: Optional[Iterable[Tuple[str, str]]] = None,
        config: Optional[ComparisonConfig] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ComparisonReport:
        config = config or ComparisonConfig()
        by_id = self._index(submissions)
        keys = self._canonical_pairs(pairs, by_id)

        context = self._context(config)
        metrics = ReportMetrics(total_pairs=len(keys))
        results: Dict[PairKey, Similarity] = {}
        cancelled = False

        logger.info(
            LogEvent.REPORT_STARTED,
            submissions=len(by_id),
            total_pairs=len(keys),
            threshold=config.threshold,
            fast_compare=config.fast_compare,
        )

        def task(key: PairKey) -> Optional[Similarity]:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return self.compare_pair(by_id[key[0]], by_id[key[1]], context)

        workers = config.max_workers or os.cpu_count() or 1
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="compare")
        try:
            # workers inherit the caller's logging context
            futures = {executor.submit(contextvars.copy_context().run, task, key): key for key in keys}
            for future in as_completed(futures):
                key = futures[future]
                try:
                    similarity = future.result()
                except Exception as e:
                    logger.error(LogEvent.PAIR_FAILED, pair=list(key), error=str(e), exc_info=True)
                    similarity = self._failed(key, ComparisonError(str(e), pair=key))

                if similarity is None:
                    cancelled = True
                    continue
                results[key] = similarity
                metrics.record(similarity)
                if progress_callback:
                    progress_callback(ComparisonProgress(current=len(results), total=len(keys)))
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        metrics.finish(context.cache.hits, context.cache.misses)
        logger.info(
            LogEvent.REPORT_CANCELLED if cancelled else LogEvent.REPORT_COMPLETED,
            **metrics.to_dict(),
        )

        return ComparisonReport(
            similarities=[results[key] for key in keys if key in results],
            threshold=config.threshold,
            cancelled=cancelled,
            metrics=metrics,
        )

    async def run_async(
        self,
        submissions: Sequence[Submission],
        pairs: Optional[Iterable[Tuple[str, str]]] = None,
        config: Optional[ComparisonConfig] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ComparisonReport:
        """Run in a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.run, submissions, pairs, config, progress_callback, cancel_event)

    def compare_sources(
        self,
        source_a: str,
        source_b: str,
        config: Optional[ComparisonConfig] = None,
    ) -> Similarity:
        """Compare two ad hoc sources, identified as ``left`` and ``right``."""
        context = self._context(config or ComparisonConfig())
        return self.compare_pair(
            Submission(submission_id="left", source=source_a),
            Submission(submission_id="right", source=source_b),
            context,
        )

    def compare_pair(self, first: Submission, second: Submission, context: _RunContext) -> Similarity:
        left, right = (first, second) if first.submission_id <= second.submission_id else (second, first)
        config = context.config
        tokens_a = context.cache.get(left)
        tokens_b = context.cache.get(right)
        min_threshold = config.threshold if config.fast_compare else None

        try:
            result = context.scorer.score(tokens_a, tokens_b, min_threshold=min_threshold)
            if not result.exact:
                logger.debug(LogEvent.PAIR_BOUNDED, left=left.submission_id, right=right.submission_id,
                             bound=result.combined)
                return Similarity(
                    left_id=left.submission_id,
                    right_id=right.submission_id,
                    status=PairStatus.BOUNDED,
                    result=result,
                )

            highlight = HighlightData()
            if result.combined >= config.threshold:
                matched = context.scorer.align(tokens_a, tokens_b)
                highlight = context.aligner.build_highlight(matched, tokens_a, tokens_b, left.source, right.source)
        except BaseApplicationError as e:
            logger.warning(
                LogEvent.PAIR_SKIPPED,
                left=left.submission_id,
                right=right.submission_id,
                error_code=e.error_code.value,
                details=e.details,
            )
            return self._failed((left.submission_id, right.submission_id), e)

        logger.debug(LogEvent.PAIR_COMPARED, left=left.submission_id, right=right.submission_id,
                     combined=result.combined, regions=len(highlight))
        return Similarity(
            left_id=left.submission_id,
            right_id=right.submission_id,
            status=PairStatus.COMPARED,
            result=result,
            highlight=highlight,
        )

    @staticmethod
    def _failed(key: PairKey, error: BaseApplicationError) -> Similarity:
        return Similarity(
            left_id=key[0],
            right_id=key[1],
            status=PairStatus.SKIPPED,
            error_code=error.error_code.value,
            error_message=error.message,
        )

    def _context(self, config: ComparisonConfig) -> _RunContext:
        return _RunContext(
            config=config,
            scorer=SimilarityScorer(max_cells=config.max_cells),
            aligner=TextAlignmentService(
                min_match_tokens=config.min_match_tokens,
                max_gap_tokens=config.max_gap_tokens,
            ),
            cache=TokenCache(self.tokenizer),
        )

    @staticmethod
    def _index(submissions: Sequence[Submission]) -> Dict[str, Submission]:
        by_id: Dict[str, Submission] = {}
        for submission in submissions:
            if submission.submission_id in by_id:
                raise InvalidInputError(
                    "Duplicate submission id", field="submission_id", value=submission.submission_id
                )
            by_id[submission.submission_id] = submission
        return by_id

    @staticmethod
    def _canonical_pairs(
        pairs: Optional[Iterable[Tuple[str, str]]],
        by_id: Dict[str, Submission],
    ) -> List[PairKey]:
        if pairs is None:
            return all_pairs(list(by_id))

        keys = set()
        for left_id, right_id in pairs:
            for submission_id in (left_id, right_id):
                if submission_id not in by_id:
                    raise InvalidInputError("Unknown submission id in pair", field="pairs", value=submission_id)
            if left_id != right_id:
                keys.add(pair_key(left_id, right_id))
        return sorted(keys)
