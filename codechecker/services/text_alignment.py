"""Project aligned token positions back onto source line ranges for highlighting."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from codechecker.services.types import HighlightData, MatchRegion, MatchType, Token


@dataclass
class _Run:
    first: Tuple[int, int]
    last: Tuple[int, int]
    size: int


class TextAlignmentService:
    """Turn an LCS alignment into line-level match regions."""

    def __init__(self, min_match_tokens: int = 3, max_gap_tokens: int = 2):
        self.min_match_tokens = min_match_tokens
        self.max_gap_tokens = max_gap_tokens

    def build_highlight(
        self,
        matched: Sequence[Tuple[int, int]],
        tokens_a: Sequence[Token],
        tokens_b: Sequence[Token],
        source_a: str,
        source_b: str,
    ) -> HighlightData:
        """
        Build highlight data from matched ``(index_a, index_b)`` token pairs.

        Runs of matched tokens separated by at most ``max_gap_tokens``
        unmatched tokens on both sides are joined; runs with fewer than
        ``min_match_tokens`` matches are dropped.
        """
        spans = []
        for run in self._find_runs(matched):
            if run.size < self.min_match_tokens:
                continue
            spans.append((
                tokens_a[run.first[0]].line,
                tokens_a[run.last[0]].line,
                tokens_b[run.first[1]].line,
                tokens_b[run.last[1]].line,
            ))

        lines_a = source_a.split("\n")
        lines_b = source_b.split("\n")
        regions = [
            MatchRegion(
                a_line_start=a_start,
                a_line_end=a_end,
                b_line_start=b_start,
                b_line_end=b_end,
                match_type=self._classify(lines_a[a_start - 1:a_end], lines_b[b_start - 1:b_end]),
            )
            for a_start, a_end, b_start, b_end in self._merge_overlapping_spans(spans)
        ]
        return HighlightData(matches=tuple(regions))

    def _find_runs(self, matched: Sequence[Tuple[int, int]]) -> List[_Run]:
        runs: List[_Run] = []
        for pair in matched:
            if runs:
                current = runs[-1]
                gap_a = pair[0] - current.last[0] - 1
                gap_b = pair[1] - current.last[1] - 1
                if gap_a <= self.max_gap_tokens and gap_b <= self.max_gap_tokens:
                    current.last = pair
                    current.size += 1
                    continue
            runs.append(_Run(first=pair, last=pair, size=1))
        return runs

    def _merge_overlapping_spans(
        self, spans: List[Tuple[int, int, int, int]]
    ) -> List[Tuple[int, int, int, int]]:
        """Merge spans that overlap in the first submission."""
        if not spans:
            return []

        merged = [spans[0]]
        for current in spans[1:]:
            last = merged[-1]
            if current[0] <= last[1]:
                merged[-1] = (
                    last[0],
                    max(last[1], current[1]),
                    min(last[2], current[2]),
                    max(last[3], current[3]),
                )
            else:
                merged.append(current)
        return merged

    @staticmethod
    def _classify(lines_a: Sequence[str], lines_b: Sequence[str]) -> MatchType:
        stripped_a = [line.strip() for line in lines_a if line.strip()]
        stripped_b = [line.strip() for line in lines_b if line.strip()]
        return MatchType.EXACT if stripped_a == stripped_b else MatchType.STRUCTURAL
