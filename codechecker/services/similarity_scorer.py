"""Jaccard + LCS similarity scoring over token streams."""
from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from codechecker.core.errors import InputTooLargeError
from codechecker.services.types import SimilarityResult, Token

JACCARD_WEIGHT = 0.4
LCS_WEIGHT = 0.6
DEFAULT_MAX_CELLS = 10_000_000


def _encode(texts_a: Sequence[str], texts_b: Sequence[str]) -> Tuple[np.ndarray, np.ndarray]:
    """Map token texts to integer ids shared by both sequences."""
    vocabulary: Dict[str, int] = {}
    ids_a = np.fromiter(
        (vocabulary.setdefault(t, len(vocabulary)) for t in texts_a), dtype=np.int64, count=len(texts_a)
    )
    ids_b = np.fromiter(
        (vocabulary.setdefault(t, len(vocabulary)) for t in texts_b), dtype=np.int64, count=len(texts_b)
    )
    return ids_a, ids_b


def _next_row(previous: np.ndarray, columns: np.ndarray, symbol: int) -> np.ndarray:
    """Compute one LCS table row from the previous one.

    Equivalent to ``dp[i][j] = dp[i-1][j-1] + 1`` on a match and
    ``max(dp[i-1][j], dp[i][j-1])`` otherwise, expressed as a running maximum
    over the row so numpy evaluates it in one pass.
    """
    candidates = np.maximum(previous[1:], np.where(columns == symbol, previous[:-1] + 1, 0))
    row = np.empty_like(previous)
    row[0] = 0
    np.maximum.accumulate(candidates, out=row[1:])
    return row


class SimilarityScorer:
    """Score two token sequences.

    ``combined = 0.4 * jaccard + 0.6 * lcs``, every score a percentage.
    Pairs whose LCS table would exceed ``max_cells`` cells are refused with
    :class:`InputTooLargeError`.
    """

    def __init__(self, max_cells: int = DEFAULT_MAX_CELLS):
        self.max_cells = max_cells

    def score(
        self,
        tokens_a: Sequence[Token],
        tokens_b: Sequence[Token],
        min_threshold: Optional[float] = None,
    ) -> SimilarityResult:
        """Score two token sequences.

        With ``min_threshold`` set, the LCS table is skipped when an upper
        bound on the combined score already falls below the threshold; the
        returned result then carries the bound and ``exact=False``.
        """
        if not tokens_a or not tokens_b:
            return SimilarityResult.zero()

        texts_a = [token.text for token in tokens_a]
        texts_b = [token.text for token in tokens_b]
        longest = max(len(texts_a), len(texts_b))

        jaccard = self.jaccard(texts_a, texts_b)

        if min_threshold is not None:
            overlap = sum((Counter(texts_a) & Counter(texts_b)).values())
            lcs_bound = 100.0 * overlap / longest
            combined_bound = JACCARD_WEIGHT * jaccard + LCS_WEIGHT * lcs_bound
            if combined_bound < min_threshold:
                return SimilarityResult(jaccard=jaccard, lcs=lcs_bound, combined=combined_bound, exact=False)

        lcs = 100.0 * self.lcs_length(texts_a, texts_b) / longest
        return SimilarityResult(
            jaccard=jaccard,
            lcs=lcs,
            combined=JACCARD_WEIGHT * jaccard + LCS_WEIGHT * lcs,
        )

    @staticmethod
    def jaccard(texts_a: Sequence[str], texts_b: Sequence[str]) -> float:
        set_a = set(texts_a)
        set_b = set(texts_b)
        union = len(set_a | set_b)
        if not union:
            return 0.0
        return 100.0 * len(set_a & set_b) / union

    def lcs_length(self, texts_a: Sequence[str], texts_b: Sequence[str]) -> int:
        """Length of the longest common subsequence, in O(min(m, n)) memory."""
        if not texts_a or not texts_b:
            return 0
        self._check_size(len(texts_a), len(texts_b))

        ids_a, ids_b = _encode(texts_a, texts_b)
        if len(ids_b) > len(ids_a):
            ids_a, ids_b = ids_b, ids_a

        row = np.zeros(len(ids_b) + 1, dtype=np.int32)
        for symbol in ids_a:
            row = _next_row(row, ids_b, symbol)
        return int(row[-1])

    def align(self, tokens_a: Sequence[Token], tokens_b: Sequence[Token]) -> List[Tuple[int, int]]:
        """Return matched ``(index_a, index_b)`` pairs of one LCS, ascending."""
        if not tokens_a or not tokens_b:
            return []
        m, n = len(tokens_a), len(tokens_b)
        self._check_size(m, n)

        ids_a, ids_b = _encode([t.text for t in tokens_a], [t.text for t in tokens_b])
        table = np.zeros((m + 1, n + 1), dtype=np.int32)
        for i in range(1, m + 1):
            table[i] = _next_row(table[i - 1], ids_b, ids_a[i - 1])

        matched: List[Tuple[int, int]] = []
        i, j = m, n
        while i > 0 and j > 0:
            if ids_a[i - 1] == ids_b[j - 1]:
                matched.append((i - 1, j - 1))
                i -= 1
                j -= 1
            elif table[i - 1, j] >= table[i, j - 1]:
                i -= 1
            else:
                j -= 1
        matched.reverse()
        return matched

    def _check_size(self, m: int, n: int) -> None:
        cells = m * n
        if cells > self.max_cells:
            raise InputTooLargeError(
                f"Token sequences of length {m} and {n} exceed the comparison limit",
                size=cells,
                limit=self.max_cells,
            )
