"""Tests for Jaccard/LCS similarity scoring."""

from __future__ import annotations

import pytest

from codechecker.core.errors import ErrorCode, InputTooLargeError
from codechecker.services.similarity_scorer import SimilarityScorer
from codechecker.services.tokenizer import tokenize
from codechecker.services.types import SimilarityResult
from tests.sources import ADD_AB, ADD_XY, LOOP

BUBBLE_SORT = """
def bubble_sort(items):
    n = len(items)
    for i in range(n):
        for j in range(0, n - i - 1):
            if items[j] > items[j + 1]:
                items[j], items[j + 1] = items[j + 1], items[j]
    return items
"""

BUBBLE_SORT_RENAMED = """
def sort_list(values):
    size = len(values)
    for a in range(size):
        for b in range(0, size - a - 1):
            if values[b] > values[b + 1]:
                values[b], values[b + 1] = values[b + 1], values[b]
    return values
"""

FIBONACCI = """
class Fib:
    def __init__(self):
        self.cache = {}

    def value(self, k):
        while k not in self.cache:
            self.cache[k] = k
        return self.cache[k]
"""


@pytest.fixture
def scorer() -> SimilarityScorer:
    return SimilarityScorer()


class TestScoreProperties:
    def test_identity_is_exactly_100(self, scorer: SimilarityScorer) -> None:
        tokens = tokenize(BUBBLE_SORT)
        result = scorer.score(tokens, tokens)
        assert result.jaccard == 100.0
        assert result.lcs == 100.0
        assert result.combined == 100.0
        assert result.exact

    def test_symmetry(self, scorer: SimilarityScorer) -> None:
        a, b = tokenize(BUBBLE_SORT), tokenize(FIBONACCI)
        assert scorer.score(a, b) == scorer.score(b, a)

    def test_empty_side_scores_zero(self, scorer: SimilarityScorer) -> None:
        tokens = tokenize(ADD_AB)
        assert scorer.score([], tokens) == SimilarityResult.zero()
        assert scorer.score(tokens, []) == SimilarityResult.zero()
        assert scorer.score([], []) == SimilarityResult.zero()
        assert scorer.score(tokenize("# only a comment"), tokens).combined == 0.0

    def test_scores_are_bounded(self, scorer: SimilarityScorer) -> None:
        sources = [ADD_AB, ADD_XY, LOOP, BUBBLE_SORT, FIBONACCI]
        for left in sources:
            for right in sources:
                result = scorer.score(tokenize(left), tokenize(right))
                for value in (result.jaccard, result.lcs, result.combined):
                    assert 0.0 <= value <= 100.0

    def test_deterministic(self, scorer: SimilarityScorer) -> None:
        a, b = tokenize(BUBBLE_SORT), tokenize(BUBBLE_SORT_RENAMED)
        assert scorer.score(a, b) == scorer.score(a, b)

    def test_literal_values_do_not_matter(self, scorer: SimilarityScorer) -> None:
        result = scorer.score(tokenize("x = 1"), tokenize("x = 999999"))
        assert result.combined == 100.0


class TestScenarios:
    def test_renamed_parameters_baseline(self, scorer: SimilarityScorer) -> None:
        result = scorer.score(tokenize(ADD_AB), tokenize(ADD_XY))
        assert result.jaccard == pytest.approx(200 / 3)
        assert result.lcs == pytest.approx(200 / 3)
        assert result.combined == pytest.approx(200 / 3)

    def test_renamed_identifiers_keep_structure(self, scorer: SimilarityScorer) -> None:
        result = scorer.score(tokenize(BUBBLE_SORT), tokenize(BUBBLE_SORT_RENAMED))
        assert result.jaccard < 100.0
        assert result.lcs > result.jaccard
        assert result.combined > 60.0

    def test_unrelated_code_scores_lower(self, scorer: SimilarityScorer) -> None:
        renamed = scorer.score(tokenize(BUBBLE_SORT), tokenize(BUBBLE_SORT_RENAMED))
        unrelated = scorer.score(tokenize(BUBBLE_SORT), tokenize(FIBONACCI))
        assert unrelated.jaccard < renamed.jaccard
        assert unrelated.lcs < renamed.lcs
        assert unrelated.combined < renamed.combined

    def test_combined_weights(self, scorer: SimilarityScorer) -> None:
        result = scorer.score(tokenize(BUBBLE_SORT), tokenize(FIBONACCI))
        assert result.combined == pytest.approx(0.4 * result.jaccard + 0.6 * result.lcs)


class TestFastCompare:
    def test_exact_when_bound_reaches_threshold(self, scorer: SimilarityScorer) -> None:
        a, b = tokenize(BUBBLE_SORT), tokenize(BUBBLE_SORT_RENAMED)
        full = scorer.score(a, b)
        fast = scorer.score(a, b, min_threshold=full.combined)
        assert fast == full
        assert fast.exact

    def test_bound_below_threshold_skips_lcs(self, scorer: SimilarityScorer) -> None:
        a, b = tokenize(BUBBLE_SORT), tokenize(LOOP)
        full = scorer.score(a, b)
        fast = scorer.score(a, b, min_threshold=90.0)
        assert not fast.exact
        assert fast.combined < 90.0
        assert fast.combined >= full.combined
        assert fast.jaccard == full.jaccard

    def test_bounded_pair_never_hits_size_limit(self) -> None:
        tiny = SimilarityScorer(max_cells=4)
        result = tiny.score(tokenize(BUBBLE_SORT), tokenize(LOOP), min_threshold=90.0)
        assert not result.exact


class TestLcs:
    def test_classic_sequences(self, scorer: SimilarityScorer) -> None:
        assert scorer.lcs_length(list("ABCBDAB"), list("BDCABA")) == 4
        assert scorer.lcs_length(list("abcd"), list("bda")) == 2
        assert scorer.lcs_length(list("abc"), list("xyz")) == 0
        assert scorer.lcs_length([], list("abc")) == 0

    def test_length_is_symmetric(self, scorer: SimilarityScorer) -> None:
        assert scorer.lcs_length(list("AGGTAB"), list("GXTXAYB")) == 4
        assert scorer.lcs_length(list("GXTXAYB"), list("AGGTAB")) == 4

    def test_align_matches_lcs_length(self, scorer: SimilarityScorer) -> None:
        a, b = tokenize(BUBBLE_SORT), tokenize(BUBBLE_SORT_RENAMED)
        matched = scorer.align(a, b)
        assert len(matched) == scorer.lcs_length([t.text for t in a], [t.text for t in b])
        for i, j in matched:
            assert a[i].text == b[j].text
        assert matched == sorted(matched)
        assert len({i for i, _ in matched}) == len(matched)
        assert len({j for _, j in matched}) == len(matched)

    def test_align_empty(self, scorer: SimilarityScorer) -> None:
        assert scorer.align([], tokenize(ADD_AB)) == []


class TestSizeLimit:
    def test_oversized_pair_raises(self) -> None:
        tiny = SimilarityScorer(max_cells=10)
        with pytest.raises(InputTooLargeError) as exc_info:
            tiny.score(tokenize(ADD_AB), tokenize(ADD_XY))
        assert exc_info.value.error_code == ErrorCode.INPUT_TOO_LARGE
        assert exc_info.value.details == {"size": 144, "limit": 10}
        assert exc_info.value.status_code == 413

    def test_align_checks_size(self) -> None:
        tiny = SimilarityScorer(max_cells=10)
        with pytest.raises(InputTooLargeError):
            tiny.align(tokenize(ADD_AB), tokenize(ADD_XY))

    def test_limit_is_inclusive(self) -> None:
        tokens = tokenize(ADD_AB)
        scorer = SimilarityScorer(max_cells=len(tokens) ** 2)
        assert scorer.score(tokens, tokens).combined == 100.0
