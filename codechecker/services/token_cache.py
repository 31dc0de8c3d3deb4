"""Fill-once token cache shared by the workers of one report run."""
from __future__ import annotations

import threading
from typing import Dict, Tuple

from codechecker.core.logging import LogEvent, get_logger
from codechecker.services.tokenizer import PythonTokenizer
from codechecker.services.types import Submission, Token

logger = get_logger(__name__)


class TokenCache:
    """Memoise token sequences per submission id.

    The first worker to need a submission tokenizes it and publishes the
    result; later readers get the published tuple. Token tuples are
    immutable, so readers need no lock once a value is published.
    """

    def __init__(self, tokenizer: PythonTokenizer):
        self.tokenizer = tokenizer
        self._tokens: Dict[str, Tuple[Token, ...]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, submission: Submission) -> Tuple[Token, ...]:
        cached = self._tokens.get(submission.submission_id)
        if cached is not None:
            with self._lock:
                self.hits += 1
            return cached

        computed = tuple(self.tokenizer.tokenize(submission.source))
        with self._lock:
            published = self._tokens.setdefault(submission.submission_id, computed)
            if published is computed:
                self.misses += 1
            else:
                self.hits += 1
        if published is computed:
            logger.debug(LogEvent.TOKEN_CACHE_MISS, submission_id=submission.submission_id, tokens=len(computed))
        return published

    def __len__(self) -> int:
        return len(self._tokens)
