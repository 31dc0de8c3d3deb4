"""Metrics collected over one comparison report run."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from codechecker.services.types import PairStatus, Similarity


@dataclass
class ReportMetrics:
    """Counters and timings of a report run."""
    total_pairs: int = 0
    compared: int = 0
    bounded: int = 0
    skipped: int = 0
    highlighted: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def processed(self) -> int:
        return self.compared + self.bounded + self.skipped

    @property
    def total_execution_time(self) -> float:
        if self.end_time is None:
            return time.time() - self.start_time
        return self.end_time - self.start_time

    @property
    def cache_hit_rate(self) -> float:
        total = self.cache_hits + self.cache_misses
        if total == 0:
            return 0.0
        return self.cache_hits / total

    def record(self, similarity: Similarity) -> None:
        if similarity.status == PairStatus.COMPARED:
            self.compared += 1
            if similarity.highlight.matches:
                self.highlighted += 1
        elif similarity.status == PairStatus.BOUNDED:
            self.bounded += 1
        else:
            self.skipped += 1

    def finish(self, cache_hits: int, cache_misses: int) -> None:
        self.cache_hits = cache_hits
        self.cache_misses = cache_misses
        self.end_time = time.time()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_pairs": self.total_pairs,
            "processed": self.processed,
            "compared": self.compared,
            "bounded": self.bounded,
            "skipped": self.skipped,
            "highlighted": self.highlighted,
            "cache_hit_rate": round(self.cache_hit_rate, 3),
            "total_execution_time": round(self.total_execution_time, 3),
        }
