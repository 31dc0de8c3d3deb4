"""Build the explicit pair list for a report scope."""
from __future__ import annotations

from enum import Enum
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

from codechecker.core.errors import InvalidInputError
from codechecker.services.types import Submission

PairKey = Tuple[str, str]


class ReportScope(str, Enum):
    """Which submissions of an assignment take part in a report."""

    LATEST_PER_STUDENT = "latest_per_student"
    ALL_SUBMISSIONS = "all_submissions"
    SINGLE_TARGET = "single_target"


def pair_key(left_id: str, right_id: str) -> PairKey:
    """Canonical, order-independent key of a pair."""
    return (left_id, right_id) if left_id <= right_id else (right_id, left_id)


def all_pairs(submission_ids: Sequence[str]) -> List[PairKey]:
    unique = sorted(set(submission_ids))
    return list(combinations(unique, 2))


def latest_per_student(submissions: Sequence[Submission]) -> List[Submission]:
    """Keep each student's most recent submission.

    Submissions without a student id are treated as their own student. Ties
    on ``submitted_at`` (or a missing timestamp) go to the later entry.
    """
    latest: Dict[str, Tuple[Tuple[bool, float, int], Submission]] = {}
    for index, submission in enumerate(submissions):
        owner = submission.student_id if submission.student_id is not None else f"#{submission.submission_id}"
        stamp = submission.submitted_at.timestamp() if submission.submitted_at else 0.0
        rank = (submission.submitted_at is not None, stamp, index)
        current = latest.get(owner)
        if current is None or rank >= current[0]:
            latest[owner] = (rank, submission)
    return [entry[1] for entry in latest.values()]


def plan_pairs(
    submissions: Sequence[Submission],
    scope: ReportScope,
    target_id: Optional[str] = None,
) -> List[PairKey]:
    """Return the canonical pairs a report of ``scope`` has to compare."""
    if scope == ReportScope.ALL_SUBMISSIONS:
        ids = [s.submission_id for s in submissions]
        if len(set(ids)) < 2:
            raise InvalidInputError("At least two submissions are required", field="submissions", value=len(set(ids)))
        return all_pairs(ids)

    if scope == ReportScope.LATEST_PER_STUDENT:
        latest = latest_per_student(submissions)
        if len(latest) < 2:
            raise InvalidInputError(
                "At least two students' latest submissions are required", field="submissions", value=len(latest)
            )
        return all_pairs([s.submission_id for s in latest])

    if scope == ReportScope.SINGLE_TARGET:
        target = next((s for s in submissions if s.submission_id == target_id), None)
        if target is None:
            raise InvalidInputError("Target submission not found", field="target_submission_id", value=target_id)
        others = [
            s for s in latest_per_student(submissions)
            if s.submission_id != target.submission_id
            and (target.student_id is None or s.student_id != target.student_id)
        ]
        if not others:
            raise InvalidInputError("No other submissions to compare against", field="submissions")
        return sorted(pair_key(target.submission_id, s.submission_id) for s in others)

    raise InvalidInputError("Unknown report scope", field="scope", value=scope)
