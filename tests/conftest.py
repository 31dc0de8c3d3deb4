"""Shared fixtures and helpers for tests."""

import pytest

from codechecker.services.tokenizer import PythonTokenizer
from codechecker.services.types import Submission
from tests.sources import ADD_AB, ADD_XY, LOOP


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


@pytest.fixture
def tokenizer() -> PythonTokenizer:
    return PythonTokenizer()


@pytest.fixture
def submissions() -> list[Submission]:
    """Two near-copies and one unrelated submission."""
    return [
        Submission(submission_id="s1", source=ADD_AB, student_id="u1"),
        Submission(submission_id="s2", source=ADD_XY, student_id="u2"),
        Submission(submission_id="s3", source=LOOP, student_id="u3"),
    ]
