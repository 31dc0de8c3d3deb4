"""
Services - tokenizer, scorer, comparison engine and the application services around them.
"""

from codechecker.services.base_service import BaseService, singleton
from codechecker.services.comparison_engine import (
    ComparisonConfig,
    ComparisonProgress,
    ComparisonReport,
    PairwiseComparisonEngine,
)
from codechecker.services.pair_planner import ReportScope, plan_pairs
from codechecker.services.service_factory import ServiceFactory
from codechecker.services.similarity_scorer import SimilarityScorer
from codechecker.services.tokenizer import PythonTokenizer, tokenize

__all__ = [
    'BaseService',
    'singleton',
    'ServiceFactory',

    'PythonTokenizer',
    'tokenize',
    'SimilarityScorer',
    'PairwiseComparisonEngine',
    'ComparisonConfig',
    'ComparisonProgress',
    'ComparisonReport',
    'ReportScope',
    'plan_pairs',
]
