from codechecker.services import ServiceFactory
from codechecker.services.comparison_service import ComparisonService


def get_comparison_service() -> ComparisonService:
    """Comparison service singleton."""
    return ServiceFactory.get_comparison_service()
