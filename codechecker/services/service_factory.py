"""
Service factory - the access point the API layer uses for services.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codechecker.services.comparison_service import ComparisonService


class ServiceFactory:
    """Hands out the shared service instances."""

    @staticmethod
    def get_comparison_service() -> 'ComparisonService':
        from codechecker.services.comparison_service import ComparisonService
        return ComparisonService()

    @staticmethod
    def reset() -> None:
        """Drop shared instances so the next request builds them from current settings."""
        from codechecker.services.comparison_service import ComparisonService
        ComparisonService.reset_instance()
