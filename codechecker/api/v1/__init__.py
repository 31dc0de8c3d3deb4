"""Version 1 API routers."""

from . import compare, health

__all__ = ["compare", "health"]
