"""Services for the checker API."""

from functools import lru_cache

from .checker import CheckerService

__all__ = ["CheckerService", "get_checker_service"]


@lru_cache(maxsize=1)
def get_checker_service() -> CheckerService:
    """Process-wide service; routes receive it through Depends."""
    from ..config import get_settings

    return CheckerService(get_settings())
