"""Route handlers."""

from .cache import router as cache_router
from .check import router as check_router
from .features import router as features_router
from .health import router as health_router
from .root import router as root_router
from .scan import router as scan_router

__all__ = ["root_router", "health_router", "check_router", "scan_router", "features_router", "cache_router"]
