"""Health check route."""

from fastapi import APIRouter, Depends

from baseline_checker import __version__

from ..services import CheckerService, get_checker_service

router = APIRouter()


@router.get("/health")
def health(service: CheckerService = Depends(get_checker_service)) -> dict:
    """Liveness check. Does not load platform data."""
    return {"status": "ok", "version": __version__, "provider": service.provider_name()}
