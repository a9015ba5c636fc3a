"""Resolver cache diagnostics."""

from fastapi import APIRouter, Depends

from ..schemas import CacheStatsOut
from ..services import CheckerService, get_checker_service

router = APIRouter()


@router.get("/cache", response_model=CacheStatsOut)
def cache_stats(svc: CheckerService = Depends(get_checker_service)) -> CacheStatsOut:
    return svc.cache_stats()


@router.delete("/cache", response_model=CacheStatsOut)
def clear_cache(svc: CheckerService = Depends(get_checker_service)) -> CacheStatsOut:
    """Empty both caches and return the reset statistics."""
    svc.clear_cache()
    return svc.cache_stats()
