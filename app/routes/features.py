"""Feature catalog routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from baseline_checker.issue import Tier

from ..schemas import ErrorDetail, FeatureListResponse, FeatureOut
from ..services import CheckerService, get_checker_service

router = APIRouter(prefix="/features")

_STATUS_TIERS = {
    "widely": Tier.WIDELY,
    "high": Tier.WIDELY,
    "newly": Tier.NEWLY,
    "low": Tier.NEWLY,
    "limited": Tier.LIMITED,
}


@router.get("", response_model=FeatureListResponse, responses={400: {"model": ErrorDetail}})
def list_features(
    status: Optional[str] = Query(default=None, description="widely, newly or limited"),
    group: Optional[str] = Query(default=None, description="Feature group, e.g. css"),
    q: Optional[str] = Query(default=None, description="Search text"),
    limit: int = Query(default=100, ge=1, le=1000),
    svc: CheckerService = Depends(get_checker_service),
) -> FeatureListResponse:
    """Features filtered by status, group and search text."""
    tier = None
    if status is not None:
        tier = _STATUS_TIERS.get(status.lower())
        if tier is None:
            raise HTTPException(400, f"Invalid status '{status}'. Must be one of: widely, newly, limited")
    features = svc.features(status=tier, group=group, query=q)
    return FeatureListResponse(count=len(features), features=features[:limit])


@router.get("/{feature_id}", response_model=FeatureOut, responses={404: {"model": ErrorDetail}})
def get_feature(feature_id: str, svc: CheckerService = Depends(get_checker_service)) -> FeatureOut:
    """One feature by web-features id."""
    feature = svc.feature(feature_id)
    if feature is None:
        raise HTTPException(404, f'Feature "{feature_id}" not found')
    return feature
