"""Scan route: analyze a directory on the server."""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import get_default_scan_path
from ..schemas import ErrorDetail, ScanResponse
from ..services import CheckerService, get_checker_service

router = APIRouter()


@router.get("/scan", response_model=ScanResponse, responses={404: {"model": ErrorDetail}})
def scan(
    path: Optional[str] = Query(default=None, description="File or directory to scan"),
    level: Optional[str] = Query(default=None, description="low/newly or high/widely"),
    svc: CheckerService = Depends(get_checker_service),
) -> ScanResponse:
    """Scan `path` (default from BASELINE_SCAN_PATH) and return results with a score."""
    target = path or get_default_scan_path()
    if not Path(target).exists():
        raise HTTPException(404, f"Path not found: {target}")
    return svc.scan(target, level=level)
