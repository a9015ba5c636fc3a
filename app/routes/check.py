"""Check route: analyze a snippet of source text."""

from fastapi import APIRouter, Depends

from ..schemas import CheckRequest, ErrorDetail, FileResultOut
from ..services import CheckerService, get_checker_service

router = APIRouter()


@router.post(
    "/check",
    response_model=FileResultOut,
    responses={400: {"model": ErrorDetail}, 422: {"model": ErrorDetail}},
)
def check(req: CheckRequest, svc: CheckerService = Depends(get_checker_service)) -> FileResultOut:
    """Classify every feature used in `code` against the required level."""
    return svc.check_code(req.code, req.language, filename=req.filename, level=req.level)
