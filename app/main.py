"""FastAPI app: /health, /check, /scan, /features, /cache."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from baseline_checker import __version__
from baseline_checker.errors import BaselineCheckError, FileError, ParseError
from baseline_checker.utils import configure_logging

from .config import get_cors_origins, get_host, get_port, get_settings
from .routes import cache_router, check_router, features_router, health_router, root_router, scan_router

logger = logging.getLogger("baseline_checker.api")

app = FastAPI(
    title="Baseline Compatibility Checker API",
    description="Classify CSS and JavaScript feature usage by Baseline availability.",
    version=__version__,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(check_router)
app.include_router(scan_router)
app.include_router(features_router)
app.include_router(cache_router)


@app.on_event("startup")
def _validate_config() -> None:
    """Install logging and warn when no platform data source is configured."""
    configure_logging()
    provider = get_settings().provider
    if not provider.data_path and not provider.data_url:
        logger.warning("No platform data source configured; using the built-in fallback table only.")
        logger.warning("Set BASELINE_DATA_PATH or BASELINE_DATA_URL for full Baseline data.")


@app.exception_handler(BaselineCheckError)
async def _checker_error(request: Request, exc: BaselineCheckError) -> JSONResponse:
    if isinstance(exc, ParseError):
        status_code = 422
    elif isinstance(exc, FileError) and exc.context.get("operation") == "read":
        status_code = 404
    else:
        status_code = 400
    logger.debug("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=get_host(), port=get_port())
