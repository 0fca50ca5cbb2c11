"""FastAPI application for the pegswap quote service."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pegswap import __version__
from pegswap.amm.errors import CurveMathError, SnapshotValidationError
from pegswap.api.endpoints import router
from pegswap.safe_int import SafeIntError
from pegswap.slippage import InvalidSlippageError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("PEGSWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("PEGSWAP_PORT", "8000"))
DEBUG = os.environ.get("PEGSWAP_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (64 KB)
MAX_REQUEST_SIZE = 64 * 1024

app = FastAPI(
    title="pegswap",
    description="Off-chain Curve StableSwap/CryptoSwap quotes and swap/mint route planning",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(CurveMathError)
@app.exception_handler(SnapshotValidationError)
@app.exception_handler(SafeIntError)
@app.exception_handler(InvalidSlippageError)
async def unprocessable(request: Request, exc: Exception) -> JSONResponse:
    """Report pool math and input failures as 422 with the error message."""
    logger.warning("request_rejected", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the quote API server.

    Configuration via environment variables:
    - PEGSWAP_HOST: Host to bind to (default: 0.0.0.0)
    - PEGSWAP_PORT: Port to bind to (default: 8000)
    - PEGSWAP_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "pegswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
