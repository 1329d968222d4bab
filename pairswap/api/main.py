"""FastAPI application for the pairswap devnet.

Every request runs against one process-wide Chain. Top-level calls serialize
on the chain's lock, so FastAPI's worker threads never interleave two
settlements.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pairswap import __version__
from pairswap.api.endpoints import router
from pairswap.errors import ExchangeError
from pairswap.ledger.errors import LedgerError
from pairswap.safe_int import SafeIntError

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("PAIRSWAP_HOST", "127.0.0.1")
PORT = int(os.environ.get("PAIRSWAP_PORT", "8000"))
DEBUG = os.environ.get("PAIRSWAP_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("PAIRSWAP_LOG_LEVEL", "INFO").upper()

# Maximum request body size (64 KB; payloads are a handful of fields)
MAX_REQUEST_SIZE = 64 * 1024

logger = structlog.get_logger()

app = FastAPI(
    title="pairswap devnet",
    description="Constant-product exchange pairs with a routing registry on a local chain",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(ExchangeError)
@app.exception_handler(LedgerError)
async def settlement_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """A rejected call: the chain has already rolled it back."""
    code = getattr(exc, "code", type(exc).__name__)
    logger.info("call_rejected", path=request.url.path, error=code, detail=str(exc))
    return JSONResponse(status_code=400, content={"error": code, "detail": str(exc)})


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    logger.warning("arithmetic_error", path=request.url.path, error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=400, content={"error": type(exc).__name__, "detail": str(exc)})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def configure_logging(level: str = LOG_LEVEL) -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        ),
    )


def run() -> None:
    """Run the devnet API server.

    Configuration via environment variables:
    - PAIRSWAP_HOST: Host to bind to (default: 127.0.0.1)
    - PAIRSWAP_PORT: Port to bind to (default: 8000)
    - PAIRSWAP_DEBUG: Enable debug/reload mode (default: false)
    - PAIRSWAP_LOG_LEVEL: Minimum log level (default: INFO)
    """
    configure_logging()
    uvicorn.run(
        "pairswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
