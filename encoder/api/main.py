"""FastAPI application for the swap router encoder.

Note: Rate limiting is not implemented at the application level.
It is handled at the infrastructure layer (reverse proxy / load balancer).
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from encoder import __version__
from encoder.api.endpoints import SUPPORTED_CHAINS, router
from encoder.config import EncoderSettings

# Configuration from environment variables with defaults
SETTINGS = EncoderSettings.from_env()

# Maximum request body size (10 MB)
MAX_REQUEST_SIZE = 10 * 1024 * 1024

app = FastAPI(
    title="Swap Router Encoder",
    description="Encodes swap solutions into router call data",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(RequestValidationError)
async def invalid_request(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed solutions are invalid input (400), not 422."""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")} for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"kind": "invalid_input", "detail": errors, "retryable": False},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "supported_chains": sorted(SUPPORTED_CHAINS)}


def run() -> None:
    """Run the encoder API server.

    Configuration via environment variables:
    - ENCODER_HOST: Host to bind to (default: 0.0.0.0)
    - ENCODER_PORT: Port to bind to (default: 8000)
    - ENCODER_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "encoder.api.main:app",
        host=SETTINGS.host,
        port=SETTINGS.port,
        reload=SETTINGS.debug,
    )


if __name__ == "__main__":
    run()
