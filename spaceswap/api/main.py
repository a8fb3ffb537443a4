"""FastAPI application for the SpaceSwap exchange.

Note: the exchange is an in-process ledger. Each call is applied under the
exchange lock and either commits in full or rolls back.

The API is unauthenticated and meant for devnet use only. Every request
names its own `sender`, so any client can act as any account, the owner
included. Run it behind a trusted boundary and keep the faucet disabled
(SPACESWAP_FAUCET_ENABLED, off by default) anywhere value matters.
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from spaceswap import __version__
from spaceswap.api.endpoints import router
from spaceswap.config import ApiSettings
from spaceswap.errors import AMMError, UnauthorizedCaller
from spaceswap.log_config import configure_logging
from spaceswap.models.responses import ErrorResponse
from spaceswap.safe_int import SafeIntError

SETTINGS = ApiSettings()

configure_logging(debug=SETTINGS.debug)

app = FastAPI(
    title="SpaceSwap",
    description="Constant-product SPC/ETH exchange with a tax-aware token",
    version=__version__,
)


def _error_body(exc: Exception) -> dict[str, str]:
    return ErrorResponse(error=type(exc).__name__, detail=str(exc)).model_dump()


@app.exception_handler(AMMError)
async def amm_error_handler(request: Request, exc: AMMError) -> JSONResponse:
    """Map domain errors to 400, or 403 for calls from the wrong caller."""
    status_code = 403 if isinstance(exc, UnauthorizedCaller) else 400
    return JSONResponse(status_code=status_code, content=_error_body(exc))


@app.exception_handler(SafeIntError)
async def safe_int_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    return JSONResponse(status_code=400, content=_error_body(exc))


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the exchange API server.

    Configuration via environment variables:
    - SPACESWAP_HOST: Host to bind to (default: 0.0.0.0)
    - SPACESWAP_PORT: Port to bind to (default: 8000)
    - SPACESWAP_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "spaceswap.api.main:app",
        host=SETTINGS.host,
        port=SETTINGS.port,
        reload=SETTINGS.debug,
    )


if __name__ == "__main__":
    run()
