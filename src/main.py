from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.network import router as network_router
from src.adapters.api.controllers.search import router as search_router
from src.domain.exceptions import (
    DataUnavailable,
    EntityConflict,
    EntityNotFound,
    InvalidNetworkData,
)


def configure_logging() -> None:
    level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging()

app = FastAPI(title="Bus Connection Finder")
app.include_router(search_router)
app.include_router(network_router)

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    DataUnavailable: 503,
    EntityNotFound: 404,
    EntityConflict: 409,
    InvalidNetworkData: 400,
}


@app.exception_handler(DataUnavailable)
@app.exception_handler(EntityNotFound)
@app.exception_handler(EntityConflict)
@app.exception_handler(InvalidNetworkData)
async def transit_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = _STATUS_BY_ERROR.get(type(exc), 400)
    if status_code >= 500:
        logging.getLogger("uvicorn.error").error(
            "Network data unavailable: %s", exc, extra={"path": str(request.url.path)}
        )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Ensure API errors are JSON so the frontend can display them."""

    logging.getLogger("uvicorn.error").exception(
        "Unhandled exception", extra={"path": str(request.url.path)}
    )

    reveal = (os.getenv("TRANSIT_REVEAL_ERRORS") or "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }

    if reveal or isinstance(exc, (FileNotFoundError, RuntimeError, ValueError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
