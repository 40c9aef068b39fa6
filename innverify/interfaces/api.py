"""
interfaces/api.py
──────────────────────────────────────────────────────────────────────────────
FastAPI delivery layer for the Mini App backend.

Run:
  uvicorn innverify.interfaces.api:app --port 3000
  innverify-api                       # console script, uses API_HOST/API_PORT

Routes:
  POST /api/fns/verify-inn   {"inn": "..."} → VerificationResult
  GET  /api/hello            smoke test
  GET  /api/health           provider + cache counters

Status mapping for /api/fns/verify-inn:
  200  status=success | status=warning (company present)
  404  status=error   (organization not found, cached like any result)
  400  {"message"}    missing / malformed inn or body
  502  {"message", "details"}  registry transport failure (never cached)
  500  {"message", "details"}  anything else

The endpoint is a plain ``def`` so FastAPI runs it on its worker thread
pool; the blocking registry call never stalls the event loop.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from innverify import __version__
from innverify.config import messages
from innverify.config.settings import get_settings
from innverify.domain.exceptions import InnVerifyError, InvalidFormat, TransportError
from innverify.domain.models import VerificationStatus, VerifyInnRequest
from innverify.services.container import get_service
from innverify.services.verifier import VerificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["verification"])


# ── Routes ─────────────────────────────────────────────────────────────────

@router.post(
    "/fns/verify-inn",
    responses={
        400: {"description": "Missing or malformed INN"},
        404: {"description": "Organization not found"},
        502: {"description": "Registry lookup failed"},
    },
)
def verify_inn(
    payload: VerifyInnRequest,
    service: VerificationService = Depends(get_service),
) -> JSONResponse:
    """Verify a business INN against the company registry."""
    result = service.verify(payload.inn)
    code = (
        status.HTTP_404_NOT_FOUND
        if result.status == VerificationStatus.ERROR
        else status.HTTP_200_OK
    )
    return JSONResponse(status_code=code, content=result.to_dict())


@router.get("/hello")
def hello() -> dict[str, str]:
    return {"message": messages.HELLO}


@router.get("/health")
def health(service: VerificationService = Depends(get_service)) -> dict[str, Any]:
    """Report the configured provider and cache counters."""
    cache = service.cache
    cache_info: dict[str, Any] = {
        "size": len(cache),
        "capacity": cache.capacity,
        "ttl_seconds": cache.ttl,
    }
    stats = getattr(cache, "stats", None)
    if callable(stats):
        snapshot = stats()
        cache_info["hits"] = snapshot.hits
        cache_info["misses"] = snapshot.misses
    return {
        "status": "ok",
        "version": __version__,
        "provider": service.registry.provider_name,
        "cache": cache_info,
    }


# ── Exception handlers ─────────────────────────────────────────────────────

def _error_body(message: str, details: str | None = None) -> dict[str, str]:
    body = {"message": message}
    if details:
        body["details"] = details
    return body


async def _invalid_format_handler(request: Request, exc: InvalidFormat) -> JSONResponse:
    logger.info("rejected INN %r: %s", exc.raw, exc.message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(exc.message))


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("rejected request body: %s", exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(messages.BODY_INVALID),
    )


async def _transport_error_handler(request: Request, exc: TransportError) -> JSONResponse:
    details = exc.details
    if exc.status_code is not None:
        prefix = f"upstream HTTP {exc.status_code}"
        details = f"{prefix}: {details}" if details else prefix
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=_error_body(exc.message, details),
    )


async def _app_error_handler(request: Request, exc: InnVerifyError) -> JSONResponse:
    logger.error("application error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(messages.INTERNAL_ERROR, str(exc)),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(messages.INTERNAL_ERROR, str(exc)),
    )


# ── Application factory ────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle handler."""
    settings = get_settings()
    logger.info(
        "innverify API v%s starting | provider=%s cache_capacity=%d cache_ttl=%.0fs",
        __version__,
        settings.registry_provider,
        settings.cache_capacity,
        settings.cache_ttl_seconds,
    )
    yield
    logger.info("innverify API shutdown")


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="innverify API",
        description="INN verification proxy with a TTL cache in front of the company registry",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(router)

    app.add_exception_handler(InvalidFormat, _invalid_format_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(TransportError, _transport_error_handler)
    app.add_exception_handler(InnVerifyError, _app_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    return app


app = create_app()


def main() -> None:
    """Entry point for the innverify-api console script."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
