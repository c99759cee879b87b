import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import sentry_sdk

from aurascan.ai.types import ScoringProvider
from aurascan.api.assessment import router as assessment_router
from aurascan.api.config import router as config_router
from aurascan.api.health import router as health_router
from aurascan.core.assessment_store import AssessmentStore, build_store
from aurascan.core.config import settings
from aurascan.core.lifespan import lifespan
from aurascan.core.rate_limit import limiter

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger(__name__)


def _message_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    _ = request
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _message_response(exc.status_code, message, getattr(exc, "headers", None))


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    _ = request
    errors = exc.errors()
    if not errors:
        return _message_response(status.HTTP_400_BAD_REQUEST, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg") or "Invalid request")
    return _message_response(status.HTTP_400_BAD_REQUEST, f"{field}: {message}" if field else message)


async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    _ = request
    logger.info("rate_limit_exceeded limit=%s", exc.detail)
    return _message_response(status.HTTP_429_TOO_MANY_REQUESTS, "Too many requests. Please wait and try again.")


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error path=%s: %s", request.url.path, exc)
    return _message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to process request")


def create_app(
    store: AssessmentStore | None = None,
    provider: ScoringProvider | None = None,
) -> FastAPI:
    app = FastAPI(title="AURASCAN Assessment API", version="0.1.0", lifespan=lifespan)

    # The store lives for the whole process; the provider is built on first use.
    app.state.store = store or build_store(settings.assessment_store, settings.assessment_db_path)
    app.state.scoring_provider = provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allowed_origins),
        allow_origin_regex=(settings.cors_allow_origin_regex or "").strip() or None,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(config_router, prefix="/api", tags=["Config"])
    app.include_router(assessment_router, prefix="/api", tags=["Assessment"])
    return app


app = create_app()
