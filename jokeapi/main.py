"""FastAPI application entry point.

Joke API - random jokes, search, editing and ratings behind a response cache.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jokeapi.errors import JokeApiError, RateLimitedError, ValidationError
from jokeapi.routes import api_router
from jokeapi.schemas import ErrorDetail, ErrorResponse
from jokeapi.settings import Settings, get_settings
from jokeapi.stores.cache import ResponseCache
from jokeapi.stores.jokes import JokeStore, open_store
from jokeapi.stores.rate_limit import IpRateLimiter

logger = logging.getLogger("uvicorn.error")


async def _sweep_cache(cache: ResponseCache, interval: float) -> None:
    """Periodically purge expired entries so stats and memory stay accurate."""
    while True:
        await asyncio.sleep(interval)
        removed = cache.cleanup()
        if removed:
            logger.debug(f"Cache sweep removed {removed} expired entries")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the joke store (unless one was injected) and runs the cache sweep.
    """
    settings: Settings = app.state.settings

    if getattr(app.state, "store", None) is None:
        try:
            app.state.store = await open_store(settings)
            logger.info(f"Joke store ready ({settings.store_backend})")
        except Exception:
            logger.exception("Joke store init failed")
            raise

    sweeper: asyncio.Task | None = None
    if settings.cache_cleanup_interval > 0:
        sweeper = asyncio.create_task(_sweep_cache(app.state.cache, settings.cache_cleanup_interval))

    yield

    # Shutdown
    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    await app.state.store.close()
    app.state.store = None


def create_app(
    settings: Settings | None = None,
    *,
    store: JokeStore | None = None,
    cache: ResponseCache | None = None,
    rate_limiter: IpRateLimiter | None = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Configuration; defaults to environment-backed settings.
        store: Pre-built joke store. When omitted, the lifespan opens one.
        cache: Response cache. One is created from settings when omitted.
        rate_limiter: Per-IP limiter. One is created from settings when
            omitted and ``rate_limit_requests`` is positive.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Jokes with ratings, served through an in-memory response cache",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # One cache and one store per application instance
    app.state.settings = settings
    app.state.cache = cache if cache is not None else ResponseCache(default_ttl=settings.cache_default_ttl)
    app.state.store = store

    if rate_limiter is None and settings.rate_limit_requests > 0:
        rate_limiter = IpRateLimiter(settings.rate_limit_requests, settings.rate_limit_window)
    app.state.rate_limiter = rate_limiter

    if rate_limiter is not None:

        @app.middleware("http")
        async def limit_by_ip(request: Request, call_next):
            if request.url.path == "/health":
                return await call_next(request)

            ip = request.client.host if request.client else "unknown"
            decision = request.app.state.rate_limiter.hit(ip)
            if not decision.allowed:
                logger.info(f"Rate limit exceeded for {ip}")
                exc = RateLimitedError(decision.retry_after)
                return JSONResponse(
                    status_code=exc.status_code,
                    content=ErrorResponse.from_error(exc).model_dump(),
                    headers={
                        "Retry-After": str(exc.detail["retryAfter"]),
                        "X-RateLimit-Limit": str(decision.limit),
                        "X-RateLimit-Remaining": "0",
                    },
                )

            response = await call_next(request)
            response.headers["X-RateLimit-Limit"] = str(decision.limit)
            response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
            return response

    # CORS middleware (added last so it wraps rate-limited responses too)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(JokeApiError)
    async def joke_api_error_handler(request: Request, exc: JokeApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse.from_error(exc).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies and parameters are client errors (400)."""
        error = ErrorResponse(
            error=ErrorDetail(
                code=ValidationError.code,
                message="Invalid request",
                detail=jsonable_encoder(exc.errors()),
            )
        )
        return JSONResponse(status_code=400, content=error.model_dump())

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if settings.debug else "Internal server error",
                    "detail": None,
                }
            },
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "jokeapi.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
