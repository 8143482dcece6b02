from __future__ import annotations

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration

from .api.routes import fares as fares_routes
from .contracts import HealthResponse
from .distance import DistanceResolver, build_resolver
from .errors import FareComparisonError
from .health import HealthChecker
from .logging_config import configure_structlog, get_logger
from .metrics import PrometheusMiddleware, get_metrics
from .service import FareComparisonService
from .settings import APP_VERSION, SERVICE_NAME, Settings, settings
from .utils import add_cors, add_request_id_tracing

logger = get_logger(__name__)


def _init_sentry(config: Settings) -> None:
    if not (config.SENTRY_DSN or "").strip():
        return
    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        environment=config.SENTRY_ENVIRONMENT,
        release=config.SENTRY_RELEASE or f"{SERVICE_NAME}@{APP_VERSION}",
        integrations=[FastApiIntegration()],
        traces_sample_rate=config.SENTRY_TRACES_SAMPLE_RATE,
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = first.get("msg", "invalid value")
    return f"Invalid request body: {location}: {detail}" if location else f"Invalid request body: {detail}"


def create_app(
    config: Settings | None = None,
    *,
    resolver: DistanceResolver | None = None,
) -> FastAPI:
    """Build the API. ``resolver`` overrides the strategy chosen from ``config``."""
    config = config or settings
    configure_structlog(json_logs=not config.DEBUG, environment=config.SENTRY_ENVIRONMENT)
    _init_sentry(config)

    resolver = resolver or build_resolver(config)

    app = FastAPI(
        title="Ride Fare Compare API",
        version=APP_VERSION,
        description="Ranked ride-hailing fare estimates with provider deep links",
    )
    app.state.settings = config
    app.state.fare_service = FareComparisonService(resolver)
    app.state.health_checker = HealthChecker(config, resolver)

    add_cors(app, config.allow_origins)
    add_request_id_tracing(app)
    app.add_middleware(PrometheusMiddleware)

    @app.exception_handler(FareComparisonError)
    async def fare_error_handler(request: Request, exc: FareComparisonError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})

    app.include_router(fares_routes.router)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Liveness check; always ok while the process serves requests."""
        return HealthResponse()

    @app.get("/health/details")
    async def health_details(request: Request):
        """Wiring diagnostics (distance strategy, error reporting)."""
        return await request.app.state.health_checker.check_all()

    @app.get("/metrics")
    def metrics():
        """Expose Prometheus metrics."""
        return get_metrics()

    logger.info(
        "app_created",
        strategy=resolver.strategy,
        cors_origins=config.allow_origins,
    )
    return app


app = create_app(settings)
