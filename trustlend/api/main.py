"""FastAPI application factory for the decision engine"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from trustlend.api.dependencies import get_request_id
from trustlend.api.middleware import MetricsMiddleware, RequestIDMiddleware
from trustlend.api.v1 import fraud, governance, scoring, servicing, waterfall
from trustlend.config import settings
from trustlend.infrastructure.observability.logging import log_error, setup_logging

API_PREFIX = "/v1"

ROUTERS = (
    (scoring.router, "scoring"),
    (fraud.router, "fraud"),
    (servicing.router, "servicing"),
    (waterfall.router, "waterfall"),
    (governance.router, "governance"),
)

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """
    Build the engine service.

    Every /v1 route is a stateless decision: the caller supplies all inputs
    and gets back the result plus its decision hash.
    """
    app = FastAPI(
        title="TrustLend Decision Engine",
        description="Scoring, pricing, fraud, servicing, loss waterfall and governance decisions",
        version="0.1.0",
    )

    # Last added runs first: request IDs exist before metrics are recorded
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        request_id = get_request_id(request)
        log_error(request_id, request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "request_id": request_id},
        )

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "parameter_version": settings.parameter_version,
        }

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in ROUTERS:
        app.include_router(router, prefix=API_PREFIX, tags=[tag])

    return app


app = create_app()
