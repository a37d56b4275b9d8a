from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from taskhost import __version__
from taskhost.api.middleware.error_shaping import (
    RequestIdMiddleware,
    SafeErrorMiddleware,
    install_error_handlers,
)
from taskhost.api.routes import builders as builders_routes
from taskhost.api.routes import projects as projects_routes
from taskhost.core.config import get_settings
from taskhost.core.observability.metrics import inc_named

logging.getLogger("taskhost").setLevel(getattr(logging, get_settings().log_level, logging.INFO))

app = FastAPI(
    title="Task Host API",
    version=__version__,
)

# Starlette reverses add_middleware order: the LAST call = OUTERMOST wrapper.
app.add_middleware(RequestIdMiddleware)
app.add_middleware(SafeErrorMiddleware)

install_error_handlers(app)

system = APIRouter()


@system.get("/health/live")
def live():
    inc_named("health_live")
    return {"status": "ok"}


@system.get("/metrics", include_in_schema=False)
def prometheus_metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.include_router(system)
app.include_router(builders_routes.router)
app.include_router(projects_routes.router)
