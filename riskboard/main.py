# riskboard/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from riskboard.core import config
from riskboard.core.errors import register_exception_handlers
from riskboard.db.session import engine
from riskboard.middleware.request_logging import RequestLoggingMiddleware
from riskboard.worker.scheduler import make_scheduler

# ---------------------------
# MODELS (registers every table on Base.metadata)
# ---------------------------
from riskboard.models import Base

# ---------------------------
# ROUTERS
# ---------------------------
from riskboard.api import health
from riskboard.api.v1 import locations, hazards, actions, employees, dashboard, notifications

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("riskboard")

# ---------------------------
# CREATE TABLES (dev-only; guard with env)
# ---------------------------
if config.ENABLE_CREATE_ALL:
    Base.metadata.create_all(bind=engine)

# ---------------------------
# APP
# ---------------------------
app = FastAPI(title="Riskboard")

register_exception_handlers(app)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(locations.router, prefix="/api/v1", tags=["locations"])
app.include_router(hazards.router, prefix="/api/v1", tags=["hazards"])
app.include_router(actions.router, prefix="/api/v1", tags=["actions"])
app.include_router(employees.router, prefix="/api/v1", tags=["employees"])
app.include_router(dashboard.router, prefix="/api/v1", tags=["dashboard"])
app.include_router(notifications.router, prefix="/api/v1", tags=["notifications"])
app.include_router(health.router, prefix="/api", tags=["health"])


# ---------------------------
# Scheduler (daily alert sync)
# ---------------------------
@app.on_event("startup")
def _start_scheduler():
    app.state.scheduler = None
    if not config.ENABLE_SCHEDULER:
        return
    try:
        app.state.scheduler = make_scheduler()
        app.state.scheduler.start()
    except Exception:
        # keep the API serving when the scheduler cannot start
        log.exception("scheduler failed to start")
        app.state.scheduler = None


@app.on_event("shutdown")
def _stop_scheduler():
    sched = getattr(app.state, "scheduler", None)
    if sched:
        sched.shutdown(wait=False)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    app.openapi_schema = get_openapi(
        title="Riskboard",
        version="1.0.0",
        description="Fine-Kinney risk register, action deadlines and OHS compliance validity",
        routes=app.routes,
    )
    return app.openapi_schema


app.openapi = custom_openapi
