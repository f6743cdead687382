"""
FastAPI application factory for the transmitter dashboard.

The lifespan builds the per-device PollingService from DashboardSettings,
stores it (and the settings) on ``app.state`` for route handlers, and starts
polling the default target when ``DASHBOARD_AUTO_START`` is set. On
shutdown the timer is cancelled and awaited.

Request validation errors are answered with ``400 {"ok": false, "error":
...}`` rather than FastAPI's default 422 body.

CHANGELOG:
- 2026-10-19: Register chart router
- 2026-10-19: Initial creation
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from txdash.src.agent import NetSnmpAgent, QueryAgent
from txdash.src.api.charts import router as charts_router
from txdash.src.api.control import router as control_router
from txdash.src.api.health import router as health_router
from txdash.src.config import DashboardSettings
from txdash.src.service import PollingService

logger = logging.getLogger(__name__)


def build_agent(settings: DashboardSettings) -> NetSnmpAgent:
    """Create the Net-SNMP agent described by *settings*."""
    return NetSnmpAgent(
        read_community=settings.snmp_read_community,
        write_community=settings.snmp_write_community,
        get_timeout_s=settings.snmp_get_timeout_s,
        set_timeout_s=settings.snmp_set_timeout_s,
        snmpget_bin=settings.snmpget_bin,
        snmpset_bin=settings.snmpset_bin,
    )


def _format_validation_error(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one human-readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query"))
        msg = str(err.get("msg", "invalid value")).removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def create_app(
    settings: DashboardSettings | None = None,
    agent: QueryAgent | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration; loaded from the environment at startup
            when omitted.
        agent: Query agent; a :class:`NetSnmpAgent` built from the settings
            when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        resolved = settings if settings is not None else DashboardSettings()
        service = PollingService(
            agent=agent if agent is not None else build_agent(resolved),
            config=resolved.default_poll_config(),
        )
        app.state.settings = resolved
        app.state.service = service

        if resolved.dashboard_auto_start:
            logger.info("DASHBOARD_AUTO_START set, polling default target")
            service.start(resolved.default_poll_config())

        logger.info("Transmitter dashboard API ready")
        yield
        await service.close()
        logger.info("Transmitter dashboard API shutting down")

    app = FastAPI(
        title="Transmitter Dashboard API",
        description="SNMP telemetry polling and charts for an FM transmitter.",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"ok": False, "error": _format_validation_error(exc)},
        )

    app.include_router(health_router)
    app.include_router(control_router)
    app.include_router(charts_router)

    return app


app = create_app()
