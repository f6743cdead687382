"""
Polling control endpoints.

- ``GET  /api/defaults``             default target and auto-start flag.
- ``GET  /api/state``                poll state, snapshot, and history.
- ``POST /api/start``                validate a target and (re)start polling.
- ``POST /api/stop``                 stop polling.
- ``POST /api/reset-alarm-latched``  clear the latched alarm, then refresh.

Body validation failures are turned into ``400 {"ok": false, "error": ...}``
by the handler registered in main.py. A failed SNMP write returns 500 with
the same shape; it does not change the polling state.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from txdash.src.agent import AgentError
from txdash.src.api.deps import Service, Settings
from txdash.src.models import PollConfig, StateView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["control"])


class StartRequest(PollConfig):
    """Body of ``POST /api/start``: a polling target plus the reset flag."""

    reset_history: bool = False


@router.get("/defaults")
async def defaults(settings: Settings) -> dict:
    """Return the default polling target from the environment.

    Returns:
        dict: ``{"config": {...}, "auto_start": bool}``.
    """
    return {
        "config": settings.default_poll_config().model_dump(),
        "auto_start": settings.dashboard_auto_start,
    }


@router.get("/state")
async def state(service: Service) -> StateView:
    """Return the current poll state with a copy of the history."""
    return service.get_state()


@router.post("/start")
async def start(body: StartRequest, service: Service) -> dict:
    """Start or restart polling the requested target.

    Returns:
        dict: ``{"ok": true, "config": {...}}``.
    """
    config = PollConfig(**body.model_dump(exclude={"reset_history"}))
    service.start(config, reset_history=body.reset_history)
    return {"ok": True, "config": config.model_dump()}


@router.post("/stop")
async def stop(service: Service) -> dict:
    """Stop polling. Safe to call when already stopped."""
    service.stop()
    return {"ok": True}


@router.post("/reset-alarm-latched", response_model=None)
async def reset_alarm_latched(service: Service) -> dict | JSONResponse:
    """Write 0 to the latched alarm OID and poll once.

    Returns:
        dict: ``{"ok": true, "refreshed": bool}``; ``refreshed`` is False
        when the follow-up poll failed (see ``last_error`` in the state).
    """
    try:
        refreshed = await service.reset_latched_alarm()
    except AgentError as exc:
        logger.warning("Latched alarm reset failed: %s", exc)
        return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})
    return {"ok": True, "refreshed": refreshed}
