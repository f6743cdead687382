"""
Health check endpoint.

Provides ``GET /health`` for container HEALTHCHECK and monitoring. It
reports liveness of the HTTP process and whether the poller is running; it
never contacts the transmitter.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from fastapi import APIRouter

from txdash.src.api.deps import Service

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(service: Service) -> dict[str, str | bool]:
    """Return a simple health status.

    Returns:
        dict: ``{"status": "ok", "running": <bool>}``.
    """
    return {"status": "ok", "running": service.running}
