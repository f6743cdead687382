"""
FastAPI dependency injection providers.

The polling service and settings are created once in the application
lifespan and stored on ``app.state``; these helpers hand them to routes.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from typing import Annotated

from fastapi import Depends, Request

from txdash.src.config import DashboardSettings
from txdash.src.service import PollingService


def get_service(request: Request) -> PollingService:
    """Return the application's PollingService."""
    return request.app.state.service


def get_settings(request: Request) -> DashboardSettings:
    """Return the application's DashboardSettings."""
    return request.app.state.settings


# Usage in route handlers:
#   async def my_route(service: Service):
#       service.stop()
Service = Annotated[PollingService, Depends(get_service)]
Settings = Annotated[DashboardSettings, Depends(get_settings)]
