from typing import Annotated

from fastapi import Depends, Request
from fastapi.requests import HTTPConnection

from taskboard.core.config import Settings
from taskboard.schemas.user import UserResponse
from taskboard.services.container import ServiceContainer
from taskboard.utils.cookies import get_session_token


def get_services(connection: HTTPConnection) -> ServiceContainer:
    return connection.app.state.services


def get_app_settings(connection: HTTPConnection) -> Settings:
    return connection.app.state.settings


Services = Annotated[ServiceContainer, Depends(get_services)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]


async def get_current_user(
    request: Request,
    services: Services,
    settings: AppSettings,
) -> UserResponse:
    """Resolve the session cookie (or Bearer token) to a user; fails closed."""
    token = get_session_token(request, settings)
    return await services.auth.verify_session(token or "")


CurrentUser = Annotated[UserResponse, Depends(get_current_user)]
