from typing import AsyncIterator

import httpx
from fastapi import Depends, Request

from gbp.errors import AuthenticationRequired, ConfigurationError
from gbp.tokens import read_access_token
from .config import Settings


NOT_CONNECTED = "Google account not connected. Please connect your Google Business Profile."


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_oauth_config(request: Request) -> Settings:
    # validado una vez al arrancar (create_app)
    missing = request.app.state.missing_config
    if missing:
        raise ConfigurationError(f"Missing configuration: {', '.join(missing)}")
    return request.app.state.settings


async def get_http_client(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        timeout=settings.http_timeout_seconds,
        transport=request.app.state.transport,
    ) as client:
        yield client


def require_access_token(request: Request, **extra) -> str:
    """Token de las cookies o 401; `extra` se añade al cuerpo del error."""
    access_token = read_access_token(request.cookies)
    if not access_token:
        print("[gbp] no valid access token found")
        raise AuthenticationRequired(NOT_CONNECTED, **extra)
    return access_token


def get_access_token(request: Request) -> str:
    return require_access_token(request)
