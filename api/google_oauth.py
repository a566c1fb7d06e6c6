from typing import Optional
from urllib.parse import quote

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from gbp.client import build_auth_url, exchange_code
from gbp.errors import ConfigurationError, TokenExchangeError
from gbp.tokens import TokenBundle, clear_token_cookies, read_access_token, token_preview
from .config import Settings
from .deps import get_app_settings, get_http_client, require_oauth_config


router = APIRouter(prefix="/api/auth", tags=["auth-google"])


def _app_redirect(settings: Settings, query: str) -> RedirectResponse:
    # sin APP_BASE_URL volvemos a la raíz relativa
    return RedirectResponse(f"{settings.base_url}/?{query}", status_code=302)


def _error_redirect(settings: Settings, message: str) -> RedirectResponse:
    return _app_redirect(settings, "auth=error&message=" + quote(message, safe=""))


@router.get("")
async def start_auth(request: Request):
    """
    Devuelve la URL de consentimiento de Google; el front hace el redirect.
    """
    try:
        settings = require_oauth_config(request)
    except ConfigurationError as e:
        print("[auth] ⚠️ cannot build auth URL:", e.message)
        raise ConfigurationError("Failed to generate authentication URL", details=e.message) from e

    auth_url = build_auth_url(settings.google_client_id, settings.google_redirect_uri, settings.scopes)
    print("[auth] generated auth URL for scopes:", settings.scopes)
    return {"authUrl": auth_url}


@router.get("/callback")
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    error: Optional[str] = None,
    settings: Settings = Depends(get_app_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
):
    print("[auth] callback received - code:", "present" if code else "missing", "error:", error)

    if error:
        print("[auth] OAuth error:", error)
        return _error_redirect(settings, "OAuth failed")

    if not code:
        print("[auth] no authorization code received")
        return _error_redirect(settings, "No authorization code")

    settings = require_oauth_config(request)

    try:
        # 1) code -> tokens
        token_resp = await exchange_code(
            http,
            code=code,
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.google_redirect_uri,
        )
        print("[auth] token response status:", token_resp.status_code)

        if token_resp.status_code != 200:
            print("[auth] token exchange failed:", (token_resp.text or "")[:500])
            raise TokenExchangeError(f"Token exchange failed: {token_resp.status_code}")

        tokens = token_resp.json()
        print("[auth] tokens received:", list(tokens.keys()))

        # 2) validar y calcular expiración
        try:
            bundle = TokenBundle.from_token_response(tokens)
        except ValueError as e:
            raise TokenExchangeError(str(e)) from e

        print("[auth] access token preview:", token_preview(bundle.access_token, 20))
    except Exception as e:
        print("[auth] ❌ error in callback:", repr(e))
        return _error_redirect(settings, str(e) or "Unknown error")

    # 3) guardar en cookies y volver al front
    response = _app_redirect(settings, "auth=success")
    bundle.set_cookies(response, secure=settings.secure_cookies)
    print("[auth] ✅ tokens stored in cookies (secure=%s)" % settings.secure_cookies)
    return response


@router.get("/status")
async def auth_status(request: Request):
    return {"isAuthenticated": read_access_token(request.cookies) is not None}


@router.delete("/status")
async def disconnect(settings: Settings = Depends(get_app_settings)):
    response = JSONResponse({"success": True})
    clear_token_cookies(response, secure=settings.secure_cookies)
    print("[auth] disconnected, token cookies cleared")
    return response
