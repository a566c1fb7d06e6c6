import time
from typing import Mapping, Optional

from fastapi import Response
from pydantic import BaseModel


ACCESS_TOKEN_COOKIE = "google_access_token"
REFRESH_TOKEN_COOKIE = "google_refresh_token"
TOKEN_EXPIRY_COOKIE = "google_token_expiry"

TOKEN_COOKIES = (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, TOKEN_EXPIRY_COOKIE)

DEFAULT_EXPIRES_IN = 3600
REFRESH_TOKEN_MAX_AGE = 30 * 24 * 60 * 60  # 30 días


def now_ms() -> int:
    return int(time.time() * 1000)


class TokenBundle(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: int  # epoch en milisegundos
    expires_in: int = DEFAULT_EXPIRES_IN

    @classmethod
    def from_token_response(cls, tokens: dict, now: Optional[int] = None) -> "TokenBundle":
        """Valida la respuesta de /token y calcula la expiración absoluta."""
        access_token = tokens.get("access_token")
        refresh_token = tokens.get("refresh_token")
        if not access_token or not refresh_token:
            raise ValueError("Missing required tokens")

        expires_in = int(tokens.get("expires_in") or DEFAULT_EXPIRES_IN)
        now = now_ms() if now is None else now
        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=now + expires_in * 1000,
            expires_in=expires_in,
        )

    def set_cookies(self, response: Response, secure: bool) -> None:
        common = {"httponly": True, "secure": secure, "samesite": "lax", "path": "/"}
        response.set_cookie(ACCESS_TOKEN_COOKIE, self.access_token, max_age=self.expires_in, **common)
        response.set_cookie(REFRESH_TOKEN_COOKIE, self.refresh_token, max_age=REFRESH_TOKEN_MAX_AGE, **common)
        response.set_cookie(TOKEN_EXPIRY_COOKIE, str(self.expires_at), max_age=self.expires_in, **common)


def clear_token_cookies(response: Response, secure: bool) -> None:
    for name in TOKEN_COOKIES:
        response.delete_cookie(name, path="/", secure=secure, httponly=True, samesite="lax")


def read_access_token(cookies: Mapping[str, str], now: Optional[int] = None) -> Optional[str]:
    """
    Devuelve el access_token de las cookies solo si sigue vigente.
    Sin cookie de expiración (o ilegible) se considera caducado.
    """
    access_token = (cookies.get(ACCESS_TOKEN_COOKIE) or "").strip()
    if not access_token:
        return None

    try:
        expires_at = int(cookies.get(TOKEN_EXPIRY_COOKIE) or "")
    except ValueError:
        return None

    now = now_ms() if now is None else now
    if now >= expires_at:
        return None
    return access_token


def token_preview(token: Optional[str], size: int = 10) -> str:
    return f"{token[:size]}..." if token else "null"
