from typing import Any


class GBPError(Exception):
    """Error que la API devuelve como JSON: {"error": message, ...extra}."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, **extra: Any):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra
        super().__init__(message)

    def to_payload(self) -> dict:
        return {"error": self.message, **self.extra}


class ConfigurationError(GBPError):
    status_code = 500


class AuthenticationRequired(GBPError):
    status_code = 401


class InvalidRequest(GBPError):
    status_code = 400


class ProviderError(GBPError):
    """Google respondió con un status no-2xx; se reenvía tal cual."""

    def __init__(self, message: str, status_code: int, **extra: Any):
        super().__init__(message, status_code=status_code, **extra)


class TokenExchangeError(Exception):
    """Falló el intercambio code -> tokens."""
