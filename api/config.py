from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SCOPES = " ".join(
    [
        "https://www.googleapis.com/auth/business.manage",
        "https://www.googleapis.com/auth/places",
        "https://www.googleapis.com/auth/business.readonly",
    ]
)


class Settings(BaseSettings):
    # Google OAuth
    google_client_id: str = Field(default="", alias="GOOGLE_CLIENT_ID")
    google_client_secret: str = Field(default="", alias="GOOGLE_CLIENT_SECRET")
    google_redirect_uri: str = Field(default="", alias="GOOGLE_REDIRECT_URI")
    google_oauth_scopes: str = Field(default=DEFAULT_SCOPES, alias="GOOGLE_OAUTH_SCOPES")

    # Raíz del front a la que vuelve el callback (?auth=success / ?auth=error)
    app_base_url: str = Field(default="", alias="APP_BASE_URL")

    # Puede ser una lista separada por comas: "http://localhost:3000,https://midominio.com"
    frontend_origin: str = Field(default="http://localhost:3000", alias="FRONTEND_ORIGIN")

    environment: str = Field(default="development", alias="ENVIRONMENT")
    # None = automático (ver secure_cookies)
    cookie_secure: Optional[bool] = Field(default=None, alias="COOKIE_SECURE")

    http_timeout_seconds: float = Field(default=20.0, alias="HTTP_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    @property
    def scopes(self) -> str:
        return " ".join(self.google_oauth_scopes.split())

    @property
    def base_url(self) -> str:
        return self.app_base_url.strip().rstrip("/")

    @property
    def secure_cookies(self) -> bool:
        if self.cookie_secure is not None:
            return self.cookie_secure
        # en http (dev) el navegador descarta las cookies "secure"
        return self.environment.strip().lower() == "production" and self.base_url.startswith("https://")

    def missing_oauth_config(self) -> list[str]:
        required = {
            "GOOGLE_CLIENT_ID": self.google_client_id,
            "GOOGLE_CLIENT_SECRET": self.google_client_secret,
            "GOOGLE_REDIRECT_URI": self.google_redirect_uri,
        }
        return [name for name, value in required.items() if not (value or "").strip()]

    def allowed_origins(self) -> list[str]:
        """Convierte 'a,b,c' en lista de orígenes sin barras finales."""
        out = []
        for part in self.frontend_origin.split(","):
            o = part.strip().rstrip("/")
            if o:
                out.append(o)
        return out


@lru_cache
def get_settings() -> Settings:
    return Settings()
