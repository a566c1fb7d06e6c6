# gbp-reviews-backend/main.py
import time
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import Settings, get_settings
from api.gbp_routes import router as gbp_router
from api.google_oauth import router as auth_router
from gbp.errors import GBPError


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="GBP Reviews Backend", version="1.0.0")
    app.state.settings = settings
    # transport=None -> red real; en tests se inyecta un httpx.MockTransport
    app.state.transport = transport

    # =========================
    # Config: se valida una vez al arrancar
    # =========================
    app.state.missing_config = settings.missing_oauth_config()
    if app.state.missing_config:
        print("⚠️  Faltan variables de configuración:", ", ".join(app.state.missing_config))
    if not settings.base_url:
        print("⚠️  APP_BASE_URL vacío: el callback redirigirá a '/'")

    # ---- CORS: múltiples orígenes (localhost + producción) ----
    allowed_origins = settings.allowed_origins() or ["http://localhost:3000"]
    print(f"🔐 CORS allow_origins = {allowed_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,  # No usar "*" con allow_credentials=True
        allow_credentials=True,
        allow_methods=["GET", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(GBPError)
    async def gbp_error_handler(request: Request, exc: GBPError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request parameters", "details": details},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        print("❌ unhandled error:", repr(exc))
        return JSONResponse(status_code=500, content={"error": "Internal server error", "details": str(exc)})

    @app.get("/health")
    async def health():
        return {"ok": True, "ts": int(time.time())}

    app.include_router(auth_router)
    app.include_router(gbp_router)
    return app


app = create_app()
