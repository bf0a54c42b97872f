# ──────────────────────────────────────────────────────────────────────────────
# File: main.py
# Purpose: FastAPI entrypoint for the Figma webhook receiver
#
# Guarantees
#   • Settings are loaded once here and stored on app.state; routes never read
#     os.environ themselves.
#   • Request IDs, access logs and a per-request timeout on every route, so a
#     hung GitHub call cannot hold a webhook delivery open indefinitely.
#   • /livez is always mounted.
#   • ClientDisconnect is not treated as an application error.
#
# Run:
#   uvicorn main:app --host 0.0.0.0 --port 8080
# ──────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

# ── Stdlib --------------------------------------------------------------------
import logging
import time
import uuid
from typing import Optional

# ── Third-party ---------------------------------------------------------------
import anyio
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import ClientDisconnect

# ── Local ---------------------------------------------------------------------
from routes.webhooks_figma import router as figma_webhook_router
from services.settings import Settings, load_settings

logger = logging.getLogger("figma_sync.main")
logging.getLogger("httpx").setLevel(logging.WARNING)


# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ Middlewares                                                              ║
# ╚══════════════════════════════════════════════════════════════════════════╝

class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Attach a correlation ID to each request and echo it in the response headers.

    Header: X-Corr-Id (in/out)
    """
    async def dispatch(self, request: Request, call_next):
        cid = request.headers.get("x-corr-id") or f"{uuid.uuid4().hex[:8]}{int(time.time())%1000:03d}"
        request.state.corr_id = cid
        response = await call_next(request)
        response.headers["x-corr-id"] = cid
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Minimal structured access log. Always logs a line, even on exceptions.

    Fields: method, path, cid, status, dur_ms
    """
    async def dispatch(self, request: Request, call_next):
        t0 = time.perf_counter()
        status = None
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            dur_ms = int((time.perf_counter() - t0) * 1000)
            cid = getattr(getattr(request, "state", None), "corr_id", "-")
            logger.info(
                "req method=%s path=%s cid=%s status=%s dur_ms=%s",
                request.method, request.url.path, cid,
                status if status is not None else "ERR", dur_ms,
            )


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Per-request timeout budget (REQUEST_TIMEOUT_S, default 35s) → 504."""
    def __init__(self, app, timeout_s: float = 35.0):
        super().__init__(app)
        self.timeout_s = timeout_s

    async def dispatch(self, request: Request, call_next):
        response = None
        with anyio.move_on_after(self.timeout_s) as scope:
            response = await call_next(request)
        if scope.cancel_called or response is None:
            logger.error("❌ Request timeout path=%s budget_s=%.1f", request.url.path, self.timeout_s)
            return Response("Request timeout", status_code=504)
        return response


# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ App Factory                                                              ║
# ╚══════════════════════════════════════════════════════════════════════════╝

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="figma-docs-sync webhook")
    app.state.settings = settings

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(TimeoutMiddleware, timeout_s=settings.request_timeout_s)

    @app.get("/livez")
    async def livez():
        return {"ok": True}

    @app.exception_handler(ClientDisconnect)
    async def _client_disconnect_handler(_: Request, __: ClientDisconnect):
        # Client dropped mid-request; keep logs clean.
        return Response(status_code=204)

    app.include_router(figma_webhook_router)

    if not settings.webhook_secret:
        logger.warning("⚠️  FIGMA_WEBHOOK_SECRET not set; webhook signatures will not be verified")
    logger.info("🔌 Router enabled: figma webhook (/api/figma-webhook)")
    return app


# Instantiate the app (used by ASGI server)
app = create_app()
