# ──────────────────────────────────────────────────────────────────────────────
# File: routes/webhooks_figma.py
# Purpose: Figma webhook intake → GitHub repository_dispatch
#
# Notes:
#  - One handler for every method so the outcome table lives in one place:
#      OPTIONS → 200 {"message": "OK"} (preflight, body never read)
#      non-POST → 405
#      bad x-figma-signature (secret configured) → 401, nothing dispatched
#      FILE_UPDATE → dispatch, 200 {"triggered": true}
#      anything else → 200 {"message": "Event ignored", "event_type": ...}
#  - HMAC is computed over the raw body bytes, before JSON parsing
#  - No FIGMA_WEBHOOK_SECRET → verification skipped (permissive)
#  - Internal failures answer an opaque 500; the real error only goes to logs
# ──────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.requests import ClientDisconnect

from core.logging import log_event
from services.dispatch import trigger_repository_dispatch
from services.errors import SignatureMismatch, error_payload
from services.models import FigmaWebhookEvent
from services.settings import Settings
from services.signature import require_valid_signature

router = APIRouter(prefix="/api", tags=["webhooks"])
log = logging.getLogger("figma_sync.webhooks")

SIGNATURE_HEADER = "x-figma-signature"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_settings(request: Request) -> Settings:
    """Settings built once in create_app(); overridable in tests."""
    return request.app.state.settings


def _json(status: int, content: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status, content=content)


def _parse_event(raw: bytes) -> FigmaWebhookEvent:
    data = json.loads(raw.decode("utf-8") or "{}")
    if not isinstance(data, dict):
        raise ValueError("webhook body must be a JSON object")
    return FigmaWebhookEvent.model_validate(data)


@router.api_route("/figma-webhook", methods=ALL_METHODS)
async def figma_webhook(request: Request, settings: Settings = Depends(get_settings)):
    if request.method == "OPTIONS":
        return _json(200, {"message": "OK"})

    if request.method != "POST":
        return _json(405, error_payload("Method not allowed"))

    try:
        body = await request.body()
    except ClientDisconnect:
        return Response(status_code=204)

    try:
        if settings.webhook_secret:
            try:
                require_valid_signature(body, request.headers.get(SIGNATURE_HEADER), settings.webhook_secret)
            except SignatureMismatch:
                log.error("❌ Invalid webhook signature")
                return _json(401, error_payload("Invalid signature"))

        try:
            event = _parse_event(body)
        except (ValueError, ValidationError) as e:
            log.warning("⚠️  Rejected webhook body: %s", e)
            return _json(400, error_payload("Invalid JSON payload"))

        log_event("webhook_received", {
            "event_type": event.event_type,
            "file_key": event.file_key,
            "file_name": event.file_name,
        })

        if event.is_file_update:
            await trigger_repository_dispatch(event, settings)
            return _json(200, {"message": "Webhook processed successfully", "triggered": True})

        return _json(200, {"message": "Event ignored", "event_type": event.event_type})

    except Exception:
        log.exception("💥 Webhook processing error")
        return _json(500, error_payload("Internal server error"))
