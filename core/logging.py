# File: logging.py
# Directory: core
# Purpose: Structured JSON event helper for the webhook and sync paths, plus
#          the one-shot logging setup used by the CLIs.
#
# Upstream:
#   - Imports: datetime, json, logging
#   - Callers: routes.webhooks_figma, services.dispatch, services.sync, tools.*
#
# Downstream:
#   - "figma_sync.events" logger (stdout / container logs)
#
# Contents:
#   - log_event(event_type: str, payload: dict)
#   - configure_logging(level: str | None)

import datetime
import json
import logging
import os
from typing import Any, Dict, Optional

_events = logging.getLogger("figma_sync.events")


def _safe(obj: Any) -> Any:
    """
    Ensure object is JSON-serializable.
    If not, fall back to str() wrapped in a dict.
    """
    try:
        json.dumps(obj)
        return obj
    except (TypeError, ValueError):
        return {"_repr": str(obj)}


def log_event(event_type: str, payload: Dict[str, Any]) -> None:
    """
    Emit one structured JSON line on the events logger.
    Example:
      {"timestamp":"2025-08-28T20:11:02.123Z","event":"webhook_received","details":{...}}
    """
    ts = datetime.datetime.now(datetime.timezone.utc).isoformat().replace("+00:00", "Z")
    record = {
        "timestamp": ts,
        "event": event_type,
        "details": _safe(payload),
    }
    _events.info(json.dumps(record, ensure_ascii=False))


def configure_logging(level: Optional[str] = None) -> None:
    """Basic console logging; LOG_LEVEL env wins when no level is given."""
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
