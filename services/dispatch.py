"""
services/dispatch.py
Purpose: Forward an accepted Figma event to GitHub as a repository_dispatch.

Env (via Settings):
  - GITHUB_TOKEN         token with repo scope (sent as Bearer)
  - GITHUB_REPOSITORY    "owner/repo"

One POST per call, no retry. Missing config is a ConfigurationError; a non-2xx
answer is an UpstreamAPIError with the status and body attached (status 0 when
no response arrived).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from core.logging import log_event
from services.errors import ConfigurationError, UpstreamAPIError, UpstreamTimeout
from services.models import DispatchPayload, FigmaWebhookEvent
from services.settings import Settings

logger = logging.getLogger("figma_sync.dispatch")

UA = {"User-Agent": "figma-docs-sync/1.0"}


def dispatch_url(settings: Settings) -> str:
    owner, repo = settings.repo_owner_and_name()
    return f"{settings.github_api_base}/repos/{owner}/{repo}/dispatches"


def _headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        **UA,
    }


async def trigger_repository_dispatch(
    event: FigmaWebhookEvent,
    settings: Settings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """POST the dispatch payload and return what was sent."""
    if not settings.github_token or not settings.github_repository:
        raise ConfigurationError("Missing GitHub configuration (GITHUB_TOKEN, GITHUB_REPOSITORY)")
    url = dispatch_url(settings)

    body = DispatchPayload.from_event(event).to_json()
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout_s, transport=transport) as x:
            r = await x.post(url, headers=_headers(settings.github_token), json=body)
    except httpx.TimeoutException as e:
        raise UpstreamTimeout("GitHub", url) from e
    except httpx.TransportError as e:
        raise UpstreamAPIError("GitHub", 0, f"transport error: {e}") from e

    if not r.is_success:
        raise UpstreamAPIError("GitHub", r.status_code, r.text)

    log_event("dispatch_sent", {
        "repository": settings.github_repository,
        "file_key": event.file_key,
        "status": r.status_code,
    })
    logger.info("✅ Triggered GitHub Action for Figma update (%s)", settings.github_repository)
    return body
