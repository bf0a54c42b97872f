"""
services/figma_client.py
Purpose: Thin blocking client for the Figma REST API (X-Figma-Token auth).

Every call has an explicit timeout. Non-2xx answers raise UpstreamAPIError
(status + reason); transport timeouts raise UpstreamTimeout. Image downloads go
to pre-signed CDN URLs and never carry the Figma token.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import httpx

from services.errors import UpstreamAPIError, UpstreamTimeout
from services.settings import FIGMA_API, Settings


class FigmaClient:
    def __init__(
        self,
        token: str,
        *,
        api_base: str = FIGMA_API,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self._auth = {"X-Figma-Token": token}
        self._http = httpx.Client(timeout=timeout, transport=transport, follow_redirects=True)

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: Optional[httpx.BaseTransport] = None
    ) -> "FigmaClient":
        return cls(
            settings.figma_token,
            api_base=settings.figma_api_base,
            timeout=settings.http_timeout_s,
            transport=transport,
        )

    # ── plumbing ───────────────────────────────────────────────────────────

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "FigmaClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, *, with_body: bool = False, **kwargs: Any) -> httpx.Response:
        url = f"{self.api_base}{path}"
        try:
            r = self._http.request(method, url, headers=self._auth, **kwargs)
        except httpx.TimeoutException as e:
            raise UpstreamTimeout("Figma", url) from e
        except httpx.TransportError as e:
            raise UpstreamAPIError("Figma", 0, f"transport error: {e}") from e
        if not r.is_success:
            detail = r.reason_phrase
            if with_body and r.text:
                detail = f"{detail} - {r.text}"
            raise UpstreamAPIError("Figma", r.status_code, detail)
        return r

    def _get_json(self, path: str, **kwargs: Any) -> Dict[str, Any]:
        return self._request("GET", path, **kwargs).json()

    # ── files / variables / images ─────────────────────────────────────────

    def get_file(self, file_key: str) -> Dict[str, Any]:
        return self._get_json(f"/v1/files/{file_key}", params={"depth": 1})

    def get_local_variables(self, file_key: str) -> Dict[str, Any]:
        return self._get_json(f"/v1/files/{file_key}/variables/local")

    def get_image_urls(
        self, file_key: str, node_ids: Iterable[str], *, fmt: str = "png", scale: int = 2
    ) -> Dict[str, Optional[str]]:
        """Map node id → rendered image URL (None when Figma could not render it)."""
        params = {"ids": ",".join(node_ids), "format": fmt, "scale": scale}
        data = self._get_json(f"/v1/images/{file_key}", params=params)
        return data.get("images") or {}

    def download(self, url: str) -> bytes:
        try:
            r = self._http.get(url)
        except httpx.TimeoutException as e:
            raise UpstreamTimeout("Figma image host", url) from e
        except httpx.TransportError as e:
            raise UpstreamAPIError("Figma image host", 0, f"transport error: {e}") from e
        if not r.is_success:
            raise UpstreamAPIError("Figma image host", r.status_code, r.reason_phrase)
        return r.content

    # ── account / webhooks ─────────────────────────────────────────────────

    def get_me(self) -> Dict[str, Any]:
        return self._get_json("/v1/me")

    def list_team_webhooks(self, team_id: str) -> List[Dict[str, Any]]:
        data = self._get_json(f"/v2/teams/{team_id}/webhooks", with_body=True)
        return data.get("webhooks") or []

    def create_file_webhook(self, file_key: str, endpoint: str, passcode: str) -> Dict[str, Any]:
        body = {
            "event_type": "FILE_UPDATE",
            "context": "file",
            "context_id": file_key,
            "endpoint": endpoint,
            "passcode": passcode,
        }
        return self._request("POST", "/v2/webhooks", json=body, with_body=True).json()

    def delete_webhook(self, webhook_id: str) -> None:
        self._request("DELETE", f"/v2/webhooks/{webhook_id}")
