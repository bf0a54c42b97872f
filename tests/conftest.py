# File: conftest.py
# Directory: tests
# Purpose: Shared test fixtures: explicit Settings rooted in tmp_path, a seeded
#          docs tree, and a FigmaClient wired to an httpx.MockTransport.
#
# Notes:
# - Nothing here reads os.environ; every component gets Settings injected.
# - figma_client_factory(routes): routes maps (method, url) → httpx.Response or callable(request).

from typing import Callable, Dict, List, Tuple, Union

import httpx
import pytest

from services.figma_client import FigmaClient
from services.settings import Settings

FIGMA_API = "https://api.figma.test"

INTRO_MDX = """---
title: "Introduction"
---

# Design System

Last sync: [AUTO-GENERATED]

Tokens are pulled straight from Figma. Last sync: [AUTO-GENERATED]
"""

ALERTS_MDX = """---
title: "Alerts"
---

# Alerts

<Warning>
  Screenshots have not been synced from Figma yet.
</Warning>

## Component Screenshots

Screenshots will appear here after the first sync.

## Usage

Use alerts sparingly.
"""

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


@pytest.fixture
def docs_root(tmp_path):
    root = tmp_path / "site"
    (root / "components").mkdir(parents=True)
    (root / "introduction.mdx").write_text(INTRO_MDX, encoding="utf-8")
    (root / "components" / "alerts.mdx").write_text(ALERTS_MDX, encoding="utf-8")
    return root


@pytest.fixture
def settings(docs_root):
    return Settings(
        figma_token="figd-test",
        figma_file_key="FILEKEY",
        figma_node_ids=("12:34",),
        webhook_secret="",
        github_token="ghp-test",
        github_repository="acme/design-docs",
        docs_root=docs_root,
        http_timeout_s=5.0,
        figma_api_base=FIGMA_API,
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that also keeps every request it served."""

    def __init__(self, routes: Dict[Tuple[str, str], Route]):
        self.requests: List[httpx.Request] = []
        self.routes = routes
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, f"{request.url.scheme}://{request.url.host}{request.url.path}")
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"err": f"no route for {key}"})
        return route(request) if callable(route) else route


@pytest.fixture
def figma_client_factory():
    made: List[FigmaClient] = []

    def _make(routes: Dict[Tuple[str, str], Route]):
        transport = RecordingTransport(routes)
        client = FigmaClient("figd-test", api_base=FIGMA_API, timeout=5.0, transport=transport)
        made.append(client)
        return client, transport

    yield _make
    for c in made:
        c.close()


@pytest.fixture
def variables_payload() -> dict:
    return {
        "status": 200,
        "error": False,
        "meta": {
            "variableCollections": {
                "VC:1": {"id": "VC:1", "name": "Primitives", "defaultModeId": "1:0"},
                "VC:2": {"id": "VC:2", "name": "Typography", "defaultModeId": "2:0"},
            },
            "variables": {
                "V:1": {
                    "id": "V:1", "name": "Primary Color", "variableCollectionId": "VC:1",
                    "valuesByMode": {"1:0": "#0055ff", "1:1": "#000000"},
                },
                "V:2": {
                    "id": "V:2", "name": "Spacing/sm", "variableCollectionId": "VC:1",
                    "valuesByMode": {"1:0": 8},
                },
                "V:3": {
                    "id": "V:3", "name": "Font Family", "variableCollectionId": "VC:1",
                    "valuesByMode": {"1:0": "Inter"},
                },
                "V:4": {
                    "id": "V:4", "name": "Radius/lg", "variableCollectionId": "VC:1",
                    "valuesByMode": {"1:0": 12},
                },
                "V:5": {
                    "id": "V:5", "name": "Heading", "variableCollectionId": "VC:2",
                    "valuesByMode": {"2:0": "Georgia"},
                },
            },
        },
    }
