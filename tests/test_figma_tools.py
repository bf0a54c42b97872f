# File: tests/test_figma_tools.py
# Directory: tests
# Purpose: Webhook admin + access-probe CLIs against a mocked Figma API.

import dataclasses
import json

import httpx
import pytest

from services.errors import ConfigurationError, UpstreamAPIError
from tools import figma_access, figma_webhooks

FIGMA = "https://api.figma.test"


def test_list_uses_first_team(figma_client_factory):
    client, transport = figma_client_factory({
        ("GET", f"{FIGMA}/v1/me"): httpx.Response(200, json={"id": "u1", "teams": [{"id": 77}, {"id": 88}]}),
        ("GET", f"{FIGMA}/v2/teams/77/webhooks"): httpx.Response(200, json={"webhooks": [{"id": "w1"}]}),
    })
    assert figma_webhooks.list_webhooks(client) == [{"id": "w1"}]
    assert [r.url.path for r in transport.requests] == ["/v1/me", "/v2/teams/77/webhooks"]


def test_list_without_teams_is_configuration_error(figma_client_factory):
    client, _ = figma_client_factory({("GET", f"{FIGMA}/v1/me"): httpx.Response(200, json={"teams": []})})
    with pytest.raises(ConfigurationError):
        figma_webhooks.list_webhooks(client)


def test_create_posts_file_webhook(settings, figma_client_factory):
    settings = dataclasses.replace(settings, webhook_secret="pass")
    client, transport = figma_client_factory({
        ("POST", f"{FIGMA}/v2/webhooks"): httpx.Response(200, json={"id": "w9", "status": "ACTIVE"}),
    })
    data = figma_webhooks.create_webhook(client, settings, "https://hooks.example/api/figma-webhook")
    assert data["id"] == "w9"
    sent = json.loads(transport.requests[0].content)
    assert sent == {
        "event_type": "FILE_UPDATE",
        "context": "file",
        "context_id": "FILEKEY",
        "endpoint": "https://hooks.example/api/figma-webhook",
        "passcode": "pass",
    }


def test_create_requires_secret(settings, figma_client_factory):
    client, transport = figma_client_factory({})
    with pytest.raises(ConfigurationError):
        figma_webhooks.create_webhook(client, settings, "https://hooks.example")
    assert transport.requests == []


def test_create_error_includes_body(settings, figma_client_factory):
    settings = dataclasses.replace(settings, webhook_secret="pass")
    client, _ = figma_client_factory({
        ("POST", f"{FIGMA}/v2/webhooks"): httpx.Response(400, text="endpoint unreachable"),
    })
    with pytest.raises(UpstreamAPIError) as exc:
        figma_webhooks.create_webhook(client, settings, "https://hooks.example")
    assert exc.value.status == 400
    assert "endpoint unreachable" in str(exc.value)


def test_cleanup_deletes_every_hook(figma_client_factory):
    client, transport = figma_client_factory({
        ("GET", f"{FIGMA}/v1/me"): httpx.Response(200, json={"teams": [{"id": "t"}]}),
        ("GET", f"{FIGMA}/v2/teams/t/webhooks"): httpx.Response(200, json={"webhooks": [{"id": "a"}, {"id": "b"}]}),
        ("DELETE", f"{FIGMA}/v2/webhooks/a"): httpx.Response(200, json={}),
        ("DELETE", f"{FIGMA}/v2/webhooks/b"): httpx.Response(200, json={}),
    })
    assert figma_webhooks.cleanup_webhooks(client) == 2
    assert [r.method for r in transport.requests].count("DELETE") == 2


def test_webhooks_cli_without_token_exits_1(monkeypatch):
    monkeypatch.setenv("FIGMA_TOKEN", "")
    assert figma_webhooks.main(["list"]) == 1


def test_access_probe_reports_counts(settings, figma_client_factory, variables_payload):
    client, _ = figma_client_factory({
        ("GET", f"{FIGMA}/v1/files/FILEKEY"): httpx.Response(200, json={"name": "DS", "lastModified": "2026-10-01"}),
        ("GET", f"{FIGMA}/v1/files/FILEKEY/variables/local"): httpx.Response(200, json=variables_payload),
    })
    status = figma_access.probe_access(client, settings)
    assert status["file"] is True and status["name"] == "DS"
    assert status["variables"] is True
    assert status["variable_count"] == 5 and status["collection_count"] == 2


def test_access_probe_survives_forbidden_variables(settings, figma_client_factory):
    client, _ = figma_client_factory({
        ("GET", f"{FIGMA}/v1/files/FILEKEY"): httpx.Response(200, json={"name": "DS"}),
        ("GET", f"{FIGMA}/v1/files/FILEKEY/variables/local"): httpx.Response(403, json={"err": "Enterprise only"}),
    })
    status = figma_access.probe_access(client, settings)
    assert status["file"] is True
    assert status["variables"] is False
    assert "403" in status["variables_error"]
