# ──────────────────────────────────────────────────────────────────────────────
# File: tools/figma_webhooks.py
# Purpose: Manage the Figma FILE_UPDATE webhook that feeds /api/figma-webhook
# Usage:
#   python -m tools.figma_webhooks list
#   python -m tools.figma_webhooks create https://<host>/api/figma-webhook
#   python -m tools.figma_webhooks delete <webhook-id>
#   python -m tools.figma_webhooks cleanup          # delete every team webhook
# Env:
#   FIGMA_TOKEN (required), FIGMA_FILE_KEY + FIGMA_WEBHOOK_SECRET (create)
# ──────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from core.logging import configure_logging
from services.errors import ConfigurationError, UpstreamAPIError, UpstreamTimeout
from services.figma_client import FigmaClient
from services.settings import Settings, load_settings

logger = logging.getLogger("figma_sync.webhooks_cli")


def first_team_id(client: FigmaClient) -> str:
    me = client.get_me()
    teams = me.get("teams") or []
    if not teams:
        raise ConfigurationError("No teams found for this Figma user")
    return str(teams[0]["id"])


def list_webhooks(client: FigmaClient) -> List[Dict[str, Any]]:
    team_id = first_team_id(client)
    hooks = client.list_team_webhooks(team_id)
    logger.info("📋 %d webhook(s) for team %s", len(hooks), team_id)
    for h in hooks:
        logger.info("   %s  %s  %s  %s", h.get("id"), h.get("event_type"), h.get("status"), h.get("endpoint"))
    return hooks


def create_webhook(client: FigmaClient, settings: Settings, endpoint: str) -> Dict[str, Any]:
    settings.require("figma_file_key", "webhook_secret")
    data = client.create_file_webhook(settings.figma_file_key, endpoint, settings.webhook_secret)
    logger.info("✅ Webhook created: %s", json.dumps(data, indent=2))
    return data


def cleanup_webhooks(client: FigmaClient) -> int:
    deleted = 0
    for hook in list_webhooks(client):
        client.delete_webhook(str(hook["id"]))
        deleted += 1
    logger.info("✅ Deleted %d webhook(s)", deleted)
    return deleted


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Figma webhook setup tool.")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="List existing team webhooks")
    p_create = sub.add_parser("create", help="Create a FILE_UPDATE webhook for FIGMA_FILE_KEY")
    p_create.add_argument("endpoint", help="e.g. https://example.vercel.app/api/figma-webhook")
    p_delete = sub.add_parser("delete", help="Delete one webhook")
    p_delete.add_argument("webhook_id")
    sub.add_parser("cleanup", help="Delete all team webhooks")
    args = parser.parse_args(argv)

    configure_logging()
    settings = load_settings()
    try:
        settings.require("figma_token")
        with FigmaClient.from_settings(settings) as client:
            if args.command == "list":
                list_webhooks(client)
            elif args.command == "create":
                create_webhook(client, settings, args.endpoint)
            elif args.command == "delete":
                client.delete_webhook(args.webhook_id)
                logger.info("✅ Webhook %s deleted", args.webhook_id)
            elif args.command == "cleanup":
                cleanup_webhooks(client)
    except (ConfigurationError, UpstreamAPIError, UpstreamTimeout) as e:
        logger.error("❌ %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
