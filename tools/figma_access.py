# ──────────────────────────────────────────────────────────────────────────────
# File: tools/figma_access.py
# Purpose: Probe that FIGMA_TOKEN can read FIGMA_FILE_KEY and its variables
# Usage:
#   python -m tools.figma_access
# Exit codes: 0 both probes ok, 1 otherwise
# ──────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, List, Optional

from core.logging import configure_logging
from services.errors import ConfigurationError, UpstreamAPIError, UpstreamTimeout
from services.figma_client import FigmaClient
from services.settings import Settings, load_settings

logger = logging.getLogger("figma_sync.access")


def probe_access(client: FigmaClient, settings: Settings) -> Dict[str, Any]:
    """Return a status snapshot; never raises for upstream failures."""
    status: Dict[str, Any] = {"file": False, "variables": False}
    try:
        f = client.get_file(settings.figma_file_key)
        status.update(file=True, name=f.get("name"), last_modified=f.get("lastModified"))
        logger.info("✅ File access: %s (last modified %s)", f.get("name"), f.get("lastModified"))
    except (UpstreamAPIError, UpstreamTimeout) as e:
        status["file_error"] = str(e)
        logger.error("❌ File access failed: %s", e)

    try:
        meta = client.get_local_variables(settings.figma_file_key).get("meta") or {}
        status.update(
            variables=True,
            variable_count=len(meta.get("variables") or {}),
            collection_count=len(meta.get("variableCollections") or {}),
        )
        logger.info(
            "✅ Variables access: %d variables in %d collections",
            status["variable_count"], status["collection_count"],
        )
    except (UpstreamAPIError, UpstreamTimeout) as e:
        status["variables_error"] = str(e)
        logger.error("❌ Variables access failed: %s", e)
    return status


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check Figma file and Variables API access.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else None)
    settings = load_settings()
    try:
        settings.require("figma_token", "figma_file_key")
    except ConfigurationError as e:
        logger.error("❌ %s", e)
        return 1
    logger.info("🔍 Testing Figma access for file %s", settings.figma_file_key)
    with FigmaClient.from_settings(settings) as client:
        status = probe_access(client, settings)
    return 0 if status["file"] and status["variables"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
