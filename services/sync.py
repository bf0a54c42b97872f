# File: sync.py
# Directory: services
# Purpose: Sequence one Figma → docs run: tokens, screenshots, MDX rewrites.
#
# Upstream:
#   - ENV (via Settings): FIGMA_TOKEN, FIGMA_FILE_KEY, FIGMA_NODE_IDS, GITHUB_REPOSITORY
#   - Imports: services.figma_client, services.tokens, services.screenshots,
#              services.docs_updater
#
# Downstream:
#   - tools.figma_sync (CLI, run by the figma-update GitHub workflow)
#
# Contents:
#   - SyncReport
#   - ensure_output_dirs()
#   - run_sync()

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.logging import log_event
from services.docs_updater import update_documentation
from services.figma_client import FigmaClient
from services.screenshots import fetch_screenshots
from services.settings import Settings
from services.tokens import fetch_design_tokens

logger = logging.getLogger("figma_sync.sync")


@dataclass
class SyncReport:
    tokens_written: bool = False
    token_count: int = 0
    unclassified: int = 0
    screenshots: int = 0
    errors: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "tokens_written": self.tokens_written,
            "token_count": self.token_count,
            "unclassified": self.unclassified,
            "screenshots": self.screenshots,
            "errors": list(self.errors),
        }


def ensure_output_dirs(settings: Settings) -> None:
    for p in (settings.tokens_data_dir, settings.images_dir, settings.components_dir):
        p.mkdir(parents=True, exist_ok=True)


def run_sync(settings: Settings, *, client: Optional[FigmaClient] = None) -> SyncReport:
    """
    One full run. Fetch failures degrade to None/empty; anything else raises.

    Raises ConfigurationError before any network call when Figma is not configured.
    """
    settings.require("figma_token", "figma_file_key")
    logger.info("🎨 Starting Figma sync (file=%s)", settings.figma_file_key)

    ensure_output_dirs(settings)
    report = SyncReport()

    owned = client is None
    client = client or FigmaClient.from_settings(settings)
    try:
        tokens = fetch_design_tokens(client, settings)
        if tokens is None:
            report.errors.append("design tokens: fetch failed")
        else:
            report.tokens_written = True
            report.token_count = tokens.token_count
            report.unclassified = tokens.unclassified

        shots = fetch_screenshots(client, settings)
        report.screenshots = len(shots.records)
        report.errors.extend(f"screenshot {e}" for e in shots.errors)

        update_documentation(tokens, shots.records, settings)
    finally:
        if owned:
            client.close()

    log_event("sync_finished", report.as_dict())
    logger.info("🎉 Figma sync completed")
    return report
