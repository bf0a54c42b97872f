# ──────────────────────────────────────────────────────────────────────────────
# File: tools/figma_sync.py
# Purpose: CLI wrapper for one Figma → docs sync run (used by the CI workflow)
# Usage:
#   python -m tools.figma_sync
#   python -m tools.figma_sync --root ./docs-site --verbose
#   figma-sync --env-file .env.ci
# Env:
#   FIGMA_TOKEN, FIGMA_FILE_KEY (required)
#   FIGMA_NODE_IDS, GITHUB_REPOSITORY, GITHUB_BRANCH, DOCS_ROOT (optional)
# Exit codes: 0 ok, 1 misconfiguration or any uncaught failure
# ──────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path
from typing import List, Optional

from core.logging import configure_logging
from services.errors import ConfigurationError
from services.settings import load_settings
from services.sync import run_sync

logger = logging.getLogger("figma_sync.cli")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Pull Figma tokens/screenshots and regenerate docs.")
    parser.add_argument("--root", default=None, help="Docs root (overrides DOCS_ROOT)")
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: ./.env)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else None)
    try:
        settings = load_settings(dotenv_path=Path(args.env_file) if args.env_file else None)
        if args.root:
            settings = dataclasses.replace(settings, docs_root=Path(args.root).resolve())
        report = run_sync(settings)
    except ConfigurationError as e:
        logger.error("❌ %s", e)
        logger.error("   FIGMA_TOKEN - your Figma API token")
        logger.error("   FIGMA_FILE_KEY - the file key from the Figma URL")
        return 1
    except Exception:
        logger.exception("💥 Sync failed")
        return 1

    if report.errors:
        logger.warning("⚠️  Completed with %d degraded step(s): %s", len(report.errors), report.errors)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
