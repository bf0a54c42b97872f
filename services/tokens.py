# ──────────────────────────────────────────────────────────────────────────────
# File: tokens.py
# Directory: services/
# Purpose : Figma variables → flat design-token document
#           • Fetch /variables/local for the configured file
#           • Classify each variable into colors / spacing / typography
#           • Write tokens/_data/tokens.json (full replace, never merged)
#
# Upstream:
#   - Imports: services.figma_client, services.settings
#
# Downstream:
#   - services.sync, services.docs_updater
#
# Contents:
#   - TokenDocument
#   - classify_variable()
#   - transform_variables_to_tokens()
#   - write_tokens()
#   - fetch_design_tokens()
# ──────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from services.errors import UpstreamAPIError, UpstreamTimeout
from services.figma_client import FigmaClient
from services.settings import Settings

logger = logging.getLogger("figma_sync.tokens")

CATEGORIES = ("colors", "spacing", "typography")

# Category → (name substrings, token type); checked in this order, first match wins
_RULES = (
    ("colors", ("color",), "color"),
    ("spacing", ("spacing",), "dimension"),
    ("typography", ("font", "typography"), "fontFamily"),
)


@dataclass
class TokenDocument:
    colors: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    typography: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    spacing: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    last_sync: str = ""
    unclassified: int = 0

    def category(self, name: str) -> Dict[str, Dict[str, Any]]:
        return getattr(self, name)

    @property
    def token_count(self) -> int:
        return sum(len(self.category(c)) for c in CATEGORIES)

    def to_dict(self) -> Dict[str, Any]:
        """On-disk shape; the unclassified count is reported, not persisted."""
        return {
            "colors": self.colors,
            "typography": self.typography,
            "spacing": self.spacing,
            "$lastSync": self.last_sync,
        }


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def classify_variable(variable_name: str, collection_name: str) -> Optional[tuple]:
    """Return (category, token_type) or None when nothing matches."""
    haystacks = (variable_name.lower(), collection_name.lower())
    for category, needles, token_type in _RULES:
        if any(n in h for n in needles for h in haystacks):
            return category, token_type
    return None


def transform_variables_to_tokens(figma_data: Dict[str, Any]) -> TokenDocument:
    doc = TokenDocument(last_sync=_utc_now_iso())
    meta = figma_data.get("meta") or {}
    collections = meta.get("variableCollections") or {}
    variables = meta.get("variables") or {}

    for collection in collections.values():
        for variable in variables.values():
            if variable.get("variableCollectionId") != collection.get("id"):
                continue
            name = variable.get("name") or ""
            value = (variable.get("valuesByMode") or {}).get(collection.get("defaultModeId"))

            match = classify_variable(name, collection.get("name") or "")
            if match is None:
                doc.unclassified += 1
                continue
            category, token_type = match
            if category == "spacing":
                value = f"{value}px"
            doc.category(category)[name] = {"value": value, "type": token_type}

    if doc.unclassified:
        logger.warning("⚠️  %d Figma variable(s) matched no token category and were skipped", doc.unclassified)
    return doc


def write_tokens(doc: TokenDocument, settings: Settings) -> None:
    settings.tokens_data_dir.mkdir(parents=True, exist_ok=True)
    settings.tokens_json_path.write_text(json.dumps(doc.to_dict(), indent=2), encoding="utf-8")


def fetch_design_tokens(client: FigmaClient, settings: Settings) -> Optional[TokenDocument]:
    """Fetch, transform and persist tokens; None when the Figma call or payload is unusable."""
    logger.info("📦 Fetching design tokens...")
    try:
        data = client.get_local_variables(settings.figma_file_key)
    except (UpstreamAPIError, UpstreamTimeout, ValueError) as e:
        logger.error("❌ Failed to fetch design tokens: %s", e)
        return None

    try:
        doc = transform_variables_to_tokens(data)
    except (AttributeError, TypeError) as e:
        logger.error("❌ Malformed variables payload: %s", e)
        return None

    write_tokens(doc, settings)
    logger.info("✅ Design tokens updated (%d tokens)", doc.token_count)
    return doc
