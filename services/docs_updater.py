# ──────────────────────────────────────────────────────────────────────────────
# File: docs_updater.py
# Directory: services/
# Purpose : Rewrite the generated MDX fragments from the latest Figma data
#           • introduction.mdx  → "Last sync: [AUTO-GENERATED]" placeholder
#           • tokens/*.mdx      → full overwrite per category (tokens present)
#           • components/*.mdx  → "## Component Screenshots" section swap
#
# Upstream:
#   - Imports: services.tokens, services.screenshots, services.settings
#
# Downstream:
#   - services.sync
#
# Contents:
#   - update_introduction()
#   - render_colors_page() / render_spacing_page() / render_typography_page()
#   - update_token_pages()
#   - classify_component() / group_screenshots()
#   - update_component_page() / update_component_pages()
#   - update_documentation()
# ──────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from services.screenshots import ScreenshotRecord
from services.settings import Settings
from services.tokens import TokenDocument

logger = logging.getLogger("figma_sync.docs")

SYNC_PLACEHOLDER_RE = re.compile(r"Last sync: \[AUTO-GENERATED\]")
SCREENSHOTS_SECTION_RE = re.compile(
    r"^## Component Screenshots[^\n]*$.*?(?=^#{1,2} |\Z)",
    re.MULTILINE | re.DOTALL,
)
WARNING_RE = re.compile(r"<Warning>.*?</Warning>\s*", re.DOTALL)

COMPONENT_GROUPS = ("alerts", "forms", "cards")
# Alert component whose node id carries no "alert" hint
ALERT_NODE_IDS = frozenset({"22123:476643"})
_GROUP_HINTS = (
    ("alerts", ("alert",)),
    ("forms", ("form", "input", "field")),
    ("cards", ("card",)),
)

IMG_STYLE = "border: 1px solid #e2e8f0; border-radius: 8px; margin: 16px 0;"


def _local_timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


# ─── Introduction ─────────────────────────────────────────────────────────

def update_introduction(settings: Settings) -> bool:
    """Stamp every sync placeholder; False when the page does not exist."""
    path = settings.introduction_path
    if not path.exists():
        logger.warning("⚠️  %s not found; skipping last-sync stamp", path.name)
        return False
    content = path.read_text(encoding="utf-8")
    stamped = SYNC_PLACEHOLDER_RE.sub(f"Last sync: {_local_timestamp()}", content)
    path.write_text(stamped, encoding="utf-8")
    return True


# ─── Token pages ──────────────────────────────────────────────────────────

def format_token_value(value: Any) -> str:
    """Readable form of a raw Figma value (RGBA floats become rgba())."""
    if isinstance(value, dict) and {"r", "g", "b"} <= value.keys():
        r, g, b = (round(float(value[k]) * 255) for k in ("r", "g", "b"))
        a = round(float(value.get("a", 1)), 3)
        return f"rgba({r}, {g}, {b}, {a:g})"
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def _page(title: str, description: str, heading: str, entries: List[str]) -> str:
    body = "\n".join(entries)
    return (
        "---\n"
        f'title: "{title}"\n'
        f'description: "{description}"\n'
        "---\n\n"
        f"# {heading}\n\n"
        f"<Note>Last synced: {_local_timestamp()}</Note>\n\n"
        f"{body}\n"
    )


def _entry(name: str, token: Dict[str, Any], extra: str = "") -> str:
    lines = [
        f"## {name}",
        f"- **Value**: `{format_token_value(token.get('value'))}`",
        f"- **Type**: {token.get('type')}",
    ]
    if extra:
        lines.append(extra)
    return "\n".join(lines) + "\n"


def render_colors_page(colors: Dict[str, Dict[str, Any]]) -> str:
    entries = []
    for name, token in colors.items():
        swatch = (
            f'<div style="background-color: {format_token_value(token.get("value"))}; '
            'width: 100px; height: 50px; border: 1px solid #ccc;"></div>'
        )
        entries.append(_entry(name, token, swatch))
    return _page("Colors", "Design system color tokens synced from Figma", "Color Tokens", entries)


def render_spacing_page(spacing: Dict[str, Dict[str, Any]]) -> str:
    entries = [_entry(name, token) for name, token in spacing.items()]
    return _page("Spacing", "Design system spacing tokens synced from Figma", "Spacing Tokens", entries)


def render_typography_page(typography: Dict[str, Dict[str, Any]]) -> str:
    entries = [_entry(name, token) for name, token in typography.items()]
    return _page(
        "Typography", "Design system typography tokens synced from Figma", "Typography Tokens", entries
    )


def update_token_pages(tokens: TokenDocument, settings: Settings) -> List[Path]:
    settings.tokens_dir.mkdir(parents=True, exist_ok=True)
    pages = {
        "colors.mdx": render_colors_page(tokens.colors),
        "spacing.mdx": render_spacing_page(tokens.spacing),
        "typography.mdx": render_typography_page(tokens.typography),
    }
    written = []
    for filename, content in pages.items():
        path = settings.tokens_dir / filename
        path.write_text(content, encoding="utf-8")
        written.append(path)
    logger.info("✅ Token pages regenerated (%s)", ", ".join(p.name for p in written))
    return written


# ─── Component pages ──────────────────────────────────────────────────────

def classify_component(node_id: str) -> str:
    lowered = node_id.lower()
    if node_id in ALERT_NODE_IDS:
        return "alerts"
    for group, hints in _GROUP_HINTS:
        if any(h in lowered for h in hints):
            return group
    return "other"


def group_screenshots(screenshots: Sequence[ScreenshotRecord]) -> Dict[str, List[ScreenshotRecord]]:
    groups: Dict[str, List[ScreenshotRecord]] = {g: [] for g in (*COMPONENT_GROUPS, "other")}
    for shot in screenshots:
        groups[classify_component(shot.node_id)].append(shot)
    return groups


def render_screenshots_section(images: Sequence[ScreenshotRecord]) -> str:
    blocks = [
        f"### {img.safe_node_id}\n\n"
        "<img\n"
        f'  src="{img.url}"\n'
        f'  alt="Component screenshot for {img.node_id}"\n'
        f'  style="{IMG_STYLE}"\n'
        "/>\n"
        for img in images
    ]
    return (
        "## Component Screenshots\n\n"
        "<Note>\n"
        f"  Last updated: {_local_timestamp()}\n"
        "</Note>\n\n"
        + "\n".join(blocks)
    )


def inject_screenshots(content: str, images: Sequence[ScreenshotRecord]) -> str:
    """Swap (or append) the screenshots section and drop Warning callouts."""
    section = render_screenshots_section(images).rstrip("\n")
    match = SCREENSHOTS_SECTION_RE.search(content)
    if match:
        tail = "\n\n" if match.end() < len(content) else "\n"
        content = content[:match.start()] + section + tail + content[match.end():]
    else:
        content = content.rstrip("\n") + "\n\n" + section + "\n"
    return WARNING_RE.sub("", content)


def update_component_page(component_type: str, images: Sequence[ScreenshotRecord], settings: Settings) -> bool:
    path = settings.components_dir / f"{component_type}.mdx"
    if not path.exists():
        logger.warning("⚠️  %s not found; skipping %d screenshot(s)", path, len(images))
        return False
    content = path.read_text(encoding="utf-8")
    path.write_text(inject_screenshots(content, images), encoding="utf-8")
    logger.info("✅ Updated %s page with %d screenshots", component_type, len(images))
    return True


def update_component_pages(screenshots: Sequence[ScreenshotRecord], settings: Settings) -> List[str]:
    logger.info("📝 Updating component pages...")
    updated = []
    for component_type, images in group_screenshots(screenshots).items():
        if component_type == "other" or not images:
            continue
        if update_component_page(component_type, images, settings):
            updated.append(component_type)
    return updated


# ─── Entry point ──────────────────────────────────────────────────────────

def update_documentation(
    tokens: Optional[TokenDocument],
    screenshots: Sequence[ScreenshotRecord],
    settings: Settings,
) -> None:
    """Run the three independent rewrites; each tolerates the others' absence."""
    logger.info("📝 Updating documentation...")
    update_introduction(settings)

    if tokens is not None:
        update_token_pages(tokens, settings)

    if screenshots:
        update_component_pages(screenshots, settings)
    else:
        logger.warning("⚠️  No screenshots to update component pages with")

    logger.info("✅ Documentation updated")
