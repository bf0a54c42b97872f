"""
Render configured Figma frames to PNG and store them under public/images.

One batch call to the images endpoint resolves every node id to a CDN URL;
each URL is then downloaded on its own, so one bad image never costs the rest
of the run. File names are derived from the node id with ``:`` replaced by
``-`` because colons are unsafe in file names and URL paths.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from services.errors import UpstreamAPIError, UpstreamTimeout
from services.figma_client import FigmaClient
from services.settings import Settings

logger = logging.getLogger("figma_sync.screenshots")


@dataclass(frozen=True)
class ScreenshotRecord:
    node_id: str
    safe_node_id: str
    filename: str
    url: str


@dataclass
class ScreenshotResult:
    records: List[ScreenshotRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def safe_node_id(node_id: str) -> str:
    return node_id.replace(":", "-")


def screenshot_filename(node_id: str) -> str:
    return f"figma-{safe_node_id(node_id)}.png"


def fetch_screenshots(client: FigmaClient, settings: Settings) -> ScreenshotResult:
    logger.info("📸 Fetching screenshots...")
    result = ScreenshotResult()

    node_ids = list(settings.figma_node_ids)
    if not node_ids:
        logger.warning("⚠️  No node IDs specified. Set FIGMA_NODE_IDS with comma-separated node IDs")
        return result

    try:
        images = client.get_image_urls(settings.figma_file_key, node_ids, fmt="png", scale=2)
    except (UpstreamAPIError, UpstreamTimeout, ValueError) as e:
        logger.error("❌ Failed to fetch screenshots: %s", e)
        result.errors.append(f"batch: {e}")
        return result

    settings.images_dir.mkdir(parents=True, exist_ok=True)
    for node_id, image_url in images.items():
        if not image_url:
            logger.warning("⚠️  Figma could not render node %s; skipped", node_id)
            continue

        filename = screenshot_filename(node_id)
        try:
            content = client.download(image_url)
        except (UpstreamAPIError, UpstreamTimeout) as e:
            logger.error("❌ Failed to download screenshot for node %s: %s", node_id, e)
            result.errors.append(f"{node_id}: {e}")
            continue

        (settings.images_dir / filename).write_bytes(content)
        logger.info("✅ Downloaded screenshot for node %s as %s", node_id, filename)
        result.records.append(ScreenshotRecord(
            node_id=node_id,
            safe_node_id=safe_node_id(node_id),
            filename=filename,
            url=settings.public_image_url(filename),
        ))

    logger.info("✅ Screenshots updated (%d downloaded, %d failed)", len(result.records), len(result.errors))
    return result
