# ─────────────────────────────────────────────────────────────────────────────
# File: settings.py
# Directory: services
# Purpose: Build the run configuration once from the environment (+ .env) and
#          hand it to every component explicitly.
#
# Upstream:
#   - ENV: FIGMA_TOKEN, FIGMA_FILE_KEY, FIGMA_NODE_IDS, FIGMA_WEBHOOK_SECRET,
#          GITHUB_TOKEN, GITHUB_REPOSITORY, GITHUB_BRANCH, DOCS_ROOT,
#          HTTP_TIMEOUT_S, REQUEST_TIMEOUT_S, FIGMA_API_BASE, GITHUB_API_BASE
#   - Imports: dotenv, os, pathlib
#
# Downstream:
#   - main, routes.webhooks_figma, services.*, tools.*
#
# Contents:
#   - Settings
#   - load_settings()
# ─────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from services.errors import ConfigurationError

FIGMA_API = "https://api.figma.com"
GITHUB_API = "https://api.github.com"

_NUM_RE = re.compile(r"^\s*([0-9]+(?:\.[0-9]+)?)\s*$")

# Settings attribute -> environment variable, used in error messages
ENV_NAMES = {
    "figma_token": "FIGMA_TOKEN",
    "figma_file_key": "FIGMA_FILE_KEY",
    "figma_node_ids": "FIGMA_NODE_IDS",
    "webhook_secret": "FIGMA_WEBHOOK_SECRET",
    "github_token": "GITHUB_TOKEN",
    "github_repository": "GITHUB_REPOSITORY",
}


@dataclass(frozen=True)
class Settings:
    figma_token: str = ""
    figma_file_key: str = ""
    figma_node_ids: Tuple[str, ...] = ()
    webhook_secret: str = ""
    github_token: str = ""
    github_repository: str = ""
    github_branch: str = "main"
    docs_root: Path = field(default_factory=Path.cwd)
    http_timeout_s: float = 30.0
    request_timeout_s: float = 35.0
    figma_api_base: str = FIGMA_API
    github_api_base: str = GITHUB_API

    # ── Output layout (relative to docs_root) ──────────────────────────────
    @property
    def tokens_data_dir(self) -> Path:
        return self.docs_root / "tokens" / "_data"

    @property
    def tokens_json_path(self) -> Path:
        return self.tokens_data_dir / "tokens.json"

    @property
    def tokens_dir(self) -> Path:
        return self.docs_root / "tokens"

    @property
    def images_dir(self) -> Path:
        return self.docs_root / "public" / "images"

    @property
    def components_dir(self) -> Path:
        return self.docs_root / "components"

    @property
    def introduction_path(self) -> Path:
        return self.docs_root / "introduction.mdx"

    def public_image_url(self, filename: str) -> str:
        """Raw-content URL of a downloaded image once the run is committed."""
        if not self.github_repository:
            return f"/images/{filename}"
        return (
            f"https://raw.githubusercontent.com/{self.github_repository}/"
            f"{self.github_branch}/public/images/{filename}"
        )

    def repo_owner_and_name(self) -> Tuple[str, str]:
        owner, sep, repo = self.github_repository.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ConfigurationError(
                f"GITHUB_REPOSITORY must look like 'owner/repo' (got {self.github_repository!r})"
            )
        return owner, repo

    def require(self, *names: str) -> None:
        """Raise ConfigurationError listing every missing field in ``names``."""
        missing = [ENV_NAMES.get(n, n.upper()) for n in names if not getattr(self, n)]
        if missing:
            raise ConfigurationError(f"Missing required env var(s): {', '.join(missing)}")


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    v = env.get(name)
    if not v:
        return float(default)
    m = _NUM_RE.match(v)
    return float(m.group(1)) if m else float(default)


def _split_ids(raw: Optional[str]) -> Tuple[str, ...]:
    return tuple(s.strip() for s in (raw or "").split(",") if s.strip())


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    *,
    dotenv_path: Optional[Path] = None,
) -> Settings:
    """
    Build Settings from ``environ`` (defaults to os.environ after loading .env).

    Passing an explicit mapping skips .env loading entirely.
    """
    if environ is None:
        load_dotenv(dotenv_path=dotenv_path)
        environ = os.environ
    env = environ

    docs_root = env.get("DOCS_ROOT")
    return Settings(
        figma_token=(env.get("FIGMA_TOKEN") or "").strip(),
        figma_file_key=(env.get("FIGMA_FILE_KEY") or "").strip(),
        figma_node_ids=_split_ids(env.get("FIGMA_NODE_IDS")),
        webhook_secret=env.get("FIGMA_WEBHOOK_SECRET") or "",
        github_token=(env.get("GITHUB_TOKEN") or "").strip(),
        github_repository=(env.get("GITHUB_REPOSITORY") or "").strip(),
        github_branch=(env.get("GITHUB_BRANCH") or "main").strip(),
        docs_root=Path(docs_root).resolve() if docs_root else Path.cwd(),
        http_timeout_s=_get_float(env, "HTTP_TIMEOUT_S", 30.0),
        request_timeout_s=_get_float(env, "REQUEST_TIMEOUT_S", 35.0),
        figma_api_base=(env.get("FIGMA_API_BASE") or FIGMA_API).rstrip("/"),
        github_api_base=(env.get("GITHUB_API_BASE") or GITHUB_API).rstrip("/"),
    )

