# ──────────────────────────────────────────────────────────────────────────────
# File: services/__init__.py
# Purpose: Package marker; submodules are imported explicitly by callers.
# ──────────────────────────────────────────────────────────────────────────────
