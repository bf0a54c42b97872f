"""HMAC-SHA256 verification for Figma webhook bodies (``x-figma-signature``)."""
from __future__ import annotations

import hashlib
import hmac
from typing import Optional, Union

from services.errors import SignatureMismatch


def compute_signature(body: Union[bytes, str], secret: str) -> str:
    """Lowercase hex HMAC-SHA256 of ``body`` keyed with ``secret``."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(body: Union[bytes, str], signature: Optional[str], secret: str) -> bool:
    """
    True when ``signature`` equals the HMAC of the raw body.

    Operates on the exact bytes received, before any JSON parsing. An empty
    secret is not a bypass; callers decide whether to verify at all.
    """
    if not signature:
        return False
    expected = compute_signature(body, secret)
    supplied = signature.strip().lower().encode("utf-8")
    return hmac.compare_digest(expected.encode("ascii"), supplied)


def require_valid_signature(body: bytes, signature: Optional[str], secret: str) -> None:
    """Raise SignatureMismatch unless ``signature`` matches ``body``."""
    if not verify_signature(body, signature, secret):
        raise SignatureMismatch("x-figma-signature does not match request body")
