"""
Signed token creation and verification.

Tokens are base64url-encoded JSON payloads signed with HMAC-SHA256::

    <base64url(payload)>.<hex hmac>

The payload carries the caller's claims plus ``iat`` and ``exp`` (unix
seconds).  The secret is passed in by the caller; rotating it
invalidates every token issued under the old one.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Dict, Optional

from auth.exceptions import InvalidToken


def _sign(secret: str, raw: bytes) -> str:
    return hmac.new(secret.encode(), raw, hashlib.sha256).hexdigest()


def issue_token(
    claims: Dict[str, Any],
    secret: str,
    ttl_seconds: int,
    now: Optional[float] = None,
) -> str:
    """Create a signed token embedding ``claims`` and an expiry."""
    issued_at = int(time.time() if now is None else now)
    payload = {**claims, "iat": issued_at, "exp": issued_at + ttl_seconds}
    raw = json.dumps(payload, separators=(",", ":")).encode()
    return urlsafe_b64encode(raw).decode() + "." + _sign(secret, raw)


def verify_token(token: str, secret: str, now: Optional[float] = None) -> Dict[str, Any]:
    """
    Verify ``token`` and return its payload.

    Raises ``InvalidToken`` on a bad signature, a malformed or truncated
    token, or once ``now`` reaches the embedded expiry.
    """
    parts = token.split(".")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidToken("bad format")

    try:
        raw = urlsafe_b64decode(parts[0].encode())
    except (binascii.Error, ValueError) as exc:
        raise InvalidToken("bad encoding") from exc

    if not hmac.compare_digest(parts[1].encode(), _sign(secret, raw).encode()):
        raise InvalidToken("bad signature")

    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise InvalidToken("bad payload") from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("exp"), int):
        raise InvalidToken("bad payload")

    current = time.time() if now is None else now
    if current >= payload["exp"]:
        raise InvalidToken("token expired")
    return payload
