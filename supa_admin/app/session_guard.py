from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from datetime import datetime, timezone

# refresh a little before the token actually expires
EXPIRY_LEEWAY_SECONDS = 30


@dataclass(frozen=True)
class SessionValidation:
    valid: bool
    reason: str | None = None


def _decode_claims(token: str) -> dict | None:
    parts = token.split(".")
    if len(parts) != 3:
        return None
    payload_part = parts[1]
    padded = payload_part + ("=" * (-len(payload_part) % 4))
    try:
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("utf-8")).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def validate_token(
    token: str | None,
    *,
    expires_at: int | None = None,
    now_utc: datetime | None = None,
) -> SessionValidation:
    """Check a stored access token without calling the backend.

    ``expires_at`` from the stored session wins over the ``exp`` claim.
    """
    if not token:
        return SessionValidation(valid=False, reason="missing_token")

    claims = _decode_claims(token)
    if claims is None:
        return SessionValidation(valid=False, reason="corrupt_token")

    exp = expires_at if expires_at is not None else claims.get("exp")
    if exp is None:
        return SessionValidation(valid=True)
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return SessionValidation(valid=False, reason="corrupt_token")

    now = now_utc or datetime.now(tz=timezone.utc)
    if float(exp) - EXPIRY_LEEWAY_SECONDS <= now.timestamp():
        return SessionValidation(valid=False, reason="expired_token")
    return SessionValidation(valid=True)
