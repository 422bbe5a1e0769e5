"""Static secret checks for the x-secret-key and x-api-key headers."""

from __future__ import annotations

import hmac


def secrets_match(provided: str | None, expected: str) -> bool:
    """Constant-time comparison. An unset server-side secret never matches."""
    if not expected or provided is None:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())
