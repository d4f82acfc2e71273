"""Request signatures — HMAC-SHA256 over the canonical parameter set."""

from __future__ import annotations

import hashlib
import hmac
import os
from collections.abc import Mapping
from typing import Any

_ENV_SIGN_SECRET = "USERHUB_SIGN_SECRET"


def _get_secret() -> str | None:
    """Read the shared signing secret from the environment (None if unset)."""
    return os.environ.get(_ENV_SIGN_SECRET) or None


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def canonicalize(fields: Mapping[str, Any]) -> str:
    """Render *fields* as ``k1=v1&k2=v2`` sorted by key.

    ``None`` values and the ``sign`` field itself are skipped.
    """
    pairs = sorted(
        (key, _render(val))
        for key, val in fields.items()
        if val is not None and key != "sign"
    )
    return "&".join(f"{key}={val}" for key, val in pairs)


class SignVerifier:
    """Computes and checks request signatures.

    The secret is looked up on every call unless one is given explicitly,
    so rotating ``USERHUB_SIGN_SECRET`` needs no restart of the verifier.
    """

    def __init__(self, secret: str | None = None) -> None:
        self._secret = secret

    def _key(self) -> str | None:
        return self._secret if self._secret is not None else _get_secret()

    def sign(self, fields: Mapping[str, Any]) -> str:
        """Return the lowercase hex signature for *fields*.

        Raises ``RuntimeError`` when no secret is configured.
        """
        key = self._key()
        if not key:
            raise RuntimeError(f"{_ENV_SIGN_SECRET} environment variable is required")
        payload = canonicalize(fields)
        return hmac.new(key.encode(), payload.encode(), hashlib.sha256).hexdigest()

    def verify(self, fields: Mapping[str, Any], signature: str) -> bool:
        """Constant-time comparison of *signature* with the recomputed one.

        Without a configured secret no signature can be valid.
        """
        if not self._key():
            return False
        expected = self.sign(fields)
        return hmac.compare_digest(signature.strip().lower(), expected)
