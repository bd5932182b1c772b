"""
Opaque bearer tokens.

A token is a random hex string stored on the user record; it stays valid
until it is overwritten by the next sign-in or by sign-out.
"""

from __future__ import annotations

import secrets
from typing import Any

MIN_TOKEN_BYTES = 16


class TokenIssuer:
    def __init__(self, *, nbytes: int = MIN_TOKEN_BYTES):
        if nbytes < MIN_TOKEN_BYTES:
            raise ValueError(f"Tokens need at least {MIN_TOKEN_BYTES} bytes of entropy")
        self.nbytes = nbytes

    def generate(self) -> str:
        return secrets.token_hex(self.nbytes)

    def invalidate(self, user: Any) -> str:
        """Overwrite ``user.token`` with a fresh value.  The caller persists it."""
        user.token = self.generate()
        return user.token
