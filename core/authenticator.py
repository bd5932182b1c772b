"""
Authenticator: sign-in, sign-out, password changes and bearer lookup.

Per user the token moves ``None → t1`` on sign-in and ``t1 → t2`` on
sign-out (a fresh random value nobody holds).  A token stays valid until
it is overwritten; there is no expiry.  Concurrent sign-ins each persist
their own token and the last write wins.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from auth.password import CredentialHasher
from auth.tokens import TokenIssuer
from core.errors import BadCredentialsError, BadParamsError
from database.models import User
from database.store import DocumentStore
from utils.validators import normalize_email, validate_password_change

logger = logging.getLogger(__name__)

USER_RELATIONS = ("player_character", "player_store", "player_todo")


@dataclass(frozen=True)
class SignInResult:
    user: User
    token: str


class Authenticator:
    def __init__(self, store: DocumentStore, hasher: CredentialHasher, issuer: TokenIssuer):
        self._store = store
        self._hasher = hasher
        self._issuer = issuer

    async def sign_in(self, email: Optional[str], password: Optional[str]) -> SignInResult:
        """
        Verify ``email``/``password`` and issue a new token.

        Unknown email, missing input and wrong password all raise the same
        ``BadCredentialsError`` so callers cannot probe for accounts.
        """
        if not isinstance(email, str) or not email.strip() or not isinstance(password, str):
            raise BadCredentialsError()

        user = await self._store.find_one(
            User, populate=USER_RELATIONS, email=normalize_email(email),
        )
        if user is None or not await self._verify(password, user.hashed_password):
            raise BadCredentialsError()

        token = self._issuer.generate()
        user.token = token
        await self._store.save(user)
        logger.info("Sign-in: %s", user.id)
        return SignInResult(user=user, token=token)

    async def change_password(
        self, user: User, old_password: Optional[str], new_password: Optional[str],
    ) -> None:
        """Replace the stored hash; the old hash stays untouched on any failure."""
        change = validate_password_change({"old": old_password, "new": new_password}).unwrap()
        if not await self._verify(change.old, user.hashed_password):
            raise BadParamsError("The old password is incorrect")

        user.hashed_password = await asyncio.to_thread(self._hasher.hash, change.new)
        await self._store.save(user)
        logger.info("Password changed: %s", user.id)

    async def sign_out(self, user: User) -> None:
        self._issuer.invalidate(user)
        await self._store.save(user)
        logger.info("Sign-out: %s", user.id)

    async def authenticate(self, token: Optional[str]) -> User:
        """Resolve a bearer token to its user."""
        if not token:
            raise BadCredentialsError("A valid bearer token is required")
        user = await self._store.find_one(User, token=token)
        if user is None:
            raise BadCredentialsError("A valid bearer token is required")
        return user

    async def _verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self._hasher.verify, password, password_hash)
