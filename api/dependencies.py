"""
FastAPI dependencies (shared across routes).

Services are assembled per request from explicit parts so tests can swap
any of them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.password import CredentialHasher
from auth.tokens import TokenIssuer
from config.settings import config
from core.authenticator import Authenticator
from core.provisioner import AccountProvisioner
from database.models import User
from database.session import async_session_factory
from database.store import DocumentStore

_bearer_scheme = HTTPBearer(auto_error=False)


def get_store() -> DocumentStore:
    return DocumentStore(async_session_factory)


def get_hasher() -> CredentialHasher:
    return CredentialHasher(rounds=config.bcrypt_rounds)


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(nbytes=config.token_bytes)


def get_authenticator(
    store: DocumentStore = Depends(get_store),
    hasher: CredentialHasher = Depends(get_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Authenticator:
    return Authenticator(store, hasher, issuer)


def get_provisioner(
    store: DocumentStore = Depends(get_store),
    hasher: CredentialHasher = Depends(get_hasher),
) -> AccountProvisioner:
    return AccountProvisioner(store, hasher)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    authenticator: Authenticator = Depends(get_authenticator),
) -> User:
    """
    Resolve the ``Authorization: Bearer <token>`` header to its user.
    Raises ``BadCredentialsError`` (401) when missing or unknown.
    """
    token = credentials.credentials if credentials else None
    return await authenticator.authenticate(token)
