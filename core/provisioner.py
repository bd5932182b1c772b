"""
Account provisioner: creates a user together with the character, store
and to-do list that belong to it.

Sign-up runs as two phases:

1. *Draft*: the four records are created concurrently and unlinked.
2. *Link*: owners and back-references are set and all four records are
   saved in one transaction, producing a ``ProvisionedAccount``.

The store has no multi-document transaction spanning the concurrent
creations, so any failure after a record was created is compensated by
deleting the records of that attempt.  A compensation that itself fails
is logged with the orphaned ids and the original error is still raised.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Type

from auth.password import CredentialHasher
from config.starter_items import starter_inventory
from database.models import Base, Character, Store, ToDoList, User
from database.store import DocumentStore
from utils.validators import (
    CharacterSeed,
    SignUpCredentials,
    TodoSeed,
    validate_character_seed,
    validate_sign_up_credentials,
    validate_todo_seed,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DraftAccount:
    """Freshly created records that do not reference each other yet."""

    user: User
    character: Character
    store: Store
    todo: ToDoList

    def record_keys(self) -> List[Tuple[Type[Base], uuid.UUID]]:
        return [
            (User, self.user.id),
            (Character, self.character.id),
            (Store, self.store.id),
            (ToDoList, self.todo.id),
        ]


@dataclass(frozen=True)
class ProvisionedAccount:
    """A user whose character, store and to-do list are linked both ways."""

    user: User
    character: Character
    store: Store
    todo: ToDoList

    def __post_init__(self) -> None:
        user_id = self.user.id
        pairs = (
            (self.user.player_character_id, self.character),
            (self.user.player_store_id, self.store),
            (self.user.player_todo_id, self.todo),
        )
        for reference, child in pairs:
            if reference is None or reference != child.id or child.owner_id != user_id:
                raise ValueError(
                    f"{type(child).__name__} {child.id} is not linked to user {user_id}"
                )


class AccountProvisioner:
    def __init__(self, store: DocumentStore, hasher: CredentialHasher):
        self._store = store
        self._hasher = hasher

    async def sign_up(
        self,
        credentials: Any,
        character_seed: Any = None,
        todo_seed: Any = None,
    ) -> ProvisionedAccount:
        creds = validate_sign_up_credentials(credentials).unwrap()
        character = validate_character_seed(character_seed).unwrap()
        todo = validate_todo_seed(todo_seed).unwrap()

        draft = await self.create_drafts(creds, character, todo)
        account = await self.link(draft)
        logger.info("Provisioned account %s (%s)", account.user.id, account.user.email)
        return account

    # ── phase 1: concurrent creation ────────────────────────────────────

    async def create_drafts(
        self,
        creds: SignUpCredentials,
        character: CharacterSeed,
        todo: TodoSeed,
    ) -> DraftAccount:
        results = await asyncio.gather(
            self._create_user(creds),
            self._store.create(Character, **character.fields()),
            self._store.create(Store, inventory=starter_inventory()),
            self._store.create(ToDoList, tasks=list(todo.tasks)),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            created = [(type(r), r.id) for r in results if not isinstance(r, BaseException)]
            logger.warning(
                "Sign-up for %s failed during creation (%d of 4 records created)",
                creds.email,
                len(created),
            )
            await self._discard(created)
            raise failures[0]

        user, character_record, store_record, todo_record = results
        return DraftAccount(
            user=user, character=character_record, store=store_record, todo=todo_record,
        )

    async def _create_user(self, creds: SignUpCredentials) -> User:
        hashed = await asyncio.to_thread(self._hasher.hash, creds.password)
        return await self._store.create(User, email=creds.email, hashed_password=hashed)

    # ── phase 2: linking ────────────────────────────────────────────────

    async def link(self, draft: DraftAccount) -> ProvisionedAccount:
        keys = draft.record_keys()
        user = draft.user
        for child in (draft.character, draft.store, draft.todo):
            child.owner_id = user.id
        user.player_character_id = draft.character.id
        user.player_store_id = draft.store.id
        user.player_todo_id = draft.todo.id

        try:
            await self._store.save_many(draft.character, draft.store, draft.todo, user)
        except Exception:
            logger.warning("Linking account %s failed; discarding drafts", keys[0][1])
            await self._discard(keys)
            raise

        return ProvisionedAccount(
            user=user, character=draft.character, store=draft.store, todo=draft.todo,
        )

    # ── compensation ────────────────────────────────────────────────────

    async def _discard(self, records: List[Tuple[Type[Base], Optional[uuid.UUID]]]) -> None:
        records = [(model, entity_id) for model, entity_id in records if entity_id is not None]
        if not records:
            return
        outcomes = await asyncio.gather(
            *(self._store.delete(model, entity_id) for model, entity_id in records),
            return_exceptions=True,
        )
        for (model, entity_id), outcome in zip(records, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    "Could not remove orphaned %s %s after failed sign-up: %s",
                    model.__name__,
                    entity_id,
                    outcome,
                )
