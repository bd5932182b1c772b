"""
Tests for account provisioning (concurrent creation + linking).
"""

import asyncio
import uuid
from unittest.mock import AsyncMock, patch

import pytest

from core.errors import BadParamsError, StoreError
from core.provisioner import ProvisionedAccount
from database.models import Character, Store, ToDoList, User

CREDENTIALS = {"email": "a@b.com", "password": "p1", "password_confirmation": "p1"}
CHARACTER = {"name": "Zed", "class": "Mage"}


async def _counts(store):
    return {
        model.__name__: await store.count(model)
        for model in (User, Character, Store, ToDoList)
    }


class TestSignUpLinking:
    @pytest.mark.asyncio
    async def test_records_are_linked_both_ways(self, provisioner, store):
        account = await provisioner.sign_up(CREDENTIALS, CHARACTER, {})

        user = await store.find_by_id(User, account.user.id)
        assert user.player_character_id == account.character.id
        assert user.player_store_id == account.store.id
        assert user.player_todo_id == account.todo.id

        for model, entity_id in (
            (Character, user.player_character_id),
            (Store, user.player_store_id),
            (ToDoList, user.player_todo_id),
        ):
            child = await store.find_by_id(model, entity_id)
            assert child.owner_id == user.id

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, provisioner, store, hasher):
        account = await provisioner.sign_up(CREDENTIALS, CHARACTER, {})
        user = await store.find_by_id(User, account.user.id)
        assert user.hashed_password != "p1"
        assert hasher.verify("p1", user.hashed_password)
        assert user.token is None

    @pytest.mark.asyncio
    async def test_store_gets_starter_inventory(self, provisioner):
        account = await provisioner.sign_up(CREDENTIALS, CHARACTER, {})
        inventory = account.store.inventory
        assert [entry["item"]["description"] for entry in inventory] == ["parakeet", "drip", "mug"]
        assert [entry["item"]["cost"] for entry in inventory] == [450, 950, 5]
        assert all(entry["item"]["bought"] is False for entry in inventory)

    @pytest.mark.asyncio
    async def test_character_seed_is_applied(self, provisioner):
        account = await provisioner.sign_up(
            CREDENTIALS, {**CHARACTER, "coins": 12, "sprite": "zed.png"}, {"tasks": ["train"]},
        )
        assert account.character.name == "Zed"
        assert account.character.character_class == "Mage"
        assert account.character.coins == 12
        assert account.todo.tasks == [{"description": "train", "done": False}]

    @pytest.mark.asyncio
    async def test_stores_are_independent_copies(self, provisioner):
        first = await provisioner.sign_up(CREDENTIALS, CHARACTER, {})
        second = await provisioner.sign_up(
            {**CREDENTIALS, "email": "c@d.com"}, CHARACTER, {},
        )
        assert first.store.id != second.store.id
        first.store.inventory[0]["item"]["bought"] = True
        assert second.store.inventory[0]["item"]["bought"] is False


class TestSignUpFailures:
    @pytest.mark.asyncio
    async def test_mismatched_confirmation_creates_nothing(self, provisioner, store):
        with pytest.raises(BadParamsError):
            await provisioner.sign_up(
                {**CREDENTIALS, "password_confirmation": "p2"}, CHARACTER, {},
            )
        assert await _counts(store) == {"User": 0, "Character": 0, "Store": 0, "ToDoList": 0}

    @pytest.mark.asyncio
    async def test_invalid_character_creates_nothing(self, provisioner, store):
        with pytest.raises(BadParamsError):
            await provisioner.sign_up(CREDENTIALS, {"name": "Zed"}, {})
        assert await store.count(User) == 0

    @pytest.mark.asyncio
    async def test_duplicate_email_leaves_no_orphans(self, provisioner, store):
        await provisioner.sign_up(CREDENTIALS, CHARACTER, {})

        with pytest.raises(StoreError) as exc_info:
            await provisioner.sign_up(
                {**CREDENTIALS, "email": " A@B.com "}, CHARACTER, {},
            )

        assert exc_info.value.http_status == 422
        assert await _counts(store) == {"User": 1, "Character": 1, "Store": 1, "ToDoList": 1}

    @pytest.mark.asyncio
    async def test_concurrent_sign_ups_each_get_their_own_records(self, provisioner, store):
        first, second = await asyncio.gather(
            provisioner.sign_up(CREDENTIALS, CHARACTER, {}),
            provisioner.sign_up({**CREDENTIALS, "email": "c@d.com"}, CHARACTER, {}),
        )

        assert first.user.id != second.user.id
        assert first.character.id != second.character.id
        assert second.store.owner_id == second.user.id
        assert await _counts(store) == {"User": 2, "Character": 2, "Store": 2, "ToDoList": 2}

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_sign_ups_leave_one_account(self, provisioner, store):
        results = await asyncio.gather(
            provisioner.sign_up(CREDENTIALS, CHARACTER, {}),
            provisioner.sign_up(CREDENTIALS, CHARACTER, {}),
            return_exceptions=True,
        )

        created = [r for r in results if isinstance(r, ProvisionedAccount)]
        failed = [r for r in results if isinstance(r, StoreError)]
        assert len(created) == 1 and len(failed) == 1
        assert await _counts(store) == {"User": 1, "Character": 1, "Store": 1, "ToDoList": 1}

    @pytest.mark.asyncio
    async def test_failed_link_discards_drafts(self, provisioner, store):
        with patch.object(store, "save_many", AsyncMock(side_effect=StoreError())):
            with pytest.raises(StoreError):
                await provisioner.sign_up(CREDENTIALS, CHARACTER, {})

        assert await _counts(store) == {"User": 0, "Character": 0, "Store": 0, "ToDoList": 0}

    @pytest.mark.asyncio
    async def test_failed_cleanup_still_raises_original_error(self, provisioner, store, caplog):
        original_create = store.create

        async def failing_create(model, **fields):
            if model is ToDoList:
                raise StoreError("todo rejected")
            return await original_create(model, **fields)

        with patch.object(store, "create", side_effect=failing_create), \
                patch.object(store, "delete", AsyncMock(side_effect=StoreError("down"))):
            with pytest.raises(StoreError, match="todo rejected"):
                await provisioner.sign_up(CREDENTIALS, CHARACTER, {})

        assert "Could not remove orphaned" in caplog.text


class TestProvisionedAccount:
    def test_rejects_unlinked_records(self):
        user = User(id=uuid.uuid4(), email="a@b.com", hashed_password="x")
        character = Character(id=uuid.uuid4(), name="Zed", character_class="Mage")
        store = Store(id=uuid.uuid4(), inventory=[])
        todo = ToDoList(id=uuid.uuid4(), tasks=[])

        with pytest.raises(ValueError):
            ProvisionedAccount(user=user, character=character, store=store, todo=todo)

    def test_accepts_linked_records(self):
        user = User(id=uuid.uuid4(), email="a@b.com", hashed_password="x")
        character = Character(id=uuid.uuid4(), name="Zed", character_class="Mage", owner_id=user.id)
        store = Store(id=uuid.uuid4(), inventory=[], owner_id=user.id)
        todo = ToDoList(id=uuid.uuid4(), tasks=[], owner_id=user.id)
        user.player_character_id = character.id
        user.player_store_id = store.id
        user.player_todo_id = todo.id

        account = ProvisionedAccount(user=user, character=character, store=store, todo=todo)
        assert account.user is user
