"""
Pydantic request / response schemas.

Request bodies are deliberately loose (everything optional, extra keys
kept) so that ``utils.validators`` decides what is missing or invalid and
the client always receives a ``BAD_PARAMS`` error rather than a framework
validation payload.  Response schemas are the only outward projection of
stored records: ``hashed_password`` has no field anywhere, and ``token``
only exists on ``SignedInUserOut``.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class SignUpRequest(BaseModel):
    credentials: Optional[Dict[str, Any]] = None
    character: Optional[Dict[str, Any]] = None
    todo: Optional[Dict[str, Any]] = None


class SignInCredentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SignInRequest(BaseModel):
    credentials: SignInCredentials = Field(default_factory=SignInCredentials)


class PasswordsIn(BaseModel):
    old: Optional[str] = None
    new: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    passwords: PasswordsIn = Field(default_factory=PasswordsIn)


class CharacterUpdateRequest(BaseModel):
    character: Optional[Dict[str, Any]] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════════


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class CharacterOut(_Record):
    name: str
    character_class: str = Field(serialization_alias="class")
    coins: int = 0
    sprite: Optional[str] = None
    owned_items: List[Any] = Field(default_factory=list)
    owner_id: Optional[uuid.UUID] = None


class StoreItemOut(BaseModel):
    description: str
    cost: int
    sprite: Optional[str] = None
    bought: bool = False


class StoreEntryOut(BaseModel):
    item: StoreItemOut


class StoreOut(_Record):
    inventory: List[StoreEntryOut] = Field(default_factory=list)
    owner_id: Optional[uuid.UUID] = None


class TaskOut(BaseModel):
    description: str
    done: bool = False


class ToDoListOut(_Record):
    tasks: List[TaskOut] = Field(default_factory=list)
    owner_id: Optional[uuid.UUID] = None


class ItemOut(_Record):
    description: str
    cost: int
    sprite: Optional[str] = None
    bought: bool = False


class UserOut(BaseModel):
    id: uuid.UUID
    email: str
    player_character: Optional[CharacterOut] = None
    player_store: Optional[StoreOut] = None
    player_todo: Optional[ToDoListOut] = None
    created_at: datetime
    updated_at: datetime


class SignedInUserOut(UserOut):
    token: str


class UserEnvelope(BaseModel):
    user: UserOut


class SignedInEnvelope(BaseModel):
    user: SignedInUserOut


class CharacterEnvelope(BaseModel):
    character: CharacterOut


class ItemEnvelope(BaseModel):
    item: ItemOut


class ItemListEnvelope(BaseModel):
    items: List[ItemOut]


def project_user(
    user: Any,
    *,
    character: Any = None,
    store: Any = None,
    todo: Any = None,
) -> Dict[str, Any]:
    """Outward fields of a user plus whichever linked records are supplied."""
    return {
        "id": user.id,
        "email": user.email,
        "player_character": CharacterOut.model_validate(character) if character else None,
        "player_store": StoreOut.model_validate(store) if store else None,
        "player_todo": ToDoListOut.model_validate(todo) if todo else None,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
