"""
SQLAlchemy ORM models for player accounts and the item catalog.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    token = Column(String(128), unique=True, nullable=True, index=True)

    # users ↔ children reference each other, so the user side is added with ALTER.
    player_character_id = Column(
        Uuid,
        ForeignKey("characters.id", use_alter=True, name="fk_users_player_character"),
        nullable=True,
    )
    player_store_id = Column(
        Uuid,
        ForeignKey("stores.id", use_alter=True, name="fk_users_player_store"),
        nullable=True,
    )
    player_todo_id = Column(
        Uuid,
        ForeignKey("todo_lists.id", use_alter=True, name="fk_users_player_todo"),
        nullable=True,
    )

    player_character = relationship("Character", foreign_keys=[player_character_id])
    player_store = relationship("Store", foreign_keys=[player_store_id])
    player_todo = relationship("ToDoList", foreign_keys=[player_todo_id])


class Character(TimestampMixin, Base):
    __tablename__ = "characters"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(128), nullable=False)
    character_class = Column("class", String(64), nullable=False)
    coins = Column(Integer, nullable=False, default=0)
    sprite = Column(Text, nullable=True)
    owned_items = Column(JSON, nullable=False, default=list)
    # Null only while the account is still a draft.
    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)


class Store(TimestampMixin, Base):
    __tablename__ = "stores"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    inventory = Column(JSON, nullable=False, default=list)
    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)


class ToDoList(TimestampMixin, Base):
    __tablename__ = "todo_lists"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tasks = Column(JSON, nullable=False, default=list)
    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)


class Item(TimestampMixin, Base):
    __tablename__ = "items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    description = Column(String(255), nullable=False, unique=True)
    cost = Column(Integer, nullable=False)
    sprite = Column(Text, nullable=True)
    bought = Column(Boolean, nullable=False, default=False)
