"""
Item catalog routes (read-only, token required).
"""

from __future__ import annotations

import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user, get_store
from core.errors import handle_404
from database.models import Item, User
from database.store import DocumentStore
from utils.schemas import ItemEnvelope, ItemListEnvelope

router = APIRouter(tags=["items"])


@router.get("/items", response_model=ItemListEnvelope)
async def list_items(
    _: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    return {"items": await store.find_all(Item)}


@router.get("/items/{item_id}", response_model=ItemEnvelope)
async def show_item(
    item_id: uuid.UUID,
    _: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    return {"item": handle_404(await store.find_by_id(Item, item_id))}
