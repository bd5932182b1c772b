"""
Character routes: owner-scoped updates.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user, get_store
from core.errors import handle_404, require_ownership
from database.models import Character, User
from database.store import DocumentStore
from utils.schemas import CharacterEnvelope, CharacterUpdateRequest
from utils.validators import validate_character_update

logger = logging.getLogger(__name__)

router = APIRouter(tags=["characters"])


@router.patch("/characters/{character_id}", response_model=CharacterEnvelope)
async def update_character(
    character_id: uuid.UUID,
    req: CharacterUpdateRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    """Apply a partial update to the caller's own character."""
    changes = validate_character_update(req.character).unwrap()
    character = handle_404(await store.find_by_id(Character, character_id))
    require_ownership(user, character)

    for key, value in changes.items():
        setattr(character, key, value)
    await store.save(character)
    logger.info("Character %s updated by %s: %s", character.id, user.id, sorted(changes))
    return {"character": character}
