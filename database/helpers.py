"""
Database helper functions run outside request handling.
"""

from __future__ import annotations

import logging

from config.starter_items import STARTER_ITEMS
from database.models import Item
from database.store import DocumentStore

logger = logging.getLogger(__name__)


async def ensure_item_catalog(store: DocumentStore) -> int:
    """Insert any starter item missing from the catalog (idempotent)."""
    created = 0
    for item in STARTER_ITEMS:
        if await store.find_one(Item, description=item["description"]) is None:
            await store.create(Item, **item)
            created += 1
    if created:
        logger.info("Seeded %d catalog item(s)", created)
    return created
