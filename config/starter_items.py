"""
Starter catalog: every new player's store opens with these items.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

STARTER_SPRITE = "image-url"

STARTER_ITEMS: List[Dict[str, Any]] = [
    {"description": "parakeet", "cost": 450, "sprite": STARTER_SPRITE, "bought": False},
    {"description": "drip", "cost": 950, "sprite": STARTER_SPRITE, "bought": False},
    {"description": "mug", "cost": 5, "sprite": STARTER_SPRITE, "bought": False},
]


def starter_inventory() -> List[Dict[str, Any]]:
    """Fresh copy of the starter inventory in store-entry shape."""
    return [{"item": copy.deepcopy(item)} for item in STARTER_ITEMS]
