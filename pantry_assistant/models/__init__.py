"""SQLAlchemy models."""

from pantry_assistant.models.action_log import ActionLogEntry
from pantry_assistant.models.pantry import PantryItem
from pantry_assistant.models.shopping_list import ShoppingListItem

__all__ = [
    "ActionLogEntry",
    "PantryItem",
    "ShoppingListItem",
]
