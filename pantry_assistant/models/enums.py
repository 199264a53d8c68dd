"""Enums for model fields."""

from enum import Enum


class StorageCategory(str, Enum):
    """Storage locations a pantry item can live in."""

    FRIDGE = "fridge"
    FREEZER = "freezer"
    CUPBOARD = "cupboard"
    PANTRY_STAPLES = "pantry_staples"

    @property
    def display_name(self) -> str:
        """Human-readable name used in spoken responses."""
        return self.value.replace("_", " ")

    @classmethod
    def parse(cls, value: object) -> "StorageCategory | None":
        """Return the matching category, or None for anything outside the enum."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower().replace(" ", "_"))
        except ValueError:
            return None


class ActionType(str, Enum):
    """Kinds of mutation recorded in the action log."""

    ADD_ITEM = "add_item"
    DELETE_ITEM = "delete_item"
    UPDATE_ITEM = "update_item"
    ADD_SHOPPING = "add_shopping"
    DELETE_SHOPPING = "delete_shopping"

    @property
    def is_insert(self) -> bool:
        """Whether reversing this action means deleting the entity."""
        return self in (ActionType.ADD_ITEM, ActionType.ADD_SHOPPING)


class EntityType(str, Enum):
    """Entities the action log can point at."""

    PANTRY_ITEM = "pantry_item"
    SHOPPING_LIST_ITEM = "shopping_list_item"
