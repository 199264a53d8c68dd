"""Pantry and shopping list mutations, each recorded in the action log."""

import logging
import re
import uuid
from collections.abc import Sequence

from sqlalchemy.orm import Session

from pantry_assistant.models.enums import ActionType, EntityType, StorageCategory
from pantry_assistant.models.pantry import PantryItem
from pantry_assistant.models.shopping_list import ShoppingListItem
from pantry_assistant.schemas.actions import ItemProposal, MealSuggestion
from pantry_assistant.schemas.assistant import ShoppingListUpdates
from pantry_assistant.schemas.pantry import PantryItemUpdate
from pantry_assistant.services.action_log import ActionLogService
from pantry_assistant.services.duplicate_guard import find_existing, normalize_name

logger = logging.getLogger(__name__)

# Non-nullable columns; an explicit null in an update leaves them as they are
REQUIRED_FIELDS = ("name", "category", "is_low")


def normalize_ingredient(name: str) -> str:
    """Lowercase and strip punctuation for ingredient matching."""
    return re.sub(r"[^a-z0-9\s]", "", name.lower()).strip()


def shopping_list_updates_for_meals(
    meals: Sequence[MealSuggestion],
    inventory: Sequence[PantryItem],
) -> ShoppingListUpdates:
    """Work out which meal ingredients are missing or running low.

    An ingredient counts as present only on an exact normalized name match.
    """
    pantry_by_name = {normalize_ingredient(item.name): item for item in inventory}
    missing: dict[str, str] = {}
    low: dict[str, str] = {}

    for meal in meals:
        for ingredient in [*meal.ingredients_available, *meal.ingredients_needed]:
            key = normalize_ingredient(ingredient)
            if not key:
                continue
            matched = pantry_by_name.get(key)
            if matched is None:
                missing.setdefault(key, ingredient)
            elif matched.is_low_stock:
                low.setdefault(key, matched.name)

    return ShoppingListUpdates(missing=list(missing.values()), low=list(low.values()))


def new_group_id(count: int) -> str | None:
    """Batches of more than one mutation share a group id so they undo together."""
    return str(uuid.uuid4()) if count > 1 else None


class PantryService:
    """Service for pantry and shopping list writes."""

    def __init__(self, db: Session, action_log: ActionLogService | None = None):
        self.db = db
        self.action_log = action_log or ActionLogService(db)

    # Pantry

    def list_items(self, user_id: int) -> list[PantryItem]:
        return (
            self.db.query(PantryItem)
            .filter(PantryItem.user_id == user_id)
            .order_by(PantryItem.category, PantryItem.name)
            .all()
        )

    def get_item(self, user_id: int, item_id: int) -> PantryItem | None:
        return (
            self.db.query(PantryItem)
            .filter(PantryItem.id == item_id, PantryItem.user_id == user_id)
            .first()
        )

    def low_stock_items(self, user_id: int) -> list[PantryItem]:
        """Items that need restocking, by the numeric rule or the flag."""
        return [item for item in self.list_items(user_id) if item.is_low_stock]

    def add_items(self, user_id: int, items: Sequence[ItemProposal]) -> list[PantryItem]:
        """Insert pantry items. Callers have already run the duplicate guard.

        Raises:
            ValueError: an item has no category
        """
        group_id = new_group_id(len(items))
        created = []
        for item in items:
            if item.category is None:
                raise ValueError(f"Cannot add '{item.name}' without a category")
            row = PantryItem(
                user_id=user_id,
                name=item.name,
                category=item.category.value,
                quantity=item.quantity,
                is_low=bool(item.is_low),
            )
            self.db.add(row)
            self.db.flush()
            self.action_log.record(
                user_id,
                ActionType.ADD_ITEM,
                EntityType.PANTRY_ITEM,
                row.id,
                new_data=row.to_snapshot(),
                action_group_id=group_id,
            )
            created.append(row)

        self.db.commit()
        for row in created:
            self.db.refresh(row)
        logger.info(f"Added {len(created)} pantry item(s) for user {user_id} (group={group_id})")
        return created

    def update_items(self, user_id: int, items: Sequence[ItemProposal]) -> list[PantryItem]:
        """Apply low-stock / quantity edits to existing rows, matched by name."""
        inventory = self.list_items(user_id)
        group_id = new_group_id(len(items))
        updated = []
        for item in items:
            row = find_existing(item.name, inventory)
            if row is None:
                logger.warning(f"Update skipped, '{item.name}' not in pantry for user {user_id}")
                continue
            previous = row.to_snapshot()
            if item.quantity is not None:
                row.quantity = item.quantity
            if item.is_low is not None:
                row.is_low = item.is_low
                # Keep the numeric rule consistent with the flag
                if (
                    item.is_low
                    and row.current_quantity is not None
                    and row.low_stock_threshold is not None
                ):
                    row.current_quantity = min(row.current_quantity, row.low_stock_threshold)
            self.db.flush()
            self.action_log.record(
                user_id,
                ActionType.UPDATE_ITEM,
                EntityType.PANTRY_ITEM,
                row.id,
                previous_data=previous,
                new_data=row.to_snapshot(),
                action_group_id=group_id,
            )
            updated.append(row)

        self.db.commit()
        logger.info(f"Updated {len(updated)} pantry item(s) for user {user_id}")
        return updated

    def update_item(
        self, user_id: int, item_id: int, data: PantryItemUpdate
    ) -> PantryItem | None:
        """Edit a single pantry item."""
        row = self.get_item(user_id, item_id)
        if row is None:
            return None

        previous = row.to_snapshot()
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is None and key in REQUIRED_FIELDS:
                continue
            if key == "category":
                value = StorageCategory(value).value
            setattr(row, key, value)
        self.db.flush()
        self.action_log.record(
            user_id,
            ActionType.UPDATE_ITEM,
            EntityType.PANTRY_ITEM,
            row.id,
            previous_data=previous,
            new_data=row.to_snapshot(),
        )
        self.db.commit()
        self.db.refresh(row)
        logger.info(f"Updated pantry item {item_id} for user {user_id}")
        return row

    def delete_item(self, user_id: int, item_id: int) -> bool:
        row = self.get_item(user_id, item_id)
        if row is None:
            return False

        self.action_log.record(
            user_id,
            ActionType.DELETE_ITEM,
            EntityType.PANTRY_ITEM,
            row.id,
            previous_data=row.to_snapshot(),
        )
        self.db.delete(row)
        self.db.commit()
        logger.info(f"Deleted pantry item {item_id} for user {user_id}")
        return True

    # Shopping list

    def list_shopping(self, user_id: int) -> list[ShoppingListItem]:
        return (
            self.db.query(ShoppingListItem)
            .filter(ShoppingListItem.user_id == user_id)
            .order_by(ShoppingListItem.id)
            .all()
        )

    def add_to_shopping_list(
        self, user_id: int, items: Sequence[ItemProposal]
    ) -> tuple[list[ShoppingListItem], list[str]]:
        """Insert shopping list rows, skipping names already on the list.

        Returns (added rows, skipped names).
        """
        existing = self.list_shopping(user_id)
        to_add: list[ItemProposal] = []
        skipped: list[str] = []
        seen: set[str] = set()
        for item in items:
            key = normalize_name(item.name)
            if find_existing(item.name, existing) is not None or key in seen:
                skipped.append(item.name)
                continue
            seen.add(key)
            to_add.append(item)

        group_id = new_group_id(len(to_add))
        added = []
        for item in to_add:
            row = ShoppingListItem(user_id=user_id, name=item.name, quantity=item.quantity)
            self.db.add(row)
            self.db.flush()
            self.action_log.record(
                user_id,
                ActionType.ADD_SHOPPING,
                EntityType.SHOPPING_LIST_ITEM,
                row.id,
                new_data=row.to_snapshot(),
                action_group_id=group_id,
            )
            added.append(row)

        self.db.commit()
        for row in added:
            self.db.refresh(row)
        logger.info(
            f"Added {len(added)} shopping list item(s) for user {user_id}, skipped {len(skipped)}"
        )
        return added, skipped

    def delete_shopping_item(self, user_id: int, item_id: int) -> bool:
        row = (
            self.db.query(ShoppingListItem)
            .filter(ShoppingListItem.id == item_id, ShoppingListItem.user_id == user_id)
            .first()
        )
        if row is None:
            return False

        self.action_log.record(
            user_id,
            ActionType.DELETE_SHOPPING,
            EntityType.SHOPPING_LIST_ITEM,
            row.id,
            previous_data=row.to_snapshot(),
        )
        self.db.delete(row)
        self.db.commit()
        logger.info(f"Deleted shopping list item {item_id} for user {user_id}")
        return True
