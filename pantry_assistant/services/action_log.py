"""Action log recording and undo."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from pantry_assistant.models.action_log import ActionLogEntry
from pantry_assistant.models.enums import ActionType, EntityType
from pantry_assistant.models.pantry import PantryItem
from pantry_assistant.models.shopping_list import ShoppingListItem
from pantry_assistant.services.clarification import join_options

logger = logging.getLogger(__name__)

NOTHING_TO_UNDO = "Nothing to undo."

ENTITY_MODELS: dict[EntityType, type[PantryItem] | type[ShoppingListItem]] = {
    EntityType.PANTRY_ITEM: PantryItem,
    EntityType.SHOPPING_LIST_ITEM: ShoppingListItem,
}

UNDO_PHRASES = {
    ActionType.ADD_ITEM: "removed {names} from your pantry",
    ActionType.DELETE_ITEM: "put {names} back in your pantry",
    ActionType.UPDATE_ITEM: "restored {names}",
    ActionType.ADD_SHOPPING: "removed {names} from your shopping list",
    ActionType.DELETE_SHOPPING: "put {names} back on your shopping list",
}


@dataclass
class UndoResult:
    """Outcome of an undo request. "Nothing to undo" is not an error."""

    success: bool
    message: str
    count: int = 0
    reversed_names: list[str] = field(default_factory=list)


class ActionLogService:
    """Append mutations to the action log and reverse the latest group."""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        user_id: int,
        action_type: ActionType,
        entity_type: EntityType,
        entity_id: int,
        previous_data: dict[str, Any] | None = None,
        new_data: dict[str, Any] | None = None,
        action_group_id: str | None = None,
    ) -> ActionLogEntry:
        """Append one entry. Flushed, not committed: the caller commits it
        together with the mutation it describes."""
        entry = ActionLogEntry(
            user_id=user_id,
            action_type=action_type.value,
            entity_type=entity_type.value,
            entity_id=entity_id,
            previous_data=previous_data,
            new_data=new_data,
            action_group_id=action_group_id,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def latest_reversible(self, user_id: int) -> ActionLogEntry | None:
        """Newest entry for the user that hasn't been undone yet."""
        return (
            self.db.query(ActionLogEntry)
            .filter(
                ActionLogEntry.user_id == user_id,
                ActionLogEntry.undone_at.is_(None),
            )
            .order_by(ActionLogEntry.id.desc())
            .first()
        )

    def undo_last(self, user_id: int) -> UndoResult:
        """Reverse the newest non-undone entry, or its whole action group.

        Entries are reversed newest first and marked ``undone_at`` so a
        second call never reverses them again.
        """
        latest = self.latest_reversible(user_id)
        if latest is None:
            return UndoResult(success=False, message=NOTHING_TO_UNDO)

        entries = [latest]
        if latest.action_group_id:
            entries = (
                self.db.query(ActionLogEntry)
                .filter(
                    ActionLogEntry.user_id == user_id,
                    ActionLogEntry.action_group_id == latest.action_group_id,
                    ActionLogEntry.undone_at.is_(None),
                )
                .order_by(ActionLogEntry.id.desc())
                .all()
            )

        now = datetime.now(UTC)
        reversed_entries = []
        for entry in entries:
            if self._reverse(entry):
                reversed_entries.append(entry)
            # Stale entries are retired too, so they never block later undos
            entry.undone_at = now
        self.db.commit()

        if not reversed_entries:
            logger.info(f"Undo for user {user_id} found only stale entries")
            return UndoResult(success=False, message=NOTHING_TO_UNDO)

        # Report in the order the user did things
        chronological = list(reversed(reversed_entries))
        names = [entry.item_name or "item" for entry in chronological]
        logger.info(
            f"Undid {len(chronological)} of {len(entries)} action(s) for user {user_id} "
            f"(group={latest.action_group_id}): {names}"
        )
        return UndoResult(
            success=True,
            message=self._summarize(chronological),
            count=len(chronological),
            reversed_names=names,
        )

    def _reverse(self, entry: ActionLogEntry) -> bool:
        """Apply the inverse of one entry. False if it no longer applies."""
        action = ActionType(entry.action_type)
        model = ENTITY_MODELS[EntityType(entry.entity_type)]
        row = self.db.get(model, entry.entity_id)

        if action.is_insert:
            if row is None:
                logger.warning(f"Undo: {entry.entity_type} {entry.entity_id} already gone")
                return False
            self.db.delete(row)
        elif action in (ActionType.DELETE_ITEM, ActionType.DELETE_SHOPPING):
            if row is not None:
                logger.warning(f"Undo: {entry.entity_type} {entry.entity_id} already exists")
                return False
            self.db.add(model.from_snapshot(entry.previous_data or {}))
        else:
            if row is None or not entry.previous_data:
                logger.warning(f"Undo: cannot restore {entry.entity_type} {entry.entity_id}")
                return False
            row.apply_snapshot(entry.previous_data)
        return True

    @staticmethod
    def _summarize(entries: Sequence[ActionLogEntry]) -> str:
        names_by_action: dict[ActionType, list[str]] = {}
        for entry in entries:
            names_by_action.setdefault(ActionType(entry.action_type), []).append(
                entry.item_name or "that item"
            )
        phrases = [
            UNDO_PHRASES[action].format(names=join_options(names, "and"))
            for action, names in names_by_action.items()
        ]
        return f"Okay, I {join_options(phrases, 'and')}."
