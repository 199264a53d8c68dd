"""Assistant service: resolve a turn, apply it, update the conversation."""

import logging
from collections.abc import Sequence
from typing import assert_never

from sqlalchemy.orm import Session

from pantry_assistant.models.pantry import PantryItem
from pantry_assistant.schemas.actions import (
    Action,
    AddItem,
    AddToShoppingList,
    Ask,
    GenerateShoppingList,
    NoAction,
    SuggestMeals,
    Undo,
    UpdateItem,
)
from pantry_assistant.schemas.assistant import TurnResponse, UserContext
from pantry_assistant.services.action_log import ActionLogService, UndoResult
from pantry_assistant.services.clarification import join_options
from pantry_assistant.services.conversation import ConversationContext
from pantry_assistant.services.duplicate_guard import normalize_name
from pantry_assistant.services.pantry_service import (
    PantryService,
    shopping_list_updates_for_meals,
)
from pantry_assistant.services.turn_resolver import TurnResolver

logger = logging.getLogger(__name__)


class AssistantService:
    """Run one conversational turn end to end."""

    def __init__(
        self,
        db: Session,
        resolver: TurnResolver | None = None,
        pantry_service: PantryService | None = None,
    ):
        self.db = db
        self.action_log = ActionLogService(db)
        self.pantry = pantry_service or PantryService(db, self.action_log)
        self.resolver = resolver or TurnResolver()

    async def handle_turn(
        self,
        conversation: ConversationContext,
        utterance: str,
        user_context: UserContext,
    ) -> TurnResponse:
        """Resolve and apply one utterance.

        If the model fails, ``AssistantUnavailableError`` propagates before
        anything is written and the pending question is left as it was.
        """
        slot = conversation.pending
        pending_item = slot.get()
        inventory = self.pantry.list_items(user_context.user_id)

        action = await self.resolver.resolve_turn(utterance, pending_item, inventory, user_context)
        response = self.apply(action, user_context.user_id, inventory)

        # The resolved turn wins over a timer that fired while it was in flight
        if isinstance(action, Ask):
            slot.set(action.pending_item)
            slot.schedule_expiry()
        else:
            slot.clear()

        logger.info(
            f"Turn for user {user_context.user_id}: action={action.action} "
            f"pending={pending_item!r} -> {slot.get()!r}"
        )
        return response

    def apply(
        self,
        action: Action,
        user_id: int,
        inventory: Sequence[PantryItem],
    ) -> TurnResponse:
        """Carry out the mutations an action calls for."""
        match action:
            case AddItem():
                self.pantry.add_items(user_id, action.items)
                return TurnResponse(action=action.action, speak=action.speak, items=action.items)
            case UpdateItem():
                self.pantry.update_items(user_id, action.items)
                return TurnResponse(action=action.action, speak=action.speak, items=action.items)
            case Ask():
                return TurnResponse(
                    action=action.action,
                    speak=action.speak,
                    pending_item=action.pending_item,
                    possible_categories=action.possible_categories,
                )
            case NoAction():
                return TurnResponse(action=action.action, speak=action.speak)
            case SuggestMeals():
                return TurnResponse(
                    action=action.action,
                    speak=action.speak,
                    meal_suggestions=action.meal_suggestions,
                    shopping_list_updates=shopping_list_updates_for_meals(
                        action.meal_suggestions, inventory
                    ),
                )
            case AddToShoppingList():
                return self._add_to_shopping_list(action, user_id)
            case GenerateShoppingList():
                return self._generate_shopping_list(action, inventory)
            case Undo():
                result = self.undo(user_id)
                return TurnResponse(
                    action=action.action,
                    speak=result.message,
                    undone=result.reversed_names,
                )
            case _:
                assert_never(action)

    def _add_to_shopping_list(self, action: AddToShoppingList, user_id: int) -> TurnResponse:
        added, skipped = self.pantry.add_to_shopping_list(user_id, action.items)
        speak = action.speak
        if skipped:
            verb = "is" if len(skipped) == 1 else "are"
            already = f"{join_options(skipped, 'and')} {verb} already on your shopping list."
            if added:
                names = join_options([row.name for row in added], "and")
                speak = f"Added {names} to your shopping list. {already}"
            else:
                speak = already[0].upper() + already[1:]
        return TurnResponse(
            action=action.action,
            speak=speak,
            items=action.items,
            shopping_list=[row.name for row in added],
        )

    @staticmethod
    def _generate_shopping_list(
        action: GenerateShoppingList,
        inventory: Sequence[PantryItem],
    ) -> TurnResponse:
        names: list[str] = []
        seen: set[str] = set()
        low_stock = [item.name for item in inventory if item.is_low_stock]
        for name in [*low_stock, *action.items]:
            key = normalize_name(name)
            if key and key not in seen:
                seen.add(key)
                names.append(name)

        speak = action.speak
        if not speak:
            speak = (
                f"You need {join_options(names, 'and')}."
                if names
                else "Nothing is running low right now."
            )
        return TurnResponse(action=action.action, speak=speak, shopping_list=names)

    def undo(self, user_id: int) -> UndoResult:
        return self.action_log.undo_last(user_id)

    @staticmethod
    def cancel(conversation: ConversationContext) -> str | None:
        """Drop the pending question; return the item that was pending."""
        pending_item = conversation.pending.get()
        conversation.pending.clear()
        return pending_item
