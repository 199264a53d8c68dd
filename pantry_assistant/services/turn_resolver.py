"""Turn resolution: decide what one utterance should do to the pantry.

Local rules run first (cancellation, answers to a pending question); the
external model is only consulted when they are not enough, and whatever it
proposes is run back through the classifier and duplicate guard before it
becomes an ``Action``. Nothing here writes to the database.
"""

import logging
from collections.abc import Sequence

import httpx

from pantry_assistant.models.enums import StorageCategory
from pantry_assistant.models.pantry import PantryItem
from pantry_assistant.schemas.actions import (
    Action,
    AddItem,
    AddToShoppingList,
    Ask,
    GenerateShoppingList,
    ItemProposal,
    ModelProposal,
    NoAction,
    SuggestMeals,
    Undo,
    UpdateItem,
)
from pantry_assistant.schemas.assistant import UserContext
from pantry_assistant.services.clarification import (
    format_question,
    format_unknown_question,
    join_options,
)
from pantry_assistant.services.classifier import classify
from pantry_assistant.services.duplicate_guard import find_existing, normalize_name
from pantry_assistant.services.errors import AssistantUnavailableError
from pantry_assistant.services.heuristic_parser import HeuristicParser
from pantry_assistant.services.llm import LLMService
from pantry_assistant.services.llm_prompts import (
    ASSISTANT_TOOL,
    get_assistant_system_prompt,
    get_turn_prompt,
)
from pantry_assistant.services.response_normalizer import normalize_model_response

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Okay, skipped."
NOTHING_HEARD_MESSAGE = "Sorry, I didn't catch which items you meant."


def _display_category(value: str | StorageCategory | None) -> str:
    category = StorageCategory.parse(value)
    return category.display_name if category else "pantry"


def already_have_message(item: PantryItem) -> str:
    return f"{item.name} is already in your {_display_category(item.category)}."


def added_message(items: Sequence[ItemProposal]) -> str:
    placed = [f"{item.name} to the {_display_category(item.category)}" for item in items]
    return f"Added {join_options(placed, 'and')}."


class TurnResolver:
    """Resolve an utterance (or a follow-up answer) into a single Action."""

    def __init__(self, llm_service: LLMService | None = None):
        self.llm_service = llm_service or LLMService()

    async def resolve_turn(
        self,
        utterance: str,
        pending_item: str | None,
        inventory: Sequence[PantryItem],
        user_context: UserContext,
    ) -> Action:
        """Decide the action for one turn.

        Raises:
            AssistantUnavailableError: the model had to be consulted and failed
        """
        text = utterance.strip()

        if HeuristicParser.is_cancel(text):
            logger.info(f"Turn cancelled by user (pending={pending_item!r})")
            return NoAction(speak=CANCELLED_MESSAGE)

        if pending_item:
            category = HeuristicParser.parse_category_answer(text)
            if category is not None:
                return self._answer_pending(pending_item, category, inventory)

            existing = find_existing(pending_item, inventory)
            if existing is not None:
                return NoAction(speak=already_have_message(existing))

            result = classify(pending_item)
            if result.is_resolved:
                item = ItemProposal(name=pending_item, category=result.category)
                return AddItem(items=[item], speak=added_message([item]))
            if result.is_ambiguous:
                return Ask(
                    pending_item=pending_item,
                    possible_categories=list(result.possible_categories),
                    speak=format_question(pending_item, result.possible_categories),
                )
            logger.debug(f"Pending item '{pending_item}' unknown to classifier, asking the model")

        proposal = await self._ask_model(text, pending_item, inventory, user_context)
        return self.build_action(proposal, text, inventory)

    def _answer_pending(
        self,
        pending_item: str,
        category: StorageCategory,
        inventory: Sequence[PantryItem],
    ) -> Action:
        existing = find_existing(pending_item, inventory)
        if existing is not None:
            return NoAction(speak=already_have_message(existing))
        item = ItemProposal(name=pending_item, category=category)
        logger.info(f"Pending item '{pending_item}' answered with {category.value}")
        return AddItem(items=[item], speak=added_message([item]))

    async def _ask_model(
        self,
        utterance: str,
        pending_item: str | None,
        inventory: Sequence[PantryItem],
        user_context: UserContext,
    ) -> ModelProposal:
        try:
            raw = await self.llm_service.generate_tool_call(
                prompt=get_turn_prompt(utterance),
                system_prompt=get_assistant_system_prompt(inventory, user_context, pending_item),
                tool=ASSISTANT_TOOL,
            )
            return normalize_model_response(raw, utterance, pending_item)
        except httpx.HTTPError as e:
            logger.error(f"Assistant model request failed: {e}", exc_info=True)
            raise AssistantUnavailableError(f"model request failed: {e}") from e
        except ValueError as e:
            # Includes json.JSONDecodeError and a missing tool call
            logger.error(f"Assistant model returned no usable payload: {e}", exc_info=True)
            raise AssistantUnavailableError(f"unusable model payload: {e}") from e

    def build_action(
        self,
        proposal: ModelProposal,
        utterance: str,
        inventory: Sequence[PantryItem],
    ) -> Action:
        """Check a normalized model proposal against local rules."""
        match proposal.action:
            case "add_item":
                return self._resolve_adds(proposal.items, utterance, inventory)
            case "update_item":
                return self._resolve_updates(proposal.items, inventory)
            case "ask":
                return self._resolve_ask(proposal, utterance, inventory)
            case "suggest_meals":
                return SuggestMeals(
                    meal_suggestions=proposal.meal_suggestions,
                    speak=proposal.speak or "Here are a few ideas.",
                )
            case "add_to_shopping_list":
                if not proposal.items:
                    return NoAction(speak=NOTHING_HEARD_MESSAGE)
                items = [ItemProposal(name=i.name, quantity=i.quantity) for i in proposal.items]
                names = join_options([i.name for i in items], "and")
                return AddToShoppingList(
                    items=items,
                    speak=f"Added {names} to your shopping list.",
                )
            case "generate_shopping_list":
                names = proposal.shopping_list or [i.name for i in proposal.items]
                return GenerateShoppingList(items=names, speak=proposal.speak)
            case "undo":
                return Undo(speak=proposal.speak)
            case _:
                return NoAction(speak=proposal.speak or "Okay.")

    def _resolve_ask(
        self,
        proposal: ModelProposal,
        utterance: str,
        inventory: Sequence[PantryItem],
    ) -> Action:
        item_name = proposal.pending_item or ""
        result = classify(item_name)
        if result.is_resolved or find_existing(item_name, inventory) is not None:
            # The model asked about something we can settle locally.
            return self._resolve_adds([ItemProposal(name=item_name)], utterance, inventory)
        if result.is_ambiguous:
            return Ask(
                pending_item=item_name,
                possible_categories=list(result.possible_categories),
                speak=format_question(item_name, result.possible_categories),
            )
        return Ask(pending_item=item_name, speak=format_unknown_question(item_name))

    def _resolve_adds(
        self,
        items: Sequence[ItemProposal],
        utterance: str,
        inventory: Sequence[PantryItem],
    ) -> Action:
        """Run proposed pantry adds through the duplicate guard and classifier.

        The first item that can't be placed turns the whole turn into an Ask;
        nothing from the batch is committed in that case.

        An ambiguous item normally asks. The one exception is when the user
        named the location in the same breath ("put the fish in the freezer")
        and the model agrees on one of the candidates: that is the same
        explicit answer a pending question would have received.
        """
        resolved: list[ItemProposal] = []
        duplicates: list[PantryItem] = []
        seen: set[str] = set()
        fresh = []
        for item in items:
            existing = find_existing(item.name, inventory)
            if existing is not None:
                duplicates.append(existing)
            elif normalize_name(item.name) not in seen:
                seen.add(normalize_name(item.name))
                fresh.append(item)

        for item in fresh:
            result = classify(item.name)
            if result.is_resolved:
                if item.category is not None and item.category != result.category:
                    logger.info(
                        f"Classifier overrides model for '{item.name}': "
                        f"{item.category.value} -> {result.category.value}"
                    )
                category = result.category
            elif result.is_ambiguous:
                answered = HeuristicParser.parse_category_answer(utterance)
                if item.category in result.possible_categories and answered == item.category:
                    category = item.category
                else:
                    return self._ask_for(item, list(result.possible_categories), fresh)
            elif item.category is not None:
                category = item.category
            else:
                return self._ask_for(item, [], fresh)
            resolved.append(item.model_copy(update={"category": category}))

        duplicate_text = " ".join(already_have_message(d) for d in duplicates)
        if not resolved:
            return NoAction(speak=duplicate_text or NOTHING_HEARD_MESSAGE)

        speak = added_message(resolved)
        if duplicate_text:
            speak = f"{speak} {duplicate_text}"
        return AddItem(items=resolved, duplicates=[d.name for d in duplicates], speak=speak)

    def _ask_for(
        self,
        item: ItemProposal,
        candidates: list[StorageCategory],
        batch: Sequence[ItemProposal],
    ) -> Ask:
        held = [other.name for other in batch if other is not item]
        if candidates:
            speak = format_question(item.name, candidates)
        else:
            speak = format_unknown_question(item.name)
        if held:
            speak = f"{speak} I haven't added {join_options(held, 'and')} yet."
        logger.info(f"Asking about '{item.name}', holding {len(held)} other items")
        return Ask(
            pending_item=item.name,
            possible_categories=candidates,
            held_items=held,
            speak=speak,
        )

    def _resolve_updates(
        self,
        items: Sequence[ItemProposal],
        inventory: Sequence[PantryItem],
    ) -> Action:
        """Match low-stock/quantity edits to existing rows.

        If none of the named items are in the pantry, they go on the shopping
        list instead.
        """
        if not items:
            return NoAction(speak=NOTHING_HEARD_MESSAGE)

        found: list[ItemProposal] = []
        not_found: list[str] = []
        for item in items:
            existing = find_existing(item.name, inventory)
            if existing is None:
                not_found.append(item.name)
                continue
            is_low = item.is_low
            if is_low is None and item.quantity is None:
                is_low = True
            found.append(
                ItemProposal(
                    name=existing.name,
                    category=StorageCategory.parse(existing.category),
                    quantity=item.quantity,
                    is_low=is_low,
                )
            )

        if not found:
            names = join_options(not_found, "and")
            return AddToShoppingList(
                items=[ItemProposal(name=name) for name in not_found],
                speak=f"You don't have {names} in your pantry, so I've added it to your shopping list.",
            )

        low = [item.name for item in found if item.is_low]
        speak = (
            f"Marked {join_options(low, 'and')} as running low."
            if low
            else f"Updated {join_options([item.name for item in found], 'and')}."
        )
        if not_found:
            speak = f"{speak} I couldn't find {join_options(not_found, 'or')} in your pantry."
        return UpdateItem(items=found, not_found=not_found, speak=speak)
