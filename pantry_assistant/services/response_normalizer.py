"""Repair and normalize the external model's structured answer.

The model's output is advisory: shapes drift (a flat item instead of a list,
a bare string, categories outside the enum) and intents get confused. Every
repair lives here so the turn resolver only ever sees a ``ModelProposal``.
"""

import logging
from typing import Any

from pydantic import ValidationError

from pantry_assistant.models.enums import StorageCategory
from pantry_assistant.schemas.actions import (
    MAX_NAME_LENGTH,
    ItemProposal,
    MealSuggestion,
    ModelProposal,
)
from pantry_assistant.services.heuristic_parser import HeuristicParser
from pantry_assistant.services.llm_prompts import ASSISTANT_ACTIONS

logger = logging.getLogger(__name__)

_HOISTED_KEYS = ("items", "pending_item", "shopping_list", "meal_suggestions")
_FLAT_ITEM_KEYS = ("name", "category", "quantity", "is_low")


def _normalize_action(value: Any) -> str:
    action = str(value or "none").strip().lower().replace("-", "_").replace(" ", "_")
    if action not in ASSISTANT_ACTIONS:
        logger.warning(f"Model returned unknown action '{value}', treating as none")
        return "none"
    return action


def _usable_name(value: Any) -> str | None:
    """Stripped item name, or None if it is blank or too long to store."""
    if not isinstance(value, str):
        return None
    name = value.strip()
    if not name:
        return None
    if len(name) > MAX_NAME_LENGTH:
        logger.warning(f"Dropping item name of {len(name)} characters from model output")
        return None
    return name


def _coerce_item(entry: Any) -> ItemProposal | None:
    if isinstance(entry, str):
        name = _usable_name(entry)
        return ItemProposal(name=name) if name else None
    if not isinstance(entry, dict):
        return None

    raw_name = entry.get("name")
    name = _usable_name(str(raw_name) if raw_name is not None else None)
    if not name:
        return None

    raw_category = entry.get("category")
    category = StorageCategory.parse(raw_category)
    if raw_category and category is None:
        logger.warning(f"Dropping invalid category '{raw_category}' for '{name}'")

    quantity = entry.get("quantity")
    if quantity is not None and not isinstance(quantity, str):
        quantity = str(quantity)
    is_low = entry.get("is_low")

    return ItemProposal(
        name=name,
        category=category,
        quantity=quantity or None,
        is_low=is_low if isinstance(is_low, bool) else None,
    )


def _coerce_items(payload: dict[str, Any]) -> list[ItemProposal]:
    raw_items = payload.get("items")
    if raw_items is None and payload.get("name"):
        # Flat {name, category, ...} instead of {items: [...]}
        raw_items = [{key: payload.get(key) for key in _FLAT_ITEM_KEYS}]
    if isinstance(raw_items, dict | str):
        raw_items = [raw_items]
    if not isinstance(raw_items, list):
        return []

    items = []
    for entry in raw_items:
        item = _coerce_item(entry)
        if item is not None:
            items.append(item)
    return items


def _coerce_names(raw: Any) -> list[str]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return []
    names = []
    for entry in raw:
        if isinstance(entry, dict):
            entry = entry.get("name")
        name = _usable_name(entry)
        if name:
            names.append(name)
    return names


def _coerce_meals(raw: Any) -> list[MealSuggestion]:
    if not isinstance(raw, list):
        return []
    meals = []
    for entry in raw:
        try:
            meals.append(MealSuggestion.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping malformed meal suggestion: {e.error_count()} errors")
    return meals


def normalize_model_response(
    raw: Any,
    utterance: str,
    pending_item: str | None = None,
) -> ModelProposal:
    """Turn the model's raw tool arguments into a ``ModelProposal``.

    Raises:
        ValueError: the payload is not a JSON object at all
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a JSON object from the model, got {type(raw).__name__}")

    action = _normalize_action(raw.get("action"))
    payload = raw.get("payload")
    payload = dict(payload) if isinstance(payload, dict) else {}
    for key in (*_HOISTED_KEYS, *_FLAT_ITEM_KEYS):
        if key in raw and key not in payload:
            payload[key] = raw[key]

    items = _coerce_items(payload)
    speak = raw.get("speak")
    proposal_pending = _usable_name(payload.get("pending_item"))

    # Explicit shopping-list phrasing is never a pantry add, and a plain
    # pantry add is never a shopping-list add.
    shopping_phrasing = HeuristicParser.is_shopping_list_request(utterance)
    if action == "add_item" and shopping_phrasing:
        logger.warning("Model chose add_item for shopping-list phrasing; repairing")
        action = "add_to_shopping_list"
    elif (
        action == "add_to_shopping_list"
        and not shopping_phrasing
        and HeuristicParser.is_pantry_add(utterance)
    ):
        logger.warning("Model chose add_to_shopping_list for a pantry add; repairing")
        action = "add_item"

    if action == "none" and HeuristicParser.is_undo_request(utterance):
        action = "undo"

    if action == "add_item" and not items and _usable_name(pending_item):
        items = [ItemProposal(name=pending_item.strip())]

    if action in ("add_item", "add_to_shopping_list") and not items:
        items = [
            ItemProposal(name=name)
            for name in HeuristicParser.parse_grocery_items(utterance)
            if _usable_name(name)
        ]

    if action == "update_item" and not items:
        items = [
            ItemProposal(name=name, is_low=True)
            for name in HeuristicParser.parse_low_stock_items(utterance)
            if _usable_name(name)
        ]

    if action == "ask" and not proposal_pending:
        proposal_pending = items[0].name if items else None
        if proposal_pending is None:
            logger.warning("Model asked a question without naming an item")
            action = "none"

    return ModelProposal(
        action=action,
        items=items,
        pending_item=proposal_pending,
        shopping_list=_coerce_names(payload.get("shopping_list")),
        meal_suggestions=_coerce_meals(payload.get("meal_suggestions")),
        speak=speak.strip() if isinstance(speak, str) else "",
    )
