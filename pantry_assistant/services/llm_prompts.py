"""LLM prompt templates for the pantry assistant."""

import json
from collections.abc import Sequence

from pantry_assistant.models.enums import StorageCategory
from pantry_assistant.models.pantry import PantryItem
from pantry_assistant.schemas.assistant import UserContext
from pantry_assistant.services.classifier import CATEGORY_KEYWORDS

ASSISTANT_TOOL_NAME = "pantry_assistant_response"

ASSISTANT_ACTIONS = [
    "add_item",
    "update_item",
    "ask",
    "none",
    "suggest_meals",
    "generate_shopping_list",
    "add_to_shopping_list",
    "undo",
]

RECIPE_FILTER_LABELS = {
    "vegetarian": "Vegetarian (no meat)",
    "vegan": "Vegan (no animal products)",
    "gluten_free": "Gluten-free",
    "dairy_free": "Dairy-free",
    "nut_free": "Nut-free",
    "quick_meals": "Quick meals under 30 minutes",
    "kid_friendly": "Kid-friendly (mild flavors, familiar ingredients)",
}

_item_schema = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "category": {"type": "string", "enum": [c.value for c in StorageCategory]},
        "quantity": {"type": "string"},
        "is_low": {"type": "boolean"},
    },
}

ASSISTANT_TOOL = {
    "type": "function",
    "function": {
        "name": ASSISTANT_TOOL_NAME,
        "description": "Return the assistant's action and what it says to the user",
        "parameters": {
            "type": "object",
            "properties": {
                "action": {"type": "string", "enum": ASSISTANT_ACTIONS},
                "payload": {
                    "type": "object",
                    "properties": {
                        "items": {"type": "array", "items": _item_schema},
                        "pending_item": {"type": "string"},
                        "shopping_list": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Items to buy (low stock items)",
                        },
                        "meal_suggestions": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "name": {"type": "string"},
                                    "ingredients_available": {
                                        "type": "array",
                                        "items": {"type": "string"},
                                    },
                                    "ingredients_needed": {
                                        "type": "array",
                                        "items": {"type": "string"},
                                    },
                                    "recipe": {
                                        "type": "object",
                                        "properties": {
                                            "ingredients_with_quantities": {
                                                "type": "array",
                                                "items": {"type": "string"},
                                            },
                                            "cooking_steps": {
                                                "type": "array",
                                                "items": {"type": "string"},
                                            },
                                            "tips": {"type": "string"},
                                        },
                                    },
                                },
                            },
                        },
                    },
                },
                "speak": {"type": "string", "description": "What the assistant says out loud"},
            },
            "required": ["action", "speak"],
        },
    },
}


def get_classification_rules() -> str:
    """Render the classifier's keyword rules as guidance for the model."""
    keyword_lines = []
    for keywords, category in CATEGORY_KEYWORDS:
        quoted = ", ".join(f'"{k}"' for k in keywords)
        keyword_lines.append(f"- {quoted} → {category.value}")
    keyword_text = "\n".join(keyword_lines)

    return f"""SMART ITEM CATEGORIZATION RULES:
Classify items into fridge, freezer, cupboard or pantry_staples WITHOUT asking,
except when genuinely ambiguous.

STEP 1 - KEYWORDS (HIGHEST PRIORITY). If the item name contains any of these,
classify immediately and never ask:
{keyword_text}
Examples: "frozen fish" → freezer, "tinned peas" → cupboard, "fresh salmon" → fridge,
"dried beans" → pantry_staples.

STEP 2 - KNOWN ITEMS: "ice cream" → freezer, "baked beans" → cupboard,
"olive oil" → pantry_staples, cheese/milk/eggs/butter → fridge,
pasta/rice/flour/sugar → pantry_staples, cereal/honey/onions/potatoes → cupboard.

STEP 3 - AMBIGUOUS ITEMS (only without keywords): "fish", "peas", "bread",
"berries", "pizza", "soup", "chips" → action="ask" with pending_item.

STEP 4 - UNKNOWN ITEMS: make a reasonable guess; only ask if truly uncertain.

When using action="add_item", ALWAYS include the category field."""


ASSISTANT_COMMAND_RULES = """CRITICAL COMMAND INTERPRETATION:
- "add X", "I have X", "got X" = ADD TO PANTRY (action="add_item")
- "add X to shopping list", "add X to the list", "I need to buy X" = ADD TO SHOPPING LIST (action="add_to_shopping_list")
- "suggest meals", "what can I cook" = SUGGEST MEALS (action="suggest_meals")
- "running low on X", "almost out of X": X in pantry → action="update_item" with is_low=true; otherwise action="add_to_shopping_list"
- "what do I need", "create shopping list" = action="generate_shopping_list" with shopping_list
- "undo", "take that back" = action="undo"
- "skip", "cancel", "never mind" = action="none"
- Several items in one sentence ("add milk, eggs and butter") go in ONE add_item with all items.

When suggesting meals, include 3-4 meal_suggestions with name, ingredients_available
(from the pantry), ingredients_needed, and a recipe with ingredients_with_quantities,
cooking_steps and tips. Respect ALL dietary restrictions and recipe preferences.

Use warm, friendly language in "speak"; it is read aloud."""


def _inventory_for_prompt(inventory: Sequence[PantryItem]) -> str:
    rows = [
        {
            "name": item.name,
            "category": item.category,
            "quantity": item.quantity,
            "is_low": item.is_low_stock,
        }
        for item in inventory
    ]
    return json.dumps(rows, indent=2)


def get_assistant_system_prompt(
    inventory: Sequence[PantryItem],
    user_context: UserContext,
    pending_item: str | None = None,
) -> str:
    """Build the system prompt for one assistant turn."""
    low_stock = [item.name for item in inventory if item.is_low_stock]
    low_stock_text = "\n".join(f"- {name}" for name in low_stock) if low_stock else "None"
    pending_text = f'PENDING ITEM WAITING FOR CATEGORY: "{pending_item}"\n' if pending_item else ""
    dietary = ", ".join(user_context.dietary_restrictions) or "None"
    filters = (
        ", ".join(RECIPE_FILTER_LABELS.get(f, f) for f in user_context.recipe_filters)
        or "No specific preferences"
    )

    return f"""You are Sage, the kitchen assistant.
Interpret the user's speech, determine their intent, and answer by calling the
{ASSISTANT_TOOL_NAME} function.

{get_classification_rules()}

{ASSISTANT_COMMAND_RULES}

Current pantry inventory:
{_inventory_for_prompt(inventory)}

Items currently marked as low stock:
{low_stock_text}

{pending_text}Dietary restrictions: {dietary}
Household size: {user_context.household_size} people
Recipe preferences: {filters}"""


def get_turn_prompt(utterance: str) -> str:
    """Generate the user message for one turn."""
    return utterance.strip() or "Analyze my pantry and suggest meals"
