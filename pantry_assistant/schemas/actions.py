"""Turn actions produced by the resolver.

Each variant carries its own payload and is tagged by the ``action`` field,
so callers dispatch on the concrete class rather than on loose strings.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from pantry_assistant.models.enums import StorageCategory

# Matches the String(255) name columns on pantry and shopping list rows
MAX_NAME_LENGTH = 255


class ItemProposal(BaseModel):
    """A single item named in a turn."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    category: StorageCategory | None = None
    quantity: str | None = None
    is_low: bool | None = None


class RecipeDetails(BaseModel):
    """Recipe attached to a meal suggestion."""

    model_config = ConfigDict(extra="allow")

    ingredients_with_quantities: list[str] = Field(default_factory=list)
    cooking_steps: list[str] = Field(default_factory=list)
    tips: str | None = None


class MealSuggestion(BaseModel):
    """Meal idea returned by the model; passed through untouched."""

    model_config = ConfigDict(extra="allow")

    name: str
    ingredients_available: list[str] = Field(default_factory=list)
    ingredients_needed: list[str] = Field(default_factory=list)
    recipe: RecipeDetails | None = None


class ModelProposal(BaseModel):
    """Normalized, still untrusted, output of the external model."""

    action: str = "none"
    items: list[ItemProposal] = Field(default_factory=list)
    pending_item: str | None = None
    shopping_list: list[str] = Field(default_factory=list)
    meal_suggestions: list[MealSuggestion] = Field(default_factory=list)
    speak: str = ""


class AddItem(BaseModel):
    """Insert items into the pantry. Every item has a resolved category."""

    action: Literal["add_item"] = "add_item"
    items: list[ItemProposal]
    duplicates: list[str] = Field(default_factory=list)
    speak: str = ""


class UpdateItem(BaseModel):
    """Edit existing pantry items (low-stock flag, quantity)."""

    action: Literal["update_item"] = "update_item"
    items: list[ItemProposal]
    not_found: list[str] = Field(default_factory=list)
    speak: str = ""


class Ask(BaseModel):
    """Ask one clarifying question about where an item goes."""

    action: Literal["ask"] = "ask"
    pending_item: str
    possible_categories: list[StorageCategory] = Field(default_factory=list)
    held_items: list[str] = Field(default_factory=list)
    speak: str


class NoAction(BaseModel):
    """Nothing to change; just say something."""

    action: Literal["none"] = "none"
    speak: str


class SuggestMeals(BaseModel):
    """Meal ideas from the model."""

    action: Literal["suggest_meals"] = "suggest_meals"
    meal_suggestions: list[MealSuggestion] = Field(default_factory=list)
    speak: str = ""


class AddToShoppingList(BaseModel):
    """Insert items into the shopping list (never the pantry)."""

    action: Literal["add_to_shopping_list"] = "add_to_shopping_list"
    items: list[ItemProposal]
    speak: str = ""


class GenerateShoppingList(BaseModel):
    """Build a shopping list from low-stock items and the model's picks."""

    action: Literal["generate_shopping_list"] = "generate_shopping_list"
    items: list[str] = Field(default_factory=list)
    speak: str = ""


class Undo(BaseModel):
    """Reverse the most recent action group."""

    action: Literal["undo"] = "undo"
    speak: str = ""


Action = Annotated[
    AddItem
    | UpdateItem
    | Ask
    | NoAction
    | SuggestMeals
    | AddToShoppingList
    | GenerateShoppingList
    | Undo,
    Field(discriminator="action"),
]

