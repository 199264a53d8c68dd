"""Assistant request/response schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from pantry_assistant.models.enums import StorageCategory
from pantry_assistant.schemas.actions import ItemProposal, MealSuggestion


class UserContext(BaseModel):
    """Per-user context the resolver needs besides the inventory."""

    user_id: int
    dietary_restrictions: list[str] = Field(default_factory=list)
    household_size: int = 2
    recipe_filters: list[str] = Field(default_factory=list)


class TurnRequest(BaseModel):
    """One utterance (or follow-up answer) from the user."""

    utterance: str = Field(..., max_length=5000)
    dietary_restrictions: list[str] = Field(default_factory=list)
    household_size: int | None = Field(None, ge=1, le=50)
    recipe_filters: list[str] = Field(default_factory=list)


class ShoppingListUpdates(BaseModel):
    """Ingredients from meal suggestions that are missing or running low."""

    missing: list[str] = Field(default_factory=list)
    low: list[str] = Field(default_factory=list)


class TurnResponse(BaseModel):
    """Outcome of a resolved and applied turn."""

    action: str
    speak: str
    pending_item: str | None = None
    possible_categories: list[StorageCategory] = Field(default_factory=list)
    items: list[ItemProposal] = Field(default_factory=list)
    meal_suggestions: list[MealSuggestion] = Field(default_factory=list)
    shopping_list: list[str] = Field(default_factory=list)
    shopping_list_updates: ShoppingListUpdates | None = None
    undone: list[str] = Field(default_factory=list)


class UndoResponse(BaseModel):
    """Result of an undo request."""

    success: bool
    message: str
    count: int
    reversed_names: list[str] = Field(default_factory=list)


class PendingQuestionResponse(BaseModel):
    """Current pending clarification, if any."""

    pending_item: str | None
    expired_item: str | None = None


class ClassifyRequest(BaseModel):
    """Classify a single item name."""

    item_name: str = Field(..., min_length=1, max_length=255)


class ClassificationResponse(BaseModel):
    """Classifier output."""

    category: StorageCategory | None
    is_ambiguous: bool
    possible_categories: list[StorageCategory] = Field(default_factory=list)
    reason: Literal["dictionary", "keyword", "ambiguous", "unknown"]
    question: str | None = None
