"""Pydantic schemas for API requests and responses."""

from pantry_assistant.schemas.actions import (
    Action,
    AddItem,
    AddToShoppingList,
    Ask,
    GenerateShoppingList,
    ItemProposal,
    MealSuggestion,
    ModelProposal,
    NoAction,
    SuggestMeals,
    Undo,
    UpdateItem,
)
from pantry_assistant.schemas.assistant import TurnRequest, TurnResponse, UserContext

__all__ = [
    "Action",
    "AddItem",
    "AddToShoppingList",
    "Ask",
    "GenerateShoppingList",
    "ItemProposal",
    "MealSuggestion",
    "ModelProposal",
    "NoAction",
    "SuggestMeals",
    "Undo",
    "UpdateItem",
    "TurnRequest",
    "TurnResponse",
    "UserContext",
]
