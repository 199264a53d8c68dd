"""Pantry and shopping list schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pantry_assistant.models.enums import StorageCategory


class PantryItemUpdate(BaseModel):
    """Update a pantry item."""

    name: str | None = Field(None, min_length=1, max_length=255)
    category: StorageCategory | None = None
    quantity: str | None = Field(None, max_length=100)
    is_low: bool | None = None
    current_quantity: float | None = None
    low_stock_threshold: float | None = None
    expires_at: datetime | None = None


class PantryItemResponse(BaseModel):
    """Pantry item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    category: StorageCategory
    quantity: str | None
    current_quantity: float | None
    low_stock_threshold: float | None
    is_low: bool
    is_low_stock: bool
    expires_at: datetime | None
    created_at: datetime
    updated_at: datetime


class ShoppingListItemCreate(BaseModel):
    """Add an item to the shopping list."""

    name: str = Field(..., min_length=1, max_length=255)
    quantity: str | None = Field(None, max_length=100)


class ShoppingListItemResponse(BaseModel):
    """Shopping list item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    quantity: str | None
    checked: bool
    created_at: datetime
