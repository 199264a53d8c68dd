"""Pantry API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from pantry_assistant.api.dependencies import get_current_user_id, get_pantry_service
from pantry_assistant.schemas.pantry import PantryItemResponse, PantryItemUpdate
from pantry_assistant.services.pantry_service import PantryService

router = APIRouter(prefix="/api/v1/pantry", tags=["pantry"])


@router.get("", response_model=list[PantryItemResponse])
def list_pantry_items(
    user_id: Annotated[int, Depends(get_current_user_id)],
    pantry: Annotated[PantryService, Depends(get_pantry_service)],
):
    """List all pantry items, grouped by category."""
    return pantry.list_items(user_id)


@router.get("/low-stock", response_model=list[PantryItemResponse])
def list_low_stock_items(
    user_id: Annotated[int, Depends(get_current_user_id)],
    pantry: Annotated[PantryService, Depends(get_pantry_service)],
):
    """List items that need restocking."""
    return pantry.low_stock_items(user_id)


@router.get("/{item_id}", response_model=PantryItemResponse)
def get_pantry_item(
    item_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    pantry: Annotated[PantryService, Depends(get_pantry_service)],
):
    """Get a single pantry item."""
    item = pantry.get_item(user_id, item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pantry item not found")
    return item


@router.put("/{item_id}", response_model=PantryItemResponse)
def update_pantry_item(
    item_id: int,
    item_data: PantryItemUpdate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    pantry: Annotated[PantryService, Depends(get_pantry_service)],
):
    """Update a pantry item. The change can be undone."""
    item = pantry.update_item(user_id, item_id, item_data)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pantry item not found")
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pantry_item(
    item_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    pantry: Annotated[PantryService, Depends(get_pantry_service)],
):
    """Delete a pantry item. The deletion can be undone."""
    if not pantry.delete_item(user_id, item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pantry item not found")
