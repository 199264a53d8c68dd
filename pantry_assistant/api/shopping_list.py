"""Shopping list API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from pantry_assistant.api.dependencies import get_current_user_id, get_pantry_service
from pantry_assistant.schemas.actions import ItemProposal
from pantry_assistant.schemas.pantry import ShoppingListItemCreate, ShoppingListItemResponse
from pantry_assistant.services.pantry_service import PantryService

router = APIRouter(prefix="/api/v1/shopping-list", tags=["shopping-list"])


@router.get("", response_model=list[ShoppingListItemResponse])
def list_shopping_items(
    user_id: Annotated[int, Depends(get_current_user_id)],
    pantry: Annotated[PantryService, Depends(get_pantry_service)],
):
    """List everything on the shopping list."""
    return pantry.list_shopping(user_id)


@router.post("", response_model=ShoppingListItemResponse, status_code=status.HTTP_201_CREATED)
def add_shopping_item(
    item_data: ShoppingListItemCreate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    pantry: Annotated[PantryService, Depends(get_pantry_service)],
):
    """Add an item to the shopping list."""
    added, _ = pantry.add_to_shopping_list(
        user_id, [ItemProposal(name=item_data.name, quantity=item_data.quantity)]
    )
    if not added:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{item_data.name} is already on the shopping list",
        )
    return added[0]


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shopping_item(
    item_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    pantry: Annotated[PantryService, Depends(get_pantry_service)],
):
    """Remove an item from the shopping list. The removal can be undone."""
    if not pantry.delete_shopping_item(user_id, item_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Shopping list item not found"
        )
