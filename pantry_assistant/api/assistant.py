"""Conversational assistant API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from pantry_assistant.api.dependencies import (
    get_assistant_service,
    get_conversation_store,
    get_current_user_id,
)
from pantry_assistant.config import get_settings
from pantry_assistant.schemas.assistant import (
    ClassificationResponse,
    ClassifyRequest,
    PendingQuestionResponse,
    TurnRequest,
    TurnResponse,
    UndoResponse,
    UserContext,
)
from pantry_assistant.services.assistant_service import AssistantService
from pantry_assistant.services.clarification import format_question, format_unknown_question
from pantry_assistant.services.classifier import classify
from pantry_assistant.services.conversation import ConversationStore
from pantry_assistant.services.errors import AssistantUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/assistant", tags=["assistant"])


@router.post("/turn", response_model=TurnResponse)
async def take_turn(
    turn: TurnRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    store: Annotated[ConversationStore, Depends(get_conversation_store)],
    assistant: Annotated[AssistantService, Depends(get_assistant_service)],
):
    """Handle one utterance or follow-up answer."""
    user_context = UserContext(
        user_id=user_id,
        dietary_restrictions=turn.dietary_restrictions,
        household_size=turn.household_size or get_settings().default_household_size,
        recipe_filters=turn.recipe_filters,
    )
    conversation = store.get(user_id)
    try:
        return await assistant.handle_turn(conversation, turn.utterance, user_context)
    except AssistantUnavailableError as e:
        logger.warning(f"Turn failed for user {user_id}: {e.reason}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=AssistantUnavailableError.user_message,
        ) from e


@router.get("/pending", response_model=PendingQuestionResponse)
async def get_pending_question(
    user_id: Annotated[int, Depends(get_current_user_id)],
    store: Annotated[ConversationStore, Depends(get_conversation_store)],
):
    """Get the item currently waiting for a category, if any.

    ``expired_item`` is set when the last question timed out unanswered.
    """
    slot = store.get(user_id).pending
    pending_item = slot.get()
    return PendingQuestionResponse(pending_item=pending_item, expired_item=slot.last_expired)


@router.post("/cancel", response_model=PendingQuestionResponse)
async def cancel_pending_question(
    user_id: Annotated[int, Depends(get_current_user_id)],
    store: Annotated[ConversationStore, Depends(get_conversation_store)],
):
    """Drop the pending question without asking the model."""
    cancelled = AssistantService.cancel(store.get(user_id))
    if cancelled:
        logger.info(f"User {user_id} cancelled pending question for '{cancelled}'")
    return PendingQuestionResponse(pending_item=None)


@router.post("/undo", response_model=UndoResponse)
def undo_last_action(
    user_id: Annotated[int, Depends(get_current_user_id)],
    assistant: Annotated[AssistantService, Depends(get_assistant_service)],
):
    """Reverse the most recent action (or batch of actions)."""
    result = assistant.undo(user_id)
    return UndoResponse(
        success=result.success,
        message=result.message,
        count=result.count,
        reversed_names=result.reversed_names,
    )


@router.post("/classify", response_model=ClassificationResponse)
def classify_item(
    request: ClassifyRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
):
    """Classify an item name without running a full turn."""
    result = classify(request.item_name)
    question = None
    if result.is_ambiguous:
        question = format_question(request.item_name, result.possible_categories)
    elif result.reason == "unknown":
        question = format_unknown_question(request.item_name)
    return ClassificationResponse(
        category=result.category,
        is_ambiguous=result.is_ambiguous,
        possible_categories=list(result.possible_categories),
        reason=result.reason,
        question=question,
    )
