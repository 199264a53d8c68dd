"""FastAPI dependencies for authentication, database and services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pantry_assistant.config import get_settings
from pantry_assistant.database import get_db
from pantry_assistant.services.assistant_service import AssistantService
from pantry_assistant.services.auth import decode_access_token
from pantry_assistant.services.conversation import ConversationStore
from pantry_assistant.services.llm import LLMService
from pantry_assistant.services.pantry_service import PantryService
from pantry_assistant.services.turn_resolver import TurnResolver

security = HTTPBearer()


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> int:
    """Get the current user's id from the JWT token."""
    payload = decode_access_token(credentials.credentials)

    user_id = payload.get("sub") if payload else None
    if user_id is None or not str(user_id).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return int(user_id)


@lru_cache
def get_conversation_store() -> ConversationStore:
    """Process-wide conversation registry; pending questions live here."""
    settings = get_settings()
    return ConversationStore(
        timeout_seconds=settings.pending_question_timeout_seconds,
        idle_seconds=settings.pending_question_timeout_seconds + settings.llm_timeout_seconds,
    )


def get_llm_service() -> LLMService:
    """Get LLM service instance."""
    return LLMService()


def get_pantry_service(
    db: Annotated[Session, Depends(get_db)],
) -> PantryService:
    """Get pantry service with dependencies."""
    return PantryService(db)


def get_assistant_service(
    db: Annotated[Session, Depends(get_db)],
    llm_service: Annotated[LLMService, Depends(get_llm_service)],
) -> AssistantService:
    """Get assistant service with dependencies."""
    return AssistantService(db, TurnResolver(llm_service))
