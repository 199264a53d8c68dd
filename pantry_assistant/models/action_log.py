"""Append-only action log used for auditing and undo."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from pantry_assistant.database import Base


class ActionLogEntry(Base):
    """One recorded mutation of a pantry or shopping list row."""

    __tablename__ = "action_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    action_type: Mapped[str] = mapped_column(String(20), nullable=False)  # ActionType value
    entity_type: Mapped[str] = mapped_column(String(30), nullable=False)  # EntityType value
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    previous_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    new_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    action_group_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    undone_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    @property
    def item_name(self) -> str | None:
        """Name of the affected entity, taken from whichever snapshot exists."""
        for snapshot in (self.new_data, self.previous_data):
            if snapshot and snapshot.get("name"):
                return snapshot["name"]
        return None

    def __repr__(self) -> str:
        return (
            f"<ActionLogEntry(id={self.id}, action_type={self.action_type}, "
            f"entity_id={self.entity_id}, group={self.action_group_id})>"
        )
