"""Pantry item model for tracking what the user has at home."""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String

from pantry_assistant.database import Base
from pantry_assistant.models.mixins import SnapshotMixin, TimestampMixin


class PantryItem(Base, TimestampMixin, SnapshotMixin):
    """Pantry item stored in one of the four storage categories."""

    __tablename__ = "pantry_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)  # Display name
    category = Column(String(20), nullable=False)  # StorageCategory value
    quantity = Column(String(100), nullable=True)  # Free text: "2 packs", "half a bag"
    current_quantity = Column(Float, nullable=True)
    low_stock_threshold = Column(Float, nullable=True)
    is_low = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_low_stock(self) -> bool:
        """Whether the item should be restocked.

        The numeric comparison wins whenever both numeric fields are set;
        the explicit flag only applies when they are not.
        """
        if self.current_quantity is not None and self.low_stock_threshold is not None:
            return self.current_quantity <= self.low_stock_threshold
        return bool(self.is_low)

    def __repr__(self) -> str:
        return f"<PantryItem(id={self.id}, name={self.name!r}, category={self.category})>"
