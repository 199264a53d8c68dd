"""Shopping list item model, kept separate from pantry inventory."""

from sqlalchemy import Boolean, Column, Integer, String

from pantry_assistant.database import Base
from pantry_assistant.models.mixins import SnapshotMixin, TimestampMixin


class ShoppingListItem(Base, TimestampMixin, SnapshotMixin):
    """Something the user needs to buy."""

    __tablename__ = "shopping_list_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    quantity = Column(String(100), nullable=True)
    checked = Column(Boolean, nullable=False, default=False)
