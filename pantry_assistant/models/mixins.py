"""Mixins for SQLAlchemy models."""

from datetime import date, datetime
from typing import Any

from sqlalchemy import Column, DateTime, func, inspect


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SnapshotMixin:
    """Mixin to capture and restore a row as a JSON-safe dict.

    Snapshots feed the action log: previous/new state of a mutation is stored
    as plain JSON so it can be restored later regardless of schema dialect.
    Timestamp columns managed by the database are left out.
    """

    snapshot_exclude: tuple[str, ...] = ("created_at", "updated_at")

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize all column values into a JSON-safe dict."""
        snapshot: dict[str, Any] = {}
        for column in inspect(self).mapper.column_attrs:
            if column.key in self.snapshot_exclude:
                continue
            value = getattr(self, column.key)
            if isinstance(value, datetime | date):
                value = value.isoformat()
            elif hasattr(value, "value"):
                value = value.value
            snapshot[column.key] = value
        return snapshot

    def apply_snapshot(self, snapshot: dict[str, Any]) -> None:
        """Overwrite every snapshotted column with the stored value."""
        columns = {column.key: column for column in inspect(type(self)).column_attrs}
        for key, value in snapshot.items():
            if key not in columns or key in self.snapshot_exclude:
                continue
            column_type = columns[key].columns[0].type
            if isinstance(value, str) and isinstance(column_type, DateTime):
                value = datetime.fromisoformat(value)
            setattr(self, key, value)

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, Any]) -> Any:
        """Build a new instance from a stored snapshot."""
        instance = cls()
        instance.apply_snapshot(snapshot)
        return instance
