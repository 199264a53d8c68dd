"""Case-insensitive existence check run before any insert."""

from collections.abc import Iterable
from typing import Protocol, TypeVar


class Named(Protocol):
    name: str


T = TypeVar("T", bound=Named)


def normalize_name(name: str) -> str:
    """Lowercase and trim a name for comparison."""
    return " ".join(name.lower().split())


def find_existing(name: str, inventory: Iterable[T]) -> T | None:
    """Return the inventory entry whose name matches ``name``, ignoring case.

    Read-only; a miss is a normal result.
    """
    target = normalize_name(name)
    for item in inventory:
        if item.name and normalize_name(item.name) == target:
            return item
    return None

