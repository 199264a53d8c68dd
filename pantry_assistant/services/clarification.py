"""Natural-language clarification questions for ambiguous items."""

from collections.abc import Sequence

from pantry_assistant.models.enums import StorageCategory


def join_options(options: Sequence[str], conjunction: str = "or") -> str:
    """Join options as "a or b" / "a, b, or c"."""
    if not options:
        return ""
    if len(options) == 1:
        return options[0]
    if len(options) == 2:
        return f"{options[0]} {conjunction} {options[1]}"
    return f"{', '.join(options[:-1])}, {conjunction} {options[-1]}"


def format_question(item_name: str, candidates: Sequence[StorageCategory | str]) -> str:
    """Ask where an item should go, listing the candidate categories.

    >>> format_question("fish", ["fridge", "freezer"])
    'You said fish. Should that go in the fridge or freezer?'
    """
    options = []
    for candidate in candidates:
        category = StorageCategory.parse(candidate)
        options.append(category.display_name if category else str(candidate))
    return f"You said {item_name}. Should that go in the {join_options(options)}?"


def format_unknown_question(item_name: str) -> str:
    """Ask about an item the classifier has never heard of."""
    options = join_options([category.display_name for category in StorageCategory])
    return f"I'm not sure where {item_name} should go. {options[0].upper()}{options[1:]}?"
