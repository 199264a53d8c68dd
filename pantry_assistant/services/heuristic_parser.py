"""Deterministic heuristic parsing for voice input - no LLM calls."""

import re

from pantry_assistant.models.enums import StorageCategory

CANCEL_PATTERN = re.compile(
    r"^\s*(?:please\s+)?(?:skip(?:\s+it|\s+that)?|cancel(?:\s+that|\s+it)?|never\s*mind|forget\s+it|stop)"
    r"\s*[.!]*\s*$",
    re.I,
)

UNDO_PATTERN = re.compile(
    r"^\s*(?:please\s+)?(?:undo(?:\s+that|\s+it|\s+the\s+last\s+(?:thing|one|action))?"
    r"|take\s+(?:that|it)\s+back|reverse\s+(?:that|it)|revert\s+(?:that|it))"
    r"\s*(?:please)?\s*[.!]*\s*$",
    re.I,
)

SHOPPING_LIST_PATTERN = re.compile(
    r"\b(?:(?:to|on|onto)\s+(?:my\s+|the\s+)?shopping\s+list"
    r"|(?:to|on)\s+the\s+list"
    r"|i\s+need\s+to\s+buy"
    r"|put\s+.+\s+on\s+(?:my\s+|the\s+)?(?:shopping\s+)?list)\b",
    re.I,
)

PANTRY_ADD_PATTERN = re.compile(
    r"^\s*(?:please\s+)?(?:add|i\s+have|i've\s+got|i\s+got|got|just\s+bought|i\s+bought"
    r"|put\s+.+\s+in(?:to)?\s+(?:my\s+|the\s+)?(?:fridge|freezer|cupboard|pantry))\b",
    re.I,
)

LOW_STOCK_PATTERN = re.compile(
    r"\b(?:running\s+low\s+on|low\s+on|almost\s+out\s+of|nearly\s+out\s+of|need\s+more)\s+(?P<items>.+)$",
    re.I,
)

# Category answers: the word itself, with "staples"/"pantry" meaning pantry staples.
CATEGORY_ANSWER_PATTERNS: tuple[tuple[re.Pattern[str], StorageCategory], ...] = (
    (re.compile(r"\bfridge\b", re.I), StorageCategory.FRIDGE),
    (re.compile(r"\bfreezer\b", re.I), StorageCategory.FREEZER),
    (re.compile(r"\bcupboard\b", re.I), StorageCategory.CUPBOARD),
    (re.compile(r"\bpantry[\s_]staples\b|\bstaples\b|\bpantry\b", re.I), StorageCategory.PANTRY_STAPLES),
)


class HeuristicParser:
    """Parse voice input using deterministic rules."""

    @staticmethod
    def is_cancel(text: str) -> bool:
        """Whether the user wants to drop the current question.

        Examples: "skip", "cancel", "never mind", "forget it".
        """
        return CANCEL_PATTERN.match(text) is not None

    @staticmethod
    def is_undo_request(text: str) -> bool:
        """Whether the whole utterance asks to undo the last action."""
        return UNDO_PATTERN.match(text) is not None

    @staticmethod
    def is_shopping_list_request(text: str) -> bool:
        """Whether the user explicitly targets the shopping list.

        - "add eggs to the shopping list" -> True
        - "I need to buy bread" -> True
        - "add eggs" -> False (pantry)
        """
        return SHOPPING_LIST_PATTERN.search(text) is not None

    @staticmethod
    def is_pantry_add(text: str) -> bool:
        """Whether the utterance opens like a pantry add.

        - "add milk" -> True
        - "I've got eggs" / "put the peas in the freezer" -> True
        - "running low on coffee" -> False
        """
        return PANTRY_ADD_PATTERN.match(text) is not None

    @staticmethod
    def parse_category_answer(text: str) -> StorageCategory | None:
        """Extract a storage category named in a follow-up answer.

        - "put it in the freezer" -> freezer
        - "pantry" / "staples" -> pantry_staples
        """
        for pattern, category in CATEGORY_ANSWER_PATTERNS:
            if pattern.search(text):
                return category
        return None

    @staticmethod
    def parse_low_stock_items(text: str) -> list[str]:
        """Extract items from "running low on X" style phrasing."""
        match = LOW_STOCK_PATTERN.search(text.strip())
        if not match:
            return []
        return HeuristicParser.split_items(match.group("items"))

    @staticmethod
    def parse_grocery_items(text: str) -> list[str]:
        """Extract item names from grocery voice input.

        Rules:
        - Remove common prefixes: "add", "get", "buy", "pick up", "I have", "got"
        - Remove destinations: "to the shopping list", "in the fridge"
        - Split on commas, "and", "also"
        """
        text = text.strip()
        text = re.sub(
            r"^(?:please\s+)?(?:add|get|buy|pick\s+up|grab|put|need|i\s+need\s+to\s+buy|i\s+have|i've\s+got|got)\s+",
            "",
            text,
            flags=re.I,
        )
        text = re.sub(r"\s+(?:to|on|onto)\s+(?:my\s+|the\s+)?(?:shopping\s+)?list\s*[.!]*$", "", text, flags=re.I)
        text = re.sub(
            r"\s+(?:in|into|to)\s+(?:my\s+|the\s+)?(?:fridge|freezer|cupboard|pantry(?:\s+staples)?)\s*[.!]*$",
            "",
            text,
            flags=re.I,
        )
        return HeuristicParser.split_items(text)

    @staticmethod
    def split_items(text: str) -> list[str]:
        """Split an item list on commas, "and", "also"."""
        text = text.strip().rstrip(".!?")
        parts = re.split(r"\s*,\s*(?:and\s+|also\s+)?|\s+(?:and|also)\s+", text, flags=re.I)
        items = []
        for part in parts:
            part = re.sub(r"^(?:some|a|an|the|more)\s+", "", part.strip(), flags=re.I)
            if part:
                items.append(part)
        return items
