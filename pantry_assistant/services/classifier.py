"""Deterministic storage-category classification for grocery items - no LLM calls.

Resolution order is fixed and first match wins:

1. Keyword override ("frozen", "tinned", "fresh", ...). Fires even when the
   base noun is ambiguous: "frozen fish" is freezer, never a question.
2. Known multi-word phrases ("ice cream", "baked beans", ...).
3. Known single words, first on the whole name, then per token ("2 eggs").
4. Ambiguous base nouns ("fish", "bread", ...) with their candidate categories.
5. Unknown.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

from pantry_assistant.models.enums import StorageCategory

FRIDGE = StorageCategory.FRIDGE
FREEZER = StorageCategory.FREEZER
CUPBOARD = StorageCategory.CUPBOARD
PANTRY_STAPLES = StorageCategory.PANTRY_STAPLES

ClassificationReason = Literal["dictionary", "keyword", "ambiguous", "unknown"]

# Checked in order; the first group with a hit decides the category.
CATEGORY_KEYWORDS: tuple[tuple[tuple[str, ...], StorageCategory], ...] = (
    (("frozen", "freeze", "freezing"), FREEZER),
    (("fresh", "raw", "chilled", "refrigerated"), FRIDGE),
    (("tinned", "canned", "tin", "can"), CUPBOARD),
    (("dried", "dry", "dehydrated"), PANTRY_STAPLES),
    (("long-life", "longlife", "long life", "uht", "shelf-stable"), CUPBOARD),
)

MULTI_WORD_ITEMS = MappingProxyType(
    {
        "ice cream": FREEZER,
        "ice-cream": FREEZER,
        "icecream": FREEZER,
        "corn flakes": CUPBOARD,
        "cornflakes": CUPBOARD,
        "frozen peas": FREEZER,
        "frozen chips": FREEZER,
        "frozen vegetables": FREEZER,
        "frozen berries": FREEZER,
        "frozen pizza": FREEZER,
        "frozen fish": FREEZER,
        "fish fingers": FREEZER,
        "fish sticks": FREEZER,
        "ice lollies": FREEZER,
        "ice cubes": FREEZER,
        "frozen prawns": FREEZER,
        "frozen shrimp": FREEZER,
        "frozen meat": FREEZER,
        "frozen bread": FREEZER,
        "baked beans": CUPBOARD,
        "tinned tomatoes": CUPBOARD,
        "canned tomatoes": CUPBOARD,
        "canned soup": CUPBOARD,
        "tinned soup": CUPBOARD,
        "tinned tuna": CUPBOARD,
        "canned tuna": CUPBOARD,
        "canned beans": CUPBOARD,
        "tinned beans": CUPBOARD,
        "tinned peas": CUPBOARD,
        "canned peas": CUPBOARD,
        "tinned corn": CUPBOARD,
        "canned corn": CUPBOARD,
        "tinned fruit": CUPBOARD,
        "canned fruit": CUPBOARD,
        "canned chickpeas": CUPBOARD,
        "tinned chickpeas": CUPBOARD,
        "coconut milk": CUPBOARD,
        "long life milk": CUPBOARD,
        "uht milk": CUPBOARD,
        "peanut butter": CUPBOARD,
        "olive oil": PANTRY_STAPLES,
        "vegetable oil": PANTRY_STAPLES,
        "soy sauce": PANTRY_STAPLES,
        "stock cubes": PANTRY_STAPLES,
        "dried beans": PANTRY_STAPLES,
        "dried pasta": PANTRY_STAPLES,
        "baking powder": PANTRY_STAPLES,
        "baking soda": PANTRY_STAPLES,
        "corn starch": PANTRY_STAPLES,
        "corn flour": PANTRY_STAPLES,
        "dried herbs": PANTRY_STAPLES,
        "fresh fish": FRIDGE,
        "fresh salmon": FRIDGE,
        "fresh prawns": FRIDGE,
        "fresh meat": FRIDGE,
        "fresh chicken": FRIDGE,
        "fresh vegetables": FRIDGE,
        "fresh berries": FRIDGE,
        "fresh bread": CUPBOARD,
        "potato chips": CUPBOARD,
        "tortilla chips": CUPBOARD,
    }
)

SINGLE_WORD_ITEMS = MappingProxyType(
    {
        # Dairy, meat and chilled goods
        "cheese": FRIDGE,
        "milk": FRIDGE,
        "yogurt": FRIDGE,
        "yoghurt": FRIDGE,
        "butter": FRIDGE,
        "eggs": FRIDGE,
        "ham": FRIDGE,
        "bacon": FRIDGE,
        "cream": FRIDGE,
        "chicken": FRIDGE,
        "beef": FRIDGE,
        "mince": FRIDGE,
        "pork": FRIDGE,
        "lamb": FRIDGE,
        "sausages": FRIDGE,
        "sausage": FRIDGE,
        "lettuce": FRIDGE,
        "spinach": FRIDGE,
        "kale": FRIDGE,
        "cucumber": FRIDGE,
        "celery": FRIDGE,
        "carrots": FRIDGE,
        "carrot": FRIDGE,
        "hummus": FRIDGE,
        "juice": FRIDGE,
        "deli": FRIDGE,
        "salami": FRIDGE,
        "prosciutto": FRIDGE,
        "mayonnaise": FRIDGE,
        "mayo": FRIDGE,
        "ketchup": FRIDGE,
        "mustard": FRIDGE,
        "jam": FRIDGE,
        "marmalade": FRIDGE,
        # Shelf-stable and fruit bowl
        "cereal": CUPBOARD,
        "crackers": CUPBOARD,
        "biscuits": CUPBOARD,
        "cookies": CUPBOARD,
        "crisps": CUPBOARD,
        "nuts": CUPBOARD,
        "honey": CUPBOARD,
        "chocolate": CUPBOARD,
        "coffee": CUPBOARD,
        "tea": CUPBOARD,
        "peanuts": CUPBOARD,
        "peanut": CUPBOARD,
        "onion": CUPBOARD,
        "onions": CUPBOARD,
        "garlic": CUPBOARD,
        "potato": CUPBOARD,
        "potatoes": CUPBOARD,
        "tomato": CUPBOARD,
        "tomatoes": CUPBOARD,
        "apple": CUPBOARD,
        "apples": CUPBOARD,
        "banana": CUPBOARD,
        "bananas": CUPBOARD,
        "orange": CUPBOARD,
        "oranges": CUPBOARD,
        "lemon": CUPBOARD,
        "lemons": CUPBOARD,
        "lime": CUPBOARD,
        "limes": CUPBOARD,
        "avocado": CUPBOARD,
        "avocados": CUPBOARD,
        # Dry staples, spices
        "pasta": PANTRY_STAPLES,
        "spaghetti": PANTRY_STAPLES,
        "penne": PANTRY_STAPLES,
        "fusilli": PANTRY_STAPLES,
        "macaroni": PANTRY_STAPLES,
        "noodles": PANTRY_STAPLES,
        "rice": PANTRY_STAPLES,
        "oats": PANTRY_STAPLES,
        "porridge": PANTRY_STAPLES,
        "flour": PANTRY_STAPLES,
        "sugar": PANTRY_STAPLES,
        "salt": PANTRY_STAPLES,
        "pepper": PANTRY_STAPLES,
        "oil": PANTRY_STAPLES,
        "vinegar": PANTRY_STAPLES,
        "stock": PANTRY_STAPLES,
        "lentils": PANTRY_STAPLES,
        "couscous": PANTRY_STAPLES,
        "quinoa": PANTRY_STAPLES,
        "yeast": PANTRY_STAPLES,
        "cornflour": PANTRY_STAPLES,
        "breadcrumbs": PANTRY_STAPLES,
        "spices": PANTRY_STAPLES,
        "cinnamon": PANTRY_STAPLES,
        "cumin": PANTRY_STAPLES,
        "paprika": PANTRY_STAPLES,
        "oregano": PANTRY_STAPLES,
        "basil": PANTRY_STAPLES,
        "thyme": PANTRY_STAPLES,
    }
)

# Nouns with no single right answer unless a keyword says otherwise.
AMBIGUOUS_BASE_ITEMS = MappingProxyType(
    {
        "fish": (FRIDGE, FREEZER),
        "salmon": (FRIDGE, FREEZER),
        "prawns": (FRIDGE, FREEZER),
        "shrimp": (FRIDGE, FREEZER),
        "peas": (FRIDGE, FREEZER, CUPBOARD),
        "corn": (FRIDGE, FREEZER, CUPBOARD),
        "bread": (CUPBOARD, FREEZER),
        "berries": (FRIDGE, FREEZER),
        "strawberries": (FRIDGE, FREEZER),
        "blueberries": (FRIDGE, FREEZER),
        "raspberries": (FRIDGE, FREEZER),
        "pizza": (FRIDGE, FREEZER),
        "vegetables": (FRIDGE, FREEZER, CUPBOARD),
        "meat": (FRIDGE, FREEZER),
        "beans": (CUPBOARD, PANTRY_STAPLES),
        "soup": (FRIDGE, CUPBOARD),
        "pie": (FRIDGE, FREEZER),
        "pastry": (FRIDGE, FREEZER),
        "dough": (FRIDGE, FREEZER),
        "mushrooms": (FRIDGE, CUPBOARD),
        "herbs": (FRIDGE, PANTRY_STAPLES),
        "tofu": (FRIDGE, FREEZER),
        "chips": (CUPBOARD, FREEZER),
    }
)


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one item name.

    ``is_ambiguous`` implies ``category is None`` and at least two
    ``possible_categories``. ``reason == "unknown"`` means no category and no
    candidates at all.
    """

    category: StorageCategory | None
    is_ambiguous: bool
    reason: ClassificationReason
    possible_categories: tuple[StorageCategory, ...] = field(default_factory=tuple)

    @property
    def is_resolved(self) -> bool:
        """Whether a single category was found."""
        return self.category is not None and not self.is_ambiguous


def normalize_text(text: str) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    return re.sub(r"\s+", " ", text.lower().strip())


def tokenize(text: str) -> list[str]:
    """Split normalized text into whitespace-separated tokens."""
    normalized = normalize_text(text)
    return normalized.split(" ") if normalized else []


def contains_phrase(text: str, phrase: str) -> bool:
    """Check for ``phrase`` bounded by whitespace or string edges."""
    normalized_text = normalize_text(text)
    normalized_phrase = normalize_text(phrase)
    if not normalized_phrase:
        return False
    if normalized_text == normalized_phrase:
        return True
    return re.search(rf"(^|\s){re.escape(normalized_phrase)}($|\s)", normalized_text) is not None


def _is_phrase_keyword(keyword: str) -> bool:
    return " " in keyword or "-" in keyword


def _match_keyword(normalized: str, tokens: list[str]) -> StorageCategory | None:
    for keywords, category in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if _is_phrase_keyword(keyword):
                if contains_phrase(normalized, keyword):
                    return category
            elif keyword in tokens:
                return category
    return None


def classify(item_name: str) -> ClassificationResult:
    """Classify an item name into a storage category.

    Never raises; an unrecognized name is a normal ``unknown`` result.
    """
    normalized = normalize_text(item_name)
    tokens = tokenize(item_name)

    keyword_category = _match_keyword(normalized, tokens)
    if keyword_category is not None:
        return ClassificationResult(category=keyword_category, is_ambiguous=False, reason="keyword")

    for phrase, category in MULTI_WORD_ITEMS.items():
        if contains_phrase(normalized, phrase):
            return ClassificationResult(category=category, is_ambiguous=False, reason="dictionary")

    for candidate in (normalized, *tokens):
        if candidate in SINGLE_WORD_ITEMS:
            return ClassificationResult(
                category=SINGLE_WORD_ITEMS[candidate], is_ambiguous=False, reason="dictionary"
            )

    for candidate in (normalized, *tokens):
        if candidate in AMBIGUOUS_BASE_ITEMS:
            return ClassificationResult(
                category=None,
                is_ambiguous=True,
                reason="ambiguous",
                possible_categories=AMBIGUOUS_BASE_ITEMS[candidate],
            )

    return ClassificationResult(category=None, is_ambiguous=False, reason="unknown")


def is_ambiguous(item_name: str) -> bool:
    """Shortcut for ``classify(item_name).is_ambiguous``."""
    return classify(item_name).is_ambiguous
