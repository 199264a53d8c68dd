"""Tests for deterministic voice heuristics."""

import pytest

from pantry_assistant.models.enums import StorageCategory
from pantry_assistant.services.heuristic_parser import HeuristicParser


@pytest.mark.parametrize("text", ["skip", "Cancel", "never mind", "nevermind", "forget it", "skip it."])
def test_cancel_phrases(text):
    assert HeuristicParser.is_cancel(text)


@pytest.mark.parametrize("text", ["skip the bread", "cancel my order of milk", "add milk"])
def test_not_cancel(text):
    assert not HeuristicParser.is_cancel(text)


@pytest.mark.parametrize("text", ["undo", "Undo that", "take that back", "reverse that please"])
def test_undo_phrases(text):
    assert HeuristicParser.is_undo_request(text)


def test_undo_must_be_whole_utterance():
    assert not HeuristicParser.is_undo_request("how do I undo a recipe")


@pytest.mark.parametrize(
    "text",
    [
        "add eggs to the shopping list",
        "add eggs to my shopping list",
        "put eggs on the list",
        "I need to buy bread",
        "add milk to the list",
    ],
)
def test_shopping_list_phrasing(text):
    assert HeuristicParser.is_shopping_list_request(text)


def test_bare_add_is_not_shopping_list():
    assert not HeuristicParser.is_shopping_list_request("add eggs")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("put it in the freezer", StorageCategory.FREEZER),
        ("fridge", StorageCategory.FRIDGE),
        ("the cupboard please", StorageCategory.CUPBOARD),
        ("pantry staples", StorageCategory.PANTRY_STAPLES),
        ("staples", StorageCategory.PANTRY_STAPLES),
        ("pantry", StorageCategory.PANTRY_STAPLES),
    ],
)
def test_category_answers(text, expected):
    assert HeuristicParser.parse_category_answer(text) == expected


def test_no_category_answer():
    assert HeuristicParser.parse_category_answer("it's the fish I bought") is None


def test_low_stock_items():
    assert HeuristicParser.parse_low_stock_items("I'm running low on milk and eggs") == [
        "milk",
        "eggs",
    ]
    assert HeuristicParser.parse_low_stock_items("add milk") == []


def test_grocery_items_strip_prefix_and_destination():
    assert HeuristicParser.parse_grocery_items("add milk, eggs and butter") == [
        "milk",
        "eggs",
        "butter",
    ]
    assert HeuristicParser.parse_grocery_items("add eggs to the shopping list") == ["eggs"]
    assert HeuristicParser.parse_grocery_items("put the cheese in the fridge") == ["cheese"]


def test_split_items_drops_articles():
    assert HeuristicParser.split_items("some rice, a loaf of bread, also the jam") == [
        "rice",
        "loaf of bread",
        "jam",
    ]


@pytest.mark.parametrize(
    "text",
    ["add eggs", "please add eggs", "I have eggs", "I've got eggs", "got eggs", "put the peas in the freezer"],
)
def test_pantry_add_phrasing(text):
    assert HeuristicParser.is_pantry_add(text)


@pytest.mark.parametrize("text", ["running low on coffee", "what can I cook", "I need to buy bread"])
def test_not_pantry_add(text):
    assert not HeuristicParser.is_pantry_add(text)
