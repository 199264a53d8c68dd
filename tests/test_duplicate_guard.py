"""Tests for the duplicate guard."""

from pantry_assistant.models.pantry import PantryItem
from pantry_assistant.services.duplicate_guard import find_existing, normalize_name


def test_normalize_name():
    assert normalize_name("  Whole   MILK ") == "whole milk"


def test_case_insensitive_match_returns_the_row():
    milk = PantryItem(name="Milk", category="fridge")
    inventory = [PantryItem(name="Eggs", category="fridge"), milk]

    assert find_existing("milk", inventory) is milk
    assert find_existing(" MILK ", inventory) is milk


def test_no_partial_matches():
    inventory = [PantryItem(name="Milk", category="fridge")]

    assert find_existing("oat milk", inventory) is None
    assert find_existing("mil", inventory) is None


def test_empty_inventory():
    assert find_existing("milk", []) is None
