"""Tests for the action log and undo."""

from pantry_assistant.models.action_log import ActionLogEntry
from pantry_assistant.models.enums import StorageCategory
from pantry_assistant.models.pantry import PantryItem
from pantry_assistant.models.shopping_list import ShoppingListItem
from pantry_assistant.schemas.actions import ItemProposal
from pantry_assistant.services.action_log import NOTHING_TO_UNDO, ActionLogService
from pantry_assistant.services.pantry_service import PantryService


def fridge(name: str) -> ItemProposal:
    return ItemProposal(name=name, category=StorageCategory.FRIDGE)


def test_nothing_to_undo_on_empty_log(db):
    result = ActionLogService(db).undo_last(1)

    assert result.success is False
    assert result.count == 0
    assert result.message == NOTHING_TO_UNDO


def test_single_add_has_no_group(db):
    PantryService(db).add_items(1, [fridge("milk")])

    entry = db.query(ActionLogEntry).one()
    assert entry.action_type == "add_item"
    assert entry.entity_type == "pantry_item"
    assert entry.action_group_id is None
    assert entry.new_data["name"] == "milk"
    assert entry.new_data["category"] == "fridge"


def test_batch_add_shares_one_group_and_undoes_together(db):
    PantryService(db).add_items(1, [fridge("milk"), fridge("eggs"), fridge("butter")])

    entries = db.query(ActionLogEntry).all()
    assert len(entries) == 3
    assert len({entry.action_group_id for entry in entries}) == 1
    assert entries[0].action_group_id is not None

    result = ActionLogService(db).undo_last(1)

    assert result.success is True
    assert result.count == 3
    assert result.reversed_names == ["milk", "eggs", "butter"]
    assert result.message == "Okay, I removed milk, eggs, and butter from your pantry."
    assert db.query(PantryItem).count() == 0


def test_undo_is_idempotent(db):
    PantryService(db).add_items(1, [fridge("milk")])
    log = ActionLogService(db)

    first = log.undo_last(1)
    second = log.undo_last(1)

    assert first.success is True
    assert first.reversed_names == ["milk"]
    assert second.success is False
    assert second.message == NOTHING_TO_UNDO
    assert db.query(ActionLogEntry).filter(ActionLogEntry.undone_at.is_(None)).count() == 0


def test_undo_takes_newest_group_first(db):
    pantry = PantryService(db)
    pantry.add_items(1, [fridge("milk")])
    pantry.add_items(1, [fridge("eggs"), fridge("butter")])
    log = ActionLogService(db)

    first = log.undo_last(1)
    assert first.reversed_names == ["eggs", "butter"]
    assert [item.name for item in pantry.list_items(1)] == ["milk"]

    second = log.undo_last(1)
    assert second.reversed_names == ["milk"]
    assert pantry.list_items(1) == []


def test_undo_update_restores_whole_snapshot(db, make_pantry_item):
    item = make_pantry_item("Milk", quantity="2 pints", current_quantity=4, low_stock_threshold=1)
    pantry = PantryService(db)

    pantry.update_items(1, [ItemProposal(name="milk", quantity="a splash", is_low=True)])
    db.refresh(item)
    assert item.is_low is True
    assert item.quantity == "a splash"
    assert item.current_quantity == 1

    result = ActionLogService(db).undo_last(1)
    db.refresh(item)

    assert result.message == "Okay, I restored Milk."
    assert item.is_low is False
    assert item.quantity == "2 pints"
    assert item.current_quantity == 4


def test_undo_delete_puts_row_back(db, make_pantry_item):
    item = make_pantry_item("Cheddar", category="fridge", quantity="1 block")
    item_id = item.id
    pantry = PantryService(db)

    assert pantry.delete_item(1, item_id) is True
    assert pantry.get_item(1, item_id) is None

    result = ActionLogService(db).undo_last(1)

    restored = pantry.get_item(1, item_id)
    assert result.message == "Okay, I put Cheddar back in your pantry."
    assert restored is not None
    assert restored.name == "Cheddar"
    assert restored.quantity == "1 block"


def test_undo_shopping_list_add_and_delete(db):
    pantry = PantryService(db)
    added, _ = pantry.add_to_shopping_list(1, [ItemProposal(name="bread")])
    log = ActionLogService(db)

    pantry.delete_shopping_item(1, added[0].id)
    assert pantry.list_shopping(1) == []

    result = log.undo_last(1)
    assert result.message == "Okay, I put bread back on your shopping list."
    assert [row.name for row in pantry.list_shopping(1)] == ["bread"]

    result = log.undo_last(1)
    assert result.message == "Okay, I removed bread from your shopping list."
    assert db.query(ShoppingListItem).count() == 0


def test_undo_is_per_user(db):
    PantryService(db).add_items(1, [fridge("milk")])

    result = ActionLogService(db).undo_last(2)

    assert result.success is False
    assert db.query(PantryItem).count() == 1


def test_undo_reports_only_rows_it_reversed(db):
    rows = PantryService(db).add_items(1, [fridge("milk"), fridge("eggs")])
    db.delete(rows[1])
    db.commit()

    result = ActionLogService(db).undo_last(1)

    assert result.success is True
    assert result.count == 1
    assert result.reversed_names == ["milk"]
    assert result.message == "Okay, I removed milk from your pantry."
    assert db.query(PantryItem).count() == 0


def test_undo_of_stale_entry_is_nothing_to_undo(db):
    rows = PantryService(db).add_items(1, [fridge("milk")])
    db.delete(rows[0])
    db.commit()
    log = ActionLogService(db)

    result = log.undo_last(1)

    assert result.success is False
    assert result.message == NOTHING_TO_UNDO
    assert log.latest_reversible(1) is None
