import pytest

from ratecalc.core.errors import RowNotFoundError
from ratecalc.models.row import Row, default_rows
from ratecalc.services.row_store import RowStore


def test_add_row_appends_with_fresh_id():
    store = RowStore(default_rows())
    row = store.add_row()
    assert row.yearly_pln == 0
    assert row.label == ""
    assert [r.id for r in store.rows()] == [1, 2, 3, row.id]
    assert row.id not in (1, 2, 3)


def test_display_order_is_insertion_order():
    store = RowStore([Row(id=50, label="late id"), Row(id=7, label="early id")])
    store.add_row(1000, "new")
    assert [r.label for r in store.rows()] == ["late id", "early id", "new"]


def test_ids_are_not_reused_after_removal():
    store = RowStore()
    first = store.add_row()
    second = store.add_row()
    store.remove_row(second.id)
    third = store.add_row()
    assert len({first.id, second.id, third.id}) == 3


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        RowStore([Row(id=1), Row(id=1)])


def test_remove_missing_row_is_noop():
    store = RowStore(default_rows())
    before = store.rows()
    assert store.remove_row(999) is False
    assert store.rows() == before


def test_remove_row():
    store = RowStore(default_rows())
    assert store.remove_row(2) is True
    assert [r.id for r in store.rows()] == [1, 3]


def test_set_label_and_amount():
    store = RowStore(default_rows())
    store.set_label(3, "Company C")
    store.set_canonical_amount(3, 123456.78)
    row = store.get(3)
    assert row.label == "Company C"
    assert row.yearly_pln == 123456.78


def test_negative_amount_rejected():
    store = RowStore(default_rows())
    with pytest.raises(ValueError):
        store.set_canonical_amount(1, -1)
    assert store.get(1).yearly_pln == 201600


def test_unknown_row_mutation_raises():
    store = RowStore()
    with pytest.raises(RowNotFoundError):
        store.set_label(42, "nope")
    with pytest.raises(RowNotFoundError):
        store.set_canonical_amount(42, 1)
    assert store.get(42) is None
