import pytest

from ratecalc.core.errors import RowNotFoundError
from ratecalc.models.config import DEFAULT_CONFIG
from ratecalc.models.constants import CELLS
from ratecalc.models.row import default_rows
from ratecalc.services import conversion
from ratecalc.services.calculator import SalaryCalculator


def test_edit_monthly_pln_updates_canonical(calculator):
    assert calculator.commit_edit(1, "monthly", "PLN", "15000") is True
    row = calculator.rows.get(1)
    assert row.yearly_pln == 180000
    assert conversion.derive_value(row.yearly_pln, "hourly", "PLN", calculator.config) == pytest.approx(100.45, abs=0.005)
    assert calculator.derive(1, "hourly", "PLN") == "100"


def test_edit_recomputes_all_nine_cells(calculator):
    calculator.commit_edit(2, "hourly", "EUR", "40")
    row = calculator.rows.get(2)
    expected = {
        (p, c): conversion.display_value(row.yearly_pln, p, c, calculator.config) for p, c in CELLS
    }
    cells = calculator.cells(2)
    for (period, currency), value in expected.items():
        assert cells[period][currency] == value
    assert cells["hourly"]["EUR"] == "40.0"
    assert row.yearly_pln == pytest.approx(40 * 1.16 * 3.65 * 1792)


def test_edit_does_not_touch_other_rows(calculator):
    before = [r.yearly_pln for r in calculator.rows.rows()]
    calculator.commit_edit(1, "yearly", "USD", "70,000")
    after = [r.yearly_pln for r in calculator.rows.rows()]
    assert after[1:] == before[1:]
    assert after[0] == pytest.approx(70000 * 3.65)


@pytest.mark.parametrize("raw", ["", "abc", ".", "--"])
def test_invalid_input_does_not_mutate(calculator, raw):
    assert calculator.commit_edit(1, "monthly", "USD", raw) is False
    assert calculator.rows.get(1).yearly_pln == 201600


def test_unchanged_display_is_noop(calculator):
    calculator.rows.set_canonical_amount(1, 201600.4)
    assert calculator.commit_edit(1, "monthly", "PLN", "16,800") is False
    assert calculator.rows.get(1).yearly_pln == 201600.4


def test_zero_billable_hours(calculator):
    rejected = calculator.update_config({"vacation_days_per_year": 251})
    assert rejected == []
    assert calculator.billable_hours() == 0
    cells = calculator.cells(1)
    assert cells["hourly"] == {"PLN": "", "USD": "", "EUR": ""}
    assert calculator.commit_edit(1, "hourly", "PLN", "150") is False
    assert calculator.rows.get(1).yearly_pln == 201600


def test_step_cell(calculator):
    assert calculator.step_cell(1, "hourly", "USD", 1) is True
    assert calculator.derive(1, "hourly", "USD") == "30.9"
    assert calculator.step_cell(2, "monthly", "PLN", -1) is True
    assert calculator.derive(2, "monthly", "PLN") == "14,999"
    assert calculator.rows.get(2).yearly_pln == 14999 * 12


def test_step_down_floors_at_zero(calculator):
    row = calculator.add_row()
    assert calculator.step_cell(row.id, "monthly", "PLN", -1) is False
    assert calculator.rows.get(row.id).yearly_pln == 0


def test_label_and_rows(calculator):
    row = calculator.add_row(120000, "Freelance")
    calculator.set_label(row.id, "Freelance B2B")
    assert calculator.rows.get(row.id).label == "Freelance B2B"
    assert calculator.remove_row(row.id) is True
    assert calculator.remove_row(row.id) is False
    with pytest.raises(RowNotFoundError):
        calculator.derive(row.id, "yearly", "PLN")


def test_reset_restores_defaults(calculator):
    calculator.update_config({"usd_to_pln": 5})
    calculator.add_row(1)
    calculator.remove_row(1)
    calculator.reset()
    assert calculator.config == DEFAULT_CONFIG
    assert calculator.rows.rows() == default_rows()


def test_state_persists_between_instances(store, rate_cache):
    calc = SalaryCalculator.from_store(store, rate_cache)
    calc.commit_edit(1, "monthly", "PLN", "15000")
    calc.update_config({"vacationDays": 20})
    calc.set_label(3, "Company C")

    reloaded = SalaryCalculator.from_store(store, rate_cache)
    assert reloaded.rows.get(1).yearly_pln == 180000
    assert reloaded.config.vacation_days_per_year == 20
    assert reloaded.rows.get(3).label == "Company C"


def test_snapshot_shape(calculator):
    snap = calculator.snapshot()
    assert snap["billable_hours_per_year"] == 1792
    assert len(snap["columns"]) == 9
    assert [r["id"] for r in snap["rows"]] == [1, 2, 3]
    assert snap["rows"][0]["cells"]["monthly"]["PLN"] == "16,800"
    assert snap["config"]["usdPln"] == 3.65
    assert set(snap["rates"]) == {"provider", "last_updated", "stale", "loading", "error"}
