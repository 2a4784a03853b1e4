import random

import pytest

from plan_logics.aggregation import TotalsTracker, compute, derive_sections
from plan_logics.grid_store import GridStore
from plan_logics.schemas import UnitRecord
from plan_logics.tables import REVENUE_BY_BUSINESS


def test_totals_for_small_grid(store, small_table):
    store.set("9.27", 10, "100")
    store.set("9.27", 20, "2.5")
    store.set("9.24", 20, "1,000")
    totals = compute(store.values, small_table, [10, 20])
    assert totals.row_total == {"9.24": 1000.0, "9.27": 102.5}
    assert totals.column_total == {10: 100.0, 20: 1002.5}
    assert totals.section_subtotal["9.T"]["per_column"] == {10: 100.0, 20: 1002.5}
    assert totals.section_subtotal["9.T"]["total"] == pytest.approx(1102.5)
    assert totals.grand_total == pytest.approx(1102.5)


def test_compute_accepts_unit_records(store, small_table):
    store.set("9.27", 10, "7")
    units = [UnitRecord(id=10, name="A"), UnitRecord(id=20, name="B")]
    assert compute(store.values, small_table, units).column_total == {10: 7.0, 20: 0.0}


def test_empty_units_give_zero_totals(small_table):
    store = GridStore(small_table, [])
    totals = compute(store.values, small_table, [])
    assert totals.row_total == {"9.24": 0.0, "9.27": 0.0}
    assert totals.column_total == {}
    assert totals.grand_total == 0


def test_revenue_sections_are_derived_from_row_order():
    members = derive_sections(REVENUE_BY_BUSINESS.rows)
    assert list(members) == ["1.T", "2.T", "3.T", "4.T", "5.T", "6.T"]
    assert members["2.T"] == ["2.1", "2.2", "2.3", "2.4"]
    assert sum(len(codes) for codes in members.values()) == len(REVENUE_BY_BUSINESS.item_rows)


@pytest.mark.parametrize("seed", range(5))
def test_grand_total_agrees_with_both_reductions(seed):
    rng = random.Random(seed)
    units = [11, 12, 13]
    store = GridStore(REVENUE_BY_BUSINESS, units)
    for code in REVENUE_BY_BUSINESS.item_codes:
        for uid in units:
            if rng.random() < 0.6:
                store.set(code, uid, f"{rng.randint(0, 99999)}.{rng.randint(0, 999)}")
    totals = compute(store.values, REVENUE_BY_BUSINESS, units)
    assert totals.grand_total == pytest.approx(sum(totals.column_total.values()))
    assert totals.grand_total == pytest.approx(sum(totals.row_total.values()))
    assert totals.grand_total == pytest.approx(sum(s['total'] for s in totals.section_subtotal.values()))


def test_tracker_recomputes_on_every_change(store):
    tracker = TotalsTracker(store)
    seen = []
    unsubscribe = tracker.on_change(seen.append)
    store.set("9.27", 10, "4")
    assert tracker.totals.row_total["9.27"] == 4.0
    assert len(seen) == 1
    unsubscribe()
    store.set("9.27", 10, "5")
    assert tracker.totals.row_total["9.27"] == 5.0
    assert len(seen) == 1
