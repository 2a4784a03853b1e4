from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from plan_logics.observable import Observable
from plan_logics.sanitizer import to_number
from plan_logics.taxonomy import ITEM, SECTION, SUBTOTAL


@dataclass
class Totals:
    """Derived totals of one grid state. Never stored, always recomputed."""

    row_total: dict = field(default_factory=dict)          # item code -> float
    column_total: dict = field(default_factory=dict)       # unit id -> float
    section_subtotal: dict = field(default_factory=dict)   # subtotal code -> {'per_column', 'total'}
    grand_total: float = 0.0


def derive_sections(rows):
    """
    Map each subtotal row to the item rows of its section.

    Rows are scanned in declared order; the item buffer is reset at every
    section row and handed to the next subtotal row.
    """
    members = {}
    buffer = []
    for r in rows:
        if r.kind == SECTION:
            buffer = []
        elif r.kind == ITEM:
            buffer.append(r.code)
        elif r.kind == SUBTOTAL:
            members[r.code] = list(buffer)
    return members


def to_frame(grid, item_codes, unit_ids):
    """Numeric DataFrame view of the grid (rows = item codes, columns = unit ids)."""
    data = np.zeros((len(item_codes), len(unit_ids)), dtype=float)
    for i, code in enumerate(item_codes):
        row = grid.get(code, {})
        for j, uid in enumerate(unit_ids):
            data[i, j] = to_number(row.get(uid, ''))
    return pd.DataFrame(data, index=list(item_codes), columns=list(unit_ids))


def _unit_ids(units):
    return [int(getattr(u, 'id', u)) for u in units]


def compute(grid, table, units):
    """
    Recompute every total from scratch.

    Args:
        grid: {code: {unit_id: amount_text}} as held by GridStore.
        table: TableDefinition providing row order and kinds.
        units: Unit records (anything with .id) or plain unit ids.

    Returns:
        Totals with row_total, column_total, section_subtotal and grand_total.
    """
    unit_ids = _unit_ids(units)
    item_codes = table.item_codes
    frame = to_frame(grid, item_codes, unit_ids)

    row_sums = frame.sum(axis=1)
    col_sums = frame.sum(axis=0)

    row_total = {code: float(row_sums[code]) for code in item_codes}
    column_total = {uid: float(col_sums[uid]) for uid in unit_ids}

    section_subtotal = {}
    for sub_code, codes in derive_sections(table.rows).items():
        per_col = frame.loc[codes].sum(axis=0)
        per_column = {uid: float(per_col[uid]) for uid in unit_ids}
        section_subtotal[sub_code] = {
            'per_column': per_column,
            'total': sum(per_column.values()),
        }

    grand_total = sum(column_total[uid] for uid in unit_ids)

    return Totals(
        row_total=row_total,
        column_total=column_total,
        section_subtotal=section_subtotal,
        grand_total=grand_total,
    )


class TotalsTracker:
    """
    Keeps Totals in step with a GridStore by recomputing on every change.

    Subscribers registered with on_change receive the fresh Totals.
    """

    def __init__(self, store):
        self._store = store
        self._changed = Observable()
        self.totals = compute(store.values, store.table, store.unit_ids)
        store.subscribe(self._recompute)

    def on_change(self, callback):
        """callback(totals) after every recompute; returns an unsubscribe function."""
        return self._changed.subscribe(callback)

    def _recompute(self, store):
        self.totals = compute(store.values, store.table, store.unit_ids)
        self._changed.notify(self.totals)
