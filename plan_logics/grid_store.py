import copy
import logging

from plan_logics.observable import Observable


logger = logging.getLogger(__name__)


def rebuild(item_codes, unit_ids):
    """Fresh matrix: every item row gets an empty string for each unit id."""
    return {code: {uid: '' for uid in unit_ids} for code in item_codes}


def reshape(old_grid, item_codes, new_unit_ids):
    """
    Re-key a matrix onto a new unit set.

    Values of units present in both the old grid and new_unit_ids are kept,
    units only in new_unit_ids start empty, removed units are dropped.
    """
    out = {}
    for code in item_codes:
        old_row = old_grid.get(code, {})
        out[code] = {uid: old_row.get(uid, '') for uid in new_unit_ids}
    return out


class GridStore:
    """
    Observable holder of the editable matrix: row code -> unit id -> amount text.

    Every mutation (set, rebuild, reshape, load, clear) notifies subscribers
    exactly once with the store itself. Row codes are validated against the
    table's item rows; an unknown code is a programming error (KeyError).

    Example:
        store = GridStore(table)
        store.subscribe(lambda s: print(s.values))
        store.rebuild([10, 20])
        store.set("9.27", 10, "100")
    """

    def __init__(self, table, unit_ids=()):
        self.table = table
        self._codes = table.item_codes
        self._code_set = set(self._codes)
        self._unit_ids = [int(u) for u in unit_ids]
        self._values = rebuild(self._codes, self._unit_ids)
        self._changed = Observable()

    # ── Observation ───────────────────────────────────────────

    def subscribe(self, callback):
        return self._changed.subscribe(callback)

    def _emit(self):
        self._changed.notify(self)

    # ── Read ──────────────────────────────────────────────────

    @property
    def unit_ids(self):
        return list(self._unit_ids)

    @property
    def values(self):
        """The live matrix. Treat as read-only; mutate through set()."""
        return self._values

    def snapshot(self):
        return copy.deepcopy(self._values)

    def get(self, code, unit_id):
        self._check_code(code)
        return self._values[code].get(int(unit_id), '')

    def row(self, code):
        self._check_code(code)
        return dict(self._values[code])

    # ── Write ─────────────────────────────────────────────────

    def set(self, code, unit_id, value):
        self._check_code(code)
        self._values[code][int(unit_id)] = '' if value is None else str(value)
        self._emit()

    def rebuild(self, unit_ids):
        self._unit_ids = [int(u) for u in unit_ids]
        self._values = rebuild(self._codes, self._unit_ids)
        self._emit()

    def reshape(self, unit_ids):
        """Move the matrix onto a new unit set. No notification when the set is unchanged."""
        new_ids = [int(u) for u in unit_ids]
        if new_ids == self._unit_ids:
            return
        logger.debug("[GRID] Reshape units %s -> %s", self._unit_ids, new_ids)
        self._unit_ids = new_ids
        self._values = reshape(self._values, self._codes, new_ids)
        self._emit()

    def load(self, cells):
        """
        Replace the whole matrix from {code: {unit_id: text}} in one notification.

        Codes outside the table and units outside the current unit set are ignored.
        """
        seeded = {}
        for code, row in (cells or {}).items():
            if code in self._code_set:
                seeded[code] = {int(uid): text for uid, text in row.items()}
        self._values = reshape(seeded, self._codes, self._unit_ids)
        self._emit()

    def clear(self):
        self._values = rebuild(self._codes, self._unit_ids)
        self._emit()

    # ── Internals ─────────────────────────────────────────────

    def _check_code(self, code):
        if code not in self._code_set:
            raise KeyError(f"Unknown row code '{code}' for table {self.table.table_code}")
