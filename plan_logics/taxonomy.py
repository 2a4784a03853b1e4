from dataclasses import dataclass
from typing import Optional, Tuple


TITLE = 'title'
SECTION = 'section'
ITEM = 'item'
SUBTOTAL = 'subtotal'
GRANDTOTAL = 'grandtotal'

ROW_KINDS = (TITLE, SECTION, ITEM, SUBTOTAL, GRANDTOTAL)


@dataclass(frozen=True)
class LineItem:
    """
    One row of a planning table.

    Only `item` rows are editable and carry a ledger code (category_code) and
    a business group. composite_id_override pins the backend identifier for
    rows whose (category_code, group_id) pair is shared with another row.
    """

    code: str
    label: str
    kind: str = ITEM
    category_code: Optional[int] = None
    group_id: Optional[int] = None
    composite_id_override: Optional[int] = None

    def __post_init__(self):
        if self.kind not in ROW_KINDS:
            raise ValueError(f"Unknown row kind '{self.kind}' for row {self.code}")

    @property
    def is_item(self):
        return self.kind == ITEM


@dataclass(frozen=True)
class SeedEntry:
    """One (composite_id, category_code, group_id) triple of the backend reference data."""

    composite_id: int
    category_code: int
    group_id: int


@dataclass(frozen=True)
class TableDefinition:
    """
    Immutable description of one planning table.

    Args:
        table_code: Stable identifier, e.g. "BUSINESS_PLAN_EXPENSES".
        title: Display title.
        rows: Ordered line items (titles, sections, items, subtotals).
        id_field: Name of the composite identifier on the wire
            ("business_cost_id" or "business_earning_id").
        load_path: Endpoint template with {plan_id} and {branch_id}.
        save_path: Endpoint template with {plan_id}.
        seed: Composite identifier seed triples.
    """

    table_code: str
    title: str
    rows: Tuple[LineItem, ...]
    id_field: str
    load_path: str
    save_path: str
    seed: Tuple[SeedEntry, ...] = ()

    def __post_init__(self):
        seen = set()
        for row in self.rows:
            if row.code in seen:
                raise ValueError(f"Duplicate row code '{row.code}' in table {self.table_code}")
            seen.add(row.code)

    @property
    def item_rows(self):
        return [r for r in self.rows if r.is_item]

    @property
    def item_codes(self):
        return [r.code for r in self.rows if r.is_item]

    def row(self, code):
        for r in self.rows:
            if r.code == code:
                return r
        raise KeyError(code)

    def load_url(self, plan_id, branch_id):
        return self.load_path.format(plan_id=int(plan_id), branch_id=int(branch_id))

    def save_url(self, plan_id):
        return self.save_path.format(plan_id=int(plan_id))
