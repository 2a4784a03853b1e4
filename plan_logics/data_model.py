import logging

from plan_logics import config
from plan_logics.aggregation import TotalsTracker
from plan_logics.grid_store import GridStore
from plan_logics.identifier_map import CompositeIdResolver
from plan_logics.persistence import PersistenceGateway
from plan_logics.tables import ALL_TABLES


logger = logging.getLogger(__name__)


def year_options(base=config.YEAR_BASE, count=config.YEAR_COUNT):
    """Selectable Buddhist-era plan years: 2569, 2570, ..."""
    return [base + i for i in range(count)]


def year_to_plan_id(year):
    """2569 -> 1. Returns 0 for anything that is not a year after the offset."""
    try:
        plan_id = int(year) - config.PLAN_YEAR_OFFSET
    except (TypeError, ValueError):
        return 0
    return plan_id if plan_id > 0 else 0


def plan_id_to_year(plan_id):
    return int(plan_id) + config.PLAN_YEAR_OFFSET


def period_label(year):
    """Default fiscal period for a plan year: 2569 -> '1 Apr 69-31 Mar 70'."""
    yy = int(year) % 100
    return f"1 Apr {yy:02d}-31 Mar {(yy + 1) % 100:02d}"


class PlanModel:
    """Shared state container for the planning window."""

    def __init__(self, client, table_code=None):
        self.client = client
        self.year = config.YEAR_BASE
        self.period = period_label(self.year)
        self.branch_id = None
        self.units = []                             # UnitRecord list for the branch
        self.table = None                           # Active TableDefinition
        self.store = None                           # GridStore of the active table
        self.tracker = None                         # TotalsTracker on the store
        self.resolver = None
        self.gateway = None
        self.select_table(table_code or next(iter(ALL_TABLES)))

    @property
    def plan_id(self):
        return year_to_plan_id(self.year)

    @property
    def unit_ids(self):
        return [u.id for u in self.units]

    def select_table(self, table_code):
        """Switch tables; the new grid keeps the current unit columns and starts empty."""
        self.table = ALL_TABLES[table_code]
        self.resolver = CompositeIdResolver.for_table(self.table)
        self.store = GridStore(self.table, self.unit_ids)
        self.tracker = TotalsTracker(self.store)
        self.gateway = PersistenceGateway(self.client, self.table, self.store, self.resolver)
        self._retarget()
        unmapped = self.resolver.unmapped_rows(self.table.rows)
        if unmapped:
            logger.info("[MAPPING] %s: rows without composite id: %s",
                        table_code, ", ".join(r.code for r in unmapped))

    def select_year(self, year, period=None):
        self.year = int(year)
        self.period = period or period_label(self.year)
        self._retarget()

    def select_branch(self, branch_id):
        self.branch_id = int(branch_id) if branch_id else None
        self._retarget()

    def set_units(self, units):
        """Install the branch's units and reshape the grid onto them."""
        self.units = list(units)
        self.store.reshape(self.unit_ids)

    def _retarget(self):
        self.gateway.select(self.plan_id, self.branch_id, self.period)
