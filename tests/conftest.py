import pytest

from plan_logics.errors import ApiError
from plan_logics.grid_store import GridStore
from plan_logics.identifier_map import CompositeIdResolver
from plan_logics.persistence import PersistenceGateway
from plan_logics.taxonomy import ITEM, SECTION, SUBTOTAL, LineItem, SeedEntry, TableDefinition


SUPPORT_GROUP = 8


@pytest.fixture
def small_table():
    """Two item rows: 9.27 resolves through the seed, 9.24 has no mapping."""
    return TableDefinition(
        table_code='SMALL',
        title="Small support table",
        rows=(
            LineItem("9", "Support work expenses", SECTION),
            LineItem("9.24", "Office materials", ITEM, category_code=124, group_id=SUPPORT_GROUP),
            LineItem("9.27", "Fuel used - 4 wheel", ITEM, category_code=127, group_id=SUPPORT_GROUP),
            LineItem("9.T", "Total", SUBTOTAL),
        ),
        id_field='business_cost_id',
        load_path='/business-plan/{plan_id}/costs?branch_id={branch_id}',
        save_path='/business-plan/{plan_id}/costs/bulk',
        seed=(SeedEntry(327, 127, SUPPORT_GROUP),),
    )


class FakeClient:
    """Records calls and answers from queued responses (or raises queued errors)."""

    def __init__(self):
        self.calls = []
        self.get_responses = []
        self.post_responses = []

    def _next(self, queue, default):
        if not queue:
            return default
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, path):
        self.calls.append(('GET', path, None))
        return self._next(self.get_responses, [])

    def post(self, path, body):
        self.calls.append(('POST', path, body))
        return self._next(self.post_responses, {'rows': len(body.get('rows', [])), 'branch_totals_upserted': 1})

    def posts(self):
        return [c for c in self.calls if c[0] == 'POST']


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def store(small_table):
    return GridStore(small_table, [10, 20])


@pytest.fixture
def gateway(client, small_table, store):
    gw = PersistenceGateway(client, small_table, store, CompositeIdResolver.for_table(small_table))
    gw.select(plan_id=1, branch_id=3, period="1 Apr 69-31 Mar 70")
    return gw


@pytest.fixture
def api_error():
    def make(status, message="boom"):
        return ApiError(message, status=status)
    return make
