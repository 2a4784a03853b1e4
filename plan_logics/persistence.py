import json
import logging
from dataclasses import dataclass, field
from typing import Optional

from plan_logics.errors import ApiError, PlanGridError, SaveInProgress, UnmappedDataFailure, ValidationFailure, classify
from plan_logics.identifier_map import CompositeIdResolver
from plan_logics.observable import Observable
from plan_logics.sanitizer import amount_to_text, to_number
from plan_logics.schemas import SaveRequest, SaveResponse, SaveRow, UnitValue, parse_saved_cells


logger = logging.getLogger(__name__)

IDLE = 'idle'
LOADING = 'loading'
LOADED = 'loaded'
LOAD_FAILED = 'load_failed'
SAVING = 'saving'
SAVED = 'saved'
SAVE_FAILED = 'save_failed'


@dataclass(frozen=True)
class LoadTicket:
    generation: int
    plan_id: int
    branch_id: int
    url: str


@dataclass(frozen=True)
class SaveTicket:
    plan_id: int
    branch_id: int
    url: str
    payload: dict = field(default_factory=dict)


class PersistenceGateway:
    """
    Loads and saves one planning table for the selected (plan, branch).

    Each operation is split into a UI-thread `begin_*`, a network-only step
    that is safe to run on a worker thread (`fetch` / `send`), and a UI-thread
    `finish_*` / `fail_*` that touches the grid. `load()` and `save()` chain
    the three synchronously.

    Load results are tagged with a generation number; a result whose
    generation or (plan_id, branch_id) no longer matches the current
    selection is dropped. A failed load or save never touches the grid.

    Example:
        gateway = PersistenceGateway(client, table, store)
        gateway.select(plan_id=1, branch_id=3, period="1 Apr 69-31 Mar 70")
        gateway.load()
        store.set("9.27", 10, "100")
        gateway.save()
    """

    def __init__(self, client, table, store, resolver=None):
        self.client = client
        self.table = table
        self.store = store
        self.resolver = resolver or CompositeIdResolver.for_table(table)
        self.plan_id = None
        self.branch_id = None
        self.period = None
        self.state = IDLE
        self.last_error = None
        self.last_response = None
        self._generation = 0
        self._saving = False
        self._state_changed = Observable()

    # ── State ─────────────────────────────────────────────────

    def subscribe(self, callback):
        """callback(state, gateway) after every state transition."""
        return self._state_changed.subscribe(callback)

    def _set_state(self, state, error=None):
        self.state = state
        self.last_error = error
        logger.debug("[PERSIST] %s -> %s", self.table.table_code, state)
        self._state_changed.notify(state, self)

    @property
    def generation(self):
        return self._generation

    @property
    def is_saving(self):
        return self._saving

    def select(self, plan_id, branch_id, period=None):
        """Point the gateway at a new plan/branch. In-flight loads for the old target become stale."""
        self.plan_id = int(plan_id) if plan_id else None
        self.branch_id = int(branch_id) if branch_id else None
        self.period = period
        self._generation += 1
        self._set_state(IDLE)

    def _require_target(self):
        if not self.plan_id or self.plan_id <= 0:
            raise ValidationFailure(f"Invalid plan_id ({self.plan_id}). Select a plan year first.")
        if not self.branch_id:
            raise ValidationFailure("Select a branch first.")

    # ── Load ──────────────────────────────────────────────────

    def begin_load(self):
        self._require_target()
        self._generation += 1
        ticket = LoadTicket(
            generation=self._generation,
            plan_id=self.plan_id,
            branch_id=self.branch_id,
            url=self.table.load_url(self.plan_id, self.branch_id),
        )
        self._set_state(LOADING)
        return ticket

    def fetch(self, ticket):
        """Network step of a load. Does not touch the grid."""
        return self.client.get(ticket.url)

    def _is_current(self, ticket):
        return (
            ticket.generation == self._generation
            and ticket.plan_id == self.plan_id
            and ticket.branch_id == self.branch_id
        )

    def finish_load(self, ticket, payload):
        """
        Apply a fetched payload to the grid in one replacement.

        Returns False (and leaves everything untouched) when the ticket is stale.
        """
        if not self._is_current(ticket):
            logger.info("[LOAD] Discarding stale result (generation %s, plan %s, branch %s)",
                        ticket.generation, ticket.plan_id, ticket.branch_id)
            return False

        reverse = self.resolver.reverse_map(self.table.rows)
        unit_ids = set(self.store.unit_ids)
        cells = {}
        ignored = 0
        for cell in parse_saved_cells(payload):
            code = reverse.get(cell.composite_id)
            if code is None or cell.unit_id not in unit_ids:
                ignored += 1
                continue
            cells.setdefault(code, {})[cell.unit_id] = amount_to_text(cell.amount)

        if ignored:
            logger.debug("[LOAD] Ignored %d cells with unknown ids", ignored)
        self.store.load(cells)
        logger.info("[LOAD] %s plan=%s branch=%s: %d rows filled",
                    self.table.table_code, ticket.plan_id, ticket.branch_id, len(cells))
        self._set_state(LOADED)
        return True

    def fail_load(self, ticket, error):
        """Record a failed load. Returns the classified error, or None when the ticket is stale."""
        if not self._is_current(ticket):
            return None
        failure = classify(error, plan_id=ticket.plan_id)
        logger.warning("[LOAD] %s failed: %s", self.table.table_code, failure)
        self._set_state(LOAD_FAILED, failure)
        return failure

    def load(self):
        """Synchronous load; raises the classified PlanGridError on failure."""
        ticket = self.begin_load()
        try:
            payload = self.fetch(ticket)
        except ApiError as e:
            failure = self.fail_load(ticket, e)
            if failure is not None:
                raise failure from e
            return False
        return self.finish_load(ticket, payload)

    # ── Save ──────────────────────────────────────────────────

    def build_save_request(self):
        """
        Build the bulk-save body from the current grid.

        Rows without a composite id are left out when every cell is zero;
        any such row with a non-zero amount raises UnmappedDataFailure.
        """
        self._require_target()
        values = self.store.values
        unit_ids = self.store.unit_ids
        rows = []
        blocked = []
        for item in self.table.item_rows:
            amounts = [to_number(values[item.code].get(uid, '')) for uid in unit_ids]
            composite_id = self.resolver.resolve_row(item)
            if composite_id is None:
                if any(a != 0 for a in amounts):
                    blocked.append(item.code)
                continue
            rows.append(SaveRow(
                branch_id=self.branch_id,
                unit_values=[UnitValue(unit_id=uid, amount=a) for uid, a in zip(unit_ids, amounts)],
                branch_total=sum(amounts),
                comment=self.period,
                **{self.table.id_field: composite_id},
            ))

        if blocked:
            raise UnmappedDataFailure(blocked)
        return SaveRequest(rows=rows)

    def preview(self):
        """Outgoing JSON body, or the reason it cannot be built."""
        try:
            return json.dumps(self.build_save_request().to_payload(), indent=2, ensure_ascii=False)
        except PlanGridError as e:
            return str(e)

    def begin_save(self):
        if self._saving:
            raise SaveInProgress("Wait for the current save to finish.")
        try:
            request = self.build_save_request()
        except PlanGridError as e:
            logger.warning("[SAVE] Blocked before sending: %s", e)
            self._set_state(SAVE_FAILED, e)
            raise
        self._saving = True
        self._set_state(SAVING)
        return SaveTicket(
            plan_id=self.plan_id,
            branch_id=self.branch_id,
            url=self.table.save_url(self.plan_id),
            payload=request.to_payload(),
        )

    def send(self, ticket):
        """Network step of a save."""
        return self.client.post(ticket.url, ticket.payload)

    def _is_current_save(self, ticket):
        return ticket.plan_id == self.plan_id and ticket.branch_id == self.branch_id

    def finish_save(self, ticket, response):
        """
        Record a completed save.

        Returns the SaveResponse, or None when the plan/branch changed while it was in flight.
        """
        self._saving = False
        if not self._is_current_save(ticket):
            logger.info("[SAVE] Ignoring completion for plan %s, branch %s (selection changed)",
                        ticket.plan_id, ticket.branch_id)
            return None
        self.last_response = SaveResponse.model_validate(response if isinstance(response, dict) else {})
        logger.info("[SAVE] %s plan=%s: %d rows sent, branch_totals_upserted=%s",
                    self.table.table_code, ticket.plan_id, len(ticket.payload.get('rows', [])),
                    self.last_response.branch_totals_upserted)
        self._set_state(SAVED)
        return self.last_response

    def fail_save(self, ticket, error):
        """Record a failed save. Returns the classified error, or None when the ticket is stale."""
        self._saving = False
        failure = classify(error, plan_id=ticket.plan_id)
        if not self._is_current_save(ticket):
            logger.info("[SAVE] Ignoring failure for plan %s, branch %s (selection changed): %s",
                        ticket.plan_id, ticket.branch_id, failure)
            return None
        logger.warning("[SAVE] %s failed: %s", self.table.table_code, failure)
        self._set_state(SAVE_FAILED, failure)
        return failure

    def save(self):
        """
        Synchronous save followed by a reload of the stored values.

        Returns the SaveResponse even when the reload fails; the reload failure
        is left in `state`/`last_error`. Raises the classified PlanGridError when
        the save itself fails.
        """
        ticket = self.begin_save()
        try:
            response = self.send(ticket)
        except ApiError as e:
            failure = self.fail_save(ticket, e)
            if failure is not None:
                raise failure from e
            return None
        result = self.finish_save(ticket, response)
        if result is None:
            return None
        try:
            self.load()
        except PlanGridError as e:
            logger.warning("[SAVE] Saved, but reloading %s failed: %s", self.table.table_code, e)
        return result


def saved_summary(response: Optional[SaveResponse], ticket: SaveTicket):
    rows = response.rows if response and response.rows is not None else len(ticket.payload.get('rows', []))
    upserted = response.branch_totals_upserted if response and response.branch_totals_upserted is not None else "?"
    return f"rows={rows} • branch_totals_upserted={upserted}"
