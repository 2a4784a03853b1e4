import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from plan_logics.sanitizer import to_number


logger = logging.getLogger(__name__)

UNIT_NAME_KEYS = ('unit_name', 'klang_name', 'unit', 'name')
COMPOSITE_ID_KEYS = ('business_cost_id', 'business_earning_id', 'composite_id')


# ── Unit directory ────────────────────────────────────────────

class UnitRecord(BaseModel):
    """A unit (column) of the grid as returned by the unit search endpoint."""

    model_config = ConfigDict(extra='ignore', frozen=True)

    id: int
    name: str

    @model_validator(mode='before')
    @classmethod
    def _normalize(cls, data):
        if not isinstance(data, dict):
            return data
        raw_id = data.get('id', data.get('unit_id'))
        name = None
        for key in UNIT_NAME_KEYS:
            value = data.get(key)
            if value is not None and str(value).strip():
                name = str(value).strip()
                break
        if name is None:
            name = f"Unit {raw_id}"
        return {'id': raw_id, 'name': name}


def parse_units(records):
    """
    Validate raw unit records, dropping anything without a positive id.

    Returns a list of UnitRecord in the server's order.
    """
    units = []
    for raw in records or []:
        try:
            unit = UnitRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning("[UNITS] Skipping malformed unit record %r: %s", raw, e.errors()[0]['msg'])
            continue
        if unit.id <= 0:
            continue
        units.append(unit)
    return units


# ── Load path ─────────────────────────────────────────────────

class SavedCell(BaseModel):
    """One stored amount: composite id x unit id."""

    model_config = ConfigDict(extra='ignore')

    composite_id: int
    unit_id: int
    amount: float = 0.0

    @model_validator(mode='before')
    @classmethod
    def _normalize(cls, data):
        if not isinstance(data, dict):
            return data
        out = dict(data)
        for key in COMPOSITE_ID_KEYS:
            if out.get(key) is not None:
                out['composite_id'] = out[key]
                break
        out['amount'] = to_number(out.get('amount'))
        return out


def parse_saved_cells(payload):
    """
    Accept either a plain list of cells or a {"unit_cells": [...]} envelope.

    Malformed cells are skipped with a warning.
    """
    if isinstance(payload, dict):
        payload = payload.get('unit_cells') or payload.get('rows') or []
    cells = []
    for raw in payload or []:
        try:
            cells.append(SavedCell.model_validate(raw))
        except ValidationError as e:
            logger.warning("[LOAD] Skipping malformed cell %r: %s", raw, e.errors()[0]['msg'])
    return cells


# ── Save path ─────────────────────────────────────────────────

class UnitValue(BaseModel):
    unit_id: int
    amount: float


class SaveRow(BaseModel):
    """
    One line item of a bulk save.

    Exactly one of business_cost_id / business_earning_id is set, depending
    on which table family is being saved.
    """

    branch_id: int
    business_cost_id: Optional[int] = None
    business_earning_id: Optional[int] = None
    unit_values: List[UnitValue] = Field(default_factory=list)
    branch_total: float = 0.0
    comment: Optional[str] = None


class SaveRequest(BaseModel):
    rows: List[SaveRow] = Field(default_factory=list)

    def to_payload(self):
        return self.model_dump(exclude_none=True)


class SaveResponse(BaseModel):
    model_config = ConfigDict(extra='allow')

    rows: Optional[int] = None
    branch_totals_upserted: Optional[int] = None
