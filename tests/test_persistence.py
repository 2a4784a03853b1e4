import json

import pytest

from plan_logics import persistence
from plan_logics.aggregation import compute
from plan_logics.errors import (
    AuthFailure, NetworkFailure, SaveInProgress, ServerFailure, UnmappedDataFailure, ValidationFailure,
)
from plan_logics.schemas import SaveResponse


def test_scenario_a_zero_unmapped_row_is_skipped(gateway, client, store):
    store.set("9.27", 10, "100")
    store.set("9.24", 10, "0")
    store.set("9.24", 20, "0")

    result = gateway.save()

    posts = client.posts()
    assert len(posts) == 1
    _, path, body = posts[0]
    assert path == "/business-plan/1/costs/bulk"
    assert len(body["rows"]) == 1
    row = body["rows"][0]
    assert row["business_cost_id"] == 327
    assert row["branch_id"] == 3
    assert row["branch_total"] == 100
    assert row["unit_values"] == [{"unit_id": 10, "amount": 100.0}, {"unit_id": 20, "amount": 0.0}]
    assert row["comment"] == "1 Apr 69-31 Mar 70"
    assert "business_earning_id" not in row
    assert result.branch_totals_upserted == 1


def test_scenario_b_unmapped_amount_blocks_save(gateway, client, store):
    store.set("9.27", 10, "100")
    store.set("9.24", 20, "50")

    with pytest.raises(UnmappedDataFailure) as excinfo:
        gateway.save()

    assert excinfo.value.codes == ["9.24"]
    assert "9.24" in str(excinfo.value)
    assert client.calls == []
    assert gateway.state == persistence.SAVE_FAILED
    assert not gateway.is_saving


def test_scenario_c_load_fills_grid(gateway, client, store, small_table):
    client.get_responses.append([
        {"business_cost_id": 327, "unit_id": 10, "amount": "75.5"},
        {"business_cost_id": 999, "unit_id": 10, "amount": "1"},
        {"business_cost_id": 327, "unit_id": 77, "amount": "1"},
    ])

    assert gateway.load() is True

    assert client.calls == [("GET", "/business-plan/1/costs?branch_id=3", None)]
    assert store.values["9.27"] == {10: "75.5", 20: ""}
    assert compute(store.values, small_table, store.unit_ids).row_total["9.27"] == 75.5
    assert gateway.state == persistence.LOADED


def test_load_accepts_envelope_and_blanks_zero(gateway, client, store):
    client.get_responses.append({"unit_cells": [
        {"business_cost_id": 327, "unit_id": 10, "amount": 0},
        {"business_cost_id": 327, "unit_id": 20, "amount": 12},
    ]})
    gateway.load()
    assert store.values["9.27"] == {10: "", 20: "12"}


def test_load_replaces_previous_values(gateway, client, store):
    store.set("9.24", 10, "8")
    client.get_responses.append([])
    gateway.load()
    assert store.values["9.24"] == {10: "", 20: ""}


def test_failed_load_leaves_grid_untouched(gateway, client, store, api_error):
    store.set("9.27", 10, "5")
    client.get_responses.append(api_error(0, "connection refused"))
    with pytest.raises(NetworkFailure):
        gateway.load()
    assert store.get("9.27", 10) == "5"
    assert gateway.state == persistence.LOAD_FAILED


def test_stale_load_is_discarded(gateway, store):
    first = gateway.begin_load()
    second = gateway.begin_load()
    assert gateway.finish_load(first, [{"business_cost_id": 327, "unit_id": 10, "amount": 1}]) is False
    assert store.get("9.27", 10) == ""
    assert gateway.finish_load(second, [{"business_cost_id": 327, "unit_id": 10, "amount": 2}]) is True
    assert store.get("9.27", 10) == "2"


def test_load_for_previous_branch_is_discarded(gateway, store):
    ticket = gateway.begin_load()
    gateway.select(plan_id=1, branch_id=4)
    assert gateway.finish_load(ticket, [{"business_cost_id": 327, "unit_id": 10, "amount": 1}]) is False
    assert gateway.fail_load(ticket, RuntimeError("late")) is None
    assert store.get("9.27", 10) == ""


def test_save_reentry_is_rejected(gateway, client, store):
    store.set("9.27", 10, "1")
    ticket = gateway.begin_save()
    with pytest.raises(SaveInProgress):
        gateway.begin_save()
    gateway.finish_save(ticket, gateway.send(ticket))
    assert gateway.state == persistence.SAVED
    assert not gateway.is_saving


def test_failed_save_keeps_grid_and_releases_guard(gateway, client, store, api_error):
    store.set("9.27", 10, "1")
    client.post_responses.append(api_error(401, "Not authenticated"))
    with pytest.raises(AuthFailure):
        gateway.save()
    assert store.get("9.27", 10) == "1"
    assert gateway.state == persistence.SAVE_FAILED
    assert not gateway.is_saving
    assert [c[0] for c in client.calls] == ["POST"]


def test_successful_save_reloads(gateway, client, store):
    store.set("9.27", 10, "40")
    client.get_responses.append([{"business_cost_id": 327, "unit_id": 10, "amount": "40"}])
    gateway.save()
    assert [c[0] for c in client.calls] == ["POST", "GET"]
    assert store.get("9.27", 10) == "40"
    assert gateway.state == persistence.LOADED


def test_save_completion_after_branch_switch_is_ignored(gateway, client, store):
    store.set("9.27", 10, "5")
    ticket = gateway.begin_save()
    response = gateway.send(ticket)
    gateway.select(plan_id=1, branch_id=4)
    assert gateway.finish_save(ticket, response) is None
    assert gateway.state == persistence.IDLE
    assert gateway.last_response is None
    assert not gateway.is_saving
    # the next save is not blocked by the old one
    gateway.begin_save()


def test_save_failure_after_plan_switch_is_ignored(gateway, store, api_error):
    store.set("9.27", 10, "5")
    ticket = gateway.begin_save()
    gateway.select(plan_id=2, branch_id=3)
    assert gateway.fail_save(ticket, api_error(500)) is None
    assert gateway.state == persistence.IDLE
    assert gateway.last_error is None
    assert not gateway.is_saving


def test_failed_reload_keeps_save_response(gateway, client, store, api_error):
    store.set("9.27", 10, "40")
    client.post_responses.append({"rows": 1, "branch_totals_upserted": 1})
    client.get_responses.append(api_error(500, "Internal Server Error"))
    result = gateway.save()
    assert isinstance(result, SaveResponse)
    assert result.rows == 1
    assert gateway.last_response is result
    assert gateway.state == persistence.LOAD_FAILED
    assert isinstance(gateway.last_error, ServerFailure)
    assert [c[0] for c in client.calls] == ["POST", "GET"]
    assert store.get("9.27", 10) == "40"


def test_missing_target_is_a_validation_failure(gateway):
    gateway.select(plan_id=0, branch_id=3)
    with pytest.raises(ValidationFailure):
        gateway.begin_load()
    gateway.select(plan_id=1, branch_id=None)
    with pytest.raises(ValidationFailure):
        gateway.build_save_request()


def test_preview_shows_body_or_reason(gateway, store):
    store.set("9.27", 20, "3")
    body = json.loads(gateway.preview())
    assert body["rows"][0]["branch_total"] == 3
    store.set("9.24", 10, "1")
    assert "9.24" in gateway.preview()


def test_state_transitions_are_published(gateway, client):
    states = []
    gateway.subscribe(lambda state, _gw: states.append(state))
    gateway.load()
    assert states == [persistence.LOADING, persistence.LOADED]
