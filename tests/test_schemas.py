from plan_logics.schemas import (
    SaveRequest, SaveRow, UnitRecord, UnitValue, parse_saved_cells, parse_units,
)


def test_unit_name_fallback_order():
    assert UnitRecord.model_validate({'id': 1, 'unit_name': 'A', 'name': 'B'}).name == 'A'
    assert UnitRecord.model_validate({'id': 1, 'unit_name': ' ', 'unit': 'C'}).name == 'C'
    assert UnitRecord.model_validate({'id': "4"}).name == 'Unit 4'


def test_parse_units_drops_non_positive_ids():
    assert [u.id for u in parse_units([{'id': -1}, {'id': 0}, {'id': 2}])] == [2]
    assert parse_units(None) == []


def test_saved_cell_accepts_either_id_field():
    cells = parse_saved_cells([
        {'business_cost_id': 5, 'unit_id': 1, 'amount': '1,200.5'},
        {'business_earning_id': 6, 'unit_id': '2', 'amount': None},
        {'unit_id': 3, 'amount': 1},
    ])
    assert [(c.composite_id, c.unit_id, c.amount) for c in cells] == [(5, 1, 1200.5), (6, 2, 0.0)]


def test_save_request_payload_omits_unused_id_field():
    row = SaveRow(branch_id=3, business_earning_id=40,
                  unit_values=[UnitValue(unit_id=1, amount=2.0)], branch_total=2.0)
    payload = SaveRequest(rows=[row]).to_payload()
    assert payload == {'rows': [{
        'branch_id': 3,
        'business_earning_id': 40,
        'unit_values': [{'unit_id': 1, 'amount': 2.0}],
        'branch_total': 2.0,
    }]}
