import pytest

from plan_logics.navigation import KeyboardNavigator, Rect, ensure_visible


COL_W = {'code': 50, 'item': 150, 'cell': 100, 'total': 100}


@pytest.fixture
def nav(small_table):
    return KeyboardNavigator(small_table.rows, n_cols=3, col_w=COL_W, row_height=30, pad=10)


def test_arrows_clamp_at_top_left(nav):
    pos = (0, 0)
    for key in ["Up", "Left"] * 5:
        pos = nav.on_directional_key(*pos, key)
        assert pos == (0, 0)


def test_arrows_clamp_at_bottom_right(nav):
    assert nav.on_directional_key(1, 2, "Right") == (1, 2)
    assert nav.on_directional_key(1, 2, "Down") == (1, 2)


def test_moves_inside_grid(nav):
    assert nav.on_directional_key(0, 0, "Right") == (0, 1)
    assert nav.on_directional_key(0, 1, "Down") == (1, 1)
    assert nav.on_directional_key(1, 1, "ArrowUp") == (0, 1)


def test_enter_wraps_to_next_row(nav):
    assert nav.on_directional_key(0, 1, "Return") == (0, 2)
    assert nav.on_directional_key(0, 2, "Return") == (1, 0)


def test_enter_on_last_cell_stays_put(nav):
    assert nav.on_directional_key(1, 2, "Enter") == (1, 2)
    assert nav.on_directional_key(1, 2, "Return") == (1, 2)


def test_unknown_key_and_empty_grid_are_noops(nav, small_table):
    assert nav.on_directional_key(0, 0, "Tab") is None
    empty = KeyboardNavigator(small_table.rows, n_cols=0)
    assert empty.on_directional_key(0, 0, "Right") is None


def test_cell_rect_skips_static_rows(nav):
    # item rows sit at display rows 1 and 2 (row 0 is the section header)
    assert nav.cell_rect(0, 0) == Rect(200, 30, 300, 60)
    assert nav.cell_rect(1, 2) == Rect(400, 60, 500, 90)


def test_ensure_visible_leaves_visible_cell_alone():
    assert ensure_visible(Rect(300, 40, 400, 70), 800, 400, 0, 0, frozen_left=200, pad=10) == (0, 0)


def test_ensure_visible_scrolls_right_by_overlap():
    # right edge 900 vs visible right 0 + 800 - 10; top 30 vs visible top 30 + 10
    assert ensure_visible(Rect(800, 30, 900, 60), 800, 400, 0, 30, frozen_left=200, pad=10) == (110, 20)


def test_ensure_visible_treats_frozen_pane_as_hidden():
    # cell starts at 300 but frozen pane + pad hides up to 150 + 200 + 10
    x, _ = ensure_visible(Rect(300, 0, 400, 30), 800, 400, 150, 0, frozen_left=200, pad=10)
    assert x == 90


def test_ensure_visible_never_goes_negative():
    assert ensure_visible(Rect(200, 0, 300, 30), 800, 400, 5, 5, frozen_left=200, pad=10) == (0, 0)


def test_scroll_for_bottom_row(nav):
    x, y = nav.scroll_for(1, 0, viewport_width=600, viewport_height=50, scroll_x=0, scroll_y=0)
    assert (x, y) == (0, 50)
