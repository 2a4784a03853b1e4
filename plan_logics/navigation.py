from dataclasses import dataclass

from plan_logics import config


LEFT = 'Left'
RIGHT = 'Right'
UP = 'Up'
DOWN = 'Down'
ENTER = 'Return'

# Tk keysyms and browser-style names both map onto the same moves.
KEY_ALIASES = {
    'Left': LEFT, 'ArrowLeft': LEFT,
    'Right': RIGHT, 'ArrowRight': RIGHT,
    'Up': UP, 'ArrowUp': UP,
    'Down': DOWN, 'ArrowDown': DOWN,
    'Return': ENTER, 'Enter': ENTER, 'KP_Enter': ENTER,
}


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float


def ensure_visible(cell, viewport_width, viewport_height, scroll_x, scroll_y,
                   frozen_left=0, pad=config.SCROLL_PAD):
    """
    Return the (scroll_x, scroll_y) that brings cell fully into view.

    cell is in table coordinates (x = 0 at the left edge of the frozen pane).
    The first frozen_left pixels of the viewport are covered by the frozen
    pane and do not count as visible. Scroll moves by exactly the overlap,
    never to a centred position, and is never negative.
    """
    visible_left = scroll_x + frozen_left + pad
    visible_right = scroll_x + viewport_width - pad
    visible_top = scroll_y + pad
    visible_bottom = scroll_y + viewport_height - pad

    if cell.left < visible_left:
        scroll_x -= visible_left - cell.left
    elif cell.right > visible_right:
        scroll_x += cell.right - visible_right

    if cell.top < visible_top:
        scroll_y -= visible_top - cell.top
    elif cell.bottom > visible_bottom:
        scroll_y += cell.bottom - visible_bottom

    return max(0, scroll_x), max(0, scroll_y)


class KeyboardNavigator:
    """
    2-D traversal over the editable cells of a planning table.

    Indices count editable cells only: row i is the i-th item row, column j
    the j-th unit. Static rows (titles, sections, subtotals) are skipped.

    Args:
        rows: The table's line items in display order.
        n_cols: Number of unit columns.
        col_w: Column widths (code, item, cell, total).
        row_height: Height of one body row in pixels.
    """

    def __init__(self, rows, n_cols=0, col_w=None, row_height=config.ROW_HEIGHT, pad=config.SCROLL_PAD):
        self._positions = [i for i, r in enumerate(rows) if r.is_item]
        self.n_cols = max(0, int(n_cols))
        self.col_w = dict(col_w or config.COL_W)
        self.row_height = row_height
        self.pad = pad

    @property
    def n_rows(self):
        return len(self._positions)

    @property
    def frozen_left(self):
        return self.col_w['code'] + self.col_w['item']

    def set_columns(self, n_cols):
        self.n_cols = max(0, int(n_cols))

    def on_directional_key(self, row, col, key):
        """
        Target cell for key pressed at (row, col), or None when the key is not handled.

        Left/Right and Up/Down clamp at the grid edges. Enter moves one column
        right, or to column 0 of the next row from the last column. Enter on the
        bottom-right cell stays put.
        """
        move = KEY_ALIASES.get(key)
        if move is None or self.n_rows == 0 or self.n_cols == 0:
            return None

        last_row = self.n_rows - 1
        last_col = self.n_cols - 1
        row = min(max(0, int(row)), last_row)
        col = min(max(0, int(col)), last_col)

        if move == LEFT:
            return row, max(0, col - 1)
        if move == RIGHT:
            return row, min(last_col, col + 1)
        if move == UP:
            return max(0, row - 1), col
        if move == DOWN:
            return min(last_row, row + 1), col
        # Enter: keep typing row-major, stop on the last cell
        if col < last_col:
            return row, col + 1
        if row == last_row:
            return row, col
        return row + 1, 0

    def cell_rect(self, row, col):
        """Rect of an editable cell in table coordinates."""
        top = self._positions[row] * self.row_height
        left = self.frozen_left + col * self.col_w['cell']
        return Rect(left, top, left + self.col_w['cell'], top + self.row_height)

    def scroll_for(self, row, col, viewport_width, viewport_height, scroll_x, scroll_y):
        """
        Scroll position that reveals (row, col).

        viewport_width is the width of the whole body viewport including the
        frozen pane.
        """
        return ensure_visible(
            self.cell_rect(row, col), viewport_width, viewport_height, scroll_x, scroll_y,
            frozen_left=self.frozen_left, pad=self.pad,
        )
