import logging

from plan_logics import config
from plan_logics.observable import Observable


logger = logging.getLogger(__name__)


def left_width(col_w=None):
    col_w = col_w or config.COL_W
    return col_w['code'] + col_w['item']


def right_width(n_units, col_w=None):
    """Width of the scrollable region; at least one cell column wide when there are no units."""
    col_w = col_w or config.COL_W
    return max(1, int(n_units)) * col_w['cell'] + col_w['total']


class ScrollSyncController:
    """
    Single source of truth for the grid's scroll position.

    The body pane reports its offset through on_body_scroll(); the header and
    footer panes subscribe and receive the negated horizontal offset, which
    they apply as a layout shift rather than scrolling on their own. The
    frozen left pane never moves horizontally and follows the body vertically.

    Args:
        n_units: Number of unit columns in the scrollable region.
        viewport_width: Visible width of the scrollable region.
        viewport_height: Visible height of the body.
        content_height: Full height of the body rows.
    """

    def __init__(self, n_units=0, viewport_width=0, viewport_height=0, content_height=0, col_w=None):
        self.col_w = dict(col_w or config.COL_W)
        self.left_w = left_width(self.col_w)
        self.right_w = right_width(n_units, self.col_w)
        self.viewport_width = max(0, int(viewport_width))
        self.viewport_height = max(0, int(viewport_height))
        self.content_height = max(0, int(content_height))
        self.scroll_x = 0
        self.scroll_y = 0
        self._horizontal = Observable()
        self._vertical = Observable()

    # ── Geometry ──────────────────────────────────────────────

    @property
    def total_width(self):
        return self.left_w + self.right_w

    @property
    def max_scroll_x(self):
        return max(0, self.right_w - self.viewport_width)

    @property
    def max_scroll_y(self):
        return max(0, self.content_height - self.viewport_height)

    def set_units(self, n_units):
        self.right_w = right_width(n_units, self.col_w)
        logger.debug("[SCROLL] %d units, scrollable width %d", n_units, self.right_w)
        self._apply(self.scroll_x, self.scroll_y)

    def resize(self, viewport_width=None, viewport_height=None, content_height=None):
        if viewport_width is not None:
            self.viewport_width = max(0, int(viewport_width))
        if viewport_height is not None:
            self.viewport_height = max(0, int(viewport_height))
        if content_height is not None:
            self.content_height = max(0, int(content_height))
        self._apply(self.scroll_x, self.scroll_y)

    # ── Subscriptions ─────────────────────────────────────────

    def subscribe_horizontal(self, callback):
        """callback(offset) with offset = -scroll_x, for header and footer panes."""
        unsubscribe = self._horizontal.subscribe(callback)
        callback(self.header_offset)
        return unsubscribe

    def subscribe_vertical(self, callback):
        """callback(scroll_y) for the body and the frozen label pane."""
        unsubscribe = self._vertical.subscribe(callback)
        callback(self.scroll_y)
        return unsubscribe

    @property
    def header_offset(self):
        return -self.scroll_x

    # ── Scroll input ──────────────────────────────────────────

    def on_body_scroll(self, x=None, y=None):
        """Apply the offset reported by the body's scroll event, synchronously."""
        self._apply(self.scroll_x if x is None else x, self.scroll_y if y is None else y)

    def scroll_by(self, dx=0, dy=0):
        self._apply(self.scroll_x + dx, self.scroll_y + dy)

    def _apply(self, x, y):
        x = min(max(0, int(round(x))), self.max_scroll_x)
        y = min(max(0, int(round(y))), self.max_scroll_y)
        if x != self.scroll_x:
            self.scroll_x = x
            self._horizontal.notify(self.header_offset)
        if y != self.scroll_y:
            self.scroll_y = y
            self._vertical.notify(self.scroll_y)
