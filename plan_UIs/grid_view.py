import logging
import tkinter as tk

from plan_logics import config
from plan_logics.navigation import KeyboardNavigator
from plan_logics.sanitizer import format_amount, sanitize
from plan_logics.scroll_sync import ScrollSyncController, left_width, right_width
from plan_logics.taxonomy import GRANDTOTAL, ITEM, SECTION, SUBTOTAL, TITLE


logger = logging.getLogger(__name__)

HEADER_BG = '#e2e8f0'
FOOTER_BG = '#d1fae5'
ROW_STYLES = {
    TITLE: {'bg': '#bfdbfe', 'font': ("Arial", 11, "bold")},
    SECTION: {'bg': '#e0f2fe', 'font': ("Arial", 10, "bold")},
    ITEM: {'bg': 'white', 'font': ("Arial", 10)},
    SUBTOTAL: {'bg': '#ecfdf5', 'font': ("Arial", 10, "bold")},
    GRANDTOTAL: {'bg': '#a7f3d0', 'font': ("Arial", 10, "bold")},
}
UNMAPPED_FG = '#b45309'
NAV_KEYSYMS = ('Left', 'Right', 'Up', 'Down', 'Return', 'KP_Enter')


class PlanGrid(tk.Frame):
    """
    Frozen-pane planning grid.

    Layout (six canvases):

        corner      | header        (header shifts with the body horizontally)
        labels      | body          (labels follow the body vertically)
        footer-left | footer        (footer shifts with the body horizontally)

    The body offset lives in a ScrollSyncController; every pane is positioned
    from its notifications, so nothing scrolls on its own. Cell entries write
    through the sanitizer into the model's GridStore, and totals come back
    from the model's TotalsTracker.

    Args:
        parent: Parent widget.
        model: PlanModel providing table, units, store and tracker.
    """

    def __init__(self, parent, model, col_w=None):
        super().__init__(parent)
        self.model = model
        self.col_w = dict(col_w or config.COL_W)
        self.row_height = config.ROW_HEIGHT
        self.scroll = ScrollSyncController(col_w=self.col_w)
        self.navigator = None

        self._vars = {}         # (code, unit_id) -> StringVar
        self._entries = {}      # (row, col) -> Entry
        self._totals = {}       # key -> Label
        self._syncing = False
        self._unsubscribers = []
        self._windows = {}      # pane -> canvas window id

        self._build_panes()
        self.scroll.subscribe_horizontal(self._on_horizontal)
        self.scroll.subscribe_vertical(self._on_vertical)
        self.refresh()

    # ── Layout ──────────────────────────────────────────────

    def _build_panes(self):
        left_w = left_width(self.col_w)
        h = self.row_height

        def canvas(**kw):
            return tk.Canvas(self, highlightthickness=0, bd=0, **kw)

        self._corner = canvas(width=left_w, height=h, bg=HEADER_BG)
        self._header = canvas(height=h, bg=HEADER_BG)
        self._labels = canvas(width=left_w, bg='white')
        self._body = canvas(bg='white')
        self._footer_left = canvas(width=left_w, height=h, bg=FOOTER_BG)
        self._footer = canvas(height=h, bg=FOOTER_BG)
        self._vbar = tk.Scrollbar(self, orient='vertical', command=self._on_vbar)
        self._hbar = tk.Scrollbar(self, orient='horizontal', command=self._on_hbar)

        self._corner.grid(row=0, column=0, sticky='nsew')
        self._header.grid(row=0, column=1, sticky='nsew')
        self._labels.grid(row=1, column=0, sticky='nsew')
        self._body.grid(row=1, column=1, sticky='nsew')
        self._vbar.grid(row=1, column=2, sticky='ns')
        self._footer_left.grid(row=2, column=0, sticky='nsew')
        self._footer.grid(row=2, column=1, sticky='nsew')
        self._hbar.grid(row=3, column=1, sticky='ew')
        self.grid_columnconfigure(1, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._body.bind('<Configure>', self._on_body_configure)
        self._bind_wheel(self._body)
        self._bind_wheel(self._labels)

    def _pane_frame(self, pane, canvas, width, height, bg):
        frame = tk.Frame(canvas, width=width, height=height, bg=bg)
        self._windows[pane] = canvas.create_window(0, 0, window=frame, anchor='nw', width=width, height=height)
        self._bind_wheel(frame)
        return frame

    def refresh(self):
        """Rebuild every pane from the model's current table, units and store."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._vars.clear()
        self._entries.clear()
        self._totals.clear()
        for canvas in (self._corner, self._header, self._labels, self._body, self._footer_left, self._footer):
            for child in canvas.winfo_children():
                child.destroy()
            canvas.delete('all')

        table = self.model.table
        units = self.model.units
        n_cols = len(units)
        self.navigator = KeyboardNavigator(table.rows, n_cols, self.col_w, self.row_height)

        left_w = left_width(self.col_w)
        right_w = right_width(n_cols, self.col_w)
        body_h = len(table.rows) * self.row_height

        self._build_header(left_w, right_w, units)
        self._build_labels(left_w, body_h, table)
        self._build_body(right_w, body_h, table, units)
        self._build_footer(left_w, right_w, units)

        self.scroll.set_units(n_cols)
        self.scroll.resize(content_height=body_h)

        self._unsubscribers.append(self.model.store.subscribe(self._on_store_changed))
        self._unsubscribers.append(self.model.tracker.on_change(self._on_totals))
        self._on_totals(self.model.tracker.totals)
        self._place_panes()
        logger.debug("[GRID] %s rendered: %d rows x %d units", table.table_code, len(table.rows), n_cols)

    def _cell_label(self, parent, x, y, width, text='', anchor='e', **style):
        label = tk.Label(parent, text=text, anchor=anchor, bd=1, relief='groove', padx=6, **style)
        label.place(x=x, y=y, width=width, height=self.row_height)
        self._bind_wheel(label)
        return label

    def _build_header(self, left_w, right_w, units):
        corner = self._pane_frame('corner', self._corner, left_w, self.row_height, HEADER_BG)
        style = {'bg': HEADER_BG, 'font': ("Arial", 10, "bold")}
        self._cell_label(corner, 0, 0, self.col_w['code'], "Code", anchor='center', **style)
        self._cell_label(corner, self.col_w['code'], 0, self.col_w['item'], "Item", anchor='w', **style)

        header = self._pane_frame('header', self._header, right_w, self.row_height, HEADER_BG)
        cell_w = self.col_w['cell']
        for j, unit in enumerate(units):
            self._cell_label(header, j * cell_w, 0, cell_w, unit.name, anchor='center', **style)
        self._cell_label(header, max(1, len(units)) * cell_w, 0, self.col_w['total'], "Total",
                         anchor='center', **style)

    def _build_labels(self, left_w, body_h, table):
        pane = self._pane_frame('labels', self._labels, left_w, body_h, 'white')
        unmapped = {r.code for r in self.model.resolver.unmapped_rows(table.rows)}
        for i, row in enumerate(table.rows):
            style = dict(ROW_STYLES[row.kind])
            y = i * self.row_height
            code_text = row.code if row.kind in (ITEM, SECTION) else ''
            label_text = row.label
            if row.code in unmapped:
                label_text = f"{row.label}  (no backend id)"
                style['fg'] = UNMAPPED_FG
            self._cell_label(pane, 0, y, self.col_w['code'], code_text, anchor='center', **style)
            self._cell_label(pane, self.col_w['code'], y, self.col_w['item'], label_text, anchor='w', **style)

    def _build_body(self, right_w, body_h, table, units):
        pane = self._pane_frame('body', self._body, right_w, body_h, 'white')
        cell_w = self.col_w['cell']
        total_x = max(1, len(units)) * cell_w
        nav_row = 0
        for i, row in enumerate(table.rows):
            style = ROW_STYLES[row.kind]
            y = i * self.row_height
            if row.kind == ITEM:
                for j, unit in enumerate(units):
                    self._make_entry(pane, row.code, unit.id, nav_row, j, j * cell_w, y)
                self._totals[('row', row.code)] = self._cell_label(pane, total_x, y, self.col_w['total'], **style)
                nav_row += 1
            elif row.kind == SUBTOTAL:
                for j, unit in enumerate(units):
                    self._totals[('sub', row.code, unit.id)] = self._cell_label(pane, j * cell_w, y, cell_w, **style)
                self._totals[('sub', row.code, 'total')] = self._cell_label(
                    pane, total_x, y, self.col_w['total'], **style)
            elif row.kind == GRANDTOTAL:
                for j, unit in enumerate(units):
                    self._totals[('grand', row.code, unit.id)] = self._cell_label(pane, j * cell_w, y, cell_w, **style)
                self._totals[('grand', row.code, 'total')] = self._cell_label(
                    pane, total_x, y, self.col_w['total'], **style)
            else:
                self._cell_label(pane, 0, y, right_w, **style)
        logger.debug("[GRID] %d editable cells", len(self._entries))

    def _make_entry(self, parent, code, unit_id, row, col, x, y):
        var = tk.StringVar(value=self.model.store.get(code, unit_id))
        var.trace_add('write', lambda *_a, c=code, u=unit_id, v=var: self._on_cell_edit(c, u, v))
        entry = tk.Entry(parent, textvariable=var, justify='right', relief='solid', bd=1)
        entry.place(x=x, y=y, width=self.col_w['cell'], height=self.row_height)
        for keysym in NAV_KEYSYMS:
            entry.bind(f'<KeyPress-{keysym}>', lambda e, r=row, c=col: self._on_key(e, r, c))
        entry.bind('<FocusIn>', lambda _e, r=row, c=col: self._reveal(r, c))
        self._bind_wheel(entry)
        self._vars[(code, unit_id)] = var
        self._entries[(row, col)] = entry

    def _build_footer(self, left_w, right_w, units):
        style = {'bg': FOOTER_BG, 'font': ("Arial", 10, "bold")}
        footer_left = self._pane_frame('footer_left', self._footer_left, left_w, self.row_height, FOOTER_BG)
        self._cell_label(footer_left, 0, 0, left_w, "Grand total", anchor='w', **style)

        footer = self._pane_frame('footer', self._footer, right_w, self.row_height, FOOTER_BG)
        cell_w = self.col_w['cell']
        for j, unit in enumerate(units):
            self._totals[('col', unit.id)] = self._cell_label(footer, j * cell_w, 0, cell_w, **style)
        self._totals[('col', 'total')] = self._cell_label(
            footer, max(1, len(units)) * cell_w, 0, self.col_w['total'], **style)

    # ── Store / totals ──────────────────────────────────────

    def _on_cell_edit(self, code, unit_id, var):
        if self._syncing:
            return
        raw = var.get()
        clean = sanitize(raw)
        if clean != raw:
            self._syncing = True
            try:
                var.set(clean)
            finally:
                self._syncing = False
        self.model.store.set(code, unit_id, clean)

    def _on_store_changed(self, store):
        values = store.values
        self._syncing = True
        try:
            for (code, unit_id), var in self._vars.items():
                text = values[code].get(unit_id, '')
                if var.get() != text:
                    var.set(text)
        finally:
            self._syncing = False

    def _on_totals(self, totals):
        def put(key, value):
            label = self._totals.get(key)
            if label is not None:
                label.config(text=format_amount(value))

        for code, value in totals.row_total.items():
            put(('row', code), value)
        for code, sub in totals.section_subtotal.items():
            for unit_id, value in sub['per_column'].items():
                put(('sub', code, unit_id), value)
            put(('sub', code, 'total'), sub['total'])
        for unit_id, value in totals.column_total.items():
            put(('col', unit_id), value)
        put(('col', 'total'), totals.grand_total)
        for row in self.model.table.rows:
            if row.kind == GRANDTOTAL:
                for unit_id, value in totals.column_total.items():
                    put(('grand', row.code, unit_id), value)
                put(('grand', row.code, 'total'), totals.grand_total)

    # ── Keyboard ────────────────────────────────────────────

    def _on_key(self, event, row, col):
        target = self.navigator.on_directional_key(row, col, event.keysym)
        if target is None:
            return None
        self.focus_cell(*target)
        return 'break'

    def focus_cell(self, row, col):
        entry = self._entries.get((row, col))
        if entry is None:
            return
        entry.focus_set()
        entry.icursor('end')
        entry.select_range(0, 'end')
        self._reveal(row, col)

    def _reveal(self, row, col):
        x, y = self.navigator.scroll_for(
            row, col,
            viewport_width=self.navigator.frozen_left + self.scroll.viewport_width,
            viewport_height=self.scroll.viewport_height,
            scroll_x=self.scroll.scroll_x,
            scroll_y=self.scroll.scroll_y,
        )
        self.scroll.on_body_scroll(x, y)

    # ── Scrolling ───────────────────────────────────────────

    def _on_body_configure(self, event):
        self.scroll.resize(viewport_width=event.width, viewport_height=event.height)
        self._update_scrollbars()

    def _bind_wheel(self, widget):
        widget.bind('<MouseWheel>', self._on_wheel)
        widget.bind('<Shift-MouseWheel>', self._on_shift_wheel)
        widget.bind('<Button-4>', lambda _e: self.scroll.scroll_by(dy=-3 * self.row_height))
        widget.bind('<Button-5>', lambda _e: self.scroll.scroll_by(dy=3 * self.row_height))

    def _on_wheel(self, event):
        step = -1 if event.delta > 0 else 1
        self.scroll.scroll_by(dy=step * 3 * self.row_height)

    def _on_shift_wheel(self, event):
        step = -1 if event.delta > 0 else 1
        self.scroll.scroll_by(dx=step * self.col_w['cell'])

    def _on_hbar(self, action, amount, unit=None):
        if action == 'moveto':
            self.scroll.on_body_scroll(x=float(amount) * self.scroll.right_w)
        elif action == 'scroll':
            step = self.col_w['cell'] if unit == 'units' else self.scroll.viewport_width
            self.scroll.scroll_by(dx=int(amount) * step)

    def _on_vbar(self, action, amount, unit=None):
        if action == 'moveto':
            self.scroll.on_body_scroll(y=float(amount) * self.scroll.content_height)
        elif action == 'scroll':
            step = self.row_height if unit == 'units' else self.scroll.viewport_height
            self.scroll.scroll_by(dy=int(amount) * step)

    def _on_horizontal(self, offset):
        self._move('header', self._header, offset, 0)
        self._move('footer', self._footer, offset, 0)
        self._move('body', self._body, offset, -self.scroll.scroll_y)
        self._update_scrollbars()

    def _on_vertical(self, scroll_y):
        self._move('labels', self._labels, 0, -scroll_y)
        self._move('body', self._body, -self.scroll.scroll_x, -scroll_y)
        self._update_scrollbars()

    def _place_panes(self):
        self._on_horizontal(self.scroll.header_offset)
        self._on_vertical(self.scroll.scroll_y)

    def _move(self, pane, canvas, x, y):
        window = self._windows.get(pane)
        if window is not None:
            canvas.coords(window, x, y)

    def _update_scrollbars(self):
        s = self.scroll
        if s.right_w:
            self._hbar.set(s.scroll_x / s.right_w, min(1.0, (s.scroll_x + s.viewport_width) / s.right_w))
        if s.content_height:
            self._vbar.set(s.scroll_y / s.content_height,
                           min(1.0, (s.scroll_y + s.viewport_height) / s.content_height))
