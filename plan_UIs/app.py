import logging
import tkinter as tk
from tkinter import ttk, messagebox, simpledialog

from plan_logics import config
from plan_logics.api_client import ApiClient
from plan_logics.data_model import PlanModel, period_label, year_options
from plan_logics.errors import PlanGridError, classify
from plan_logics.persistence import saved_summary
from plan_logics.tables import ALL_TABLES

from plan_UIs.grid_view import PlanGrid
from plan_UIs.payload_dialog import PayloadDialog
from plan_UIs.progress_dialog import BusyDialog
from plan_UIs.widgets import LabeledCombobox, NoticeBar


logger = logging.getLogger(__name__)


class PlanningApp:
    """Main window: table/year/branch selectors, the planning grid and its actions."""

    def __init__(self, root, client=None):
        self.root = root
        self.root.title("Business plan - budget grid")
        self.root.geometry("1200x800")

        self.client = client or ApiClient()
        self.model = PlanModel(self.client)
        self._titles = {t.title: code for code, t in ALL_TABLES.items()}

        self._build_toolbar()
        self.notice = NoticeBar(self.root)
        self.notice.pack(fill='x')
        self._unmapped_label = tk.Label(self.root, fg='#b45309', anchor='w')
        self._unmapped_label.pack(fill='x', padx=10)

        self.grid = PlanGrid(self.root, self.model)
        self.grid.pack(fill='both', expand=True, padx=10, pady=(0, 10))
        self._update_unmapped()

    # ── Layout ──────────────────────────────────────────────

    def _build_toolbar(self):
        bar = ttk.Frame(self.root, padding=(10, 8))
        bar.pack(fill='x')

        self._table_combo = LabeledCombobox(bar, label="Table:", values=self._titles, width=34,
                                            on_select=self._on_table_selected)
        self._table_combo.set(self.model.table.title)
        self._table_combo.pack(side='left', padx=(0, 10))

        self._year_combo = LabeledCombobox(bar, label="Year (BE):", values=year_options(), width=8,
                                           on_select=self._on_year_selected)
        self._year_combo.set(str(self.model.year))
        self._year_combo.pack(side='left', padx=(0, 10))

        tk.Label(bar, text="Period:").pack(side='left')
        self._period_var = tk.StringVar(value=self.model.period)
        period_entry = ttk.Entry(bar, textvariable=self._period_var, width=20)
        period_entry.pack(side='left', padx=(4, 10))
        period_entry.bind('<FocusOut>', lambda _e: self._on_period_changed())

        tk.Label(bar, text="Branch id:").pack(side='left')
        self._branch_var = tk.StringVar()
        branch_entry = ttk.Entry(bar, textvariable=self._branch_var, width=6)
        branch_entry.pack(side='left', padx=(4, 4))
        branch_entry.bind('<Return>', lambda _e: self._on_branch_selected())
        ttk.Button(bar, text="Open branch", command=self._on_branch_selected).pack(side='left', padx=(0, 10))

        ttk.Button(bar, text="Preview payload", command=self._on_preview).pack(side='right')
        ttk.Button(bar, text="Reset all", command=self._on_reset).pack(side='right', padx=4)
        ttk.Button(bar, text="Save", command=self._on_save).pack(side='right', padx=4)
        ttk.Button(bar, text="Reload", command=self._load).pack(side='right', padx=4)
        ttk.Button(bar, text="Token...", command=self._on_token).pack(side='right', padx=4)

    # ── Selection ───────────────────────────────────────────

    def _on_table_selected(self, title):
        self.model.select_table(self._titles[title])
        self.grid.refresh()
        self._update_unmapped()
        if self.model.branch_id and self.model.units:
            self._load()

    def _on_year_selected(self, year):
        self.model.select_year(int(year))
        self._period_var.set(self.model.period)
        if self.model.branch_id and self.model.units:
            self._load()

    def _on_period_changed(self):
        period = self._period_var.get().strip() or period_label(self.model.year)
        if period != self.model.period:
            self.model.select_year(self.model.year, period)

    def _on_branch_selected(self):
        text = self._branch_var.get().strip()
        if not text.isdigit() or int(text) <= 0:
            messagebox.showerror("Invalid branch", "Enter a positive branch id.")
            return
        branch_id = int(text)
        self.model.select_branch(branch_id)

        def on_success(units):
            if self.model.branch_id != branch_id:
                logger.info("[UNITS] Branch changed while loading units for %s, ignoring", branch_id)
                return
            self.model.set_units(units)
            self.grid.refresh()
            if not units:
                self.notice.show('warning', "No units", f"Branch {branch_id} has no units.")
                return
            self._load()

        BusyDialog(self.root, "Loading units...", "Loading units...", f"Branch: {branch_id}").run(
            lambda: self.client.list_units(branch_id), on_success=on_success, on_error=self._show_error,
        )

    def _on_token(self):
        current = self.client.token_store.get(config.TOKEN_KEY) or ''
        token = simpledialog.askstring("Bearer token", "Paste the access token:", initialvalue=current,
                                       parent=self.root)
        if token is not None:
            self.client.token_store.set(config.TOKEN_KEY, token.strip() or None)

    # ── Load / save ─────────────────────────────────────────

    def _load(self):
        gateway = self.model.gateway
        try:
            ticket = gateway.begin_load()
        except PlanGridError as e:
            self._show_error(e)
            return

        def on_success(payload):
            if gateway.finish_load(ticket, payload):
                self.notice.show('info', "Loaded", f"plan_id={ticket.plan_id} • branch={ticket.branch_id}",
                                 auto_hide_ms=3000)

        def on_error(error):
            failure = gateway.fail_load(ticket, error)
            if failure is not None:
                self._show_error(failure)

        BusyDialog(self.root, "Loading...", "Loading saved values...", ticket.url).run(
            lambda: gateway.fetch(ticket), on_success=on_success, on_error=on_error,
        )

    def _on_save(self):
        gateway = self.model.gateway
        try:
            ticket = gateway.begin_save()
        except PlanGridError as e:
            self._show_error(e)
            return

        def on_success(response):
            result = gateway.finish_save(ticket, response)
            if result is None:
                return
            self.notice.show('success', "Saved", saved_summary(result, ticket))
            self._load()

        def on_error(error):
            failure = gateway.fail_save(ticket, error)
            if failure is not None:
                self._show_error(failure)

        BusyDialog(self.root, "Saving...", "Sending plan to server...", ticket.url).run(
            lambda: gateway.send(ticket), on_success=on_success, on_error=on_error,
        )

    def _on_reset(self):
        if messagebox.askyesno("Reset all", "Clear every cell of this table? Saved values are kept until you save."):
            self.model.store.clear()

    def _on_preview(self):
        PayloadDialog(self.root, self.model.gateway.preview())

    # ── Helpers ──────────────────────────────────────────────

    def _update_unmapped(self):
        rows = self.model.resolver.unmapped_rows(self.model.table.rows)
        if rows:
            codes = ", ".join(r.code for r in rows)
            self._unmapped_label.config(text=f"Rows without a backend id (cannot hold amounts): {codes}")
        else:
            self._unmapped_label.config(text="")

    def _show_error(self, error):
        failure = classify(error, plan_id=self.model.plan_id)
        title, detail = failure.user_message()
        logger.error("[UI] %s: %s", title, detail)
        self.notice.show('error', title, detail)
        messagebox.showerror(title, detail)
