import tkinter as tk
from tkinter import ttk


NOTICE_COLORS = {
    'success': ('#ecfdf5', '#065f46'),
    'error': ('#fef2f2', '#991b1b'),
    'warning': ('#fffbeb', '#92400e'),
    'info': ('#eff6ff', '#1e40af'),
}


class NoticeBar(tk.Frame):
    """
    A one-line coloured banner for operation results, with a close button.

    The outer frame stays packed; only the inner bar is shown and hidden, so
    the banner keeps its place in the layout.

    Args:
        parent: Parent widget.

    Example:
        bar = NoticeBar(root)
        bar.pack(fill='x')
        bar.show('success', "Saved", "rows=12", auto_hide_ms=4000)
    """

    def __init__(self, parent):
        super().__init__(parent)
        self._timer = None

        self._bar = tk.Frame(self, bd=1, relief='solid')
        self._title = tk.Label(self._bar, font=("Arial", 10, "bold"), anchor='w')
        self._title.pack(side='left', padx=(8, 4), pady=4)
        self._detail = tk.Label(self._bar, anchor='w', justify='left', wraplength=800)
        self._detail.pack(side='left', fill='x', expand=True, pady=4)
        self._close = tk.Button(self._bar, text="x", relief='flat', command=self.hide)
        self._close.pack(side='right', padx=4)

    def show(self, kind, title, detail="", auto_hide_ms=0):
        bg, fg = NOTICE_COLORS.get(kind, NOTICE_COLORS['info'])
        for widget in (self._bar, self._title, self._detail, self._close):
            widget.config(bg=bg)
        self._title.config(text=title, fg=fg)
        self._detail.config(text=detail, fg=fg)
        self._bar.pack(fill='x', padx=8, pady=4)

        if self._timer is not None:
            self.after_cancel(self._timer)
            self._timer = None
        if auto_hide_ms:
            self._timer = self.after(auto_hide_ms, self.hide)

    def hide(self):
        if self._timer is not None:
            self.after_cancel(self._timer)
            self._timer = None
        self._bar.pack_forget()


class LabeledCombobox(ttk.Frame):
    """Label + readonly Combobox pair used in the toolbar."""

    def __init__(self, parent, *, label, values, width=18, on_select=None):
        super().__init__(parent)
        tk.Label(self, text=label).pack(side='left', padx=(0, 4))
        self.var = tk.StringVar()
        self.combo = ttk.Combobox(self, textvariable=self.var, values=list(values),
                                  state='readonly', width=width)
        self.combo.pack(side='left')
        if on_select is not None:
            self.combo.bind('<<ComboboxSelected>>', lambda _e: on_select(self.var.get()))

    def get(self):
        return self.var.get()

    def set(self, value):
        self.var.set(value)

    def current(self, index=None):
        if index is None:
            return self.combo.current()
        return self.combo.current(index)
