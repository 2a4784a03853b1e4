import tkinter as tk
from tkinter import ttk, scrolledtext


class PayloadDialog:
    """Read-only view of the outgoing save body with a copy-to-clipboard button."""

    def __init__(self, root, text, title="Payload preview"):
        self._root = root
        self._text = text

        self._dialog = tk.Toplevel(root)
        self._dialog.title(title)
        self._dialog.geometry("640x520")
        self._dialog.transient(root)

        box = scrolledtext.ScrolledText(self._dialog, wrap='none', font=("Courier", 10))
        box.insert('1.0', text)
        box.configure(state='disabled')
        box.pack(fill='both', expand=True, padx=8, pady=(8, 4))

        buttons = ttk.Frame(self._dialog)
        buttons.pack(fill='x', padx=8, pady=(0, 8))
        self._copied = tk.Label(buttons, text="", fg="green")
        self._copied.pack(side='left')
        ttk.Button(buttons, text="Close", command=self._dialog.destroy).pack(side='right')
        ttk.Button(buttons, text="Copy", command=self._copy).pack(side='right', padx=4)

    def _copy(self):
        self._root.clipboard_clear()
        self._root.clipboard_append(self._text)
        self._copied.config(text="Copied")
