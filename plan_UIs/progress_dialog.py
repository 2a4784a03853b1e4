import logging
import threading
import tkinter as tk
from tkinter import ttk


logger = logging.getLogger(__name__)


class BusyDialog:
    """
    Modal "please wait" dialog that runs a network call in a background thread.

    Usage:
        BusyDialog(root, "Saving...", "Sending plan to server...").run(
            lambda: gateway.send(ticket),
            on_success=lambda response: ...,
            on_error=lambda exc: ...,
        )

    Args:
        root: Parent Tk window.
        title: Dialog window title.
        body_label: Bold heading shown at the top.
        status: Optional line shown under the heading, e.g. the request URL.
    """

    def __init__(self, root, title, body_label, status=""):
        self._root = root

        self._dialog = tk.Toplevel(root)
        self._dialog.title(title)
        self._dialog.geometry("400x130")
        self._dialog.resizable(False, False)
        self._dialog.transient(root)
        self._dialog.grab_set()
        # closing mid-request would orphan the worker's completion
        self._dialog.protocol("WM_DELETE_WINDOW", lambda: None)

        tk.Label(self._dialog, text=body_label, font=("Arial", 12, "bold")).pack(pady=10)

        self._status_label = tk.Label(self._dialog, text=status, fg="blue")
        self._status_label.pack(pady=5)

        self._progress_bar = ttk.Progressbar(self._dialog, mode='indeterminate', length=300)
        self._progress_bar.pack(pady=10, padx=20)
        self._progress_bar.start(12)

    def run(self, fn, on_success, on_error):
        """
        Execute fn in a background thread, then call on_success or on_error on the main thread.

        Args:
            fn: callable() -> result. Must not touch Tk widgets.
            on_success: callable(result) invoked on the main thread when fn completes.
            on_error: callable(exception) invoked on the main thread if fn raises.
        """
        def background():
            try:
                result = fn()
            except Exception as e:
                logger.debug("[BUSY] Background task failed", exc_info=True)
                # `e` is unbound once the except block exits
                err = e
                self._root.after(0, lambda err=err: self._finish(on_success, None, err, on_error))
                return
            self._root.after(0, lambda result=result: self._finish(on_success, result, None, on_error))

        threading.Thread(target=background, daemon=True).start()

    def _finish(self, on_success, result, error, on_error):
        if self._dialog.winfo_exists():
            self._progress_bar.stop()
            self._dialog.grab_release()
            self._dialog.destroy()
        if error is not None:
            on_error(error)
        else:
            on_success(result)
