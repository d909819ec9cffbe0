# main.py
from __future__ import annotations
import sys
import ctypes

from cli import run as run_cli
from logsetup import setup_logging


def enable_dpi_awareness():
    """
    Windows-only: enable per-monitor DPI awareness before creating Tk root.
    No-op on other platforms (ctypes has no windll there).
    """
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(2)   # Per-monitor v2
    except (AttributeError, OSError):
        try:
            ctypes.windll.user32.SetProcessDPIAware()    # Legacy fallback
        except (AttributeError, OSError):
            pass


def center_window(window) -> None:
    """
    Center the window at its requested size.
    Called after the first layout pass so Tk knows actual metrics.
    """
    window.update_idletasks()  # ensure Tk has computed widget sizes
    sw, sh = window.winfo_screenwidth(), window.winfo_screenheight()
    w, h = window.winfo_reqwidth(), window.winfo_reqheight()
    window.geometry(f"{w}x{h}+{(sw - w) // 2}+{(sh - h) // 2}")


def run_gui():
    # tkinter only loads for the window, the CLI runs headless
    import tkinter as tk
    from tkinter import ttk
    from app_state import AppState
    from ui_timer import APP_TITLE, TimerTab

    setup_logging("INFO")
    # Enable HD before Tk root
    enable_dpi_awareness()
    root = tk.Tk()
    root.title(APP_TITLE)

    style = ttk.Style()
    style.configure("TButton", padding=6)
    style.configure("TLabel", padding=2)

    state = AppState()  # run state shared by the Run button and the ticker thread
    tab = TimerTab(root, state)
    tab.frame.pack(fill="both", expand=True)
    root.after_idle(lambda: center_window(root))

    root.mainloop()


def main(argv=None):
    """with arguments: command-line countdown. without: the window."""
    if argv is None:
        argv = sys.argv[1:]
    if argv:
        return run_cli(argv)
    run_gui()
    return 0


if __name__ == "__main__":
    sys.exit(main())
