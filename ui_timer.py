# ui_timer.py
from __future__ import annotations
import logging
import queue
import tkinter as tk
from pathlib import Path
from tkinter import ttk, messagebox, filedialog

from app_state import AppState, RunSnapshot
from errors import ParseFailure, TimeOverflow
from sinks import build_sink
from storage import RunConfig, load_config, save_config
from timeparse import is_valid_input
from timer import Ticker

logger = logging.getLogger(__name__)

APP_TITLE = "CountMeDown"
DEFAULT_TIME_IN = "10:00"
INVALID_FG = "#c80c0c"
POLL_MS = 100

# phase changes travel through the label queue too
_RUN_MARK = object()
_IDLE_MARK = object()


class TimerTab:
    """
    Countdown page:
    - title line mirroring whatever was last written to the output file
    - time / step / prefix / ending fields (time and step go red when invalid)
    - output file picker
    - Run/Stop, Save, Load
    The ticker thread only talks to AppState and the sinks; widgets are touched
    from the Tk thread alone, by draining the label queue.
    """
    def __init__(self, parent, state: AppState):
        self.state = state
        self.frame = ttk.Frame(parent)
        self._lines: "queue.Queue[str]" = queue.Queue()

        defaults = RunConfig.default()

        # ------- title / live line -------
        self.title_var = tk.StringVar(value=APP_TITLE)
        tk.Label(self.frame, textvariable=self.title_var,
                 font=("Consolas", 28, "bold")).pack(pady=(16, 8))

        # ------- inputs -------
        ffrm = ttk.LabelFrame(self.frame, text="Countdown", padding=8)
        ffrm.pack(padx=10, pady=8, fill="x")
        ffrm.grid_columnconfigure(1, weight=1)

        self.time_var = tk.StringVar(value=defaults.time_in)
        self.step_var = tk.StringVar(value=str(defaults.step))
        self.prefix_var = tk.StringVar(value=defaults.prefix)
        self.ending_var = tk.StringVar(value=defaults.ending)

        self.time_label = tk.Label(ffrm, text="Time:")
        self.time_label.grid(row=0, column=0, sticky="e", padx=(0, 6), pady=2)
        ttk.Entry(ffrm, textvariable=self.time_var).grid(row=0, column=1, sticky="ew", pady=2)

        self.step_label = tk.Label(ffrm, text="Step (s):")
        self.step_label.grid(row=1, column=0, sticky="e", padx=(0, 6), pady=2)
        ttk.Entry(ffrm, textvariable=self.step_var, width=6).grid(row=1, column=1, sticky="w", pady=2)

        tk.Label(ffrm, text="Prefix:").grid(row=2, column=0, sticky="e", padx=(0, 6), pady=2)
        ttk.Entry(ffrm, textvariable=self.prefix_var).grid(row=2, column=1, sticky="ew", pady=2)

        tk.Label(ffrm, text="Ending:").grid(row=3, column=0, sticky="e", padx=(0, 6), pady=2)
        ttk.Entry(ffrm, textvariable=self.ending_var).grid(row=3, column=1, sticky="ew", pady=2)

        # ------- output file -------
        self.file_path = defaults.filepath
        self.file_name_var = tk.StringVar(value=Path(self.file_path).name)
        tk.Label(ffrm, text="File:").grid(row=4, column=0, sticky="e", padx=(0, 6), pady=2)
        tk.Label(ffrm, textvariable=self.file_name_var, anchor="w").grid(row=4, column=1, sticky="ew", pady=2)
        ttk.Button(ffrm, text="Pick", command=self.pick_file).grid(row=4, column=2, padx=6)

        self._normal_fg = self.time_label.cget("fg")

        # ------- controls -------
        bfrm = tk.Frame(self.frame); bfrm.pack(pady=12)
        self.btn_run  = ttk.Button(bfrm, text="Run",  command=self.on_run)
        self.btn_save = ttk.Button(bfrm, text="Save", command=self.on_save)
        self.btn_load = ttk.Button(bfrm, text="Load", command=self.on_load)
        self.btn_run.grid(row=0, column=0, padx=6)
        self.btn_save.grid(row=0, column=1, padx=6)
        self.btn_load.grid(row=0, column=2, padx=6)

        tk.Label(self.frame, text="Enter: Run/Stop", font=("Segoe UI", 9), fg="#666").pack(side="bottom", pady=6)
        self.frame.bind_all("<Return>", lambda e: self.on_run())

        # live validation
        self.time_var.trace_add("write", self._check_time_in)
        self.step_var.trace_add("write", self._check_step_in)

        # engine: ticker thread -> state -> sinks -> queue -> title label
        self.state.subscribe(self._on_state_changed)
        self.ticker = Ticker(on_tick=self._on_timer_tick)
        self.ticker.start()
        self.frame.after(POLL_MS, self._drain_lines)
        self.frame.bind("<Destroy>", lambda e: self.ticker.stop(timeout=2))

    # ---------- validation ----------
    def _set_validity(self, label: tk.Label, valid: bool) -> None:
        label.config(fg=self._normal_fg if valid else INVALID_FG)

    def _check_time_in(self, *args) -> None:
        self._set_validity(self.time_label, is_valid_input(self.time_var.get(), colon_allowed=True))

    def _check_step_in(self, *args) -> None:
        self._set_validity(self.step_label, is_valid_input(self.step_var.get(), colon_allowed=False))

    # ---------- form <-> config ----------
    def _read_form(self) -> RunConfig:
        try: step = int(self.step_var.get())
        except ValueError: step = 1
        return RunConfig(
            time_in=self.time_var.get().strip() or DEFAULT_TIME_IN,
            prefix=self.prefix_var.get(),
            ending=self.ending_var.get(),
            step=max(1, step),
            filepath=self.file_path,
        )

    def _fill_form(self, cfg: RunConfig) -> None:
        self.time_var.set(cfg.time_in)
        self.step_var.set(str(cfg.step))
        self.prefix_var.set(cfg.prefix)
        self.ending_var.set(cfg.ending)
        self._set_file(cfg.filepath)

    def _set_file(self, path: str) -> None:
        self.file_path = path
        self.file_name_var.set(Path(path).name)

    # ---------- events ----------
    def pick_file(self) -> None:
        start = Path(self.file_path)
        chosen = filedialog.asksaveasfilename(
            parent=self.frame,
            initialdir=str(start.parent),
            initialfile=start.name,
            defaultextension=".txt",
            filetypes=[("text", "*.txt")],
        )
        # cancelled dialog returns ""
        if chosen:
            self._set_file(chosen)

    def _make_run(self):
        plan = self._read_form().to_plan(verbose=True)
        return plan, build_sink(plan.filepath, plan.verbose, self._lines)

    def on_run(self) -> None:
        try:
            snap = self.state.toggle(self._make_run)
        except (ParseFailure, TimeOverflow) as exc:
            messagebox.showerror("Invalid time", str(exc))
            return
        if snap.running:
            # first line right away, the ticker takes over from here
            self._on_timer_tick()

    def on_save(self) -> None:
        try:
            save_config(self._read_form())
        except OSError as exc:
            logger.error("could not save config: %s", exc)
            messagebox.showerror("Save failed", str(exc))
            return
        self.title_var.set("Config saved!")

    def on_load(self) -> None:
        cfg = load_config()
        if cfg is not None:
            self._fill_form(cfg)

    # ---------- timer callbacks ----------
    def _on_timer_tick(self) -> None:
        """runs on the ticker thread (and once on the Tk thread at start)"""
        result = self.state.advance()
        if result is None:
            return
        result.sink.emit(result.line)
        if result.finished and not result.line:
            self._lines.put(APP_TITLE)

    def _on_state_changed(self, snap: RunSnapshot) -> None:
        # may arrive on the ticker thread; only flag it for the Tk thread
        self._lines.put(_RUN_MARK if snap.running else _IDLE_MARK)

    def _drain_lines(self) -> None:
        try:
            while True:
                line = self._lines.get_nowait()
                if line is _RUN_MARK:
                    self.btn_run.config(text="Stop")
                elif line is _IDLE_MARK:
                    self.btn_run.config(text="Run")
                else:
                    self.title_var.set(line)
        except queue.Empty:
            pass
        self.frame.after(POLL_MS, self._drain_lines)

