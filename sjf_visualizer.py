"""
SJF Scheduling Visualizer
=========================

This module implements a GUI application (customtkinter) that animates
Shortest Job First (SJF, non-preemptive) CPU scheduling one decision at a
time, as commonly taught in an operating systems course.

The GUI allows you to:

- Add, update, and remove processes (arrival time, burst time)
- Load example scenarios (idle gaps, simultaneous arrivals, ...)
- Play, pause, step through, and reset the scheduling timeline
- Watch the ready queue, the running process, and the Gantt chart grow
- Inspect per-process completion, turnaround, and waiting times, plus the
  average waiting and turnaround times once the run has finished.

All scheduling decisions come from :mod:`sjf_scheduler`; playback state lives
in :class:`sjf_player.TimelinePlayer`. This module only renders them.
"""

import argparse
import logging
import sys
import tkinter as tk
from tkinter import ttk, messagebox
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import customtkinter as ctk

from sjf_player import DEFAULT_STEP_INTERVAL_MS, AnimationStep, TimelinePlayer
from sjf_scheduler import (
    DEFAULT_PROCESSES,
    EXAMPLE_SCENARIOS,
    InvalidInput,
    Process,
    ScheduleResult,
    build_scenario,
    compute_schedule,
)

logger = logging.getLogger(__name__)

# Color palette for processes (bright accents on dark background).
COLOR_PALETTE = [
    "#3B82F6",  # blue
    "#EF4444",  # red
    "#F97316",  # orange
    "#8B5CF6",  # violet
    "#22C55E",  # emerald
    "#EC4899",  # pink
    "#EAB308",  # amber
    "#6366F1",  # indigo
]
IDLE_COLOR = "#4B5563"
WINDOW_GEOMETRY = "1100x760"


# ---------------------------------------------------------------------------
# Helpers (no widgets involved)
# ---------------------------------------------------------------------------


def parse_process_fields(pid: str, arrival_text: str, burst_text: str) -> Process:
    """
    Build a Process from raw entry text.

    Raises:
        InvalidInput: if a field is not an integer, the arrival time is
            negative, or the burst time is not positive.
    """
    try:
        arrival = int(arrival_text.strip())
        burst = int(burst_text.strip())
    except ValueError:
        raise InvalidInput("Arrival and burst times must be integers.") from None

    if arrival < 0 or burst <= 0:
        raise InvalidInput("Arrival time must be >= 0 and burst time must be > 0.")

    return Process(pid=pid, arrival_time=arrival, burst_time=burst)


def assign_colors(pids: Iterable[str], palette: Sequence[str] = COLOR_PALETTE) -> Dict[str, str]:
    """Cycle through ``palette`` in the order pids are first seen."""
    colors: Dict[str, str] = {}
    for pid in pids:
        if pid not in colors:
            colors[pid] = palette[len(colors) % len(palette)]
    return colors


# ---------------------------------------------------------------------------
# Simple tooltip helper for Tk / customtkinter widgets
# ---------------------------------------------------------------------------


class _ToolTip:
    """Minimal tooltip implementation for Tk / customtkinter widgets."""

    def __init__(self, widget: tk.Widget, text: str) -> None:
        self.widget = widget
        self.text = text
        self._tip_window: Optional[tk.Toplevel] = None
        widget.bind("<Enter>", self._on_enter)
        widget.bind("<Leave>", self._on_leave)

    def _on_enter(self, _event: tk.Event) -> None:
        if self._tip_window is not None:
            return
        x = self.widget.winfo_rootx() + 20
        y = self.widget.winfo_rooty() + self.widget.winfo_height() + 5
        self._tip_window = tw = tk.Toplevel(self.widget)
        tw.wm_overrideredirect(True)
        tw.wm_geometry(f"+{x}+{y}")
        label = tk.Label(
            tw,
            text=self.text,
            justify="left",
            background="#111827",
            foreground="#F9FAFB",
            relief="solid",
            borderwidth=1,
            font=("Segoe UI", 9),
            padx=4,
            pady=2,
        )
        label.pack(ipadx=1)

    def _on_leave(self, _event: tk.Event) -> None:
        if self._tip_window is not None:
            self._tip_window.destroy()
            self._tip_window = None


def _add_tooltip(widget: tk.Widget, text: str) -> None:
    """Attach a tooltip with the given text to a widget."""
    _ToolTip(widget, text)


# ---------------------------------------------------------------------------
# GUI Application
# ---------------------------------------------------------------------------


class SJFVisualizerApp:
    """
    customtkinter-based GUI for stepping through SJF scheduling.

    High-level structure:
        - Top section: process input (arrival, burst) + list of processes.
        - Middle section: playback controls + step narration, ready queue,
          and running-process badge.
        - Bottom section: Gantt chart (Canvas) + metrics table (Treeview).

    Every edit of the process list recomputes the schedule. If the edited
    set cannot be scheduled, the last valid schedule stays on screen.
    """

    def __init__(
        self,
        root: Optional[ctk.CTk] = None,
        interval_ms: int = DEFAULT_STEP_INTERVAL_MS,
        initial_processes: Sequence[Process] = DEFAULT_PROCESSES,
    ) -> None:
        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("dark-blue")

        if root is None:
            root = ctk.CTk()
        self.root = root
        self.root.title("SJF Non-Preemptive Scheduling")
        self.root.geometry(WINDOW_GEOMETRY)
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

        self._interval_ms = interval_ms
        self._appearance_var = ctk.StringVar(value="Dark")

        # Counter used to assign new process identifiers (P1, P2, ...).
        self._next_pid = 1

        # Last valid schedule and the player replaying it.
        self._player: Optional[TimelinePlayer] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._colors: Dict[str, str] = {}
        self._help_window: Optional[ctk.CTkToplevel] = None

        self._configure_treeview_style()
        self._build_ui()

        for p in initial_processes:
            self._insert_process_row(p.arrival_time, p.burst_time)
        self._recompute()

    def _configure_treeview_style(self) -> None:
        """Apply a dark theme to ttk Treeview widgets so they match customtkinter."""
        style = ttk.Style(self.root)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

        style.configure(
            "Treeview",
            background="#020617",
            foreground="#E5E7EB",
            fieldbackground="#020617",
            bordercolor="#1F2937",
            borderwidth=1,
            rowheight=22,
        )
        style.map(
            "Treeview",
            background=[("selected", "#1D4ED8")],
            foreground=[("selected", "#F9FAFB")],
        )
        style.configure(
            "Treeview.Heading",
            background="#0F172A",
            foreground="#E5E7EB",
            font=("Segoe UI Semibold", 9),
        )

    def _on_theme_changed(self, mode: str) -> None:
        """Callback when the Dark/Light segmented button is changed."""
        ctk.set_appearance_mode(mode.lower())
        self._configure_treeview_style()

    def _show_help_window(self) -> None:
        """Open a small help window explaining SJF and the metrics."""
        if self._help_window is not None:
            try:
                self._help_window.lift()
                return
            except tk.TclError:
                self._help_window = None

        help_win = self._help_window = ctk.CTkToplevel(self.root)
        help_win.title("SJF Scheduling – Theory Overview")
        help_win.geometry("640x420")

        container = ctk.CTkScrollableFrame(help_win, corner_radius=0)
        container.pack(fill="both", expand=True, padx=12, pady=12)

        text_blocks = [
            (
                "SJF (Shortest Job First, non-preemptive)",
                "Whenever the CPU becomes free, run the ready process with the "
                "smallest burst time. Once started, a process runs to completion.\n"
                "Ties go to the earlier arrival, then to the process listed first.",
            ),
            (
                "Idle CPU",
                "If no process has arrived when the CPU becomes free, the CPU "
                "stays idle until the next arrival (gray in the Gantt chart).",
            ),
            (
                "Metrics",
                "Turnaround Time T = Completion - Arrival.\n"
                "Waiting Time   W = Turnaround - Burst.",
            ),
        ]

        for heading, body in text_blocks:
            ctk.CTkLabel(
                container, text=heading, font=("Segoe UI Semibold", 14)
            ).pack(anchor="w", pady=(10, 2))
            ctk.CTkLabel(
                container, text=body, font=("Segoe UI", 11), justify="left"
            ).pack(anchor="w")

        ctk.CTkButton(
            container, text="Close", width=100, command=self._close_help_window
        ).pack(anchor="e", pady=(16, 0))

    def _close_help_window(self) -> None:
        if self._help_window is not None:
            self._help_window.destroy()
            self._help_window = None

    # ------------------------------------------------------------------#
    # UI construction                                                   #
    # ------------------------------------------------------------------#

    def _build_ui(self) -> None:
        """Create and lay out all GUI widgets."""
        main_frame = ctk.CTkScrollableFrame(
            self.root,
            corner_radius=0,
            fg_color="transparent",
        )
        main_frame.pack(fill="both", expand=True, padx=16, pady=16)

        header_frame = ctk.CTkFrame(main_frame, fg_color="transparent")
        header_frame.pack(fill="x", pady=(0, 10))

        title_left = ctk.CTkFrame(header_frame, fg_color="transparent")
        title_left.pack(side="left", fill="x", expand=True)
        ctk.CTkLabel(
            title_left,
            text="SJF Non-Preemptive Scheduling",
            font=("Segoe UI Semibold", 22),
        ).pack(anchor="w")
        ctk.CTkLabel(
            title_left,
            text="Shortest Job First, one decision at a time",
            font=("Segoe UI", 12),
        ).pack(anchor="w")

        title_right = ctk.CTkFrame(header_frame, fg_color="transparent")
        title_right.pack(side="right")

        ctk.CTkSegmentedButton(
            title_right,
            values=["Dark", "Light"],
            variable=self._appearance_var,
            width=140,
            command=self._on_theme_changed,
        ).pack(side="right", padx=(0, 8))

        ctk.CTkButton(
            title_right,
            text="Help / Theory",
            width=110,
            command=self._show_help_window,
        ).pack(side="right", padx=(0, 8))

        self._build_process_input_section(main_frame)
        self._build_playback_section(main_frame)
        self._build_output_section(main_frame)

    def _build_process_input_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="x", pady=(10, 10))

        ctk.CTkLabel(
            frame, text="Processes", font=("Segoe UI Semibold", 13)
        ).grid(row=0, column=0, columnspan=2, padx=12, pady=(10, 6), sticky="w")

        ctk.CTkLabel(frame, text="Arrival Time (AT)").grid(
            row=1, column=0, padx=12, pady=4, sticky="w"
        )
        self.arrival_entry = ctk.CTkEntry(frame, width=80)
        self.arrival_entry.grid(row=1, column=1, padx=6, pady=4, sticky="w")

        ctk.CTkLabel(frame, text="Burst Time (BT)").grid(
            row=1, column=2, padx=12, pady=4, sticky="w"
        )
        self.burst_entry = ctk.CTkEntry(frame, width=80)
        self.burst_entry.grid(row=1, column=3, padx=6, pady=4, sticky="w")

        ctk.CTkButton(
            frame, text="Add Process", command=self.add_process, width=110
        ).grid(row=1, column=4, padx=10, pady=4)

        update_button = ctk.CTkButton(
            frame, text="Update Selected", command=self.update_selected_process, width=130
        )
        update_button.grid(row=1, column=5, padx=10, pady=4)
        _add_tooltip(
            update_button,
            "Overwrite the selected row with the arrival\n"
            "and burst times typed on the left.",
        )

        ctk.CTkButton(
            frame,
            text="Remove Selected",
            command=self.remove_selected_process,
            width=140,
            fg_color="#1F2937",
            hover_color="#111827",
        ).grid(row=1, column=6, padx=10, pady=4)

        ctk.CTkButton(
            frame,
            text="Clear All",
            command=self.clear_all,
            width=110,
            fg_color="#1F2937",
            hover_color="#111827",
        ).grid(row=1, column=7, padx=10, pady=4)

        columns = ("pid", "arrival", "burst")
        self.process_tree = ttk.Treeview(frame, columns=columns, show="headings", height=6)
        self.process_tree.heading("pid", text="PID")
        self.process_tree.heading("arrival", text="Arrival")
        self.process_tree.heading("burst", text="Burst")
        for col in columns:
            self.process_tree.column(col, anchor="center", width=90, stretch=True)

        self.process_tree.tag_configure("evenrow", background="#020617")
        self.process_tree.tag_configure("oddrow", background="#111827")
        self.process_tree.grid(
            row=2, column=0, columnspan=8, sticky="nsew", padx=12, pady=(8, 6)
        )

        scrollbar = ttk.Scrollbar(frame, orient="vertical", command=self.process_tree.yview)
        self.process_tree.configure(yscroll=scrollbar.set)
        scrollbar.grid(row=2, column=8, sticky="ns", pady=(8, 6))

        self.process_tree.bind("<<TreeviewSelect>>", self._on_process_tree_select)

        ctk.CTkLabel(frame, text="Example Scenario", font=("Segoe UI", 11)).grid(
            row=3, column=0, padx=12, pady=(0, 10), sticky="w"
        )
        self.scenario_var = ctk.StringVar(value="None")
        self.scenario_combobox = ctk.CTkComboBox(
            frame,
            values=["None"] + list(EXAMPLE_SCENARIOS.keys()),
            variable=self.scenario_var,
            width=260,
            state="readonly",
            command=self._on_scenario_selected,
        )
        self.scenario_combobox.grid(
            row=3, column=1, columnspan=3, padx=8, pady=(0, 10), sticky="w"
        )

        # Shown when an edit is refused and the previous schedule is kept.
        self.status_label = ctk.CTkLabel(
            frame, text="", font=("Segoe UI", 11), text_color="#F87171"
        )
        self.status_label.grid(row=3, column=4, columnspan=4, padx=12, pady=(0, 10), sticky="e")

        for col_index in range(8):
            frame.columnconfigure(col_index, weight=1)

    def _build_playback_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="x", pady=(0, 10))

        controls = ctk.CTkFrame(frame, fg_color="transparent")
        controls.pack(fill="x", padx=12, pady=(10, 6))

        self.play_button = ctk.CTkButton(
            controls, text="▶ Play", width=100, command=self.toggle_playback
        )
        self.play_button.pack(side="left", padx=(0, 6))

        self.next_button = ctk.CTkButton(
            controls, text="⏭ Next Step", width=120, command=self.next_step
        )
        self.next_button.pack(side="left", padx=(0, 6))

        ctk.CTkButton(
            controls,
            text="⟲ Reset",
            width=90,
            command=self.reset_playback,
            fg_color="#1F2937",
            hover_color="#111827",
        ).pack(side="left", padx=(0, 6))

        self.step_counter_label = ctk.CTkLabel(controls, text="Step - / -", font=("Segoe UI", 11))
        self.step_counter_label.pack(side="right")

        self.step_title_label = ctk.CTkLabel(
            frame, text="", font=("Segoe UI Semibold", 16)
        )
        self.step_title_label.pack(anchor="w", padx=12)
        self.step_description_label = ctk.CTkLabel(
            frame, text="", font=("Segoe UI", 12), justify="left", wraplength=900
        )
        self.step_description_label.pack(anchor="w", padx=12, pady=(0, 6))

        state_row = ctk.CTkFrame(frame, fg_color="transparent")
        state_row.pack(fill="x", padx=12, pady=(0, 10))

        ctk.CTkLabel(state_row, text="CPU:", font=("Segoe UI Semibold", 12)).pack(side="left")
        self.running_badge = ctk.CTkLabel(
            state_row,
            text="Idle",
            width=70,
            corner_radius=8,
            fg_color=IDLE_COLOR,
            text_color="#F9FAFB",
        )
        self.running_badge.pack(side="left", padx=(6, 24))

        ctk.CTkLabel(state_row, text="Ready Queue:", font=("Segoe UI Semibold", 12)).pack(
            side="left"
        )
        self.ready_queue_frame = ctk.CTkFrame(state_row, fg_color="transparent")
        self.ready_queue_frame.pack(side="left", padx=6)

    def _build_output_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="both", expand=True)

        gantt_frame = ctk.CTkFrame(frame, corner_radius=12)
        gantt_frame.pack(fill="x", padx=10, pady=(10, 0))

        ctk.CTkLabel(gantt_frame, text="Gantt Chart", font=("Segoe UI Semibold", 13)).pack(
            anchor="w", padx=12, pady=(10, 4)
        )

        self.gantt_canvas = tk.Canvas(gantt_frame, height=130, bg="#020617", highlightthickness=0)
        self.gantt_canvas.pack(fill="x", padx=12, pady=(0, 12))
        self.gantt_canvas.bind("<Configure>", lambda _event: self._redraw_gantt())

        metrics_frame = ctk.CTkFrame(frame, corner_radius=12)
        metrics_frame.pack(fill="both", expand=True, padx=10, pady=(10, 10))

        ctk.CTkLabel(
            metrics_frame, text="Process Metrics", font=("Segoe UI Semibold", 13)
        ).pack(anchor="w", padx=12, pady=(10, 4))

        table_container = ctk.CTkFrame(metrics_frame, fg_color="transparent")
        table_container.pack(fill="both", expand=True, padx=8, pady=(0, 8))

        headings = [
            ("pid", "PID"),
            ("arrival", "Arrival"),
            ("burst", "Burst"),
            ("completion", "Completion"),
            ("turnaround", "Turnaround"),
            ("waiting", "Waiting"),
        ]
        self.results_tree = ttk.Treeview(
            table_container,
            columns=[col for col, _ in headings],
            show="headings",
            height=6,
        )
        for col, label in headings:
            self.results_tree.heading(col, text=label)
            self.results_tree.column(col, anchor="center", width=90, stretch=True)

        self.results_tree.tag_configure("evenrow", background="#020617")
        self.results_tree.tag_configure("oddrow", background="#111827")
        self.results_tree.pack(side="left", fill="both", expand=True, padx=(4, 0), pady=4)

        metrics_scrollbar = ttk.Scrollbar(
            table_container, orient="vertical", command=self.results_tree.yview
        )
        self.results_tree.configure(yscroll=metrics_scrollbar.set)
        metrics_scrollbar.pack(side="right", fill="y", padx=(0, 4), pady=4)

        averages_frame = ctk.CTkFrame(metrics_frame, fg_color="transparent")
        averages_frame.pack(fill="x", padx=12, pady=(0, 10))

        self.avg_waiting_label = ctk.CTkLabel(
            averages_frame, text="Average Waiting Time: N/A", font=("Segoe UI Semibold", 16)
        )
        self.avg_waiting_label.pack(anchor="e")
        self.avg_turnaround_label = ctk.CTkLabel(
            averages_frame, text="Average Turnaround Time: N/A", font=("Segoe UI Semibold", 16)
        )
        self.avg_turnaround_label.pack(anchor="e")
        self.extra_metrics_label = ctk.CTkLabel(
            averages_frame,
            text="CPU Utilization: N/A  |  Throughput: N/A",
            font=("Segoe UI", 11),
        )
        self.extra_metrics_label.pack(anchor="e", pady=(4, 0))

    # ------------------------------------------------------------------#
    # Process list operations                                           #
    # ------------------------------------------------------------------#

    def _insert_process_row(self, arrival: int, burst: int) -> None:
        pid = f"P{self._next_pid}"
        self._next_pid += 1
        row_index = len(self.process_tree.get_children())
        tag = "evenrow" if row_index % 2 == 0 else "oddrow"
        self.process_tree.insert("", "end", values=(pid, arrival, burst), tags=(tag,))

    def add_process(self) -> None:
        """Add a new process using the values from the entry fields."""
        try:
            process = parse_process_fields(
                f"P{self._next_pid}", self.arrival_entry.get(), self.burst_entry.get()
            )
        except ValueError as exc:
            messagebox.showerror("Invalid input", str(exc))
            return

        self._insert_process_row(process.arrival_time, process.burst_time)
        self.arrival_entry.delete(0, tk.END)
        self.burst_entry.delete(0, tk.END)
        self._recompute()

    def update_selected_process(self) -> None:
        """Overwrite the selected row with the values from the entry fields."""
        selection = self.process_tree.selection()
        if not selection:
            messagebox.showerror("No selection", "Select a process to update first.")
            return

        item = selection[0]
        pid = str(self.process_tree.item(item, "values")[0])
        try:
            process = parse_process_fields(pid, self.arrival_entry.get(), self.burst_entry.get())
        except ValueError as exc:
            messagebox.showerror("Invalid input", str(exc))
            return

        self.process_tree.item(item, values=(pid, process.arrival_time, process.burst_time))
        self._recompute()

    def remove_selected_process(self) -> None:
        """Remove the selected process(es) from the process list."""
        for item in self.process_tree.selection():
            self.process_tree.delete(item)
        self._restyle_process_tree_rows()
        self._recompute()

    def clear_all(self) -> None:
        """Clear all processes. The last valid schedule stays visible."""
        for item in self.process_tree.get_children():
            self.process_tree.delete(item)
        self._next_pid = 1
        self._recompute()

    def _restyle_process_tree_rows(self) -> None:
        """Apply alternating row colors to the process input Treeview."""
        for index, item in enumerate(self.process_tree.get_children()):
            tag = "evenrow" if index % 2 == 0 else "oddrow"
            self.process_tree.item(item, tags=(tag,))

    def _on_process_tree_select(self, _event: tk.Event) -> None:
        """Copy the selected row into the entry fields for editing."""
        selection = self.process_tree.selection()
        if not selection:
            return
        _pid, arrival, burst = self.process_tree.item(selection[0], "values")
        self.arrival_entry.delete(0, tk.END)
        self.arrival_entry.insert(0, str(arrival))
        self.burst_entry.delete(0, tk.END)
        self.burst_entry.insert(0, str(burst))

    def _on_scenario_selected(self, selected_label: str) -> None:
        """Replace the process list with one of the example scenarios."""
        if selected_label not in EXAMPLE_SCENARIOS:
            return
        for item in self.process_tree.get_children():
            self.process_tree.delete(item)
        self._next_pid = 1
        for p in build_scenario(selected_label):
            self._insert_process_row(p.arrival_time, p.burst_time)
        self._recompute()

    def _get_processes_from_tree(self) -> List[Process]:
        """Convert the rows in the process Treeview into Process objects."""
        processes: List[Process] = []
        for item in self.process_tree.get_children():
            pid, arrival, burst = self.process_tree.item(item, "values")
            processes.append(
                Process(pid=str(pid), arrival_time=int(arrival), burst_time=int(burst))
            )
        return processes

    # ------------------------------------------------------------------#
    # Simulation + playback                                             #
    # ------------------------------------------------------------------#

    def _recompute(self) -> None:
        """Schedule the current process list and restart playback."""
        processes = self._get_processes_from_tree()
        try:
            result = compute_schedule(processes)
        except ValueError as exc:
            logger.warning("Keeping previous schedule: %s", exc)
            self.status_label.configure(text=f"Schedule unchanged: {exc}")
            return

        self.status_label.configure(text="")
        player = TimelinePlayer(result, processes, self.root, self._interval_ms)
        logger.info(
            "Scheduled %d processes, %d steps, total time %d",
            len(processes),
            len(player.steps),
            result.total_time,
        )
        self._replace_player(player, processes)

    def _replace_player(self, player: TimelinePlayer, processes: Sequence[Process]) -> None:
        if self._player is not None:
            self._unsubscribe()
            self._player.dispose()
        self._player = player
        self._colors = assign_colors(p.pid for p in processes)
        self._unsubscribe = player.subscribe(self._render)
        self._render(player)

    def toggle_playback(self) -> None:
        if self._player is not None:
            self._player.toggle()

    def next_step(self) -> None:
        if self._player is not None:
            self._player.next()

    def reset_playback(self) -> None:
        if self._player is not None:
            self._player.reset()

    def _redraw_gantt(self) -> None:
        # Canvas width changed; bars must be rescaled.
        if self._player is not None:
            self._draw_gantt_chart(self._player.current_step, self._player.result)

    def _render(self, player: TimelinePlayer) -> None:
        step = player.current_step
        self.step_title_label.configure(text=step.title)
        self.step_description_label.configure(text=step.description)
        self.step_counter_label.configure(
            text=f"Step {player.step_index + 1} / {player.last_index + 1}   |   t = {step.time}"
        )
        self.play_button.configure(
            text="⏸ Pause" if player.is_playing else "▶ Play",
            state="disabled" if player.is_finished else "normal",
        )
        self.next_button.configure(state="disabled" if player.is_finished else "normal")

        self._render_cpu_state(step)
        self._draw_gantt_chart(step, player.result)
        self._populate_results_table(step)

        metrics = player.metrics
        if metrics is None:
            self.avg_waiting_label.configure(text="Average Waiting Time: N/A")
            self.avg_turnaround_label.configure(text="Average Turnaround Time: N/A")
            self.extra_metrics_label.configure(text="CPU Utilization: N/A  |  Throughput: N/A")
        else:
            self.avg_waiting_label.configure(
                text=f"Average Waiting Time: {metrics.average_waiting_time:.2f}"
            )
            self.avg_turnaround_label.configure(
                text=f"Average Turnaround Time: {metrics.average_turnaround_time:.2f}"
            )
            self.extra_metrics_label.configure(
                text=(
                    f"CPU Utilization: {metrics.cpu_utilization * 100:.2f}%  |  "
                    f"Throughput: {metrics.throughput:.3f} proc/unit"
                )
            )

    def _render_cpu_state(self, step: AnimationStep) -> None:
        running = step.running_process
        if running is None:
            self.running_badge.configure(text="Idle", fg_color=IDLE_COLOR)
        else:
            self.running_badge.configure(
                text=running.name, fg_color=self._colors.get(running.pid, IDLE_COLOR)
            )

        for child in self.ready_queue_frame.winfo_children():
            child.destroy()
        if not step.ready_queue:
            ctk.CTkLabel(self.ready_queue_frame, text="(empty)", font=("Segoe UI", 11)).pack(
                side="left"
            )
        for p in step.ready_queue:
            chip = ctk.CTkLabel(
                self.ready_queue_frame,
                text=f"{p.name}  BT={p.burst_time}",
                corner_radius=8,
                fg_color=self._colors.get(p.pid, IDLE_COLOR),
                text_color="#F9FAFB",
            )
            chip.pack(side="left", padx=3)

    def _populate_results_table(self, step: AnimationStep) -> None:
        """Show metrics for the processes finished so far, sorted by PID."""
        for item in self.results_tree.get_children():
            self.results_tree.delete(item)

        rows = sorted(step.completed, key=lambda p: (len(p.pid), p.pid))
        for index, p in enumerate(rows):
            tag = "evenrow" if index % 2 == 0 else "oddrow"
            self.results_tree.insert(
                "",
                "end",
                values=(
                    p.pid,
                    p.arrival_time,
                    p.burst_time,
                    p.completion_time,
                    p.turnaround_time,
                    p.waiting_time,
                ),
                tags=(tag,),
            )

    def _draw_gantt_chart(self, step: AnimationStep, result: ScheduleResult) -> None:
        """
        Draw the blocks visible at ``step`` on the Canvas.

        The horizontal axis always spans the whole schedule (0 .. total_time)
        so bars keep their position as the animation advances. Idle time
        before ``step.time`` is shown in gray, the running block is outlined.
        """
        self.gantt_canvas.delete("all")

        total_time = result.total_time
        canvas_width = int(self.gantt_canvas.winfo_width())
        if canvas_width <= 1:
            # If the canvas has not been fully laid out yet, fall back to a default width.
            canvas_width = 800

        left_margin = 20
        right_margin = 20
        bar_top = 20
        bar_bottom = bar_top + 50
        time_scale = max(1, canvas_width - left_margin - right_margin) / float(total_time)

        label_font = ("Segoe UI", 9)
        tick_font = ("Segoe UI", 8)

        def x_at(t: int) -> float:
            return left_margin + t * time_scale

        # Empty track for the whole time axis.
        self.gantt_canvas.create_rectangle(
            x_at(0), bar_top, x_at(total_time), bar_bottom, outline="#1F2937"
        )

        for start, end in result.idle_intervals():
            visible_end = min(end, step.time)
            if visible_end <= start:
                break
            self.gantt_canvas.create_rectangle(
                x_at(start), bar_top, x_at(visible_end), bar_bottom,
                fill=IDLE_COLOR, outline="#111827",
            )

        running_pid = step.running_process.pid if step.running_process else None
        ticks = {0, total_time}
        for block in step.gantt_so_far:
            x1, x2 = x_at(block.start_time), x_at(block.end_time)
            is_running = block.pid == running_pid
            self.gantt_canvas.create_rectangle(
                x1,
                bar_top,
                x2,
                bar_bottom,
                fill=self._colors.get(block.pid, IDLE_COLOR),
                outline="#F9FAFB" if is_running else "#111827",
                width=3 if is_running else 1,
            )
            self.gantt_canvas.create_text(
                (x1 + x2) / 2,
                (bar_top + bar_bottom) / 2,
                text=result.result_for(block.pid).name,
                font=label_font,
                fill="#F9FAFB",
            )
            ticks.update((block.start_time, block.end_time))

        for t in sorted(ticks):
            x = x_at(t)
            self.gantt_canvas.create_line(x, bar_bottom, x, bar_bottom + 5, fill=IDLE_COLOR)
            self.gantt_canvas.create_text(
                x, bar_bottom + 7, text=str(t), anchor="n", font=tick_font, fill="#D1D5DB"
            )

        # Current time cursor.
        cursor_x = x_at(step.time)
        self.gantt_canvas.create_line(
            cursor_x, bar_top - 8, cursor_x, bar_bottom + 4, fill="#FACC15", width=2
        )

    # ------------------------------------------------------------------#
    # Mainloop                                                          #
    # ------------------------------------------------------------------#

    def _on_close(self) -> None:
        if self._player is not None:
            self._player.dispose()
        self.root.destroy()

    def run(self) -> None:
        """Start the Tkinter main event loop."""
        self.root.mainloop()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _configure_logging(level: str) -> None:
    """Configure application logging and capture uncaught exceptions."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    def _log_excepthook(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).exception(
            "Uncaught exception", exc_info=(exc_type, exc, tb)
        )

    sys.excepthook = _log_excepthook


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Animate SJF (non-preemptive) CPU scheduling.")
    parser.add_argument(
        "--interval-ms",
        type=int,
        default=DEFAULT_STEP_INTERVAL_MS,
        help="Delay between auto-advanced steps (default: %(default)s).",
    )
    parser.add_argument(
        "--scenario",
        choices=list(EXAMPLE_SCENARIOS.keys()),
        default=None,
        help="Example scenario to load on start (default: classic demo).",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )
    args = parser.parse_args(argv)
    if args.interval_ms <= 0:
        parser.error("--interval-ms must be a positive integer")
    return args


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point when running this module as a script."""
    args = parse_args(argv)
    _configure_logging(args.log_level)

    processes = build_scenario(args.scenario) if args.scenario else DEFAULT_PROCESSES
    app = SJFVisualizerApp(interval_ms=args.interval_ms, initial_processes=processes)
    app.run()


if __name__ == "__main__":
    main()
