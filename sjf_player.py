"""
Timeline Player
===============

Turns a finished SJF schedule into a sequence of discrete animation steps and
replays them with play / pause / next / reset controls.

The steps are derived once from the schedule:

- an initial step at t = 0, before any block has started,
- one step per Gantt block start (a decision point), and
- a terminal step once every process has completed.

Auto-advance uses a single cancellable timer obtained from a *host* object
exposing Tk's ``after(ms, func)`` / ``after_cancel(id)`` pair. In the GUI the
host is the root window; tests pass a fake.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from sjf_scheduler import (
    GanttBlock,
    Process,
    ScheduleMetrics,
    ScheduleResult,
    compute_metrics,
)

logger = logging.getLogger(__name__)

# Delay between two auto-advanced steps, in milliseconds.
DEFAULT_STEP_INTERVAL_MS = 2500


# ---------------------------------------------------------------------------
# Animation steps
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnimationStep:
    """
    Snapshot of the simulation at one point in the timeline.

    Attributes:
        index:             Position in the step sequence.
        time:              Synthetic clock value.
        ready_queue:       Arrived, unfinished, not running (display order only).
        running_process:   Process on the CPU, or None when idle.
        gantt_so_far:      Blocks started by ``time``.
        is_decision_point: True when the CPU just became free and a ready
                           process was selected.
        completed:         Scheduled processes that finished by ``time``.
        title:             Short caption, e.g. "Time 6: P3 selected".
        description:       One or two sentences narrating the step.
    """

    index: int
    time: int
    ready_queue: Tuple[Process, ...]
    running_process: Optional[Process]
    gantt_so_far: Tuple[GanttBlock, ...]
    is_decision_point: bool
    completed: Tuple[Process, ...]
    title: str
    description: str


def _describe_choice(chosen: Process, candidates: List[Process], block: GanttBlock) -> str:
    runs = f"{chosen.name} runs from {block.start_time} to {block.end_time}."
    if len(candidates) == 1:
        return f"{chosen.name} is the only ready process. {runs}"
    options = " vs ".join(f"{p.name} (BT={p.burst_time})" for p in candidates)
    return f"Shortest job among {options}: {chosen.name} selected. {runs}"


def build_steps(
    result: ScheduleResult, processes: Sequence[Process]
) -> Tuple[AnimationStep, ...]:
    """
    Derive the animation steps for a schedule.

    Args:
        result:    Output of :func:`sjf_scheduler.compute_schedule`.
        processes: The process set that produced ``result``, in input order.
                   Ready-queue display order follows arrival time, then this
                   order.

    Returns:
        Immutable tuple of steps: initial, one per block, terminal.
    """
    order = {p.pid: index for index, p in enumerate(processes)}
    by_arrival = sorted(processes, key=lambda p: (p.arrival_time, order[p.pid]))
    by_pid = {p.pid: p for p in processes}
    finished = {p.pid: p for p in result.results}

    def arrived_at(time: int, done: set) -> List[Process]:
        return [p for p in by_arrival if p.arrival_time <= time and p.pid not in done]

    steps: List[AnimationStep] = []

    # Initial step: t = 0, nothing has run yet.
    waiting = arrived_at(0, set())
    first_start = result.blocks[0].start_time
    if waiting:
        description = "Arrived: " + ", ".join(p.name for p in waiting) + "."
    else:
        description = f"No process has arrived yet. CPU idle until t = {first_start}."
    steps.append(
        AnimationStep(
            index=0,
            time=0,
            ready_queue=tuple(waiting),
            running_process=None,
            gantt_so_far=(),
            is_decision_point=False,
            completed=(),
            title="Time 0: Start",
            description=description,
        )
    )

    done: set = set()
    completed: List[Process] = []
    previous_end = 0
    for i, block in enumerate(result.blocks):
        candidates = arrived_at(block.start_time, done)
        chosen = by_pid[block.pid]
        description = _describe_choice(chosen, candidates, block)
        if block.start_time > previous_end:
            description = (
                f"CPU idle from {previous_end} to {block.start_time}. {description}"
            )
        steps.append(
            AnimationStep(
                index=len(steps),
                time=block.start_time,
                ready_queue=tuple(p for p in candidates if p.pid != chosen.pid),
                running_process=chosen,
                gantt_so_far=result.blocks[: i + 1],
                is_decision_point=True,
                completed=tuple(completed),
                title=f"Time {block.start_time}: {chosen.name} selected",
                description=description,
            )
        )
        done.add(block.pid)
        completed.append(finished[block.pid])
        previous_end = block.end_time

    metrics = compute_metrics(result)
    steps.append(
        AnimationStep(
            index=len(steps),
            time=result.total_time,
            ready_queue=(),
            running_process=None,
            gantt_so_far=result.blocks,
            is_decision_point=False,
            completed=tuple(completed),
            title=f"Time {result.total_time}: All complete",
            description=(
                "All processes finished. "
                f"Average waiting time {metrics.average_waiting_time:.2f}, "
                f"average turnaround time {metrics.average_turnaround_time:.2f}."
            ),
        )
    )
    return tuple(steps)


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------


class PlayerState(enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    FINISHED = "finished"


class TimelinePlayer:
    """
    Replays the animation steps of one schedule.

    State machine:
        - IDLE(step_index):    paused on a step before the last one.
        - PLAYING(step_index): auto-advancing every ``interval_ms``.
        - FINISHED:            on the terminal step; results are available.

    Every transition is total: calling :meth:`next` on the terminal step or
    :meth:`play` when finished is a no-op, never an error.

    The player owns at most one pending timer. :meth:`pause`, :meth:`reset`,
    :meth:`jump_to` and :meth:`dispose` cancel it before returning, so no
    transition happens afterwards.
    """

    def __init__(
        self,
        result: ScheduleResult,
        processes: Sequence[Process],
        host: Any,
        interval_ms: int = DEFAULT_STEP_INTERVAL_MS,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("Step interval must be a positive number of milliseconds.")
        self._result = result
        self._steps = build_steps(result, processes)
        self._metrics = compute_metrics(result)
        self._host = host
        self._interval_ms = interval_ms

        self._index = 0
        self._state = PlayerState.IDLE
        self._timer_id: Optional[Any] = None
        self._listeners: List[Callable[["TimelinePlayer"], None]] = []

    # ------------------------------------------------------------------#
    # Read-only view                                                    #
    # ------------------------------------------------------------------#

    @property
    def result(self) -> ScheduleResult:
        return self._result

    @property
    def steps(self) -> Tuple[AnimationStep, ...]:
        return self._steps

    @property
    def step_index(self) -> int:
        return self._index

    @property
    def last_index(self) -> int:
        return len(self._steps) - 1

    @property
    def current_step(self) -> AnimationStep:
        return self._steps[self._index]

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlayerState.PLAYING

    @property
    def is_finished(self) -> bool:
        return self._state is PlayerState.FINISHED

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def metrics(self) -> Optional[ScheduleMetrics]:
        """Aggregate metrics, exposed once the terminal step is reached."""
        return self._metrics if self.is_finished else None

    # ------------------------------------------------------------------#
    # Observers                                                         #
    # ------------------------------------------------------------------#

    def subscribe(
        self, callback: Callable[["TimelinePlayer"], None]
    ) -> Callable[[], None]:
        """
        Call ``callback(player)`` after every transition.

        Returns a function that removes the subscription.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    # ------------------------------------------------------------------#
    # Transitions                                                       #
    # ------------------------------------------------------------------#

    def reset(self) -> None:
        """Stop playback and go back to the first step."""
        self._cancel_timer()
        self._index = 0
        self._state = PlayerState.IDLE
        logger.debug("Player reset")
        self._notify()

    def next(self) -> bool:
        """
        Advance one step.

        Returns:
            True if the player moved, False if it was already on the
            terminal step.
        """
        if self._index >= self.last_index:
            return False
        self._index += 1
        if self._index == self.last_index:
            self._cancel_timer()
            self._state = PlayerState.FINISHED
            logger.debug("Player finished at t = %d", self.current_step.time)
        self._notify()
        return True

    def play(self) -> None:
        """Start auto-advancing. No-op once finished."""
        if self.is_finished:
            return
        self._cancel_timer()
        self._state = PlayerState.PLAYING
        self._schedule_tick()
        logger.debug("Player playing from step %d", self._index)
        self._notify()

    def pause(self) -> None:
        """Stop auto-advancing and stay on the current step."""
        self._cancel_timer()
        if self._state is PlayerState.PLAYING:
            self._state = PlayerState.IDLE
            logger.debug("Player paused at step %d", self._index)
            self._notify()

    def toggle(self) -> None:
        """Play if paused, pause if playing."""
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def jump_to(self, index: int) -> None:
        """Stop playback and show the step at ``index``."""
        if not 0 <= index <= self.last_index:
            raise IndexError(f"Step index {index} out of range 0..{self.last_index}")
        self._cancel_timer()
        self._index = index
        if index == self.last_index:
            self._state = PlayerState.FINISHED
        else:
            self._state = PlayerState.IDLE
        self._notify()

    def dispose(self) -> None:
        """Cancel any pending timer and drop all subscribers."""
        self._cancel_timer()
        if self._state is PlayerState.PLAYING:
            self._state = PlayerState.IDLE
        self._listeners.clear()

    # ------------------------------------------------------------------#
    # Timer                                                             #
    # ------------------------------------------------------------------#

    def _schedule_tick(self) -> None:
        self._timer_id = self._host.after(self._interval_ms, self._on_tick)

    def _cancel_timer(self) -> None:
        if self._timer_id is not None:
            self._host.after_cancel(self._timer_id)
            logger.debug("Cancelled step timer %r", self._timer_id)
            self._timer_id = None

    def _on_tick(self) -> None:
        # The callback that is firing is no longer pending.
        self._timer_id = None
        if not self.is_playing:
            return
        self.next()
        # A subscriber may already have restarted playback from _notify.
        if self.is_playing and self._timer_id is None:
            self._schedule_tick()
