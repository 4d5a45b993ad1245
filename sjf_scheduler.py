"""
SJF Scheduler
=============

Pure scheduling core for the Shortest Job First (SJF, non-preemptive)
visualizer.

Given a set of processes (identifier, arrival time, burst time), this module
computes the complete non-preemptive SJF schedule:

- a Gantt chart made of contiguous CPU execution blocks, and
- per-process completion, turnaround, and waiting times.

Nothing in here performs I/O or keeps shared state, so the same input always
produces the same output and callers may invoke it freely.
"""

import heapq
import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


class InvalidInput(ValueError):
    """Raised when a process set cannot be scheduled as given."""


@dataclass(frozen=True)
class Process:
    """
    Represents a single process for CPU scheduling.

    Attributes:
        pid:             Unique, stable process identifier (e.g. "P1").
        arrival_time:    The time at which the process becomes schedulable.
        burst_time:      The total CPU time required by the process.
        name:            Display label; defaults to the pid.
        completion_time: Time at which the process finished (None until scheduled).
        turnaround_time: completion_time - arrival_time (None until scheduled).
        waiting_time:    turnaround_time - burst_time (None until scheduled).
    """

    pid: str
    arrival_time: int
    burst_time: int
    name: str = ""
    completion_time: Optional[int] = None
    turnaround_time: Optional[int] = None
    waiting_time: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.pid)

    @property
    def is_scheduled(self) -> bool:
        return self.completion_time is not None

    def completed_at(self, completion_time: int) -> "Process":
        """Return a copy of this process with its derived metrics filled in."""
        turnaround = completion_time - self.arrival_time
        return replace(
            self,
            completion_time=completion_time,
            turnaround_time=turnaround,
            waiting_time=turnaround - self.burst_time,
        )


@dataclass(frozen=True)
class GanttBlock:
    """One contiguous CPU execution interval, [start_time, end_time)."""

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class ScheduleResult:
    """
    Output of :func:`compute_schedule`.

    Attributes:
        blocks:  Gantt blocks in the order they were emitted.
        results: Scheduled processes in the order they *finished*
                 (not the original input order).
    """

    blocks: Tuple[GanttBlock, ...]
    results: Tuple[Process, ...]

    @property
    def total_time(self) -> int:
        """Time-axis span of the chart: the latest completion time."""
        return max(p.completion_time for p in self.results)

    def result_for(self, pid: str) -> Process:
        for p in self.results:
            if p.pid == pid:
                return p
        raise KeyError(pid)

    def in_input_order(self, processes: Iterable[Process]) -> List[Process]:
        """Return the scheduled processes re-sorted to match ``processes``."""
        by_pid = {p.pid: p for p in self.results}
        return [by_pid[p.pid] for p in processes]

    def idle_intervals(self) -> List[Tuple[int, int]]:
        """
        Return the (start, end) intervals in which the CPU sat idle.

        A leading gap (first arrival after time 0) is included. Idle time is
        never represented as a GanttBlock.
        """
        gaps: List[Tuple[int, int]] = []
        cursor = 0
        for block in self.blocks:
            if block.start_time > cursor:
                gaps.append((cursor, block.start_time))
            cursor = block.end_time
        return gaps


@dataclass(frozen=True)
class ScheduleMetrics:
    """Aggregate metrics over a finished schedule."""

    average_waiting_time: float
    average_turnaround_time: float
    min_waiting_time: int
    max_waiting_time: int
    cpu_utilization: float
    throughput: float
    total_time: int


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _is_int(value: object) -> bool:
    # bool is an int subclass but never a meaningful time value.
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(processes: Sequence[Process]) -> None:
    """
    Check the scheduling preconditions.

    Raises:
        InvalidInput: if the set is empty, a time is not an integer, a burst
            time is below 1, an arrival time is negative, or two processes
            share an identifier.
    """
    if not processes:
        raise InvalidInput("At least one process is required.")

    seen: Dict[str, int] = {}
    for index, p in enumerate(processes):
        if not _is_int(p.arrival_time) or not _is_int(p.burst_time):
            raise InvalidInput(
                f"{p.pid}: arrival and burst times must be integers."
            )
        if p.arrival_time < 0:
            raise InvalidInput(
                f"{p.pid}: arrival time must be >= 0 (got {p.arrival_time})."
            )
        if p.burst_time < 1:
            raise InvalidInput(
                f"{p.pid}: burst time must be >= 1 (got {p.burst_time})."
            )
        if p.pid in seen:
            raise InvalidInput(
                f"Duplicate process id {p.pid!r} at positions {seen[p.pid]} and {index}."
            )
        seen[p.pid] = index


# ---------------------------------------------------------------------------
# Scheduling algorithm
# ---------------------------------------------------------------------------


def compute_schedule(processes: Sequence[Process]) -> ScheduleResult:
    """
    Shortest Job First (SJF) scheduling, non-preemptive.

    Concept:
        - Non-preemptive: once started, a process runs to completion.
        - Whenever the CPU becomes free, choose among the arrived processes
          the one with the smallest burst time.
        - Ties are broken by earliest arrival time, then by input order.
        - If no process is ready, the CPU is idle until the next arrival.
          Idle time is a gap between blocks, never a block of its own.

    Implementation details:
        - Processes not yet arrived are kept sorted by arrival; arrived ones
          sit in a min-heap keyed by (burst, arrival, input index), so each
          decision costs O(log n).

    Args:
        processes: Process objects to schedule. They are not modified.

    Returns:
        ScheduleResult with blocks in emission order and results in
        completion order.

    Raises:
        InvalidInput: if the preconditions checked by
            :func:`validate_processes` do not hold.
    """
    try:
        validate_processes(processes)
    except InvalidInput as exc:
        logger.info("Refusing to schedule: %s", exc)
        raise

    # (arrival, input index, process) for everything that has not arrived yet.
    pending = sorted(
        ((p.arrival_time, index, p) for index, p in enumerate(processes)),
        key=lambda item: (item[0], item[1]),
    )
    n = len(pending)
    next_index = 0

    ready: List[Tuple[int, int, int, Process]] = []
    blocks: List[GanttBlock] = []
    completed: List[Process] = []
    clock = 0

    while len(completed) < n:
        # Move every process that has arrived by now into the ready heap.
        while next_index < n and pending[next_index][0] <= clock:
            arrival, index, p = pending[next_index]
            heapq.heappush(ready, (p.burst_time, arrival, index, p))
            next_index += 1

        if not ready:
            # CPU idle until the next arrival.
            clock = pending[next_index][0]
            continue

        _, _, _, chosen = heapq.heappop(ready)
        start = clock
        clock += chosen.burst_time
        blocks.append(GanttBlock(chosen.pid, start, clock))
        completed.append(chosen.completed_at(clock))

    result = ScheduleResult(blocks=tuple(blocks), results=tuple(completed))
    logger.debug(
        "SJF schedule for %d processes: %s",
        n,
        ", ".join(f"{b.pid}:{b.start_time}-{b.end_time}" for b in result.blocks),
    )
    return result


def compute_metrics(result: ScheduleResult) -> ScheduleMetrics:
    """Compute aggregate metrics from a finished schedule."""
    stats = result.results
    waiting = [p.waiting_time for p in stats]
    turnaround = [p.turnaround_time for p in stats]

    total_time = result.total_time
    busy_time = sum(block.duration for block in result.blocks)

    return ScheduleMetrics(
        average_waiting_time=sum(waiting) / len(stats),
        average_turnaround_time=sum(turnaround) / len(stats),
        min_waiting_time=min(waiting),
        max_waiting_time=max(waiting),
        cpu_utilization=busy_time / total_time,
        throughput=len(stats) / total_time,
        total_time=total_time,
    )


# ---------------------------------------------------------------------------
# Example scenarios
# ---------------------------------------------------------------------------


DEFAULT_PROCESSES: Tuple[Process, ...] = (
    Process("P1", arrival_time=0, burst_time=6),
    Process("P2", arrival_time=2, burst_time=4),
    Process("P3", arrival_time=4, burst_time=2),
    Process("P4", arrival_time=5, burst_time=3),
)

# Scenarios as lists of (arrival, burst); pids are assigned P1, P2, ...
EXAMPLE_SCENARIOS: Dict[str, List[Tuple[int, int]]] = {
    "Classic SJF demo": [(p.arrival_time, p.burst_time) for p in DEFAULT_PROCESSES],
    "Idle CPU gap": [
        (2, 3),
        (3, 1),
        (10, 2),  # arrives after the CPU has drained the first two
        (11, 1),
    ],
    "Simultaneous arrivals": [
        (0, 3),
        (0, 1),
        (0, 4),
        (0, 1),  # same burst as P2: input order decides
    ],
    "Long job first": [
        (0, 8),
        (1, 4),
        (2, 2),
        (3, 1),
    ],
}


def build_scenario(label: str) -> List[Process]:
    """Materialize one of :data:`EXAMPLE_SCENARIOS` as Process objects."""
    rows = EXAMPLE_SCENARIOS[label]
    return [
        Process(f"P{index}", arrival_time=arrival, burst_time=burst)
        for index, (arrival, burst) in enumerate(rows, start=1)
    ]
