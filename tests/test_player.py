import pytest

from sjf_player import (
    DEFAULT_STEP_INTERVAL_MS,
    PlayerState,
    TimelinePlayer,
    build_steps,
)
from sjf_scheduler import DEFAULT_PROCESSES, Process, build_scenario, compute_schedule


def _player(host, processes=DEFAULT_PROCESSES, **kwargs):
    return TimelinePlayer(compute_schedule(processes), processes, host, **kwargs)


def _names(processes):
    return [p.pid for p in processes]


# ---------------------------------------------------------------------------
# Step derivation
# ---------------------------------------------------------------------------


def test_one_step_per_block_plus_initial_and_terminal():
    result = compute_schedule(DEFAULT_PROCESSES)
    steps = build_steps(result, DEFAULT_PROCESSES)

    assert len(steps) == len(result.blocks) + 2
    assert [s.index for s in steps] == list(range(len(steps)))
    assert [s.time for s in steps] == [0, 0, 6, 8, 11, 15]


def test_classic_steps_content():
    steps = build_steps(compute_schedule(DEFAULT_PROCESSES), DEFAULT_PROCESSES)

    initial = steps[0]
    assert initial.running_process is None
    assert initial.gantt_so_far == ()
    assert not initial.is_decision_point
    assert _names(initial.ready_queue) == ["P1"]

    first = steps[1]
    assert first.is_decision_point
    assert first.running_process.pid == "P1"
    assert first.ready_queue == ()
    assert [b.pid for b in first.gantt_so_far] == ["P1"]

    decision = steps[2]
    assert decision.title == "Time 6: P3 selected"
    assert decision.running_process.pid == "P3"
    assert _names(decision.ready_queue) == ["P2", "P4"]
    assert [b.pid for b in decision.gantt_so_far] == ["P1", "P3"]
    assert "P2 (BT=4) vs P3 (BT=2) vs P4 (BT=3)" in decision.description
    assert [(p.pid, p.completion_time) for p in decision.completed] == [("P1", 6)]

    assert _names(steps[3].ready_queue) == ["P2"]
    assert steps[4].running_process.pid == "P2"
    assert "only ready process" in steps[4].description


def test_terminal_step_has_everything_finished():
    result = compute_schedule(DEFAULT_PROCESSES)
    terminal = build_steps(result, DEFAULT_PROCESSES)[-1]

    assert terminal.time == 15
    assert terminal.running_process is None
    assert terminal.ready_queue == ()
    assert not terminal.is_decision_point
    assert terminal.gantt_so_far == result.blocks
    assert terminal.completed == result.results
    assert "3.50" in terminal.description
    assert "7.25" in terminal.description


def test_gantt_prefix_grows_with_each_step():
    result = compute_schedule(DEFAULT_PROCESSES)
    steps = build_steps(result, DEFAULT_PROCESSES)

    for step in steps:
        assert step.gantt_so_far == result.blocks[: len(step.gantt_so_far)]
        assert all(b.start_time <= step.time for b in step.gantt_so_far)


def test_idle_gaps_are_narrated():
    processes = build_scenario("Idle CPU gap")
    steps = build_steps(compute_schedule(processes), processes)

    assert steps[0].ready_queue == ()
    assert "CPU idle until t = 2" in steps[0].description
    assert steps[1].description.startswith("CPU idle from 0 to 2.")
    assert steps[3].time == 10
    assert steps[3].description.startswith("CPU idle from 6 to 10.")
    assert not steps[2].description.startswith("CPU idle")


def test_display_names_are_used_in_narration():
    processes = [
        Process("P1", arrival_time=0, burst_time=2, name="editor"),
        Process("P2", arrival_time=0, burst_time=1, name="compiler"),
    ]
    steps = build_steps(compute_schedule(processes), processes)

    assert steps[1].title == "Time 0: compiler selected"
    assert "editor (BT=2) vs compiler (BT=1)" in steps[1].description
    assert steps[2].title == "Time 1: editor selected"


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


def test_starts_idle_on_first_step(host):
    player = _player(host)

    assert player.state is PlayerState.IDLE
    assert player.step_index == 0
    assert player.current_step is player.steps[0]
    assert not player.is_playing
    assert not player.is_finished
    assert player.metrics is None
    assert player.interval_ms == DEFAULT_STEP_INTERVAL_MS


def test_next_walks_to_finished(host):
    player = _player(host)

    for expected in range(1, player.last_index + 1):
        assert player.next() is True
        assert player.step_index == expected

    assert player.is_finished
    assert player.metrics.average_waiting_time == pytest.approx(3.5)
    assert player.metrics.average_turnaround_time == pytest.approx(7.25)


def test_next_on_terminal_step_is_a_noop(host):
    player = _player(host)
    player.jump_to(player.last_index)

    assert player.next() is False
    assert player.step_index == player.last_index
    assert player.is_finished


def test_reset_then_next_matches_direct_jump(host):
    walker = _player(host)
    jumper = _player(host)

    for k in range(walker.last_index + 1):
        walker.reset()
        for _ in range(k):
            walker.next()
        jumper.jump_to(k)
        assert walker.current_step == jumper.current_step
        assert walker.state is jumper.state


def test_jump_out_of_range_raises(host):
    player = _player(host)

    with pytest.raises(IndexError):
        player.jump_to(player.last_index + 1)
    with pytest.raises(IndexError):
        player.jump_to(-1)


def test_reset_from_finished_returns_to_idle(host):
    player = _player(host)
    player.jump_to(player.last_index)

    player.reset()

    assert player.state is PlayerState.IDLE
    assert player.step_index == 0
    assert player.metrics is None


# ---------------------------------------------------------------------------
# Auto-advance timer
# ---------------------------------------------------------------------------


def test_play_then_pause_advances_zero_steps(host):
    player = _player(host)

    player.play()
    player.pause()

    assert player.step_index == 0
    assert player.state is PlayerState.IDLE
    assert host.pending == {}
    assert len(host.cancelled) == 1


def test_play_schedules_with_configured_interval(host):
    player = _player(host, interval_ms=40)

    player.play()

    assert [ms for ms, _ in host.pending.values()] == [40]


def test_play_runs_to_finished_and_stops(host):
    player = _player(host)

    player.play()
    fired = host.fire_all()

    assert fired == player.last_index
    assert player.is_finished
    assert not player.is_playing
    assert host.pending == {}


def test_play_is_idempotent(host):
    player = _player(host)

    player.play()
    first_timer = next(iter(host.pending))
    player.play()

    assert len(host.pending) == 1
    assert first_timer in host.cancelled
    host.fire_next()
    assert player.step_index == 1


def test_play_when_finished_is_a_noop(host):
    player = _player(host)
    player.jump_to(player.last_index)

    player.play()

    assert player.is_finished
    assert host.pending == {}


def test_reset_cancels_pending_timer(host):
    player = _player(host)
    player.play()
    host.fire_next()

    player.reset()

    assert host.pending == {}
    assert player.step_index == 0
    assert not player.is_playing


def test_stale_callback_does_not_advance(host):
    player = _player(host)
    player.play()
    _, stale_callback = next(iter(host.pending.values()))

    player.pause()
    stale_callback()

    assert player.step_index == 0
    assert host.pending == {}


def test_toggle_switches_between_play_and_pause(host):
    player = _player(host)

    player.toggle()
    assert player.is_playing
    player.toggle()
    assert player.state is PlayerState.IDLE


def test_players_do_not_share_timers(host):
    first = _player(host)
    second = _player(host)

    first.play()
    second.play()
    first.pause()

    assert len(host.pending) == 1
    host.fire_next()
    assert first.step_index == 0
    assert second.step_index == 1


def test_subscriber_restarting_playback_does_not_double_the_timer(host):
    player = _player(host)
    restarted = []

    def restart_once(p):
        if p.step_index == 1 and not restarted:
            restarted.append(True)
            p.play()

    player.subscribe(restart_once)
    player.play()
    host.fire_next()

    assert restarted == [True]
    assert len(host.pending) == 1


def test_dispose_cancels_timer_and_listeners(host):
    player = _player(host)
    seen = []
    player.subscribe(seen.append)
    player.play()
    seen.clear()

    player.dispose()

    assert host.pending == {}
    assert not player.is_playing
    player.next()
    assert seen == []


def test_invalid_interval_is_rejected(host):
    with pytest.raises(ValueError):
        _player(host, interval_ms=0)


# ---------------------------------------------------------------------------
# Subscribers
# ---------------------------------------------------------------------------


def test_subscribers_see_every_transition(host):
    player = _player(host)
    seen = []
    unsubscribe = player.subscribe(lambda p: seen.append((p.state, p.step_index)))

    player.next()
    player.play()
    player.pause()
    player.jump_to(player.last_index)
    unsubscribe()
    player.reset()

    assert seen == [
        (PlayerState.IDLE, 1),
        (PlayerState.PLAYING, 1),
        (PlayerState.IDLE, 1),
        (PlayerState.FINISHED, player.last_index),
    ]


def test_pause_when_not_playing_is_silent(host):
    player = _player(host)
    seen = []
    player.subscribe(seen.append)

    player.pause()

    assert seen == []
