import pytest

pytest.importorskip("tkinter")
pytest.importorskip("customtkinter")

from sjf_player import DEFAULT_STEP_INTERVAL_MS
from sjf_scheduler import InvalidInput
from sjf_visualizer import COLOR_PALETTE, assign_colors, parse_args, parse_process_fields


def test_parse_process_fields():
    p = parse_process_fields("P3", " 4 ", "2")

    assert (p.pid, p.arrival_time, p.burst_time) == ("P3", 4, 2)


@pytest.mark.parametrize(
    "arrival, burst, message",
    [
        ("", "2", "must be integers"),
        ("1.5", "2", "must be integers"),
        ("abc", "2", "must be integers"),
        ("-1", "2", "Arrival time must be >= 0"),
        ("0", "0", "burst time must be > 0"),
    ],
)
def test_parse_process_fields_rejects_bad_text(arrival, burst, message):
    with pytest.raises(InvalidInput, match=message):
        parse_process_fields("P1", arrival, burst)


def test_colors_cycle_by_first_appearance():
    pids = [f"P{i}" for i in range(1, len(COLOR_PALETTE) + 2)]

    colors = assign_colors(pids + ["P1"])

    assert colors["P1"] == COLOR_PALETTE[0]
    assert colors["P2"] == COLOR_PALETTE[1]
    assert colors[pids[-1]] == COLOR_PALETTE[0]
    assert len(colors) == len(pids)


def test_parse_args_defaults():
    args = parse_args([])

    assert args.interval_ms == DEFAULT_STEP_INTERVAL_MS
    assert args.scenario is None
    assert args.log_level == "INFO"


def test_parse_args_rejects_non_positive_interval():
    with pytest.raises(SystemExit):
        parse_args(["--interval-ms", "0"])


def test_parse_args_scenario():
    assert parse_args(["--scenario", "Idle CPU gap"]).scenario == "Idle CPU gap"
