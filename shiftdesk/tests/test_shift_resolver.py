"""
Tests for current-shift resolution
"""
from shiftdesk.services.shift_resolver import resolve_current, sort_by_start
from shiftdesk.services.time_window import TimeWindow


def catalog():
    return sort_by_start([
        ("shift2", TimeWindow.from_hhmm("17:00", "01:00")),
        ("shift1", TimeWindow.from_hhmm("09:00", "17:00")),
        ("shift3", TimeWindow.from_hhmm("01:00", "09:00")),
    ])


def test_sort_by_start_orders_catalog():
    assert [shift_id for shift_id, _ in catalog()] == ["shift3", "shift1", "shift2"]


def test_full_day_catalog_has_exactly_one_match_per_minute():
    windows = catalog()
    for minute in range(1440):
        matches = [shift_id for shift_id, window in windows if window.contains(minute)]
        assert len(matches) == 1
        assert resolve_current(windows, minute) == matches[0]


def test_boundaries_belong_to_the_starting_shift():
    windows = catalog()
    assert resolve_current(windows, 9 * 60) == "shift1"
    assert resolve_current(windows, 17 * 60) == "shift2"
    assert resolve_current(windows, 60) == "shift3"
    assert resolve_current(windows, 0) == "shift2"


def test_gap_returns_none():
    windows = [("day", TimeWindow.from_hhmm("09:00", "17:00"))]
    assert resolve_current(windows, 20 * 60) is None
    assert resolve_current([], 600) is None


def test_overlap_first_in_order_wins():
    windows = [
        ("a", TimeWindow.from_hhmm("08:00", "12:00")),
        ("b", TimeWindow.from_hhmm("10:00", "14:00")),
    ]
    assert resolve_current(windows, 11 * 60) == "a"
    assert resolve_current(list(reversed(windows)), 11 * 60) == "b"
