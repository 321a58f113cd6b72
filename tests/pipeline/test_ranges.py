"""Tests for encounter range detection."""

import pytest

from transcriptor_fixture.config import RangeConfig
from transcriptor_fixture.errors import RangeError
from transcriptor_fixture.models import LogEntry
from transcriptor_fixture.pipeline.ranges import (
    LineRange,
    detect_range,
    explicit_range,
    scan_markers,
    select_range,
)

WINDOW = RangeConfig().boss_kill_window


def _make_entry(length: int, markers: dict[int, str]) -> LogEntry:
    """Build a log of `length` filler lines with marker events at 1-based offsets."""
    lines = []
    for offset in range(1, length + 1):
        event = markers.get(offset, "PLAYER_TARGET_CHANGED")
        lines.append(f"<{offset:.2f} 20:00:00> [{event}] ")
    return LogEntry(name="log", lines=tuple(lines))


class TestScanMarkers:

    def test_records_all_offsets(self):
        entry = _make_entry(20, {
            2: "ENCOUNTER_START", 5: "ENCOUNTER_END", 6: "BOSS_KILL",
            10: "ENCOUNTER_START", 15: "ENCOUNTER_END",
        })
        markers = scan_markers(entry)
        assert markers.starts == [2, 10]
        assert markers.ends == [5, 15]
        assert markers.boss_kills == [6]


class TestDetectRange:

    def test_single_pair(self):
        entry = _make_entry(100, {10: "ENCOUNTER_START", 40: "ENCOUNTER_END"})
        assert detect_range(entry, boss_kill_window=WINDOW) == LineRange(first=10, last=40)

    def test_no_start(self):
        entry = _make_entry(100, {40: "ENCOUNTER_END"})
        with pytest.raises(RangeError) as exc_info:
            detect_range(entry, boss_kill_window=WINDOW)
        assert exc_info.value.starts == []
        assert exc_info.value.ends == [40]

    def test_multiple_pairs_lists_candidates(self):
        entry = _make_entry(100, {
            10: "ENCOUNTER_START", 40: "ENCOUNTER_END",
            50: "ENCOUNTER_START", 70: "ENCOUNTER_END",
        })
        with pytest.raises(RangeError) as exc_info:
            detect_range(entry, boss_kill_window=WINDOW)
        assert exc_info.value.starts == [10, 50]
        assert exc_info.value.ends == [40, 70]

    def test_boss_kill_after_end_extends(self):
        entry = _make_entry(100, {
            10: "ENCOUNTER_START", 40: "ENCOUNTER_END", 55: "BOSS_KILL",
        })
        assert detect_range(entry, boss_kill_window=WINDOW) == LineRange(first=10, last=55)

    def test_boss_kill_at_window_edge_extends(self):
        entry = _make_entry(100, {
            10: "ENCOUNTER_START", 40: "ENCOUNTER_END", 90: "BOSS_KILL",
        })
        assert detect_range(entry, boss_kill_window=WINDOW).last == 90

    def test_boss_kill_far_after_end_ignored(self):
        entry = _make_entry(100, {
            10: "ENCOUNTER_START", 40: "ENCOUNTER_END", 95: "BOSS_KILL",
        })
        assert detect_range(entry, boss_kill_window=WINDOW) == LineRange(first=10, last=40)

    def test_only_last_boss_kill_counts(self):
        entry = _make_entry(200, {
            10: "ENCOUNTER_START", 40: "ENCOUNTER_END",
            45: "BOSS_KILL", 150: "BOSS_KILL",
        })
        assert detect_range(entry, boss_kill_window=WINDOW).last == 40

    def test_boss_kill_before_end_does_not_shrink(self):
        entry = _make_entry(100, {
            10: "ENCOUNTER_START", 30: "BOSS_KILL", 40: "ENCOUNTER_END",
        })
        assert detect_range(entry, boss_kill_window=WINDOW).last == 40

    def test_custom_window(self):
        entry = _make_entry(100, {
            10: "ENCOUNTER_START", 40: "ENCOUNTER_END", 55: "BOSS_KILL",
        })
        assert detect_range(entry, boss_kill_window=10).last == 40


class TestExplicitRange:

    def test_used_verbatim(self):
        entry = _make_entry(100, {})
        assert select_range(entry, 3, 7, boss_kill_window=WINDOW) == LineRange(first=3, last=7)

    def test_bypasses_marker_scan(self):
        entry = _make_entry(100, {
            10: "ENCOUNTER_START", 20: "ENCOUNTER_START", 40: "ENCOUNTER_END",
        })
        assert select_range(entry, 20, 40, boss_kill_window=WINDOW) == LineRange(first=20, last=40)

    @pytest.mark.parametrize(("start", "end"), [(0, 5), (5, 4), (1, 101)])
    def test_invalid_bounds(self, start, end):
        with pytest.raises(RangeError):
            explicit_range(_make_entry(100, {}), start, end)

    def test_single_line_range(self):
        assert explicit_range(_make_entry(5, {}), 3, 3).offsets() == range(3, 4)
