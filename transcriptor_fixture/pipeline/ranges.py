"""Determine which lines of a log belong to the encounter."""

import logging
from dataclasses import dataclass, field

from transcriptor_fixture.errors import RangeError
from transcriptor_fixture.models import LogEntry
from transcriptor_fixture.pipeline.constants import (
    BOSS_KILL_MARKER,
    ENCOUNTER_END_MARKER,
    ENCOUNTER_START_MARKER,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineRange:
    """Inclusive 1-based line offsets."""

    first: int
    last: int

    def offsets(self) -> range:
        return range(self.first, self.last + 1)


@dataclass
class MarkerOffsets:
    starts: list[int] = field(default_factory=list)
    ends: list[int] = field(default_factory=list)
    boss_kills: list[int] = field(default_factory=list)


def scan_markers(entry: LogEntry) -> MarkerOffsets:
    """Record the offsets of every encounter start/end and boss kill line."""
    markers = MarkerOffsets()
    for offset, line in enumerate(entry.lines, start=1):
        if ENCOUNTER_START_MARKER in line:
            markers.starts.append(offset)
        elif ENCOUNTER_END_MARKER in line:
            markers.ends.append(offset)
        elif BOSS_KILL_MARKER in line:
            markers.boss_kills.append(offset)
    return markers


def detect_range(
    entry: LogEntry, *, boss_kill_window: int,
) -> LineRange:
    """Find the encounter by its ENCOUNTER_START/ENCOUNTER_END pair.

    BOSS_KILL often fires after ENCOUNTER_END; a late kill within
    boss_kill_window lines of the end is included so the fixture also
    covers not ending the encounter twice.
    """
    markers = scan_markers(entry)
    if len(markers.starts) != 1 or len(markers.ends) != 1:
        raise RangeError(
            "Log doesn't contain exactly one ENCOUNTER_START/END",
            starts=markers.starts,
            ends=markers.ends,
        )

    first = markers.starts[0]
    last = markers.ends[0]
    if markers.boss_kills:
        last_kill = markers.boss_kills[-1]
        if last_kill <= last + boss_kill_window:
            last = max(last, last_kill)

    logger.debug(
        "Detected encounter range %d-%d (boss kills at %s)",
        first, last, markers.boss_kills,
    )
    return LineRange(first=first, last=last)


def explicit_range(entry: LogEntry, start: int, end: int) -> LineRange:
    if start < 1 or end > len(entry) or start > end:
        raise RangeError(
            f"Invalid range {start}-{end} for a log with {len(entry)} lines"
        )
    return LineRange(first=start, last=end)


def select_range(
    entry: LogEntry,
    start: int | None = None,
    end: int | None = None,
    *,
    boss_kill_window: int,
) -> LineRange:
    """Use explicit bounds when both are given, otherwise auto-detect."""
    if start is not None and end is not None:
        return explicit_range(entry, start, end)
    return detect_range(entry, boss_kill_window=boss_kill_window)
