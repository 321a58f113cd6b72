"""Load Transcriptor's SavedVariables file and pick one log from it."""

import logging
from pathlib import Path

from transcriptor_fixture.errors import LoadError, SelectionError
from transcriptor_fixture.models import LogEntry, LogFile
from transcriptor_fixture.savedvars.lua_data import LuaSyntaxError, loads

logger = logging.getLogger(__name__)

DB_VARIABLE = "TranscriptDB"
LINES_KEY = "total"


def parse_transcript(text: str, source: str = "<string>") -> LogFile:
    """Parse SavedVariables text into entry name -> LogEntry.

    Non-log keys in TranscriptDB (such as the addon's "ignoredEvents"
    settings) carry no "total" list and are skipped.
    """
    try:
        data = loads(text)
    except LuaSyntaxError as exc:
        raise LoadError(f"Malformed transcript file {source}: {exc}") from exc

    db = data.get(DB_VARIABLE)
    if not isinstance(db, dict):
        raise LoadError(f"{source} does not define a {DB_VARIABLE} table")

    log_file: LogFile = {}
    for name, entry in db.items():
        if not isinstance(name, str) or not isinstance(entry, dict):
            continue
        lines = entry.get(LINES_KEY)
        if lines is None:
            continue
        if not isinstance(lines, list) or not all(isinstance(li, str) for li in lines):
            raise LoadError(f"{source}: log {name!r} has a malformed {LINES_KEY!r} list")
        log_file[name] = LogEntry(name=name, lines=tuple(lines))

    logger.info("Loaded %d logs from %s", len(log_file), source)
    return log_file


def load_transcript(path: str | Path) -> LogFile:
    path = Path(path)
    try:
        with open(path, encoding="utf-8", errors="surrogateescape") as f:
            text = f.read()
    except OSError as exc:
        raise LoadError(f"Could not read transcript file {path}: {exc}") from exc
    return parse_transcript(text, source=str(path))


def select_entry(log_file: LogFile, prefix: str | None = None) -> LogEntry:
    """Return the single log whose name starts with prefix (any log if no prefix)."""
    matches = [
        entry for name, entry in log_file.items()
        if prefix is None or name.startswith(prefix)
    ]
    if len(matches) > 1:
        raise SelectionError("Multiple logs found in file, use --entry to select one")
    if not matches:
        raise SelectionError("Could not find specified log")
    logger.debug("Selected log %r (%d lines)", matches[0].name, len(matches[0]))
    return matches[0]
