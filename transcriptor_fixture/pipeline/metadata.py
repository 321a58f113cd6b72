"""Instance info, logging player and game version from the selected log."""

import logging
from dataclasses import dataclass

from transcriptor_fixture.models import InstanceInfo, LogEntry
from transcriptor_fixture.pipeline.coercion import guess_types
from transcriptor_fixture.pipeline.constants import (
    INSTANCE_INFO_HINT,
    INSTANCE_INFO_PATTERN,
    PLAYER_CAST_PATTERN,
    SOD_GAME_VERSION,
    SOD_VERSION_MARKER,
)
from transcriptor_fixture.pipeline.ranges import LineRange

logger = logging.getLogger(__name__)

_INSTANCE_INFO_FIELDS = (
    "name", "instance_type", "difficulty_id", "difficulty_name", "max_players",
    "dynamic_difficulty", "is_dynamic", "instance_id", "instance_group_size",
    "lfg_dungeon_id",
)


@dataclass(frozen=True)
class LogMetadata:
    player_name: str | None
    instance_info: InstanceInfo
    game_version: str


def parse_instance_info(line: str) -> InstanceInfo | None:
    """Parse a "[DBM_Debug] GetInstanceInfo() = ..." line."""
    m = INSTANCE_INFO_PATTERN.search(line)
    if not m:
        return None
    values = guess_types([g if g is not None else "nil" for g in m.groups()])
    return InstanceInfo(**dict(zip(_INSTANCE_INFO_FIELDS, values, strict=True)))


def parse_player_name(line: str) -> str | None:
    """Name of the logging player from their own successful spell cast."""
    m = PLAYER_CAST_PATTERN.search(line)
    return m.group(1) if m else None


def game_version_for(entry_name: str) -> str:
    return SOD_GAME_VERSION if SOD_VERSION_MARKER in entry_name else ""


def extract_metadata(entry: LogEntry, line_range: LineRange) -> LogMetadata:
    player_name: str | None = None
    instance_info: InstanceInfo | None = None

    for offset in line_range.offsets():
        line = entry.line(offset)
        if instance_info is None and INSTANCE_INFO_HINT in line:
            instance_info = parse_instance_info(line)
        if player_name is None:
            player_name = parse_player_name(line)
        if player_name is not None and instance_info is not None:
            break

    if instance_info is None:
        logger.warning("No GetInstanceInfo() debug line in range, instance info left empty")
    if player_name is None:
        logger.warning("Could not deduce the logging player from the log")

    return LogMetadata(
        player_name=player_name,
        instance_info=instance_info or InstanceInfo(),
        game_version=game_version_for(entry.name),
    )
