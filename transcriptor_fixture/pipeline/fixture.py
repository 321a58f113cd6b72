"""Assemble the DBM.Test:DefineTest{} fixture text."""

import logging

from transcriptor_fixture.models import InstanceInfo, LogEntry, ParsedEvent, EncounterFixture
from transcriptor_fixture.pipeline.filters import IgnoreLists
from transcriptor_fixture.pipeline.literals import literal, literals
from transcriptor_fixture.pipeline.metadata import extract_metadata
from transcriptor_fixture.pipeline.ranges import LineRange
from transcriptor_fixture.pipeline.transcribe import Transcriber, transcribe_range

logger = logging.getLogger(__name__)

TEMPLATE = """\
DBM.Test:DefineTest{{
	name = {name},
	gameVersion = {game_version},
	addon = {addon},
	mod = {mod},
	instanceInfo = {instance_info},
	playerName = {player_name},
	log = {{
		{log}
	}}
}}
"""

ROW_SEPARATOR = "\n\t\t"

# Lua field name -> InstanceInfo attribute, in GetInstanceInfo() return order
_INSTANCE_INFO_KEYS = (
    ("name", "name"),
    ("instanceType", "instance_type"),
    ("difficultyID", "difficulty_id"),
    ("difficultyName", "difficulty_name"),
    ("maxPlayers", "max_players"),
    ("dynamicDifficulty", "dynamic_difficulty"),
    ("isDynamic", "is_dynamic"),
    ("instanceID", "instance_id"),
    ("instanceGroupSize", "instance_group_size"),
    ("lfgDungeonID", "lfg_dungeon_id"),
)


def format_instance_info(info: InstanceInfo) -> str:
    fields = ", ".join(
        f"{key} = {literal(getattr(info, attr))}" for key, attr in _INSTANCE_INFO_KEYS
    )
    return "{" + fields + "}"


def format_row(event: ParsedEvent) -> str:
    values = ", ".join(literals((event.event_name, *event.parameters)))
    return "{%.2f, %s}," % (event.timestamp, values)


def resolve_player_name(explicit: str | None, deduced: str | None) -> str | None:
    """The CLI-supplied player wins; a disagreement is only worth a warning."""
    if explicit is not None and deduced != explicit:
        logger.warning(
            "Log seems to be created by player %s, you provided player %s on CLI, "
            "this mismatch can mess with flags and targets",
            deduced, explicit,
        )
    return explicit if explicit is not None else deduced


def render_fixture(fixture: EncounterFixture) -> str:
    return TEMPLATE.format(
        name=literal(fixture.name),
        game_version=literal(fixture.game_version),
        addon=literal(fixture.addon),
        mod=literal(fixture.mod),
        instance_info=format_instance_info(fixture.instance_info),
        player_name=literal(fixture.player_name),
        log=ROW_SEPARATOR.join(fixture.rows),
    )


def build_fixture(
    entry: LogEntry,
    line_range: LineRange,
    *,
    ignore_lists: IgnoreLists | None = None,
    player_name: str | None = None,
    name: str = "",
    addon: str = "",
    mod: str = "",
) -> EncounterFixture:
    """Run metadata extraction and transcription over the selected range."""
    metadata = extract_metadata(entry, line_range)
    player = resolve_player_name(player_name, metadata.player_name)

    transcriber = Transcriber(ignore_lists=ignore_lists, player_name=player)
    lines = entry.lines[line_range.first - 1:line_range.last]
    events = transcribe_range(lines, transcriber, first_offset=line_range.first)

    logger.info(
        "Transcribed lines %d-%d of %r: %d events kept, %d dropped",
        line_range.first, line_range.last, entry.name,
        transcriber.emitted, transcriber.suppressed,
    )
    return EncounterFixture(
        name=name,
        game_version=metadata.game_version,
        addon=addon,
        mod=mod,
        instance_info=metadata.instance_info,
        player_name=player,
        rows=tuple(format_row(e) for e in events),
    )


def generate_fixture(entry: LogEntry, line_range: LineRange, **kwargs) -> str:
    return render_fixture(build_fixture(entry, line_range, **kwargs))
