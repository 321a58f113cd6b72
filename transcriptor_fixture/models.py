from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

# A coerced transcript token: nil, boolean, number or opaque string.
Value = str | int | float | bool | None


@dataclass(frozen=True)
class Bitmask:
    """Unit flag mask, rendered as a hexadecimal literal instead of a number."""

    value: int


@dataclass(frozen=True)
class LogEntry:
    name: str
    lines: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.lines)

    def line(self, offset: int) -> str:
        """Return the line at a 1-based offset."""
        return self.lines[offset - 1]


# Entry name -> LogEntry, as stored in TranscriptDB.
LogFile = dict[str, LogEntry]


@dataclass(frozen=True)
class RawLine:
    elapsed_time: float
    event_name: str
    params: str


@dataclass(frozen=True)
class ParsedEvent:
    timestamp: float
    event_name: str
    parameters: tuple[Value | Bitmask, ...] = ()


@dataclass(frozen=True)
class CombatLogEvent:
    """A reconstructed COMBAT_LOG_EVENT_UNFILTERED payload.

    Raid flags and spell school are never recorded in transcripts and are
    always emitted as zero.
    """

    event: str
    source_guid: Value
    source_name: Value
    source_flags: int
    dest_guid: Value
    dest_name: Value
    dest_flags: int
    spell_id: Value
    spell_name: Value
    extra_arg1: Value = None
    extra_arg2: Value = None
    source_raid_flags: int = field(default=0, init=False)
    dest_raid_flags: int = field(default=0, init=False)
    spell_school: int = field(default=0, init=False)

    def parameters(self) -> tuple[Value | Bitmask, ...]:
        return (
            self.event,
            self.source_guid, self.source_name,
            Bitmask(self.source_flags), Bitmask(self.source_raid_flags),
            self.dest_guid, self.dest_name,
            Bitmask(self.dest_flags), Bitmask(self.dest_raid_flags),
            self.spell_id, self.spell_name, Bitmask(self.spell_school),
            self.extra_arg1, self.extra_arg2,
        )


class InstanceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Value = None
    instance_type: Value = None
    difficulty_id: Value = None
    difficulty_name: Value = None
    max_players: Value = None
    dynamic_difficulty: Value = None
    is_dynamic: Value = None
    instance_id: Value = None
    instance_group_size: Value = None
    lfg_dungeon_id: Value = None


class EncounterFixture(BaseModel):
    """Everything needed to render one fixture definition."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    game_version: str = ""
    addon: str = ""
    mod: str = ""
    instance_info: InstanceInfo = InstanceInfo()
    player_name: str | None = None
    rows: tuple[str, ...] = ()
