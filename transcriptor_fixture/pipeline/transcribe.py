"""Turn Transcriptor lines back into the events the encounter mod saw.

Each raw line yields zero or one ParsedEvent. Events that only add noise to
boss mod tests (debug telemetry, nameplates, the player's own casts, healing
and damage done by the raid, ...) are dropped entirely.
"""

import logging
from dataclasses import dataclass

from transcriptor_fixture.errors import ParseError
from transcriptor_fixture.models import CombatLogEvent, ParsedEvent, RawLine, Value
from transcriptor_fixture.pipeline import constants as c
from transcriptor_fixture.pipeline.coercion import guess_type, parse_number
from transcriptor_fixture.pipeline.filters import IgnoreLists

logger = logging.getLogger(__name__)

FLAGS_MISSING_WARNING = (
    "Log doesn't contain flags, /getspells logflags to log flags in Transcriptor. "
    "Results for mods relying heavily on flags may be inaccurate."
)


def parse_line(line: str, offset: int = 0) -> RawLine:
    m = c.LINE_PATTERN.match(line)
    if not m:
        raise ParseError(offset, line)
    try:
        elapsed = float(m.group(1))
    except ValueError:
        raise ParseError(offset, line) from None
    return RawLine(elapsed_time=elapsed, event_name=m.group(2), params=m.group(3))


def split_fields(params: str) -> list[Value]:
    return [guess_type(f) for f in params.split(c.FIELD_DELIMITER)]


def normalize_source_flags(flags: int) -> int:
    """Strip raid target/focus/tank/assist bits so flags look uniform across events."""
    for threshold, amount in c.SPECIAL_FLAG_CLEARING:
        if flags >= threshold:
            flags -= amount
    return flags


@dataclass(frozen=True)
class UnitKind:
    is_player: bool = False
    is_pet: bool = False
    is_npc: bool = False

    @property
    def is_player_or_pet(self) -> bool:
        return self.is_player or self.is_pet


def classify_guid(guid: Value) -> UnitKind:
    if not isinstance(guid, str):
        return UnitKind()
    return UnitKind(
        is_player=guid.startswith(c.PLAYER_GUID_PREFIX),
        is_pet=guid.startswith(c.PET_GUID_PREFIX),
        is_npc=guid.startswith(c.NPC_GUID_PREFIXES),
    )


def creature_id(guid: Value) -> int | None:
    """NPC or game object id embedded in a Creature-/GameObject- GUID."""
    if not isinstance(guid, str):
        return None
    m = c.CREATURE_ID_PATTERN.search(guid)
    return int(m.group(1)) if m else None


def reconstruct_flags(
    name: Value, kind: UnitKind, player_name: str | None = None,
) -> int:
    """Best-effort unit flags for events logged without them.

    Reaction is not tracked across events: every player and pet is friendly
    and every NPC hostile.
    """
    flags = 0
    if kind.is_player:
        if player_name is not None and name == player_name:
            flags += c.AFFILIATION_MINE
        else:
            flags += c.AFFILIATION_PARTY  # party and raid are not distinguished
        flags += c.REACTION_FRIENDLY + c.CONTROL_PLAYER + c.TYPE_PLAYER
    elif kind.is_pet:
        flags += c.AFFILIATION_PARTY + c.REACTION_FRIENDLY + c.CONTROL_PLAYER + c.TYPE_PET
    elif kind.is_npc:
        flags += c.AFFILIATION_OUTSIDER + c.REACTION_HOSTILE + c.CONTROL_NPC + c.TYPE_NPC
    return flags


def _padded(fields: list[Value], count: int) -> list[Value]:
    return (fields + [None] * count)[:count]


class Transcriber:
    """Stateful per-run transcriber.

    Holds the ignore-lists, the player name used for flag reconstruction and
    the missing-flags warning latch, so one instance must be used per run.
    """

    def __init__(
        self,
        ignore_lists: IgnoreLists | None = None,
        player_name: str | None = None,
    ) -> None:
        self.ignore_lists = ignore_lists or IgnoreLists()
        self.player_name = player_name
        self.flag_warning_shown = False
        self.emitted = 0
        self.suppressed = 0

    def transcribe(self, raw: RawLine, timestamp: float) -> ParsedEvent | None:
        values = self.transcribe_event(raw.event_name, raw.params)
        if values is None:
            self.suppressed += 1
            return None
        self.emitted += 1
        event_name, *parameters = values
        return ParsedEvent(
            timestamp=timestamp, event_name=event_name, parameters=tuple(parameters),
        )

    def transcribe_event(self, event: str, params: str) -> tuple | None:
        """Event name followed by its arguments, or None if the line is dropped."""
        if event.startswith(c.SUPPRESSED_EVENT_PREFIXES):
            return None
        if event.startswith(c.UNIT_SPELL_PREFIX):
            return self.transcribe_unit_spell(event, params)
        if event in c.TARGET_CHANGE_EVENTS:
            # targets are not reconstructed from target-change events
            return None
        if event == c.CLEU_EVENT:
            cleu = self.transcribe_cleu(params)
            if cleu is None:
                return None
            # timestamp and hideCaster are not part of the replayed payload
            return (c.CLEU_OUTPUT_EVENT, *cleu.parameters())
        return (event, *split_fields(params))

    def transcribe_unit_spell(self, event: str, params: str) -> tuple | None:
        if params.startswith(c.PLAYER_SPELL_PREFIX):
            return None
        m = c.UNIT_SPELL_PATTERN.search(params)
        if not m:
            return (event, None, None, None)
        unit, guid, spell_id = m.groups()
        return (event, unit, guid, parse_number(spell_id))

    def transcribe_cleu(self, params: str) -> CombatLogEvent | None:
        fields = split_fields(params)
        source_flags: int | None = None
        dest_name: Value = None
        extra_arg1: Value = None
        extra_arg2: Value = None

        first, second = _padded(fields, 2)
        has_flags = isinstance(second, (int, float)) and not isinstance(second, bool)
        if isinstance(first, str) and c.CONDENSED_MARKER in first:
            event, source_guid, source_name, _, spell_id, spell_name = _padded(fields, 6)
            dest_guid: Value = ""
        elif has_flags:
            (event, raw_flags, source_guid, source_name, dest_guid, dest_name,
             spell_id, spell_name, extra_arg1, extra_arg2) = _padded(fields, 10)
            source_flags = normalize_source_flags(int(raw_flags))
        else:
            (event, source_guid, source_name, dest_guid, dest_name,
             spell_id, spell_name, extra_arg1, extra_arg2) = _padded(fields, 9)
            if event == c.CAST_START_EVENT and not self.flag_warning_shown:
                logger.warning(FLAGS_MISSING_WARNING)
                self.flag_warning_shown = True

        event = str(event)

        if spell_id in self.ignore_lists.spell_ids:
            return None
        ignored_creatures = self.ignore_lists.creature_ids
        if (creature_id(source_guid) in ignored_creatures
                or creature_id(dest_guid) in ignored_creatures):
            return None

        source = classify_guid(source_guid)
        dest = classify_guid(dest_guid)
        event = event.replace(c.CONDENSED_MARKER, "")

        if self._is_filtered(event, source, dest, extra_arg1):
            return None

        if source_flags is None:
            source_flags = reconstruct_flags(source_name, source, self.player_name)
        dest_flags = reconstruct_flags(dest_name, dest, self.player_name)

        return CombatLogEvent(
            event=event,
            source_guid=source_guid,
            source_name=source_name,
            source_flags=source_flags,
            dest_guid=dest_guid,
            dest_name=dest_name,
            dest_flags=dest_flags,
            spell_id=spell_id,
            spell_name=spell_name,
            extra_arg1=extra_arg1,
            extra_arg2=extra_arg2,
        )

    @staticmethod
    def _is_filtered(
        event: str, source: UnitKind, dest: UnitKind, aura_type: Value,
    ) -> bool:
        if event == c.SUMMON_EVENT and source.is_player_or_pet:
            return True
        if event.endswith(c.HEAL_SUFFIXES) and dest.is_player_or_pet:
            return True
        if ((event.startswith(c.CAST_EVENT_PREFIX) or event == c.EXTRA_ATTACKS_EVENT)
                and source.is_player_or_pet):
            return True
        if event in c.DAMAGE_EVENTS and source.is_player_or_pet:
            return True
        if event in c.AURA_EVENTS:
            if aura_type == c.AURA_TYPE_BUFF and dest.is_player_or_pet:
                return True
            if aura_type == c.AURA_TYPE_DEBUFF and dest.is_npc:
                return True
        return False


def transcribe_range(
    lines,
    transcriber: Transcriber,
    first_offset: int = 1,
) -> list[ParsedEvent]:
    """Transcribe consecutive lines; timestamps are relative to the first line."""
    events: list[ParsedEvent] = []
    time_offset: float | None = None
    for offset, line in enumerate(lines, start=first_offset):
        raw = parse_line(line, offset)
        if time_offset is None:
            time_offset = raw.elapsed_time
        parsed = transcriber.transcribe(raw, raw.elapsed_time - time_offset)
        if parsed is not None:
            events.append(parsed)
    logger.debug(
        "Transcribed %d events, suppressed %d lines",
        transcriber.emitted, transcriber.suppressed,
    )
    return events
