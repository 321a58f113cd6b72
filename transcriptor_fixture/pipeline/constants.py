"""Transcriptor markers, event families and combat log unit flag bits."""

import re

# --- Encounter markers ---

ENCOUNTER_START_MARKER = "[ENCOUNTER_START]"
ENCOUNTER_END_MARKER = "[ENCOUNTER_END]"
BOSS_KILL_MARKER = "[BOSS_KILL]"

# Entry names of Classic Season of Discovery logs carry the 1.x client version
SOD_VERSION_MARKER = "Version: 1."
SOD_GAME_VERSION = "SeasonOfDiscovery"

# --- Line grammar ---

# "<12.34 20:01:02> [EVENT] param#param#..."
LINE_PATTERN = re.compile(r"^<([\d.]+) [^>]+> \[([^\]]*)\] (.*)$", re.DOTALL)
FIELD_DELIMITER = "#"

# --- Event dispatch ---

SUPPRESSED_EVENT_PREFIXES: tuple[str, ...] = ("DBM_", "NAME_PLATE_UNIT_")
UNIT_SPELL_PREFIX = "UNIT_SPELL"
PLAYER_SPELL_PREFIX = "PLAYER_SPELL"
TARGET_CHANGE_EVENTS: frozenset[str] = frozenset({"UNIT_TARGET", "PLAYER_TARGET_CHANGED"})
CLEU_EVENT = "CLEU"
CLEU_OUTPUT_EVENT = "COMBAT_LOG_EVENT_UNFILTERED"
CONDENSED_MARKER = "[CONDENSED]"

# "[[boss1:Creature-0-...:12345]]"
UNIT_SPELL_PATTERN = re.compile(r"\[\[([^:]+):([^:]+):([^\]]+)\]\]")

# --- Metadata ---

INSTANCE_INFO_HINT = "GetInstanceInfo() ="
INSTANCE_INFO_PATTERN = re.compile(
    r"\[DBM_Debug\] GetInstanceInfo\(\) = "
    + ", ".join([r"([^,]+)"] * 8)
    + r", ([^,#]+)(?:, ([^,#]+))?"
)
PLAYER_CAST_PATTERN = re.compile(
    r"\[UNIT_SPELLCAST_SUCCEEDED\] PLAYER_SPELL\{([^}]+)\} -.*- \[\[player:Cast-"
)

# --- GUIDs ---

PLAYER_GUID_PREFIX = "Player-"
PET_GUID_PREFIX = "Pet-"
NPC_GUID_PREFIXES: tuple[str, ...] = ("Creature-", "Vehicle-")
CREATURE_ID_PATTERN = re.compile(r"(?:Creature|GameObject)-0-\d*-\d*-\d*-(\d+)")

# --- CLEU event families ---

SUMMON_EVENT = "SPELL_SUMMON"
CAST_START_EVENT = "SPELL_CAST_START"
CAST_EVENT_PREFIX = "SPELL_CAST"
EXTRA_ATTACKS_EVENT = "SPELL_EXTRA_ATTACKS"
HEAL_SUFFIXES: tuple[str, ...] = ("_ENERGIZE", "_HEAL")

DAMAGE_EVENTS: frozenset[str] = frozenset({
    "SPELL_DAMAGE",
    "SPELL_PERIODIC_DAMAGE",
    "SPELL_PERIODIC_MISSED",
    "SPELL_MISSED",
    "DAMAGE_SHIELD",
    "DAMAGE_SHIELD_MISSED",
    "SWING_DAMAGE",
})

AURA_EVENTS: frozenset[str] = frozenset({
    "SPELL_AURA_APPLIED",
    "SPELL_AURA_APPLIED_DOSE",
    "SPELL_AURA_REMOVED",
    "SPELL_AURA_REMOVED_DOSE",
    "SPELL_AURA_REFRESH",
})

AURA_TYPE_BUFF = "BUFF"
AURA_TYPE_DEBUFF = "DEBUFF"

# --- Unit flags (COMBATLOG_OBJECT_*) ---

AFFILIATION_MINE = 0x0001
AFFILIATION_PARTY = 0x0002
AFFILIATION_OUTSIDER = 0x0008
REACTION_FRIENDLY = 0x0010
REACTION_HOSTILE = 0x0040
CONTROL_PLAYER = 0x0100
CONTROL_NPC = 0x0200
TYPE_PLAYER = 0x0400
TYPE_NPC = 0x0800
TYPE_PET = 0x1000

TARGET = 0x10000
FOCUS = 0x20000
MAINTANK = 0x40000
MAINASSIST = 0x80000
NONE = 0x80000000

# (threshold, amount) pairs applied in order to normalise logged source flags.
# MAINTANK subtracts the MAINASSIST bit; existing fixtures depend on it.
SPECIAL_FLAG_CLEARING: tuple[tuple[int, int], ...] = (
    (NONE, NONE),
    (MAINASSIST, MAINASSIST),
    (MAINTANK, MAINASSIST),
    (FOCUS, FOCUS),
    (TARGET, TARGET),
)
