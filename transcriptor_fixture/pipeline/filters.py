"""Spell and creature ignore-lists applied to combat log events."""

import logging
from dataclasses import dataclass
from pathlib import Path

from transcriptor_fixture.config import Settings
from transcriptor_fixture.errors import LoadError
from transcriptor_fixture.savedvars.lua_data import LuaSyntaxError, loads

logger = logging.getLogger(__name__)

SPELL_IDS_VARIABLE = "ignoredSpellIds"
CREATURE_IDS_VARIABLE = "ignoredCreatureIds"


@dataclass(frozen=True)
class IgnoreLists:
    spell_ids: frozenset[int] = frozenset()
    creature_ids: frozenset[int] = frozenset()

    def merged(self, other: "IgnoreLists") -> "IgnoreLists":
        return IgnoreLists(
            spell_ids=self.spell_ids | other.spell_ids,
            creature_ids=self.creature_ids | other.creature_ids,
        )


def _id_set(raw, variable: str, path: Path) -> frozenset[int]:
    """Accept either {[id] = true} maps or plain {id, id} lists."""
    if raw is None:
        return frozenset()
    if isinstance(raw, dict):
        ids = [k for k, v in raw.items() if v]
    elif isinstance(raw, list):
        ids = raw
    else:
        raise LoadError(f"{path}: {variable} must be a table")
    if not all(isinstance(i, int) and not isinstance(i, bool) for i in ids):
        raise LoadError(f"{path}: {variable} must only contain numeric ids")
    return frozenset(ids)


def load_filter(path: str | Path) -> IgnoreLists:
    """Read ignoredSpellIds / ignoredCreatureIds from a filter data file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8", errors="surrogateescape") as f:
            data = loads(f.read())
    except OSError as exc:
        raise LoadError(f"Could not read filter file {path}: {exc}") from exc
    except LuaSyntaxError as exc:
        raise LoadError(f"Malformed filter file {path}: {exc}") from exc

    lists = IgnoreLists(
        spell_ids=_id_set(data.get(SPELL_IDS_VARIABLE), SPELL_IDS_VARIABLE, path),
        creature_ids=_id_set(data.get(CREATURE_IDS_VARIABLE), CREATURE_IDS_VARIABLE, path),
    )
    logger.debug(
        "Loaded filter %s: %d spells, %d creatures",
        path, len(lists.spell_ids), len(lists.creature_ids),
    )
    return lists


def build_ignore_lists(settings: Settings, path: str | Path | None = None) -> IgnoreLists:
    """Combine configured ids with an optional filter file (CLI path wins over config)."""
    lists = IgnoreLists(
        spell_ids=frozenset(settings.filter.ignored_spell_ids),
        creature_ids=frozenset(settings.filter.ignored_creature_ids),
    )
    path = path or settings.filter.path
    if path:
        lists = lists.merged(load_filter(path))
    return lists
