"""Generate a DBM-Test fixture from a Transcriptor SavedVariables log.

Usage:
    parse-transcriptor --transcriptor WTF/Account/X/SavedVariables/Transcriptor.lua
    parse-transcriptor --transcriptor Transcriptor.lua --entry "[2024-02-10]@[20:14:51]"
    parse-transcriptor --transcriptor Transcriptor.lua --start 120 --end 4210 --player Tandanu
    parse-transcriptor --transcriptor Transcriptor.lua --filter Transcriptor-Filter.lua
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from transcriptor_fixture.config import Settings, get_settings
from transcriptor_fixture.errors import ConfigError, RangeError, TranscriptorError, UsageError
from transcriptor_fixture.pipeline.filters import build_ignore_lists
from transcriptor_fixture.pipeline.fixture import generate_fixture
from transcriptor_fixture.pipeline.loader import load_transcript, select_entry
from transcriptor_fixture.pipeline.ranges import select_range

logger = logging.getLogger(__name__)

USAGE = (
    "parse-transcriptor --transcriptor <path to SavedVariables/Transcriptor.lua> "
    '[--entry "[YYYY-MM-DD]@[HH:MM:SS]" --start <log offset> --end <log offset> '
    "--player <player who logged this>]"
)


class _ArgumentParser(argparse.ArgumentParser):
    """Bad arguments exit with status 1 like every other fatal error."""

    def error(self, message: str):
        raise UsageError(f"{message}\nUsage: {USAGE}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = _ArgumentParser(
        description="Generate a DBM-Test fixture from a Transcriptor log",
        usage=USAGE,
    )
    parser.add_argument("--transcriptor", help="Path to the Transcriptor SavedVariables file")
    parser.add_argument("--entry", help="Prefix of the log name to use")
    parser.add_argument("--start", type=int, help="First log offset (with --end)")
    parser.add_argument("--end", type=int, help="Last log offset (with --start)")
    parser.add_argument("--player", help="Name of the player who recorded the log")
    parser.add_argument("--filter", help="Filter file with ignoredSpellIds/ignoredCreatureIds")
    parser.add_argument("--name", default="", help="Test name")
    parser.add_argument("--addon", default="", help="Addon containing the mod")
    parser.add_argument("--mod", default="", help="Mod under test")
    parser.add_argument("--output", help="Write the fixture here instead of stdout")
    return parser.parse_args(argv)


def check_args(args: argparse.Namespace) -> None:
    if not args.transcriptor:
        raise UsageError(f"Usage: {USAGE}")
    if (args.start is None) != (args.end is None):
        raise UsageError("--start and --end must be used together")


def load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def run(
    transcriptor: str,
    *,
    entry: str | None = None,
    start: int | None = None,
    end: int | None = None,
    player: str | None = None,
    filter_path: str | None = None,
    name: str = "",
    addon: str = "",
    mod: str = "",
) -> str:
    """Load, select and transcribe; returns the fixture text."""
    settings = load_settings()
    ignore_lists = build_ignore_lists(settings, filter_path)

    log_file = load_transcript(transcriptor)
    log_entry = select_entry(log_file, entry)
    line_range = select_range(
        log_entry, start, end, boss_kill_window=settings.range.boss_kill_window,
    )
    return generate_fixture(
        log_entry, line_range,
        ignore_lists=ignore_lists,
        player_name=player,
        name=name,
        addon=addon,
        mod=mod,
    )


def _report(exc: TranscriptorError) -> None:
    logger.error("%s", exc)
    if isinstance(exc, RangeError) and (exc.starts or exc.ends):
        logger.error("ENCOUNTER_START at: %s", ", ".join(map(str, exc.starts)))
        logger.error("ENCOUNTER_END at: %s", ", ".join(map(str, exc.ends)))
        logger.error("Use --start and --end to select offsets explicitly")


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)

    try:
        settings = load_settings()
        logging.getLogger().setLevel(settings.log_level)
        args = parse_args(argv)
        check_args(args)
        fixture = run(
            args.transcriptor,
            entry=args.entry,
            start=args.start,
            end=args.end,
            player=args.player,
            filter_path=args.filter,
            name=args.name,
            addon=args.addon,
            mod=args.mod,
        )
    except TranscriptorError as exc:
        _report(exc)
        sys.exit(1)

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(fixture, encoding="utf-8")
        except OSError as exc:
            logger.error("Could not write fixture to %s: %s", output_path, exc)
            sys.exit(1)
        logger.info("Wrote fixture to %s", output_path)
    else:
        sys.stdout.write(fixture)


if __name__ == "__main__":
    main()
