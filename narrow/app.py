import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import ConfigError, Settings, settings_from_env
from .env import load_env
from .history import HistoryError, HistoryLog, load_history
from .items import (
    ItemStore,
    SourceError,
    load_keyed,
    load_lines,
    parse_priority_items,
    read_keyed_source,
)
from .caserule import case_rule
from .logger import configure_logger, get_logger
from .pagination import TextMeasure
from .session import Session, build_layout

logger = get_logger()

CELL_PADDING = 2


def settings_from_args(args: argparse.Namespace) -> Settings:
    settings = settings_from_env()
    if args.token:
        settings.fuzzy = False
    if args.ignore_case:
        settings.case_insensitive = True
    if args.lines is not None:
        settings.set_lines(args.lines)
    if args.columns is not None:
        settings.set_columns(args.columns)
    if args.lineheight is not None:
        settings.set_lineheight(args.lineheight)
    if args.maxhist is not None:
        settings.maxhist = args.maxhist
    if args.allow_dup_history:
        settings.histnodup = False
    if args.histfile:
        settings.histfile = Path(args.histfile).expanduser()
    if args.prompt is not None:
        settings.prompt = args.prompt
    if args.hp:
        settings.priority_items = parse_priority_items(args.hp)
    if args.password:
        settings.password = True
    if args.log_level:
        settings.log_level = args.log_level.upper()
    if args.log_dir:
        settings.log_dir = Path(args.log_dir)
    settings.validate()
    return settings


def load_candidates(args: argparse.Namespace, settings: Settings) -> ItemStore:
    """Read the candidate set from -j, --input or stdin."""
    if settings.password:
        return ItemStore()
    if args.json:
        return load_keyed(read_keyed_source(Path(args.json)))
    rule = case_rule(settings.case_insensitive)
    if args.input:
        input_path = Path(args.input)
        if not input_path.exists():
            raise SourceError(f"Input file not found: {input_path}")
        with input_path.open("r", encoding="utf-8", newline="\n") as f:
            return load_lines(f, settings.priority_items, rule)
    return load_lines(sys.stdin, settings.priority_items, rule)


def open_session(args: argparse.Namespace, settings: Settings) -> Session:
    store = load_candidates(args, settings)
    logger.record_load(len(store))
    history = HistoryLog.open(settings.histfile, maxhist=settings.maxhist, dedup=settings.histnodup)
    layout = build_layout(
        settings,
        store,
        window_width=args.width,
        text_width=TextMeasure(padding=CELL_PADDING),
    )
    logger.debug(
        "Session opened",
        candidates=len(store),
        history=len(history),
        layout=repr(layout),
        fuzzy=settings.fuzzy,
    )
    return Session(store, settings, history=history, layout=layout)


def cmd_filter(args: argparse.Namespace, settings: Settings) -> None:
    session = open_session(args, settings)
    session.set_query(args.query or "")
    for id in session.matches:
        print(session.source[id].text)


def cmd_pick(args: argparse.Namespace, settings: Settings) -> None:
    session = open_session(args, settings)
    if args.query:
        session.type_text(args.query)
    keys = [k.strip() for k in args.keys.split(",") if k.strip()] if args.keys else []
    for key in keys:
        if session.done:
            break
        try:
            session.dispatch(key)
        except ValueError as e:
            raise ConfigError(f"{e}. Known commands: {', '.join(session.command_names)}")
    if not session.done:
        session.commit()
    for line in session.result.lines:
        print(line)
    if session.result.cancelled:
        raise SystemExit(session.result.exit_code)


def cmd_history(args: argparse.Namespace, settings: Settings) -> None:
    if settings.histfile is None:
        raise SystemExit("No history file. Pass -H FILE or set NARROW_HISTFILE.")
    records = load_history(settings.histfile)
    if not records:
        print(f"No history in {settings.histfile}")
        return
    for record in records:
        print(record)


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-F", dest="token", action="store_true", help="Token (substring) matching instead of fuzzy")
    common.add_argument("-i", dest="ignore_case", action="store_true", help="Case-insensitive matching")
    common.add_argument("-j", dest="json", help="Read candidates from the keys of a JSON object file")
    common.add_argument("--input", help="Read candidates from a file instead of stdin, one per line")
    common.add_argument("-l", dest="lines", type=int, help="Rows in the grid layout")
    common.add_argument("-g", dest="columns", type=int, help="Columns in the grid layout")
    common.add_argument("--lineheight", type=int, help="Minimum height of one row")
    common.add_argument("-p", dest="prompt", help="Prompt shown left of the input field")
    common.add_argument("-P", dest="password", action="store_true", help="Password mode: no candidates, masked input")
    common.add_argument("-H", dest="histfile", help="History file")
    common.add_argument("--maxhist", type=int, help="Records kept in the history file (default 64)")
    common.add_argument("--allow-dup-history", action="store_true", help="Record a query even if it repeats the last one")
    common.add_argument("--hp", help="Comma-separated high priority items")
    common.add_argument("--width", type=int, default=80, help="Window width in terminal cells (default 80)")
    common.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL (default WARNING)")
    common.add_argument("--log-dir", help="Also write a debug log file into this directory")
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _common_options()
    parser = argparse.ArgumentParser(prog="narrow", description="Narrow a list of candidates as you type")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    flt = subparsers.add_parser("filter", parents=[common], help="Print every candidate matching a query, best first")
    flt.add_argument("query", nargs="?", default="", help="Query text (default: empty, matches everything)")
    flt.set_defaults(func=cmd_filter)

    pck = subparsers.add_parser("pick", parents=[common], help="Run a scripted session and print the selection")
    pck.add_argument("--query", default="", help="Text typed before any key commands")
    pck.add_argument("--keys", help="Comma-separated session commands, e.g. \"down,toggle,down,commit\"")
    pck.set_defaults(func=cmd_pick)

    hst = subparsers.add_parser("history", parents=[common], help="Print the records in a history file")
    hst.set_defaults(func=cmd_history)
    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (NARROW_HISTFILE, NARROW_FUZZY, etc.)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        settings = settings_from_args(args)
        configure_logger(settings.log_level, settings.log_dir)
        args.func(args, settings)
    except (ConfigError, SourceError, HistoryError) as e:
        logger.record_error(type(e).__name__)
        logger.error("Fatal error", error=str(e), command=args.command)
        raise SystemExit(str(e))
    finally:
        logger.log_metrics_summary()


if __name__ == "__main__":
    main()
