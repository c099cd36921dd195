"""Command line entry point for dedupguard."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from art import tprint
from rich.console import Console
from rich.logging import RichHandler

import settings
from adapters.ruleset_file import RulesetFile
from adapters.ruleset_formatting import build_ruleset_table, format_percent, format_preview
from core.controller import RulesetController
from core.lsh import lsh_probability
from core.ruleset_reader import parse_ruleset
from core.ruleset_writer import render_ruleset
from core.similarity import preview_similarity
from core.validators import DEDUP_FIELDS, RULE_FIELDS, coerce_field, validate_configuration

NAME = "DEDUPGUARD"
FONT = "tarty-1"

# Overrides the config.json level and turns logging on; may come from .env.
LOG_LEVEL_ENV = "DEDUPGUARD_LOG_LEVEL"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _resolve_level(config: dict, override: Optional[str]) -> int:
    level_name = override or config.get("level", "INFO")
    return getattr(logging, str(level_name).upper(), logging.INFO)


def _build_handlers(config: dict, level: int) -> list[logging.Handler]:
    """Console goes through rich on stderr so stdout stays clean for command output."""

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = RichHandler(console=Console(stderr=True), show_path=False)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/dedupguard.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 3)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(file_handler)

    return handlers


def _configure_logging(level_override: Optional[str] = None) -> None:
    """Install handlers from config.json, or from a command line / env level override."""

    config = settings.LOGGING or {}
    override = level_override or os.getenv(LOG_LEVEL_ENV)
    if not config.get("enabled", False) and not override:
        return

    level = _resolve_level(config, override)
    handlers = _build_handlers(config, level)
    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers, force=True)


def _load_controller(ruleset: RulesetFile) -> tuple[RulesetController, bool]:
    """Start a session from defaults and apply the ruleset file over them.

    The flag is False when the file contributed nothing, so callers that
    write back must not replace it with defaults.
    """

    controller = RulesetController(on_change=ruleset.write_text)
    text = ruleset.read_text()
    loaded = controller.receive(text)
    if text and not loaded:
        LOGGER.warning("%s has no deduplication section, using defaults", ruleset.path)
    return controller, loaded


def _missing(ruleset: RulesetFile) -> int:
    print(f"No ruleset at {ruleset.path}. Run 'dedupguard init' first.")
    return 1


def _unreadable(ruleset: RulesetFile) -> int:
    print(
        f"{ruleset.path} has no deduplication section; not overwriting it "
        "(use 'dedupguard init --force' to replace it)."
    )
    return 1


def _init(ruleset: RulesetFile, force: bool) -> int:
    _print_banner()
    if ruleset.exists() and not force:
        print(f"{ruleset.path} already exists (use --force to overwrite).")
        return 1
    controller = RulesetController(on_change=ruleset.write_text)
    if controller.sync() is None:
        print(f"Failed to write ruleset: {controller.state.error}")
        return 1
    print(f"Wrote default ruleset to {ruleset.path}")
    return 0


def _show(ruleset: RulesetFile) -> int:
    if not ruleset.exists():
        return _missing(ruleset)
    _print_banner()
    controller, _ = _load_controller(ruleset)
    Console().print(build_ruleset_table(controller.config, controller.probability()))
    return 0


def _format(ruleset: RulesetFile, check: bool) -> int:
    if not ruleset.exists():
        return _missing(ruleset)
    original = ruleset.read_text()
    controller, loaded = _load_controller(ruleset)
    if not loaded:
        return _unreadable(ruleset)
    canonical = render_ruleset(controller.config)
    if canonical == original:
        print(f"{ruleset.path} is already canonical.")
        return 0
    if check:
        print(f"{ruleset.path} would be reformatted.")
        return 1
    if controller.sync() is None:
        print(f"Failed to write ruleset: {controller.state.error}")
        return 1
    print(f"Reformatted {ruleset.path}")
    return 0


def _set(ruleset: RulesetFile, field: str, raw_value: str) -> int:
    if not ruleset.exists():
        return _missing(ruleset)
    parsed = coerce_field(field, raw_value)
    if parsed.error:
        print(parsed.error)
        return 1

    controller, loaded = _load_controller(ruleset)
    if not loaded:
        return _unreadable(ruleset)
    if field in DEDUP_FIELDS:
        controller.update_dedup(field, parsed.value)
    elif field in RULE_FIELDS:
        controller.update_rule(field, parsed.value)
    if controller.state.error:
        print(f"Failed to write ruleset: {controller.state.error}")
        return 1
    print(f"Set {field} in {ruleset.path}")
    return 0


def _check(ruleset: RulesetFile) -> int:
    if not ruleset.exists():
        return _missing(ruleset)
    problems = validate_configuration(parse_ruleset(ruleset.read_text()))
    if not problems:
        print(f"{ruleset.path}: ok")
        return 0
    for problem in problems:
        print(f"{ruleset.path}: {problem}")
    return 1


def _probability(
    ruleset: RulesetFile,
    threshold: Optional[float],
    hashes: Optional[int],
    bands: Optional[int],
) -> int:
    controller, _ = _load_controller(ruleset)
    dedup = controller.config.deduplication
    try:
        value = lsh_probability(
            dedup["similarity_threshold"] if threshold is None else threshold,
            dedup["num_hash_functions"] if hashes is None else hashes,
            dedup["num_bands"] if bands is None else bands,
        )
    except (KeyError, TypeError) as exc:
        LOGGER.warning("Cannot compute LSH probability from %s", ruleset.path, exc_info=True)
        print(f"Cannot compute probability from {ruleset.path}: {exc}")
        return 1
    print(format_percent(value))
    return 0


def _preview(ruleset: RulesetFile, left_path: str, right_path: str) -> int:
    if not ruleset.exists():
        return _missing(ruleset)
    controller, _ = _load_controller(ruleset)
    left = Path(left_path).read_text(encoding="utf-8")
    right = Path(right_path).read_text(encoding="utf-8")
    try:
        preview = preview_similarity(left, right, controller.config.deduplication)
    except (KeyError, TypeError, ValueError) as exc:
        LOGGER.warning("Cannot preview with settings from %s", ruleset.path, exc_info=True)
        print(f"Cannot preview with settings from {ruleset.path}: {exc}")
        return 1
    Console().print(format_preview(preview))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dedupguard")
    parser.add_argument(
        "--ruleset",
        default=settings.RULESET_PATH,
        help="Ruleset document to work on (default from config.json or DEDUPGUARD_RULESET)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at DEBUG level to stderr",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help=f"Log at this level (overrides config.json and {LOG_LEVEL_ENV})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Write the default ruleset")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    subparsers.add_parser("show", help="Print the ruleset and its LSH detection probability")

    format_parser = subparsers.add_parser("format", help="Rewrite the ruleset canonically")
    format_parser.add_argument(
        "--check",
        action="store_true",
        help="Only report whether the file would change",
    )

    set_parser = subparsers.add_parser("set", help="Change one field of the ruleset")
    set_parser.add_argument("field", choices=DEDUP_FIELDS + RULE_FIELDS)
    set_parser.add_argument("value")

    subparsers.add_parser("check", help="Validate the ruleset")

    probability_parser = subparsers.add_parser(
        "probability",
        help="Probability that a pair at the threshold becomes an LSH candidate",
    )
    probability_parser.add_argument("--threshold", type=float)
    probability_parser.add_argument("--hashes", type=int)
    probability_parser.add_argument("--bands", type=int)

    preview_parser = subparsers.add_parser(
        "preview",
        help="Compare two documents using the ruleset's detection settings",
    )
    preview_parser.add_argument("left")
    preview_parser.add_argument("right")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging("DEBUG" if args.verbose else args.log_level)
    ruleset = RulesetFile(args.ruleset)

    try:
        if args.command == "init":
            return _init(ruleset, args.force)
        if args.command == "show":
            return _show(ruleset)
        if args.command == "format":
            return _format(ruleset, args.check)
        if args.command == "set":
            return _set(ruleset, args.field, args.value)
        if args.command == "check":
            return _check(ruleset)
        if args.command == "probability":
            return _probability(ruleset, args.threshold, args.hashes, args.bands)
        return _preview(ruleset, args.left, args.right)
    except OSError as exc:
        LOGGER.exception("Command %s failed", args.command)
        print(f"error: {exc.strerror or exc}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
