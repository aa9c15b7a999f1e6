"""Append a single entry to a filelog log file from the command line."""

import argparse
import logging
import sys

from filelog.config import load_config
from filelog.levels import VALID_LEVELS, InvalidLevel
from filelog.logger import Logger

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [filelog] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def _parse_context(pairs: list[str]) -> dict:
    context = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Context must be KEY=VALUE, got {pair!r}")
        context[key] = value
    return context


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filelog",
        description="Write one sanitized entry to a log file.",
    )
    parser.add_argument("--level", default="info",
                        help=f"Log level ({', '.join(VALID_LEVELS)})")
    parser.add_argument("--message", required=True, help="Message text, may contain {placeholders}")
    parser.add_argument("--context", nargs="*", default=[], metavar="KEY=VALUE",
                        help="Context values, sensitive keys are redacted")
    parser.add_argument("--source", help="Source name recorded with the entry")
    parser.add_argument("--log-file", help="Target log file (default from LOG_FILE / LOG_ROOT)")
    parser.add_argument("--config", help="YAML config file (default from CONFIG_PATH)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        context = _parse_context(args.context)
    except ValueError as e:
        parser.error(str(e))
    if args.source:
        context["source"] = args.source
    else:
        context.setdefault("source", "cli")

    config = load_config(args.config)
    log = Logger.from_config(config)
    if args.log_file:
        log = Logger(args.log_file, max_file_size_bytes=config.max_file_size_bytes,
                     tz_name=config.timezone)

    try:
        log.log(args.level, args.message, context)
    except InvalidLevel as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.info("Logged %s entry, target %s", args.level.strip().lower(), log.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
