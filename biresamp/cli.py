"""biresamp CLI entry point.

Usage:
    biresamp input.wav 16000 output.wav
    biresamp input.flac 44100 output.flac --channel 1 --overflow wrap
    biresamp input.wav 8000 output.wav --config biresamp.yaml

Exits 0 on success and 1 on any error.
"""

from __future__ import annotations

import argparse
import re
import sys

import yaml
from loguru import logger
from pydantic import ValidationError

from biresamp.core.errors import BiresampError, UsageError
from biresamp.core.models import OverflowMode

INT_MAX = 2**31 - 1

# Optional leading whitespace and sign, then decimal digits only
_RATE_RE = re.compile(r"\s*[+-]?[0-9]+")


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad invocations as UsageError instead of exiting 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def parse_rate(value: str) -> int:
    """Parse a sample rate as an integer in ``[1, INT_MAX]``."""
    if not _RATE_RE.fullmatch(value):
        raise UsageError(f"rate is invalid: {value}")
    rate = int(value)
    if rate < 1:
        raise UsageError(f"rate is too small: {value}")
    if rate > INT_MAX:
        raise UsageError(f"rate is too large: {value}")
    return rate


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="biresamp",
        description="biresamp - bandlimited interpolation sample rate converter",
    )
    parser.add_argument("input", help="Input audio file")
    parser.add_argument("rate", help="Output sample rate in Hz")
    parser.add_argument("output", help="Output audio file (format follows the extension)")
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "--channel",
        type=int,
        default=None,
        help="Source channel to convert (default: 0)",
    )
    parser.add_argument(
        "--overflow",
        choices=[m.value for m in OverflowMode],
        default=None,
        help="How to narrow sums outside the 16-bit range (default: saturate)",
    )
    parser.add_argument(
        "--subtype",
        default=None,
        help="Output subtype, e.g. PCM_16 (default: PCM_16 where supported)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: INFO)",
    )
    return parser


def cmd_convert(args: argparse.Namespace) -> None:
    """Run one conversion from parsed arguments."""
    from biresamp.config import load_config
    from biresamp.converter import convert_file

    rate = parse_rate(args.rate)

    try:
        config = load_config(args.config).with_overrides(
            channel=args.channel,
            overflow=args.overflow,
            subtype=args.subtype,
            log_level=args.log_level,
        )
    except FileNotFoundError as e:
        raise UsageError(str(e)) from e
    except OSError as e:
        raise UsageError(f"cannot read configuration: {e}") from e
    except (ValidationError, yaml.YAMLError, TypeError, UnicodeDecodeError) as e:
        raise UsageError(f"invalid configuration: {e}") from e

    # Configure logging
    logger.remove()
    try:
        logger.add(sys.stderr, level=config.logging.level.upper())
    except ValueError as e:
        logger.add(sys.stderr, level="INFO")
        raise UsageError(f"invalid log level: {config.logging.level}") from e

    convert_file(args.input, rate, args.output, config)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        cmd_convert(args)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        logger.error(str(e))
        return 1
    except BiresampError as e:
        logger.error(str(e))
        return 1
    except MemoryError:
        logger.error("out of memory")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
