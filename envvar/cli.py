"""
ABOUTME: Command-line interface for reading typed environment variables
ABOUTME: Handles argument parsing, rule selection and the main entry point
"""

import argparse
import json
import logging
import math
import sys
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import get_and_validate, get_with_default, lookup
from .exceptions import ConfigError
from .types import ScalarType, format_value
from .validators import (
    Between,
    GreaterThan,
    LessThan,
    ValidationRule,
    ValidEmail,
    ValidUrl,
    Within,
)

console = Console()

_NUMERIC = {ScalarType.INT, ScalarType.UINT, ScalarType.FLOAT}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="envvar",
        description="Read an environment variable as a typed, optionally validated value",
    )
    p.add_argument("name", help="Environment variable to read")
    p.add_argument(
        "--type",
        dest="scalar",
        default=ScalarType.STR.value,
        choices=[s.value for s in ScalarType],
        help="Type to convert the value to",
    )
    g = p.add_mutually_exclusive_group()
    g.add_argument(
        "--default",
        metavar="VALUE",
        help="Value to print when the variable is missing or malformed",
    )
    g.add_argument("--greater-than", metavar="N", help="Require value > N")
    g.add_argument("--less-than", metavar="N", help="Require value < N")
    g.add_argument(
        "--between",
        nargs=2,
        metavar=("MIN", "MAX"),
        help="Require MIN <= value <= MAX",
    )
    g.add_argument(
        "--within", nargs="+", metavar="VALUE", help="Require one of the given values"
    )
    g.add_argument("--email", action="store_true", help="Require a valid email")
    g.add_argument("--url", action="store_true", help="Require a valid URL")
    p.add_argument(
        "--json",
        action="store_true",
        help="Output the result as JSON instead of the bare value",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level",
    )
    p.add_argument("--version", action="version", version=f"envvar {__version__}")
    return p


def _convert(
    p: argparse.ArgumentParser, scalar: ScalarType, raw: str, option: str
) -> Any:
    try:
        return scalar.parse(raw)
    except ValueError as e:
        p.error(f"argument {option}: {e}")


def build_rule(
    p: argparse.ArgumentParser, a: argparse.Namespace, scalar: ScalarType
) -> Optional[ValidationRule]:
    """Turn the rule options into a rule over ``scalar``, if one was given."""
    ordered = {
        "--greater-than": a.greater_than,
        "--less-than": a.less_than,
        "--between": a.between,
    }
    for option, raw in ordered.items():
        if raw is not None and scalar not in _NUMERIC:
            p.error(f"argument {option}: requires --type int, uint or float")
    if (a.email or a.url) and scalar is not ScalarType.STR:
        p.error("arguments --email/--url: require --type str")

    if a.greater_than is not None:
        return GreaterThan(_convert(p, scalar, a.greater_than, "--greater-than"))
    if a.less_than is not None:
        return LessThan(_convert(p, scalar, a.less_than, "--less-than"))
    if a.between is not None:
        low, high = (_convert(p, scalar, raw, "--between") for raw in a.between)
        return Between(low, high)
    if a.within is not None:
        return Within([_convert(p, scalar, raw, "--within") for raw in a.within])
    if a.email:
        return ValidEmail()
    if a.url:
        return ValidUrl()
    return None


def main(argv: Optional[list] = None):
    """
    Execute the envvar command.

    Parses arguments, configures logging, reads the variable and prints it.
    Exits with status 1 when the variable cannot be read or fails its rule.
    """
    p = build_parser()
    a = p.parse_args(argv)
    scalar = ScalarType(a.scalar)
    rule = build_rule(p, a, scalar)
    default = None
    if a.default is not None:
        default = _convert(p, scalar, a.default, "--default")

    logging.basicConfig(
        level=getattr(logging, a.log_level),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )

    try:
        if rule is not None:
            logging.debug(f"Validating {a.name} with {rule!r}")
            value = get_and_validate(a.name, rule, scalar)
        elif default is not None:
            value = get_with_default(a.name, default, scalar)
        else:
            value = lookup(a.name, scalar)
    except ConfigError as exc:
        console.print(f"❌ {exc}", markup=False, highlight=False, soft_wrap=True)
        sys.exit(1)

    if a.json:
        if isinstance(value, float) and not math.isfinite(value):
            value = format_value(value)
        output = json.dumps({"name": a.name, "value": value}, allow_nan=False)
    else:
        output = format_value(value)
    console.print(output, markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    main()
