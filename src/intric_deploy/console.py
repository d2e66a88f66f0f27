"""Operator-facing output helpers shared by all commands."""

import logging
import sys

RULE = "═" * 64


def info(message: str) -> None:
    print(f"ℹ️  {message}")


def success(message: str) -> None:
    print(f"✅ {message}")


def warning(message: str) -> None:
    print(f"⚠️  {message}")


def error(message: str) -> None:
    print(f"❌ Error: {message}", file=sys.stderr)


def banner(title: str) -> None:
    """Print a title framed by horizontal rules."""
    print()
    print(RULE)
    print(title)
    print(RULE)
    print()


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    error(message)
    sys.exit(1)


def configure_logging(verbose: bool = False) -> None:
    """
    Configure the root logger for a command run.

    Console output goes through print(); logging is only used for
    request tracing, which is silent unless --verbose is given.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if not verbose:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
