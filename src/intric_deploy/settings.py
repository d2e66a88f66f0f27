"""Resolution of command inputs from flags, environment and prompts."""

import os
import sys
from typing import Any, Optional

from intric_deploy.errors import ConfigError


def resolve(cli_value: Any = None, env_var: Optional[str] = None, default: Any = None) -> Any:
    """Return the flag value, else the environment value, else the default."""
    if cli_value:
        return cli_value
    if env_var:
        env_value = os.getenv(env_var)
        if env_value:
            return env_value
    return default


def require(value: Any, message: str) -> Any:
    if not value:
        raise ConfigError(message)
    return value


def prompt_if_missing(value: Optional[str], prompt: str) -> Optional[str]:
    """Ask for a value when it was not supplied.

    On a terminal the prompt is shown; piped input is read one line per
    call without a prompt. At end of input the value stays empty and the
    caller decides whether that is fatal.
    """
    if value:
        return value
    if sys.stdin is None:
        return value
    if sys.stdin.isatty():
        return input(f"{prompt}: ").strip()
    return sys.stdin.readline().strip() or value


def ensure_url(host: str) -> str:
    """Prefix a bare host name with https://."""
    host = host.strip().rstrip("/")
    if host.startswith("http://") or host.startswith("https://"):
        return host
    return f"https://{host}"
