"""
Input sanitization for commands sent to the WSL shell.

This is a denylist, not a shell parser. It removes the characters used for
chaining and substitution and the common path-escape sequences. Known
false positives: ".." and "~" are removed everywhere, including inside
file names and quoted strings.
"""

from __future__ import annotations

import math
import re
import shlex
from typing import Any, Optional

from wsl_exec.errors import CommandValidationError

_METACHARS = re.compile(r"[;&|`$]")


def _strip_metachars(value: str) -> str:
    return _METACHARS.sub("", value).replace("\\", "/")


def sanitize_command(command: str) -> str:
    sanitized = _strip_metachars(str(command or ""))
    sanitized = sanitized.replace("..", "").replace("~", "").strip()
    if not sanitized:
        raise CommandValidationError("Invalid command: Empty after sanitization")
    return sanitized


def validate_working_dir(working_dir: Optional[str]) -> Optional[str]:
    if not working_dir:
        return None
    sanitized = _strip_metachars(str(working_dir)).strip()
    if not sanitized:
        raise CommandValidationError("Invalid working directory", {"working_dir": working_dir})
    return sanitized


def validate_timeout(timeout: Any) -> Optional[int]:
    """
    None and 0 both mean "no timeout". Anything that is not a finite,
    non-negative number is rejected.
    """
    if timeout is None:
        return None
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise CommandValidationError("Invalid timeout value", {"timeout": repr(timeout)})
    if not math.isfinite(timeout) or timeout < 0:
        raise CommandValidationError("Invalid timeout value", {"timeout": repr(timeout)})
    if timeout == 0:
        return None
    # Round up so a sub-millisecond bound still arms a timer.
    return math.ceil(timeout)


def quote_argument(value: str) -> str:
    """Strip metacharacters from a user-supplied argument and shell-quote it."""
    return shlex.quote(_strip_metachars(str(value)).strip())
