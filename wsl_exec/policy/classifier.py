from __future__ import annotations

import re
from typing import Optional, Tuple

# Order matters only for which token gets reported by match_dangerous().
DANGEROUS_COMMANDS: Tuple[str, ...] = (
    "rm",
    "rmdir",
    "dd",
    "mkfs",
    "mkswap",
    "fdisk",
    "shutdown",
    "reboot",
    ">",  # overwrite redirect
    ">>",  # append redirect
    "format",
    "chmod",
    "chown",
    "sudo",
    "su",
    "passwd",
    "mv",
    "find -delete",
    "truncate",
    "shred",
    "kill",
    "pkill",
    "service",
    "systemctl",
    "mount",
    "umount",
    "apt",
    "apt-get",
    "dpkg",
    "yum",
    "dnf",
    "pacman",
)

_WORD_PATTERNS = tuple(
    (token, re.compile(rf"\b{re.escape(token)}\b", re.IGNORECASE)) for token in DANGEROUS_COMMANDS
)


def match_dangerous(command: str) -> Optional[str]:
    """
    Return the first sensitive token found in `command`, or None.

    A token matches as a case-insensitive substring or as a standalone word.
    This deliberately over-reports: "rm" inside "alarm" still counts.
    """
    lowered = command.lower()
    for token, pattern in _WORD_PATTERNS:
        if token.lower() in lowered or pattern.search(command):
            return token
    return None


def is_dangerous(command: str) -> bool:
    return match_dangerous(command) is not None
