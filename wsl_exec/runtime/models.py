from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CommandRequest:
    """One inbound "run this command" call, before validation."""

    raw_command: str
    working_dir: Optional[str] = None
    timeout_ms: Optional[Any] = None


@dataclass(frozen=True)
class PreparedCommand:
    """A CommandRequest after sanitization; `command` is never empty."""

    command: str
    working_dir: Optional[str] = None
    timeout_ms: Optional[int] = None


@dataclass
class ExecutionResult:
    stdout: str
    stderr: str
    exit_code: Optional[int]
    command: str
    working_dir: Optional[str] = None
    requires_confirmation: Optional[bool] = None
    confirmation_id: Optional[str] = None
    error: Optional[str] = None
