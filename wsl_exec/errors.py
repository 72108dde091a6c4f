from __future__ import annotations

from typing import Any, Dict, Optional

from wsl_exec.protocol import ErrorCode


class WslExecutionError(Exception):
    def __init__(self, message: str, code: int, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class CommandValidationError(WslExecutionError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INVALID_PARAMS, details)


class CommandTimeoutError(WslExecutionError):
    def __init__(self, timeout: int):
        super().__init__(f"Command timed out after {timeout}ms", ErrorCode.INTERNAL_ERROR, {"timeout": timeout})
        self.timeout = timeout


class InvalidConfirmationError(WslExecutionError):
    def __init__(self, confirmation_id: str):
        super().__init__(
            "Invalid or expired confirmation ID",
            ErrorCode.INVALID_REQUEST,
            {"confirmation_id": confirmation_id},
        )
        self.confirmation_id = confirmation_id


class ProcessSpawnError(WslExecutionError):
    """
    The shell could not be launched at all (missing executable, OS refusal).
    The original OSError is kept as __cause__ and on `.os_error`.
    """

    def __init__(self, os_error: OSError):
        message = str(os_error) or os_error.__class__.__name__
        super().__init__(message, ErrorCode.INTERNAL_ERROR, {"errno": getattr(os_error, "errno", None)})
        self.os_error = os_error
