"""
Error taxonomy for Audio Setup
"""

from enum import Enum
from typing import Optional


class AudioSetupError(Exception):
    """Base class for every error raised by the audio subsystem"""


# Command Runner


class CommandError(AudioSetupError):
    """The control executable could not be run to completion"""


class CommandNotFoundError(CommandError):
    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(f"Executable not found: {executable}")


class NonZeroExitError(CommandError):
    def __init__(self, exit_code: int, stderr: str):
        self.exit_code = exit_code
        self.stderr = stderr
        detail = stderr.strip() or "no error output"
        super().__init__(f"Command exited with status {exit_code}: {detail}")


class CommandTimeoutError(CommandError):
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:g}s")


# Output Parser


class ParseError(AudioSetupError):
    """The control executable's output did not have the expected structure"""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class MissingFieldError(ParseError):
    def __init__(self, field: str):
        super().__init__(field, f"Missing field: {field}")


class UnparseableFieldError(ParseError):
    def __init__(self, field: str):
        super().__init__(field, f"Unparseable value for field: {field}")


# Device Validator


class InvalidReason(str, Enum):
    EMPTY = "empty"
    TOO_LONG = "too_long"
    NULL_BYTE = "null_byte"
    CONTROL_CHARACTER = "control_character"
    PATH_TRAVERSAL = "path_traversal"
    DISALLOWED_CHARACTER = "disallowed_character"


_REASON_MESSAGES = {
    InvalidReason.EMPTY: "Device id is empty",
    InvalidReason.TOO_LONG: "Device id exceeds the maximum length",
    InvalidReason.NULL_BYTE: "Device id contains a null byte",
    InvalidReason.CONTROL_CHARACTER: "Device id contains a control character",
    InvalidReason.PATH_TRAVERSAL: "Device id contains a path traversal pattern",
    InvalidReason.DISALLOWED_CHARACTER: "Device id contains a disallowed character",
}


class ValidationError(AudioSetupError):
    """A device id was rejected. The message never includes the rejected id."""

    def __init__(self, reason: InvalidReason):
        self.reason = reason
        super().__init__(_REASON_MESSAGES[reason])


# Configuration Manager


class ConfigurationError(AudioSetupError):
    """A configuration change could not be carried out as requested"""


class TargetNotFoundError(ConfigurationError):
    def __init__(self, device_id: str, role: str):
        # Only raised for ids that already passed validation
        self.device_id = device_id
        self.role = role
        super().__init__(f"No {role} named {device_id} is known to the audio server")


class ApplyFailedError(ConfigurationError):
    def __init__(self, cause: AudioSetupError):
        self.cause = cause
        super().__init__(f"Failed to apply default device: {cause}")


class VerifyFailedError(ConfigurationError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Default device is {actual or 'unset'} after applying {expected}"
        )


class RollbackFailedError(ConfigurationError):
    def __init__(
        self,
        original: ConfigurationError,
        rollback_cause: Optional[AudioSetupError] = None,
    ):
        self.original = original
        self.rollback_cause = rollback_cause
        message = f"Rollback failed after: {original}"
        if rollback_cause is not None:
            message += f" (rollback error: {rollback_cause})"
        super().__init__(message)


# Diagnostics Reporter


class ReportError(AudioSetupError):
    """The diagnostics report itself could not be assembled"""
