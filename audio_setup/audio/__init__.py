from .device import (
    AudioDevice,
    ConfigurationChangeRequest,
    DeviceConfiguration,
    DeviceRole,
    ServerInfo,
)
from .errors import (
    ApplyFailedError,
    AudioSetupError,
    CommandError,
    CommandNotFoundError,
    CommandTimeoutError,
    ConfigurationError,
    InvalidReason,
    MissingFieldError,
    NonZeroExitError,
    ParseError,
    ReportError,
    RollbackFailedError,
    TargetNotFoundError,
    UnparseableFieldError,
    ValidationError,
    VerifyFailedError,
)
from .runner import CommandRunner, RawOutput
from .validator import ValidationResult, validate_device_id
from .manager import ConfigurationManager, ConfigurationResult, Phase
from .diagnostics import DiagnosticsReporter

__all__ = [
    "AudioDevice",
    "ConfigurationChangeRequest",
    "DeviceConfiguration",
    "DeviceRole",
    "ServerInfo",
    "ApplyFailedError",
    "AudioSetupError",
    "CommandError",
    "CommandNotFoundError",
    "CommandTimeoutError",
    "ConfigurationError",
    "InvalidReason",
    "MissingFieldError",
    "NonZeroExitError",
    "ParseError",
    "ReportError",
    "RollbackFailedError",
    "TargetNotFoundError",
    "UnparseableFieldError",
    "ValidationError",
    "VerifyFailedError",
    "CommandRunner",
    "RawOutput",
    "ValidationResult",
    "validate_device_id",
    "ConfigurationManager",
    "ConfigurationResult",
    "Phase",
    "DiagnosticsReporter",
]
