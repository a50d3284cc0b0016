"""
Audio Setup - default audio device configuration and diagnostics
"""

from .audio import ConfigurationManager, DiagnosticsReporter, DeviceRole
from .api import router
from .models import DeviceState, DiagnosticReport

__all__ = [
    "ConfigurationManager",
    "DiagnosticsReporter",
    "DeviceRole",
    "router",
    "DeviceState",
    "DiagnosticReport",
]
