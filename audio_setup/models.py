"""
Shared models for Audio Setup
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, computed_field

from .audio.device import AudioDevice, DeviceConfiguration


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class DeviceState(BaseModel):
    id: str
    display_name: str
    role: str
    index: int
    volume_percent: int
    muted: bool
    is_default: bool
    state: str = ""
    is_monitor: bool = False

    @classmethod
    def from_device(cls, device: AudioDevice) -> "DeviceState":
        return cls(**device.to_dict())


class ConfigurationState(BaseModel):
    default_sink: str
    default_source: str

    @classmethod
    def from_configuration(
        cls, configuration: DeviceConfiguration
    ) -> "ConfigurationState":
        return cls(**configuration.to_dict())


class DiagnosticCheck(BaseModel):
    name: str
    severity: Severity
    message: str
    fix: Optional[str] = None
    error: Optional[str] = None


class DiagnosticReport(BaseModel):
    server_reachable: bool
    server_name: Optional[str] = None
    backend: str = "Unknown"
    configuration: Optional[ConfigurationState] = None
    sinks: List[DeviceState] = []
    sources: List[DeviceState] = []
    sink_count: int = 0
    source_count: int = 0
    checks: List[DiagnosticCheck] = []

    @computed_field
    @property
    def healthy(self) -> bool:
        return not any(check.severity is Severity.CRITICAL for check in self.checks)

    @property
    def failures(self) -> List[DiagnosticCheck]:
        """Checks that could not be carried out"""
        return [check for check in self.checks if check.error is not None]

    def render(self) -> str:
        """Plain text form of the report"""
        lines = ["Audio diagnostics"]
        if self.server_reachable:
            lines.append(f"Server: {self.server_name} [{self.backend}]")
        else:
            lines.append("Server: unreachable")

        if self.configuration:
            lines.append(f"Default sink: {self.configuration.default_sink}")
            lines.append(f"Default source: {self.configuration.default_source}")

        for title, devices in (("Sinks", self.sinks), ("Sources", self.sources)):
            lines.append(f"{title} ({len(devices)}):")
            for device in devices:
                marker = "*" if device.is_default else "-"
                status = "muted" if device.muted else f"{device.volume_percent}%"
                name = device.display_name or device.id
                lines.append(f"  {marker} {name} ({device.id}) {status}")

        lines.append("Checks:")
        for check in self.checks:
            label = check.severity.value.upper()
            lines.append(f"  [{label}] {check.name}: {check.message}")
            if check.fix:
                lines.append(f"      fix: {check.fix}")

        lines.append("Status: " + ("healthy" if self.healthy else "unhealthy"))
        return "\n".join(lines)
