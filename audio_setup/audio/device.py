from dataclasses import dataclass
from enum import Enum


class DeviceRole(str, Enum):
    SINK = "sink"
    SOURCE = "source"

    @property
    def plural(self) -> str:
        """Noun used by `pactl list`"""
        return f"{self.value}s"

    @property
    def header(self) -> str:
        """Block header word in `pactl list` output"""
        return self.value.capitalize()

    @property
    def default_label(self) -> str:
        """Label of the default device line in `pactl info` output"""
        return f"Default {self.header}"

    @property
    def set_default_command(self) -> str:
        return f"set-default-{self.value}"


@dataclass(frozen=True)
class AudioDevice:
    """Represents a sink or source known to the audio server"""

    id: str
    display_name: str
    volume_percent: int
    muted: bool
    is_default: bool
    role: DeviceRole
    index: int
    state: str = ""

    @property
    def is_monitor(self) -> bool:
        """Monitor sources loop back a sink, they are not physical inputs"""
        return self.role is DeviceRole.SOURCE and self.id.endswith(".monitor")

    def to_dict(self) -> dict:
        """Convert device to dictionary for API responses"""
        return {
            "id": self.id,
            "display_name": self.display_name,
            "role": self.role.value,
            "index": self.index,
            "volume_percent": self.volume_percent,
            "muted": self.muted,
            "is_default": self.is_default,
            "state": self.state,
            "is_monitor": self.is_monitor,
        }


@dataclass(frozen=True)
class DeviceConfiguration:
    """Default sink and source at one point in time"""

    default_sink: str
    default_source: str

    def default_for(self, role: DeviceRole) -> str:
        if role is DeviceRole.SINK:
            return self.default_sink
        return self.default_source

    def to_dict(self) -> dict:
        return {
            "default_sink": self.default_sink,
            "default_source": self.default_source,
        }


@dataclass(frozen=True)
class ServerInfo:
    server_name: str
    server_version: str = ""

    @property
    def backend(self) -> str:
        """Which audio server answers the control executable"""
        name = self.server_name.lower()
        if "pipewire" in name:
            return "PipeWire"
        if "pulseaudio" in name:
            return "PulseAudio"
        return "Unknown"


@dataclass(frozen=True)
class ConfigurationChangeRequest:
    device_id: str
    role: DeviceRole
