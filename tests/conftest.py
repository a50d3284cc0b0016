"""Shared fixtures: realistic pactl output and a fake audio server."""

from typing import Dict, List, Optional

import pytest

from audio_setup.audio import (
    CommandRunner,
    ConfigurationManager,
    NonZeroExitError,
    RawOutput,
)

DEFAULT_VOLUME = (
    "front-left: 32768 /  50% / -18.06 dB,   front-right: 32768 /  50% / -18.06 dB"
)


def device_block(
    header: str,
    index: int,
    name: Optional[str],
    description: Optional[str] = "",
    volume: Optional[str] = DEFAULT_VOLUME,
    mute: Optional[str] = "no",
    state: Optional[str] = "RUNNING",
) -> str:
    """One `pactl list` block. Passing None for a field leaves it out."""
    lines = [f"{header} #{index}"]
    if state is not None:
        lines.append(f"\tState: {state}")
    if name is not None:
        lines.append(f"\tName: {name}")
    if description is not None:
        lines.append(f"\tDescription: {description}")
    lines += [
        "\tDriver: PipeWire",
        "\tSample Specification: s32le 2ch 48000Hz",
        "\tChannel Map: front-left,front-right",
        "\tOwner Module: 4294967295",
    ]
    if mute is not None:
        lines.append(f"\tMute: {mute}")
    if volume is not None:
        lines += [f"\tVolume: {volume}", "\t        balance 0.00"]
    lines += [
        "\tBase Volume: 65536 / 100% / 0.00 dB",
        "\tLatency: 0 usec, configured 0 usec",
        "\tFlags: HARDWARE HW_MUTE_CTRL HW_VOLUME_CTRL DECIBEL_VOLUME LATENCY",
        "\tProperties:",
        f'\t\tdevice.description = "{description}"',
        "\t\tMute: yes",
        f'\t\tmedia.class = "Audio/{header}"',
        "\tPorts:",
        "\t\tanalog-output: Analog Output (type: Line, priority: 9900, availability unknown)",
        "\tActive Port: analog-output",
        "\tFormats:",
        "\t\tpcm",
    ]
    return "\n".join(lines)


def list_output(header: str, devices: List[Dict]) -> str:
    blocks = [
        device_block(header, 40 + i, **device) for i, device in enumerate(devices)
    ]
    return "\n\n".join(blocks) + "\n"


def info_output(
    default_sink: Optional[str],
    default_source: Optional[str],
    server_name: str = "PulseAudio (on PipeWire 1.0.5)",
) -> str:
    lines = [
        "Server String: /run/user/1000/pulse/native",
        "Library Protocol Version: 35",
        "Server Protocol Version: 35",
        "Is Local: yes",
        "Client Index: 212",
        "Tile Size: 65472",
        "User Name: alice",
        "Host Name: desktop",
        f"Server Name: {server_name}",
        "Server Version: 15.0.0",
        "Default Sample Specification: float32le 2ch 48000Hz",
        "Default Channel Map: front-left,front-right",
    ]
    if default_sink is not None:
        lines.append(f"Default Sink: {default_sink}")
    if default_source is not None:
        lines.append(f"Default Source: {default_source}")
    lines.append("Cookie: 0e1c:4b12")
    return "\n".join(lines) + "\n"


def raw(text: str) -> RawOutput:
    return RawOutput(stdout=text.encode("utf-8"), stderr=b"", exit_code=0)


class FakePactl(CommandRunner):
    """Stateful stand-in for the pactl runner.

    ``set_effects`` scripts what each successive set-default call does:
    "apply" changes the default, "ignore" exits 0 without changing anything,
    any other string makes that device the default instead, and an exception
    instance is raised. ``scripted`` does the same per subcommand for reads:
    None runs normally, an exception is raised.
    """

    def __init__(
        self,
        sinks: List[Dict],
        sources: List[Dict],
        default_sink: Optional[str],
        default_source: Optional[str],
    ):
        super().__init__(timeout=1.0, env={})
        self.sinks = sinks
        self.sources = sources
        self.defaults = {"sink": default_sink, "source": default_source}
        self.calls: List[List[str]] = []
        self.set_effects: List = []
        self.scripted: Dict[str, List] = {}
        self.installed = True
        self.server_name = "PulseAudio (on PipeWire 1.0.5)"

    @property
    def mutations(self) -> List[List[str]]:
        return [call for call in self.calls if call[0].startswith("set-default-")]

    def which(self, executable: str) -> Optional[str]:
        return f"/usr/bin/{executable}" if self.installed else None

    def run(self, executable, args):
        args = list(args)
        self.calls.append(args)
        command = args[0]

        pending = self.scripted.get(command)
        if pending:
            outcome = pending.pop(0)
            if outcome is not None:
                raise outcome

        if command == "info":
            return raw(
                info_output(
                    self.defaults["sink"], self.defaults["source"], self.server_name
                )
            )
        if command == "list" and args[1] == "sinks":
            return raw(list_output("Sink", self.sinks))
        if command == "list" and args[1] == "sources":
            return raw(list_output("Source", self.sources))
        if command.startswith("set-default-"):
            return self._set_default(command[len("set-default-") :], args[1])
        raise NonZeroExitError(1, f"No such command: {command}")

    def _set_default(self, role: str, device_id: str) -> RawOutput:
        effect = self.set_effects.pop(0) if self.set_effects else "apply"
        if isinstance(effect, Exception):
            raise effect
        if effect == "apply":
            self.defaults[role] = device_id
        elif effect != "ignore":
            self.defaults[role] = effect
        return raw("")


@pytest.fixture
def make_block():
    return device_block


@pytest.fixture
def make_list_output():
    return list_output


@pytest.fixture
def make_info_output():
    return info_output


@pytest.fixture
def make_raw():
    return raw


@pytest.fixture
def sinks() -> List[Dict]:
    return [
        {"name": "dev-A", "description": "Built-in Audio Analog Stereo"},
        {"name": "dev-B", "description": "USB Audio (Speakers, Front)", "mute": "yes"},
        {"name": "dev-C", "description": "HDMI / DisplayPort 1", "state": "SUSPENDED"},
        {"name": "dev-D", "description": "Bluetooth Headset"},
    ]


@pytest.fixture
def sources() -> List[Dict]:
    return [
        {"name": "dev-A.monitor", "description": "Monitor of Built-in Audio"},
        {"name": "alsa_input.usb-Vendor_Product-00.mono-fallback", "description": "USB Mic"},
    ]


@pytest.fixture
def fake_pactl(sinks, sources) -> FakePactl:
    return FakePactl(
        sinks, sources, "dev-A", "alsa_input.usb-Vendor_Product-00.mono-fallback"
    )


@pytest.fixture
def manager(fake_pactl) -> ConfigurationManager:
    return ConfigurationManager(fake_pactl, executable="pactl")
