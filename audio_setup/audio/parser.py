"""
Parsers for `pactl` text output.

`pactl list sinks` prints one block per device. A block starts with an
unindented header such as ``Sink #52``; its fields are the lines at the first
indentation level below the header, written as ``Label: value``. Deeper lines
belong to nested sections (``Properties:``, ``Ports:``) or continue the
previous field, and are never read as fields of the block::

    Sink #52
            State: SUSPENDED
            Name: alsa_output.pci-0000_00_1f.3.analog-stereo
            Description: Built-in Audio Analog Stereo
            Mute: no
            Volume: front-left: 32768 /  50% / -18.06 dB,   front-right: ...
                    balance 0.00
            Base Volume: 65536 / 100% / 0.00 dB
            Properties:
                    device.description = "Built-in Audio"

`pactl info` prints unindented ``Label: value`` lines.

Every function here is pure: the same input always gives the same result.
"""

from typing import List, Optional, Sequence, Tuple

from .device import AudioDevice, DeviceConfiguration, DeviceRole, ServerInfo
from .errors import MissingFieldError, UnparseableFieldError
from .runner import RawOutput

TAB_SIZE = 8
MAX_VOLUME_PERCENT = 100

# pactl prints this when no default is configured
UNSET_VALUES = {"", "(null)"}


def _lines(raw: RawOutput) -> List[str]:
    return raw.text.splitlines()


def indent_of(line: str) -> int:
    """Width of the leading whitespace, tabs expanded"""
    expanded = line.expandtabs(TAB_SIZE)
    return len(expanded) - len(expanded.lstrip())


def split_blocks(lines: Sequence[str], header: str) -> List[Tuple[str, List[str]]]:
    """Group lines into (header line, body lines) pairs.

    Any unindented line that is not a header for ``header`` closes the
    current block.
    """
    blocks: List[Tuple[str, List[str]]] = []
    current: Optional[Tuple[str, List[str]]] = None
    prefix = f"{header} #"

    for line in lines:
        if not line.strip():
            continue
        if indent_of(line) == 0:
            current = None
            if line.startswith(prefix):
                current = (line.strip(), [])
                blocks.append(current)
            continue
        if current is not None:
            current[1].append(line)

    return blocks


def field_lines(body: Sequence[str]) -> List[str]:
    """Stripped lines at the block's own field depth"""
    if not body:
        return []
    depth = indent_of(body[0])
    return [line.strip() for line in body if indent_of(line) == depth]


def extract_field(lines: Sequence[str], label: str) -> Optional[str]:
    """Remainder of the first line starting with ``label:``, None if absent"""
    prefix = f"{label}:"
    for line in lines:
        if line.startswith(prefix):
            return line[len(prefix) :].strip()
    return None


def require_field(lines: Sequence[str], label: str) -> str:
    value = extract_field(lines, label)
    if value is None:
        raise MissingFieldError(label)
    return value


def leading_int(text: str) -> Optional[int]:
    """Integer formed by the leading run of digits, None if there is none"""
    text = text.lstrip()
    end = 0
    while end < len(text) and text[end].isdigit():
        end += 1
    if end == 0:
        return None
    return int(text[:end])


def parse_volume(value: str) -> int:
    """First percentage in a Volume field, clamped to 0-100.

    Handles both ``front-left: 65536 /  50% / -18.06 dB, ...`` and plain
    ``75% (-7.50 dB)`` forms.
    """
    percent = None
    for token in value.split():
        token = token.rstrip(",")
        if token.endswith("%"):
            percent = leading_int(token)
            if percent is not None:
                break

    if percent is None:
        percent = leading_int(value)
    if percent is None:
        raise UnparseableFieldError("Volume")

    return min(percent, MAX_VOLUME_PERCENT)


def parse_mute(value: str) -> bool:
    if value == "yes":
        return True
    if value == "no":
        return False
    raise UnparseableFieldError("Mute")


def parse_index(header_line: str, header: str) -> int:
    index = header_line[len(header) + 2 :].strip()
    if not index.isdigit():
        raise UnparseableFieldError(f"{header} #")
    return int(index)


def parse_device_block(
    header_line: str, body: Sequence[str], role: DeviceRole, default_id: str
) -> AudioDevice:
    fields = field_lines(body)
    device_id = require_field(fields, "Name")
    if not device_id:
        raise MissingFieldError("Name")

    return AudioDevice(
        id=device_id,
        display_name=extract_field(fields, "Description") or "",
        volume_percent=parse_volume(require_field(fields, "Volume")),
        muted=parse_mute(require_field(fields, "Mute")),
        is_default=bool(default_id) and device_id == default_id,
        role=role,
        index=parse_index(header_line, role.header),
        state=extract_field(fields, "State") or "",
    )


def parse_device_list(
    raw: RawOutput, role: DeviceRole, default_id: str = ""
) -> List[AudioDevice]:
    """Devices in the order the server listed them.

    Only the first device whose id equals ``default_id`` is flagged default.
    """
    devices = []
    default_seen = False

    for header_line, body in split_blocks(_lines(raw), role.header):
        device = parse_device_block(
            header_line, body, role, "" if default_seen else default_id
        )
        default_seen = default_seen or device.is_default
        devices.append(device)

    return devices


def _top_level_fields(raw: RawOutput) -> List[str]:
    return [
        line.strip()
        for line in _lines(raw)
        if line.strip() and indent_of(line) == 0
    ]


def parse_current_configuration(raw: RawOutput) -> DeviceConfiguration:
    """Default sink and source named by `pactl info`.

    A role with no default configured is read as ``""``. Output naming
    neither default is not `pactl info` output and raises MissingFieldError.
    """
    fields = _top_level_fields(raw)

    values = {role: extract_field(fields, role.default_label) for role in DeviceRole}
    if all(value is None for value in values.values()):
        raise MissingFieldError(DeviceRole.SINK.default_label)

    defaults = {
        role: "" if value is None or value in UNSET_VALUES else value
        for role, value in values.items()
    }
    return DeviceConfiguration(
        default_sink=defaults[DeviceRole.SINK],
        default_source=defaults[DeviceRole.SOURCE],
    )


def parse_server_info(raw: RawOutput) -> ServerInfo:
    fields = _top_level_fields(raw)
    server_name = require_field(fields, "Server Name")
    if not server_name:
        raise MissingFieldError("Server Name")
    return ServerInfo(
        server_name=server_name,
        server_version=extract_field(fields, "Server Version") or "",
    )
