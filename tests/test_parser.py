"""Tests for the pactl output parsers."""

import pytest

from audio_setup.audio import DeviceRole, MissingFieldError, UnparseableFieldError
from audio_setup.audio.parser import (
    extract_field,
    field_lines,
    indent_of,
    leading_int,
    parse_current_configuration,
    parse_device_list,
    parse_server_info,
    parse_volume,
    split_blocks,
)


class TestHelpers:
    def test_indent_of_expands_tabs(self):
        assert indent_of("\tName: x") == 8
        assert indent_of("\t        balance 0.00") == 16
        assert indent_of("    Name: x") == 4
        assert indent_of("Sink #1") == 0

    def test_extract_field_matches_label_at_line_start(self):
        lines = ["Base Volume: 65536 / 100% / 0.00 dB", "Volume: 30% (-31.37 dB)"]
        assert extract_field(lines, "Volume") == "30% (-31.37 dB)"
        assert extract_field(lines, "Mute") is None

    def test_leading_int(self):
        assert leading_int("  42% (-7 dB)") == 42
        assert leading_int("100") == 100
        assert leading_int("front-left: 1") is None
        assert leading_int("") is None

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("front-left: 32768 /  50% / -18.06 dB,   front-right: 32768 /  50% / -18.06 dB", 50),
            ("mono: 65536 / 100% / 0.00 dB", 100),
            ("75% (-7.50 dB)", 75),
            ("  60  ", 60),
            ("front-left: 98304 / 150% / 10.57 dB", 100),
        ],
    )
    def test_parse_volume(self, value, expected):
        assert parse_volume(value) == expected

    def test_parse_volume_without_number(self):
        with pytest.raises(UnparseableFieldError) as exc_info:
            parse_volume("front-left: loud")
        assert exc_info.value.field == "Volume"

    def test_field_lines_skip_nested_sections(self, make_block):
        header, body = split_blocks(make_block("Sink", 1, "dev").splitlines(), "Sink")[0]
        fields = field_lines(body)
        assert header == "Sink #1"
        assert "Name: dev" in fields
        assert "balance 0.00" not in fields
        assert not any(line.startswith("device.description") for line in fields)

    def test_split_blocks_stops_at_foreign_header(self, make_block):
        text = make_block("Sink", 1, "dev") + "\nSource #2\n\tName: mic\n"
        blocks = split_blocks(text.splitlines(), "Sink")
        assert len(blocks) == 1
        assert not any("mic" in line for line in blocks[0][1])


class TestParseDeviceList:
    def test_one_device_per_block_in_source_order(self, make_raw, make_list_output, sinks):
        raw = make_raw(make_list_output("Sink", sinks))

        devices = parse_device_list(raw, DeviceRole.SINK, "dev-B")

        assert [d.id for d in devices] == ["dev-A", "dev-B", "dev-C", "dev-D"]
        assert [d.index for d in devices] == [40, 41, 42, 43]
        assert devices[1].display_name == "USB Audio (Speakers, Front)"
        assert devices[1].muted is True
        assert devices[0].muted is False
        assert devices[0].volume_percent == 50
        assert devices[2].state == "SUSPENDED"
        assert [d.is_default for d in devices] == [False, True, False, False]
        assert all(d.role is DeviceRole.SINK for d in devices)

    def test_parsing_is_idempotent(self, make_raw, make_list_output, sinks):
        raw = make_raw(make_list_output("Sink", sinks))
        assert parse_device_list(raw, DeviceRole.SINK, "dev-A") == parse_device_list(
            raw, DeviceRole.SINK, "dev-A"
        )

    def test_nested_mute_does_not_override_block_field(self, make_raw, make_block):
        # The fixture block carries "Mute: yes" inside Properties
        raw = make_raw(make_block("Sink", 3, "dev", mute="no"))
        assert parse_device_list(raw, DeviceRole.SINK)[0].muted is False

    def test_missing_description_defaults_to_empty(self, make_raw, make_block):
        raw = make_raw(make_block("Sink", 3, "dev", description=None, state=None))
        device = parse_device_list(raw, DeviceRole.SINK)[0]
        assert device.display_name == ""
        assert device.state == ""

    @pytest.mark.parametrize("missing", ["name", "mute", "volume"])
    def test_missing_required_field(self, make_raw, make_block, missing):
        raw = make_raw(make_block("Sink", 3, **{"name": "dev", missing: None}))
        with pytest.raises(MissingFieldError) as exc_info:
            parse_device_list(raw, DeviceRole.SINK)
        assert exc_info.value.field == missing.capitalize()

    def test_unknown_mute_value(self, make_raw, make_block):
        raw = make_raw(make_block("Sink", 3, "dev", mute="maybe"))
        with pytest.raises(UnparseableFieldError):
            parse_device_list(raw, DeviceRole.SINK)

    def test_bad_header_index(self, make_raw):
        raw = make_raw("Sink #abc\n\tName: dev\n\tMute: no\n\tVolume: 10%\n")
        with pytest.raises(UnparseableFieldError):
            parse_device_list(raw, DeviceRole.SINK)

    def test_volume_above_100_is_clamped(self, make_raw, make_block):
        raw = make_raw(
            make_block("Sink", 3, "dev", volume="front-left: 98304 / 150% / 10.57 dB")
        )
        assert parse_device_list(raw, DeviceRole.SINK)[0].volume_percent == 100

    def test_space_indented_output(self, make_raw):
        text = (
            "Source #7\n"
            "    Name: mic\n"
            "    Description: Mic: front\n"
            "    Mute: yes\n"
            "    Volume: mono: 19661 /  30% / -31.37 dB\n"
            "            balance 0.00\n"
        )
        device = parse_device_list(make_raw(text), DeviceRole.SOURCE, "mic")[0]
        assert device.display_name == "Mic: front"
        assert device.volume_percent == 30
        assert device.is_default is True

    def test_only_first_duplicate_is_default(self, make_raw, make_list_output):
        raw = make_raw(make_list_output("Sink", [{"name": "dup"}, {"name": "dup"}]))
        devices = parse_device_list(raw, DeviceRole.SINK, "dup")
        assert [d.is_default for d in devices] == [True, False]

    def test_no_devices(self, make_raw):
        assert parse_device_list(make_raw(""), DeviceRole.SINK) == []

    def test_monitor_sources(self, make_raw, make_list_output, sources):
        devices = parse_device_list(
            make_raw(make_list_output("Source", sources)), DeviceRole.SOURCE
        )
        assert [d.is_monitor for d in devices] == [True, False]


class TestParseInfo:
    def test_current_configuration(self, make_raw, make_info_output):
        configuration = parse_current_configuration(
            make_raw(make_info_output("dev-A", "mic"))
        )
        assert configuration.default_sink == "dev-A"
        assert configuration.default_source == "mic"
        assert configuration.default_for(DeviceRole.SOURCE) == "mic"

    @pytest.mark.parametrize(
        "sink, source, expected",
        [
            (None, "mic", ("", "mic")),
            ("dev-A", None, ("dev-A", "")),
            ("(null)", "mic", ("", "mic")),
            ("dev-A", "(null)", ("dev-A", "")),
        ],
    )
    def test_unset_default_is_empty(
        self, make_raw, make_info_output, sink, source, expected
    ):
        configuration = parse_current_configuration(
            make_raw(make_info_output(sink, source))
        )
        assert (configuration.default_sink, configuration.default_source) == expected

    def test_no_default_labels(self, make_raw, make_info_output):
        with pytest.raises(MissingFieldError):
            parse_current_configuration(make_raw(make_info_output(None, None)))

    def test_server_info(self, make_raw, make_info_output):
        info = parse_server_info(make_raw(make_info_output("dev-A", "mic")))
        assert info.server_name == "PulseAudio (on PipeWire 1.0.5)"
        assert info.server_version == "15.0.0"
        assert info.backend == "PipeWire"

    def test_server_info_pulseaudio(self, make_raw, make_info_output):
        info = parse_server_info(
            make_raw(make_info_output("dev-A", "mic", server_name="pulseaudio"))
        )
        assert info.backend == "PulseAudio"

    def test_server_info_missing_name(self, make_raw):
        with pytest.raises(MissingFieldError):
            parse_server_info(make_raw("Default Sink: x\n"))
