"""
Diagnostics Reporter for Audio Setup
"""

from typing import List, Optional
from loguru import logger

from ..models import (
    ConfigurationState,
    DeviceState,
    DiagnosticCheck,
    DiagnosticReport,
    Severity,
)
from .device import AudioDevice, DeviceConfiguration, DeviceRole
from .errors import AudioSetupError, MissingFieldError, ReportError
from .manager import ConfigurationManager

# Lists devices without a second configuration read once that read has failed
NO_DEFAULTS = DeviceConfiguration(default_sink="", default_source="")


class DiagnosticsReporter:
    """Aggregates device and configuration reads into one report.

    A failing sub-check is recorded in the report instead of aborting it, so
    a report is produced even when the audio server is down.
    """

    def __init__(self, manager: ConfigurationManager):
        self.manager = manager

    def generate_report(self) -> DiagnosticReport:
        try:
            return self._generate()
        except Exception as e:
            logger.error(f"Error generating diagnostics report: {e}")
            raise ReportError(f"Failed to generate diagnostics report: {e}") from e

    def _generate(self) -> DiagnosticReport:
        report = DiagnosticReport(server_reachable=False)

        self._check_server(report)
        configuration = self._check_configuration(report)
        sinks = self._check_sinks(report, configuration)
        sources = self._check_sources(report, configuration)

        report.sinks = [DeviceState.from_device(d) for d in sinks]
        report.sources = [DeviceState.from_device(d) for d in sources]
        report.sink_count = len(sinks)
        report.source_count = len(sources)

        for check in report.failures:
            logger.warning(f"Diagnostics check {check.name} failed: {check.error}")
        logger.info(
            f"Diagnostics: {report.sink_count} sinks, {report.source_count} sources, "
            f"{'healthy' if report.healthy else 'unhealthy'}"
        )
        return report

    @staticmethod
    def _failed(
        name: str,
        error: AudioSetupError,
        severity: Severity = Severity.CRITICAL,
        message: Optional[str] = None,
        fix: Optional[str] = None,
    ) -> DiagnosticCheck:
        return DiagnosticCheck(
            name=name,
            severity=severity,
            message=message or str(error),
            fix=fix,
            error=str(error),
        )

    def _check_server(self, report: DiagnosticReport) -> None:
        executable = self.manager.executable
        if self.manager.runner.which(executable) is None:
            report.checks.append(
                DiagnosticCheck(
                    name="server",
                    severity=Severity.CRITICAL,
                    message=f"{executable} not found in PATH",
                    fix="Install pulseaudio-utils",
                )
            )
            return

        try:
            info = self.manager.get_server_info()
        except AudioSetupError as e:
            report.checks.append(
                self._failed(
                    "server",
                    e,
                    message="Audio server is not reachable",
                    fix="Start the audio server: systemctl --user start pipewire-pulse",
                )
            )
            return

        report.server_reachable = True
        report.server_name = info.server_name
        report.backend = info.backend
        report.checks.append(
            DiagnosticCheck(
                name="server",
                severity=Severity.SUCCESS,
                message=f"{info.backend} server is running ({info.server_name})",
            )
        )

    def _check_configuration(
        self, report: DiagnosticReport
    ) -> Optional[DeviceConfiguration]:
        try:
            configuration = self.manager.get_current_configuration()
        except MissingFieldError as e:
            report.checks.append(
                self._failed(
                    "configuration",
                    e,
                    severity=Severity.WARNING,
                    message="Audio server reported no default devices",
                    fix="Set a default audio device",
                )
            )
            return None
        except AudioSetupError as e:
            report.checks.append(self._failed("configuration", e))
            return None

        report.configuration = ConfigurationState.from_configuration(configuration)
        unset = [role for role in DeviceRole if not configuration.default_for(role)]
        for role in unset:
            report.checks.append(
                DiagnosticCheck(
                    name="configuration",
                    severity=Severity.WARNING,
                    message=f"No {role.default_label.lower()} set",
                    fix=f"pactl {role.set_default_command} <name>",
                )
            )
        if unset:
            return configuration

        report.checks.append(
            DiagnosticCheck(
                name="configuration",
                severity=Severity.SUCCESS,
                message=(
                    f"Default sink {configuration.default_sink}, "
                    f"default source {configuration.default_source}"
                ),
            )
        )
        return configuration

    def _check_sinks(
        self, report: DiagnosticReport, configuration: Optional[DeviceConfiguration]
    ) -> List[AudioDevice]:
        try:
            sinks = self.manager.list_devices(
                DeviceRole.SINK, configuration or NO_DEFAULTS
            )
        except AudioSetupError as e:
            report.checks.append(self._failed("sinks", e))
            return []

        if not sinks:
            report.checks.append(
                DiagnosticCheck(
                    name="sinks",
                    severity=Severity.CRITICAL,
                    message="No audio output devices found",
                    fix="Check hardware connections and drivers",
                )
            )
            return sinks

        report.checks.append(
            DiagnosticCheck(
                name="sinks",
                severity=Severity.SUCCESS,
                message=f"Found {len(sinks)} audio output device(s)",
            )
        )
        for sink in sinks:
            if sink.state == "SUSPENDED":
                report.checks.append(
                    DiagnosticCheck(
                        name="sinks",
                        severity=Severity.WARNING,
                        message=f"Audio sink {sink.id} is suspended",
                        fix=f"pactl suspend-sink {sink.index} 0",
                    )
                )

        if (
            configuration
            and configuration.default_sink
            and not any(sink.is_default for sink in sinks)
        ):
            report.checks.append(
                DiagnosticCheck(
                    name="sinks",
                    severity=Severity.WARNING,
                    message=f"Default sink {configuration.default_sink} is not listed",
                    fix="Set a default audio output device",
                )
            )
        return sinks

    def _check_sources(
        self, report: DiagnosticReport, configuration: Optional[DeviceConfiguration]
    ) -> List[AudioDevice]:
        try:
            sources = self.manager.list_devices(
                DeviceRole.SOURCE, configuration or NO_DEFAULTS
            )
        except AudioSetupError as e:
            report.checks.append(self._failed("sources", e, severity=Severity.WARNING))
            return []

        inputs = [source for source in sources if not source.is_monitor]
        if inputs:
            report.checks.append(
                DiagnosticCheck(
                    name="sources",
                    severity=Severity.SUCCESS,
                    message=f"Found {len(inputs)} audio input device(s)",
                )
            )
        else:
            report.checks.append(
                DiagnosticCheck(
                    name="sources",
                    severity=Severity.WARNING,
                    message="No audio input devices found",
                )
            )
        return sources
