"""
Audio Manager for Audio Setup
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple
from loguru import logger

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
    MissingFieldError,
    RollbackFailedError,
    TargetNotFoundError,
    ValidationError,
    VerifyFailedError,
)
from .parser import parse_current_configuration, parse_device_list, parse_server_info
from .runner import CommandRunner
from .validator import MAX_DEVICE_ID_LENGTH, validate_device_id


class Phase(str, Enum):
    IDLE = "idle"
    READING = "reading"
    VALIDATING = "validating"
    APPLYING = "applying"
    VERIFYING = "verifying"
    ROLLING_BACK = "rolling_back"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"


TERMINAL_PHASES = frozenset({Phase.COMMITTED, Phase.ROLLED_BACK, Phase.FAILED})

# ROLLING_BACK only leads to terminal phases, so a rollback runs at most once
TRANSITIONS: Dict[Phase, frozenset] = {
    Phase.IDLE: frozenset({Phase.READING}),
    Phase.READING: frozenset({Phase.VALIDATING, Phase.FAILED}),
    Phase.VALIDATING: frozenset({Phase.APPLYING, Phase.COMMITTED, Phase.FAILED}),
    Phase.APPLYING: frozenset({Phase.VERIFYING, Phase.FAILED}),
    Phase.VERIFYING: frozenset({Phase.COMMITTED, Phase.ROLLING_BACK, Phase.FAILED}),
    Phase.ROLLING_BACK: frozenset({Phase.ROLLED_BACK, Phase.FAILED}),
}


class InvalidTransitionError(RuntimeError):
    def __init__(self, current: Phase, target: Phase):
        super().__init__(f"Invalid transition {current.value} -> {target.value}")


@dataclass(frozen=True)
class ConfigurationResult:
    """Outcome of one default device change"""

    state: Phase
    request: ConfigurationChangeRequest
    previous: Optional[DeviceConfiguration] = None
    current: Optional[DeviceConfiguration] = None
    failed_phase: Optional[Phase] = None
    cause: Optional[AudioSetupError] = None
    history: Tuple[Phase, ...] = ()

    @property
    def committed(self) -> bool:
        return self.state is Phase.COMMITTED

    def to_dict(self) -> dict:
        rejected = isinstance(self.cause, ValidationError)
        return {
            "state": self.state.value,
            "device_id": None if rejected else self.request.device_id,
            "role": self.request.role.value,
            "previous": self.previous.to_dict() if self.previous else None,
            "current": self.current.to_dict() if self.current else None,
            "failed_phase": self.failed_phase.value if self.failed_phase else None,
            "cause": _describe_error(self.cause),
            "history": [phase.value for phase in self.history],
        }


def _describe_error(error: Optional[AudioSetupError]) -> Optional[dict]:
    if error is None:
        return None
    description = {"type": type(error).__name__, "message": str(error)}
    if isinstance(error, ValidationError):
        description["reason"] = error.reason.value
    return description


@dataclass
class _Operation:
    request: ConfigurationChangeRequest
    phase: Phase = Phase.IDLE
    history: List[Phase] = field(default_factory=list)
    previous: Optional[DeviceConfiguration] = None
    current: Optional[DeviceConfiguration] = None
    failed_phase: Optional[Phase] = None
    cause: Optional[AudioSetupError] = None

    def fail(self, cause: AudioSetupError) -> Phase:
        self.failed_phase = self.phase
        self.cause = cause
        return Phase.FAILED

    def result(self) -> ConfigurationResult:
        return ConfigurationResult(
            state=self.phase,
            request=self.request,
            previous=self.previous,
            current=self.current,
            failed_phase=self.failed_phase,
            cause=self.cause,
            history=tuple(self.history),
        )


class ConfigurationManager:
    """Reads and changes the default sink and source through `pactl`.

    Nothing is cached: every call re-reads the audio server, since another
    process may change the defaults at any time. A change is verified by
    reading the configuration back, and undone once if it did not stick.
    """

    def __init__(
        self,
        runner: CommandRunner,
        executable: str = "pactl",
        max_device_id_length: int = MAX_DEVICE_ID_LENGTH,
    ):
        self.runner = runner
        self.executable = executable
        self.max_device_id_length = max_device_id_length
        self._handlers: Dict[Phase, Callable[[_Operation], Phase]] = {
            Phase.READING: self._read,
            Phase.VALIDATING: self._validate,
            Phase.APPLYING: self._apply,
            Phase.VERIFYING: self._verify,
            Phase.ROLLING_BACK: self._roll_back,
        }

    # Reads

    def get_current_configuration(self) -> DeviceConfiguration:
        """Get the current default sink and source"""
        return parse_current_configuration(self.runner.run(self.executable, ["info"]))

    def get_server_info(self) -> ServerInfo:
        return parse_server_info(self.runner.run(self.executable, ["info"]))

    def list_devices(
        self,
        role: Optional[DeviceRole] = None,
        configuration: Optional[DeviceConfiguration] = None,
    ) -> List[AudioDevice]:
        """Get sinks and sources in server order, sinks first.

        Default flags come from ``configuration`` when given, otherwise from a
        fresh read. A role with no default configured has no device flagged.
        """
        if configuration is None:
            try:
                configuration = self.get_current_configuration()
            except MissingFieldError as e:
                logger.warning(f"Listing devices without default flags: {e}")

        roles = [role] if role is not None else list(DeviceRole)
        devices = []
        for current_role in roles:
            default_id = (
                configuration.default_for(current_role) if configuration else ""
            )
            raw = self.runner.run(self.executable, ["list", current_role.plural])
            found = parse_device_list(raw, current_role, default_id)
            logger.debug(f"Found {len(found)} {current_role.plural}")
            devices.extend(found)
        return devices

    # Mutation

    def set_default_device(
        self, device_id: str, role: DeviceRole
    ) -> ConfigurationResult:
        """Make ``device_id`` the default device for ``role``"""
        operation = _Operation(request=ConfigurationChangeRequest(device_id, role))
        self._transition(operation, Phase.READING)

        while operation.phase not in TERMINAL_PHASES:
            handler = self._handlers[operation.phase]
            self._transition(operation, handler(operation))

        result = operation.result()
        if result.state is Phase.FAILED:
            logger.error(
                f"Setting default {role.value} failed while "
                f"{result.failed_phase.value}: {result.cause}"
            )
        elif result.state is Phase.ROLLED_BACK:
            logger.warning(f"Default {role.value} change rolled back: {result.cause}")
        else:
            logger.info(f"Default {role.value} is now {device_id}")
        return result

    def _transition(self, operation: _Operation, target: Phase) -> None:
        if target not in TRANSITIONS.get(operation.phase, frozenset()):
            raise InvalidTransitionError(operation.phase, target)
        logger.debug(f"{operation.phase.value} -> {target.value}")
        operation.phase = target
        operation.history.append(target)

    def _read(self, operation: _Operation) -> Phase:
        role = operation.request.role
        try:
            operation.previous = self.get_current_configuration()
        except AudioSetupError as e:
            return operation.fail(e)

        # The snapshot default is the rollback target
        if not operation.previous.default_for(role):
            return operation.fail(MissingFieldError(role.default_label))
        return Phase.VALIDATING

    def _validate(self, operation: _Operation) -> Phase:
        request = operation.request
        try:
            validate_device_id(
                request.device_id, self.max_device_id_length
            ).raise_for_invalid()
        except ValidationError as e:
            logger.warning(f"Rejected device id: {e.reason.value}")
            return operation.fail(e)

        try:
            devices = self.list_devices(request.role, operation.previous)
        except AudioSetupError as e:
            return operation.fail(e)

        if request.device_id not in {device.id for device in devices}:
            return operation.fail(
                TargetNotFoundError(request.device_id, request.role.value)
            )

        if operation.previous.default_for(request.role) == request.device_id:
            logger.info(
                f"{request.device_id} is already the default {request.role.value}"
            )
            operation.current = operation.previous
            return Phase.COMMITTED

        return Phase.APPLYING

    def _apply(self, operation: _Operation) -> Phase:
        request = operation.request
        try:
            self._set_default(request.role, request.device_id)
        except AudioSetupError as e:
            return operation.fail(ApplyFailedError(e))
        return Phase.VERIFYING

    def _verify(self, operation: _Operation) -> Phase:
        request = operation.request
        try:
            operation.current = self.get_current_configuration()
        except AudioSetupError as e:
            return operation.fail(e)

        actual = operation.current.default_for(request.role)
        if actual == request.device_id:
            return Phase.COMMITTED

        operation.cause = VerifyFailedError(request.device_id, actual)
        logger.warning(f"{operation.cause}, restoring previous default")
        return Phase.ROLLING_BACK

    def _roll_back(self, operation: _Operation) -> Phase:
        role = operation.request.role
        original = operation.cause
        target = operation.previous.default_for(role)

        try:
            self._set_default(role, target)
            operation.current = self.get_current_configuration()
        except AudioSetupError as e:
            return operation.fail(RollbackFailedError(original, e))

        actual = operation.current.default_for(role)
        if actual != target:
            return operation.fail(
                RollbackFailedError(original, VerifyFailedError(target, actual))
            )
        return Phase.ROLLED_BACK

    def _set_default(self, role: DeviceRole, device_id: str) -> None:
        self.runner.run(self.executable, [role.set_default_command, device_id])
        logger.debug(f"Requested {device_id} as default {role.value}")
