"""
API routes for Audio Setup
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from typing import List, Optional

from ..audio import (
    AudioSetupError,
    CommandRunner,
    ConfigurationManager,
    DeviceRole,
    DiagnosticsReporter,
    Phase,
    ReportError,
    TargetNotFoundError,
    ValidationError,
)
from ..audio.manager import ConfigurationResult
from ..config import get_settings
from ..models import ConfigurationState, DeviceState, DiagnosticReport
from .models import ChangeResult, DefaultDeviceUpdate

router = APIRouter(prefix="/api/v1")
_audio_manager: Optional[ConfigurationManager] = None


def initialize_manager() -> ConfigurationManager:
    """Initialize the global manager instance from settings"""
    global _audio_manager

    if _audio_manager is None:
        settings = get_settings()
        runner = CommandRunner(
            timeout=settings.command_timeout,
            force_c_locale=settings.force_c_locale,
        )
        _audio_manager = ConfigurationManager(
            runner,
            executable=settings.pactl_path,
            max_device_id_length=settings.max_device_id_length,
        )
    return _audio_manager


def get_audio_manager() -> ConfigurationManager:
    """Get the ConfigurationManager instance"""
    if _audio_manager is None:
        return initialize_manager()
    return _audio_manager


def get_reporter(
    manager: ConfigurationManager = Depends(get_audio_manager),
) -> DiagnosticsReporter:
    return DiagnosticsReporter(manager)


def _status_code(result: ConfigurationResult) -> int:
    if result.state is Phase.COMMITTED:
        return 200
    if result.state is Phase.ROLLED_BACK:
        return 409
    if isinstance(result.cause, ValidationError):
        return 422
    if isinstance(result.cause, TargetNotFoundError):
        return 404
    return 502


@router.get("/devices")
def list_devices(
    role: Optional[DeviceRole] = None,
    manager: ConfigurationManager = Depends(get_audio_manager),
) -> List[DeviceState]:
    """List sinks and sources"""
    try:
        return [DeviceState.from_device(d) for d in manager.list_devices(role)]
    except AudioSetupError as e:
        logger.error(f"Error listing devices: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/configuration")
def get_configuration(
    manager: ConfigurationManager = Depends(get_audio_manager),
) -> ConfigurationState:
    """Get the current default sink and source"""
    try:
        return ConfigurationState.from_configuration(
            manager.get_current_configuration()
        )
    except AudioSetupError as e:
        logger.error(f"Error getting configuration: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.put("/configuration/default", response_model=ChangeResult)
def set_default_device(
    update: DefaultDeviceUpdate,
    manager: ConfigurationManager = Depends(get_audio_manager),
):
    """Set the default audio device for a role"""
    result = manager.set_default_device(update.device_id, update.role)
    body = ChangeResult(**result.to_dict())
    return JSONResponse(status_code=_status_code(result), content=body.model_dump())


@router.get("/diagnostics", response_model=DiagnosticReport)
def get_diagnostics(
    format: str = Query("json", pattern="^(json|text)$"),
    reporter: DiagnosticsReporter = Depends(get_reporter),
):
    """Generate the audio diagnostics report"""
    try:
        report = reporter.generate_report()
    except ReportError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if format == "text":
        return PlainTextResponse(report.render())
    return report
