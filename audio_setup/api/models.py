from pydantic import BaseModel, Field
from typing import List, Optional

from ..audio.device import DeviceRole
from ..models import ConfigurationState


class DefaultDeviceUpdate(BaseModel):
    # No constraints here: the device validator reports rejections without
    # echoing the input back
    device_id: str = Field(..., description="Audio server name of the device")
    role: DeviceRole = Field(DeviceRole.SINK, description="sink or source")


class ErrorDescription(BaseModel):
    type: str
    message: str
    reason: Optional[str] = None


class ChangeResult(BaseModel):
    state: str
    device_id: Optional[str] = None
    role: str
    previous: Optional[ConfigurationState] = None
    current: Optional[ConfigurationState] = None
    failed_phase: Optional[str] = None
    cause: Optional[ErrorDescription] = None
    history: List[str] = []
