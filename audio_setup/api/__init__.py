from .routes import router
from .models import ChangeResult, DefaultDeviceUpdate

__all__ = ["router", "ChangeResult", "DefaultDeviceUpdate"]
