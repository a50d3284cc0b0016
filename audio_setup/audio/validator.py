"""
Device id validation
"""

import string
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidReason, ValidationError

MAX_DEVICE_ID_LENGTH = 256

# Observed id grammar, e.g. alsa_output.usb-Vendor_Product-00.analog-stereo
ALLOWED_CHARACTERS = frozenset(string.ascii_letters + string.digits + ".-_")


@dataclass(frozen=True)
class ValidationResult:
    reason: Optional[InvalidReason] = None

    @property
    def valid(self) -> bool:
        return self.reason is None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(cls, reason: InvalidReason) -> "ValidationResult":
        return cls(reason=reason)

    def raise_for_invalid(self) -> None:
        if self.reason is not None:
            raise ValidationError(self.reason)


def validate_device_id(
    device_id: str, max_length: int = MAX_DEVICE_ID_LENGTH
) -> ValidationResult:
    """Check a caller supplied device id before it is used in a command"""
    if not device_id:
        return ValidationResult.invalid(InvalidReason.EMPTY)
    if len(device_id) > max_length:
        return ValidationResult.invalid(InvalidReason.TOO_LONG)
    if "\0" in device_id:
        return ValidationResult.invalid(InvalidReason.NULL_BYTE)
    if not device_id.isprintable():
        return ValidationResult.invalid(InvalidReason.CONTROL_CHARACTER)
    if ".." in device_id:
        return ValidationResult.invalid(InvalidReason.PATH_TRAVERSAL)
    if not ALLOWED_CHARACTERS.issuperset(device_id):
        return ValidationResult.invalid(InvalidReason.DISALLOWED_CHARACTER)
    return ValidationResult.ok()
