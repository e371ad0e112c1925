"""Domain-specific errors for samplemem."""


class SamplememError(Exception):
    """Base error for samplemem."""


class InvalidParameterError(SamplememError):
    """Raised when a scan parameter is malformed or out of range."""


class ConfigError(SamplememError):
    """Raised when the settings file cannot be read or fails validation."""


class DeviceError(SamplememError):
    """Base device error."""


class DeviceOpenError(DeviceError):
    """Raised when the block device or image cannot be opened."""


class AllocationError(DeviceError):
    """Raised when the block read buffer cannot be allocated."""


class ShortReadError(DeviceError):
    """Raised when a positioned read returns fewer bytes than one block."""

    def __init__(self, index: int, expected: int, received: int) -> None:
        super().__init__(f"Short read at block {index}: expected {expected} bytes, got {received}")
        self.index = index
        self.expected = expected
        self.received = received
