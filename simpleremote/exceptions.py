"""Exception types raised by SimpleRemote components."""


class SimpleRemoteError(Exception):
    """Base class for SimpleRemote errors."""


class DeviceInfoError(SimpleRemoteError):
    """Device answered the device-info query with an unusable body."""

    def __init__(self, message: str, location: str = "") -> None:
        super().__init__(message)
        self.location = location
