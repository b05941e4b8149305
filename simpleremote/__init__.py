"""Device session control for ECP streaming players."""

from .controller import DeviceSessionController, SelectionSource
from .models import DeviceInfoResponse, RokuDevice
from .prefs import PreferencesStore
from .roku_client import RokuApiClient, normalize_location
from .view_state import ViewState

__all__ = [
    "DeviceInfoResponse",
    "DeviceSessionController",
    "PreferencesStore",
    "RokuApiClient",
    "RokuDevice",
    "SelectionSource",
    "ViewState",
    "normalize_location",
]
