"""View states posted by the device session controller."""

from dataclasses import dataclass
from typing import Optional

from .models import RokuDevice


KIND_INITIALIZING = "initializing"
KIND_NO_DEVICE_SELECTED = "no_device_selected"
KIND_RECONNECTING_LAST_DEVICE = "reconnecting_last_device"
KIND_DEVICE_RECONNECTED = "device_reconnected"
KIND_DEVICE_DISCONNECTED = "device_disconnected"
KIND_DEVICE_MISMATCHED = "device_mismatched"
KIND_DEVICE_SELECTED = "device_selected"

ALL_KINDS = (
    KIND_INITIALIZING,
    KIND_NO_DEVICE_SELECTED,
    KIND_RECONNECTING_LAST_DEVICE,
    KIND_DEVICE_RECONNECTED,
    KIND_DEVICE_DISCONNECTED,
    KIND_DEVICE_MISMATCHED,
    KIND_DEVICE_SELECTED,
)


@dataclass(frozen=True)
class ViewState:
    kind: str
    device: Optional[RokuDevice] = None

    def __post_init__(self) -> None:
        if self.kind not in ALL_KINDS:
            raise ValueError(f"unknown view state: {self.kind!r}")
        if (self.kind == KIND_DEVICE_SELECTED) != (self.device is not None):
            raise ValueError("only device_selected carries a device")

    def __str__(self) -> str:
        if self.device is None:
            return self.kind
        return f"{self.kind}({self.device.friendly_device_name} @ {self.device.location})"


INITIALIZING = ViewState(KIND_INITIALIZING)
NO_DEVICE_SELECTED = ViewState(KIND_NO_DEVICE_SELECTED)
RECONNECTING_LAST_DEVICE = ViewState(KIND_RECONNECTING_LAST_DEVICE)
DEVICE_RECONNECTED = ViewState(KIND_DEVICE_RECONNECTED)
DEVICE_DISCONNECTED = ViewState(KIND_DEVICE_DISCONNECTED)
DEVICE_MISMATCHED = ViewState(KIND_DEVICE_MISMATCHED)


def device_selected(device: RokuDevice) -> ViewState:
    """Return the selected-device state for `device`."""
    return ViewState(KIND_DEVICE_SELECTED, device)
