import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .exceptions import DeviceInfoError


@dataclass(frozen=True)
class RokuDevice:
    location: str
    friendly_device_name: str
    device_id: str


_OPTIONAL_FIELDS = {
    "serial-number": "serial_number",
    "model-name": "model_name",
    "user-device-name": "user_device_name",
    "vendor-name": "vendor_name",
    "software-version": "software_version",
    "power-mode": "power_mode",
}


@dataclass
class DeviceInfoResponse:
    """Parsed body of an ECP `query/device-info` reply."""

    friendly_device_name: str
    device_id: str
    serial_number: Optional[str] = None
    model_name: Optional[str] = None
    user_device_name: Optional[str] = None
    vendor_name: Optional[str] = None
    software_version: Optional[str] = None
    power_mode: Optional[str] = None
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_xml(cls, body: Union[str, bytes], location: str = "") -> "DeviceInfoResponse":
        """Parse the `<device-info>` document returned by the device."""
        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            raise DeviceInfoError(f"device-info body is not XML: {e}", location=location) from e
        if root.tag != "device-info":
            raise DeviceInfoError(f"unexpected root element <{root.tag}>", location=location)

        values: Dict[str, str] = {}
        for child in root:
            values[str(child.tag)] = str(child.text or "").strip()

        name = values.pop("friendly-device-name", "")
        device_id = values.pop("device-id", "")
        if not name:
            raise DeviceInfoError("device-info is missing friendly-device-name", location=location)
        if not device_id:
            raise DeviceInfoError("device-info is missing device-id", location=location)

        kwargs = {attr: (values.pop(tag) or None) for tag, attr in _OPTIONAL_FIELDS.items() if tag in values}
        return cls(friendly_device_name=name, device_id=device_id, extra=values, **kwargs)

    def to_device(self, location: str) -> RokuDevice:
        """Build a device record for the location that produced this reply."""
        return RokuDevice(location, self.friendly_device_name, self.device_id)
