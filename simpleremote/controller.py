from __future__ import annotations

import asyncio
import enum
from typing import Optional

import requests

from . import config
from . import view_state as vs
from .exceptions import DeviceInfoError
from .logging_config import log
from .models import DeviceInfoResponse, RokuDevice
from .prefs import PreferencesStore
from .roku_client import RokuApiClient
from .state import StateChannel


PREVIOUS_LOCATION_KEY = "PREVIOUS_DEVICE_LOCATION"
PREVIOUS_NAME_KEY = "PREVIOUS_DEVICE_NAME"


class SelectionSource(enum.Enum):
    USER = "user"
    RECONNECT = "reconnect"


class DeviceSessionController:
    """Tracks the current device and the persisted last-used device.

    State transitions are posted to `view_state`, a last-value channel.
    Reconnection runs as an asyncio task; the blocking device-info request
    runs in a worker thread and is bounded by `reconnect_timeout`.
    """

    def __init__(
        self,
        client: RokuApiClient,
        prefs: PreferencesStore,
        *,
        request_timeout: Optional[float] = None,
        reconnect_timeout: Optional[float] = None,
    ) -> None:
        self.client = client
        self.prefs = prefs
        self.request_timeout = _positive_timeout(request_timeout, config.DEVICE_INFO_TIMEOUT_S, "request_timeout")
        self.reconnect_timeout = _positive_timeout(
            reconnect_timeout, config.RECONNECT_TIMEOUT_S, "reconnect_timeout"
        )
        self.current_device: Optional[RokuDevice] = None
        self.view_state: StateChannel[vs.ViewState] = StateChannel()
        self._reconnect_task: Optional[asyncio.Task] = None
        # Bumped by every selection or forget; a reconnect that sees it move
        # while awaiting the device drops its result.
        self._selection_generation = 0
        self.view_state.post(vs.INITIALIZING)

    def start_reconnect(self) -> asyncio.Task:
        """Schedule `reconnect_last_device` on the running loop.

        While a reconnect is in flight, the same task is returned again.
        """
        task = self._reconnect_task
        if task is not None and not task.done():
            return task
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.reconnect_last_device())
        self._reconnect_task = task
        return task

    async def reconnect_last_device(self) -> vs.ViewState:
        """Try to reach the persisted device and return the final view state.

        If the user selects or forgets a device while the request is in
        flight, the reconnect result is dropped and the current state is
        returned unchanged.
        """
        self.view_state.post(vs.RECONNECTING_LAST_DEVICE)
        generation = self._selection_generation
        previous_location = self.prefs.get_string(PREVIOUS_LOCATION_KEY)
        previous_name = self.prefs.get_string(PREVIOUS_NAME_KEY)

        if previous_location is None and previous_name is None:
            log.debug("No previous device information in preferences.")
            self.view_state.post(vs.NO_DEVICE_SELECTED)
            return vs.NO_DEVICE_SELECTED

        if previous_location is None or previous_name is None:
            log.warning(
                f"Incomplete previous device record (location={previous_location!r}, "
                f"name={previous_name!r}); discarding it."
            )
            self._discard_record(previous_location, previous_name)
            self.view_state.post(vs.NO_DEVICE_SELECTED)
            return vs.NO_DEVICE_SELECTED

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(self.client.get_device_info, previous_location, self.request_timeout),
                timeout=self.reconnect_timeout,
            )
        except asyncio.TimeoutError:
            log.info(f"Device at {previous_location} did not answer within {self.reconnect_timeout}s.")
            return self._disconnected(generation, previous_location, previous_name)
        except (requests.RequestException, OSError) as e:
            log.info(f"Device did not respond to device-info query: {e}")
            return self._disconnected(generation, previous_location, previous_name)
        except DeviceInfoError as e:
            log.warning(f"Device at {previous_location} sent an unusable device-info reply: {e}")
            return self._disconnected(generation, previous_location, previous_name)

        if self._superseded(generation):
            return self._current_state()
        return self._finish_reconnect(previous_location, previous_name, response)

    def _superseded(self, generation: int) -> bool:
        """Return True when a selection happened since `generation` was read."""
        if self._selection_generation == generation:
            return False
        log.info("Device selection changed during reconnect; dropping reconnect result.")
        return True

    def _current_state(self) -> vs.ViewState:
        """Return the latest posted view state."""
        state = self.view_state.value
        return state if state is not None else vs.INITIALIZING

    def _finish_reconnect(self, location: str, name: str, response: DeviceInfoResponse) -> vs.ViewState:
        """Apply a device-info reply to the record read at reconnect start."""
        if response.friendly_device_name != name:
            log.info(
                f"Device at {location} is {response.friendly_device_name!r}, expected {name!r}; "
                "forgetting previous device."
            )
            self._discard_record(location, name)
            self.view_state.post(vs.DEVICE_MISMATCHED)
            return vs.DEVICE_MISMATCHED

        log.debug("Successfully reconnected to previous device.")
        self.view_state.post(vs.DEVICE_RECONNECTED)
        device = RokuDevice(location, name, response.device_id)
        self.select_device(device, SelectionSource.RECONNECT)
        return vs.DEVICE_RECONNECTED

    def _disconnected(self, generation: int, location: str, name: str) -> vs.ViewState:
        """Report an unreachable device and forget it."""
        if self._superseded(generation):
            return self._current_state()
        self.view_state.post(vs.DEVICE_DISCONNECTED)
        self._discard_record(location, name)
        return vs.DEVICE_DISCONNECTED

    def select_device(self, device: RokuDevice, source: SelectionSource = SelectionSource.USER) -> vs.ViewState:
        """Make `device` current; user selections also become the persisted device."""
        if not isinstance(source, SelectionSource):
            raise TypeError(f"source must be a SelectionSource, got {source!r}")
        self._selection_generation += 1
        self.current_device = device
        state = vs.device_selected(device)
        self.view_state.post(state)
        if source is SelectionSource.USER:
            with self.prefs.edit() as editor:
                editor.put_string(PREVIOUS_LOCATION_KEY, device.location)
                editor.put_string(PREVIOUS_NAME_KEY, device.friendly_device_name)
            log.info(f"Remembering device {device.friendly_device_name!r} at {device.location}")
        return state

    def select_from_user(self, device: RokuDevice) -> vs.ViewState:
        """Select a device picked by the user and remember it."""
        return self.select_device(device, SelectionSource.USER)

    def select_from_reconnect(self, device: RokuDevice) -> vs.ViewState:
        """Select a device found by reconnection without touching the record."""
        return self.select_device(device, SelectionSource.RECONNECT)

    def forget_device(self) -> vs.ViewState:
        """Drop the current device and the persisted record."""
        self._selection_generation += 1
        self.current_device = None
        self._clear_last_device()
        self.view_state.post(vs.NO_DEVICE_SELECTED)
        return vs.NO_DEVICE_SELECTED

    def last_device_record(self) -> tuple[Optional[str], Optional[str]]:
        """Return the persisted (location, name) pair."""
        return self.prefs.get_string(PREVIOUS_LOCATION_KEY), self.prefs.get_string(PREVIOUS_NAME_KEY)

    def _discard_record(self, location: Optional[str], name: Optional[str]) -> None:
        """Clear the record if it still holds (location, name); write errors are logged."""
        try:
            with self.prefs.edit() as editor:
                if self.last_device_record() != (location, name):
                    log.info("Previous device record changed during reconnect; keeping it.")
                    return
                editor.remove(PREVIOUS_NAME_KEY)
                editor.remove(PREVIOUS_LOCATION_KEY)
        except OSError:
            log.exception("Failed to clear previous device record")

    def _clear_last_device(self) -> None:
        """Remove both persisted keys in one write."""
        with self.prefs.edit() as editor:
            editor.remove(PREVIOUS_NAME_KEY)
            editor.remove(PREVIOUS_LOCATION_KEY)


def _positive_timeout(value: Optional[float], default: float, name: str) -> float:
    """Return `value` as a float, or `default` when None; non-positive values are rejected."""
    if value is None:
        return float(default)
    out = float(value)
    if out <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return out
