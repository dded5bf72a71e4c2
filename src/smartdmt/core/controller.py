"""Reactive controller for the dashboard.

The controller owns the application state and is driven by one event at a
time. Each call to :meth:`Controller.handle` mutates the state, commands the
list and viewport widgets, and returns the follow-up tasks the runtime has to
schedule. Task results come back later as events of their own.

Diagnostic fetches are never cancelled. A result is applied only when its
``(device path, mode)`` still matches the current selection and mode, and is
dropped otherwise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, Union

from smartdmt.models import Device, DiagnosticReport, ReportMode

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "ctrl+c"})
RELOAD_KEYS = frozenset({"r", "R"})
TOGGLE_KEYS = frozenset({"t", "T"})

DEFAULT_REFRESH_INTERVAL = 60.0


# Events


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class DevicesLoaded:
    devices: tuple[Device, ...]


@dataclass(frozen=True)
class ReportLoaded:
    report: DiagnosticReport


@dataclass(frozen=True)
class WidgetInput:
    """The device list changed its selection or filter on its own."""


Event = Union[Resized, Tick, KeyPressed, DevicesLoaded, ReportLoaded, WidgetInput]


# Tasks


@dataclass(frozen=True)
class LoadDevices:
    pass


@dataclass(frozen=True)
class LoadReport:
    path: str
    mode: ReportMode


@dataclass(frozen=True)
class ScheduleTick:
    delay: float


@dataclass(frozen=True)
class Quit:
    pass


Task = Union[LoadDevices, LoadReport, ScheduleTick, Quit]


# Widgets


class DeviceListView(Protocol):
    @property
    def selected(self) -> Device | None: ...

    @property
    def filtering(self) -> bool: ...

    def set_devices(self, devices: Sequence[Device]) -> None: ...

    def select_path(self, path: str) -> bool: ...


class ReportViewport(Protocol):
    @property
    def y_offset(self) -> int: ...

    @y_offset.setter
    def y_offset(self, value: int) -> None: ...

    def set_content(self, text: str) -> None: ...

    def goto_top(self) -> None: ...


@dataclass
class ControllerState:
    mode: ReportMode = ReportMode.TABLE
    displayed_path: str = ""
    pending_path: str = ""
    pending_mode: ReportMode | None = None
    report_text: str = ""
    report_failed: bool = False
    report_returncode: int | None = None
    last_refresh: datetime | None = None
    ready: bool = False
    width: int = 0
    height: int = 0
    in_flight: set[tuple[str, ReportMode]] = field(default_factory=set)


class Controller:
    def __init__(
        self,
        device_list: DeviceListView,
        viewport: ReportViewport,
        *,
        mode: ReportMode = ReportMode.TABLE,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.device_list = device_list
        self.viewport = viewport
        self.refresh_interval = refresh_interval
        self.state = ControllerState(mode=mode)
        self._clock = clock
        self._selected_path = ""

    @property
    def selected(self) -> Device | None:
        return self.device_list.selected

    @property
    def loading(self) -> bool:
        """A fetch is pending for something other than what is displayed."""
        return bool(self.state.pending_path) and (
            self.state.pending_path != self.state.displayed_path
        )

    def start(self) -> list[Task]:
        return [LoadDevices(), ScheduleTick(self.refresh_interval)]

    def handle(self, event: Event) -> list[Task]:
        tasks: list[Task] = []
        reload = False

        if isinstance(event, Resized):
            reload = self._on_resized(event)
        elif isinstance(event, Tick):
            tasks.append(ScheduleTick(self.refresh_interval))
            tasks.append(LoadDevices())
            reload = True
        elif isinstance(event, KeyPressed):
            if event.key in QUIT_KEYS:
                return [Quit()]
            if event.key in RELOAD_KEYS:
                reload = True
            elif event.key in TOGGLE_KEYS:
                self._toggle_mode()
                reload = True
        elif isinstance(event, DevicesLoaded):
            reload = self._on_devices_loaded(event.devices)
        elif isinstance(event, ReportLoaded):
            self._on_report_loaded(event.report)

        selected = self.device_list.selected
        if selected is not None:
            if (
                selected.path != self._selected_path
                and selected.path != self.state.pending_path
            ):
                reload = True
            self._selected_path = selected.path
        else:
            self._selected_path = ""
            if self.state.displayed_path or self.state.report_text:
                self._clear_report()

        if reload:
            tasks.extend(self._request_report(selected))
        return tasks

    def _on_resized(self, event: Resized) -> bool:
        self.state.width = event.width
        self.state.height = event.height
        if self.state.ready:
            return False
        self.state.ready = True
        return True

    def _toggle_mode(self) -> None:
        self.state.mode = self.state.mode.toggled()
        # next matching report is a fresh view, not a reload
        self.state.displayed_path = ""
        logger.debug("Report mode is now %s", self.state.mode.value)

    def _on_devices_loaded(self, devices: Sequence[Device]) -> bool:
        if self.device_list.filtering:
            logger.debug("Filter active, ignoring device list refresh")
            return False

        previous = self.device_list.selected
        self.device_list.set_devices(devices)
        if previous is not None and previous.path:
            self.device_list.select_path(previous.path)

        return bool(devices) and not (
            self.state.displayed_path or self.state.pending_path
        )

    def _on_report_loaded(self, report: DiagnosticReport) -> None:
        key = (report.device_path, report.mode)
        self.state.in_flight.discard(key)
        if key == (self.state.pending_path, self.state.pending_mode):
            self.state.pending_path = ""
            self.state.pending_mode = None

        selected = self.device_list.selected
        if (
            selected is None
            or selected.path != report.device_path
            or report.mode != self.state.mode
        ):
            logger.debug(
                "Discarding stale %s report for %s",
                report.mode.value,
                report.device_path,
            )
            return

        is_reload = self.state.displayed_path == report.device_path
        saved_offset = self.viewport.y_offset

        self.state.report_text = report.text
        self.state.report_failed = report.failed
        self.state.report_returncode = report.returncode
        self.state.displayed_path = report.device_path

        self.viewport.set_content(report.text)
        if is_reload:
            self.viewport.y_offset = saved_offset
        else:
            self.viewport.goto_top()

        self.state.last_refresh = self._clock()

    def _clear_report(self) -> None:
        self.state.displayed_path = ""
        self.state.report_text = ""
        self.state.report_failed = False
        self.state.report_returncode = None
        self.viewport.set_content("")

    def _request_report(self, device: Device | None) -> list[Task]:
        if not self.state.ready or device is None or not device.path:
            return []

        key = (device.path, self.state.mode)
        self.state.pending_path = device.path
        self.state.pending_mode = self.state.mode
        if key in self.state.in_flight:
            logger.debug(
                "Fetch for %s (%s) already in flight", device.path, key[1].value
            )
            return []

        self.state.in_flight.add(key)
        logger.debug("Fetching %s report for %s", self.state.mode.value, device.path)
        return [LoadReport(path=device.path, mode=self.state.mode)]
