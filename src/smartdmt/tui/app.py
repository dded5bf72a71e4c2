from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from functools import partial

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Static

from smartdmt import __version__
from smartdmt.config import Settings
from smartdmt.core.controller import (
    Controller,
    DevicesLoaded,
    Event,
    KeyPressed,
    LoadDevices,
    LoadReport,
    Quit,
    ReportLoaded,
    Resized,
    ScheduleTick,
    Task,
    Tick,
    WidgetInput,
)
from smartdmt.core.devices import list_devices
from smartdmt.core.diagnostics import fetch_report
from smartdmt.models import Device, DiagnosticReport, ReportMode
from smartdmt.utils.text import truncate

from .widgets import DeviceList, ReportView

logger = logging.getLogger(__name__)

DeviceSource = Callable[[], Awaitable[list[Device]]]
ReportSource = Callable[[str, ReportMode], Awaitable[DiagnosticReport]]

TITLE = "SMART Device Monitoring Terminal"
HELP = (
    " ↑/↓: navigate • /: filter • r: reload • t: toggle view"
    " • pgup/pgdn/mouse: scroll • q: quit"
)
MODEL_WIDTH = 40
SERIAL_WIDTH = 20


class DevicesReady(Message):
    def __init__(self, devices: tuple[Device, ...]) -> None:
        super().__init__()
        self.devices = devices


class ReportReady(Message):
    def __init__(self, report: DiagnosticReport) -> None:
        super().__init__()
        self.report = report


class SmartApp(App[int]):
    CSS = """
    Screen {
        layout: vertical;
    }
    #banner {
        height: 3;
        border: round $accent;
        color: magenta;
        text-style: bold;
    }
    #panels {
        height: 1fr;
    }
    DeviceList {
        width: 20%;
        border: round $accent;
        border-title-color: magenta;
        border-title-style: bold;
    }
    #device-filter {
        height: 3;
    }
    #device-options {
        height: 1fr;
        border: none;
    }
    #report-panel {
        width: 1fr;
        margin-left: 2;
        border: round $accent;
    }
    #report-title {
        height: auto;
        color: magenta;
        text-style: bold;
        margin-bottom: 1;
    }
    #report-loading {
        height: 1fr;
        display: none;
    }
    ReportView {
        height: 1fr;
        padding: 0 1;
    }
    #help {
        height: 1;
        color: grey;
    }
    """

    BINDINGS = [
        Binding("q", "press('q')", "Quit"),
        Binding("ctrl+c", "press('ctrl+c')", "Quit", show=False, priority=True),
        Binding("r", "press('r')", "Reload"),
        Binding("t", "press('t')", "Toggle view"),
        Binding("slash", "filter", "Filter"),
        Binding("pageup", "page('up')", "Scroll up", show=False),
        Binding("pagedown", "page('down')", "Scroll down", show=False),
    ]

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        device_source: DeviceSource | None = None,
        report_source: ReportSource | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or Settings()
        commands = self.settings.commands
        self._device_source = device_source or partial(list_devices, commands)
        self._report_source = report_source or partial(fetch_report, commands=commands)
        self.controller: Controller | None = None

    def compose(self) -> ComposeResult:
        yield Static(f" smartdmt {__version__} - {TITLE}", id="banner")
        with Horizontal(id="panels"):
            device_list = DeviceList(id="devices")
            device_list.border_title = "Devices"
            yield device_list
            with Vertical(id="report-panel"):
                yield Static(id="report-title")
                yield Static(" Loading...", id="report-loading")
                yield ReportView(id="report")
        yield Static(HELP, id="help")

    def on_mount(self) -> None:
        self.controller = Controller(
            self.query_one(DeviceList),
            self.query_one(ReportView),
            mode=self.settings.display.mode,
            refresh_interval=self.settings.display.refresh_interval,
        )
        self.query_one("#device-options").focus()
        self._run(self.controller.start())
        self.feed(Resized(self.size.width, self.size.height))

    def feed(self, event: Event) -> None:
        if self.controller is None:
            return
        self._run(self.controller.handle(event))
        self._render_panel()

    def _run(self, tasks: Iterable[Task]) -> None:
        for task in tasks:
            if isinstance(task, LoadDevices):
                self.run_worker(self._load_devices(), group="devices")
            elif isinstance(task, LoadReport):
                self.run_worker(
                    self._load_report(task.path, task.mode), group="reports"
                )
            elif isinstance(task, ScheduleTick):
                self.set_timer(task.delay, self._tick)
            elif isinstance(task, Quit):
                self.exit(0)

    async def _load_devices(self) -> None:
        devices = await self._device_source()
        self.post_message(DevicesReady(tuple(devices)))

    async def _load_report(self, path: str, mode: ReportMode) -> None:
        report = await self._report_source(path, mode)
        self.post_message(ReportReady(report))

    def _tick(self) -> None:
        self.feed(Tick())

    def on_resize(self, event: events.Resize) -> None:
        self.feed(Resized(event.size.width, event.size.height))

    def on_devices_ready(self, message: DevicesReady) -> None:
        self.feed(DevicesLoaded(message.devices))

    def on_report_ready(self, message: ReportReady) -> None:
        self.feed(ReportLoaded(message.report))

    def on_device_list_changed(self, message: DeviceList.Changed) -> None:
        self.feed(WidgetInput())

    def action_press(self, key: str) -> None:
        self.feed(KeyPressed(key))

    def action_filter(self) -> None:
        self.query_one(DeviceList).focus_filter()

    def action_page(self, direction: str) -> None:
        report = self.query_one(ReportView)
        if direction == "up":
            report.scroll_page_up(animate=False)
        else:
            report.scroll_page_down(animate=False)

    def _render_panel(self) -> None:
        controller = self.controller
        if controller is None:
            return
        state = controller.state

        title = self.query_one("#report-title", Static)
        device = controller.selected
        if device is None:
            title.update(Text(" No device is selected."))
        else:
            text = Text(f" {device.path} [{state.mode.label}]\n")
            text.append(
                f" Model: {truncate(device.model, MODEL_WIDTH)}"
                f" • Serial: {truncate(device.serial, SERIAL_WIDTH)}"
            )
            if state.report_failed and state.displayed_path == device.path:
                status = (
                    f"exited with status {state.report_returncode}"
                    if state.report_returncode is not None
                    else "did not complete"
                )
                text.append(f"\n smartctl {status}", style="red")
            title.update(text)

        loading = controller.loading
        self.query_one("#report-loading").display = loading
        self.query_one(ReportView).display = not loading

        help_text = HELP
        if state.last_refresh is not None:
            help_text += f" | updated: {state.last_refresh:%H:%M:%S}"
        self.query_one("#help", Static).update(help_text)
