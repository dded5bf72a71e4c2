from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.message import Message
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from smartdmt.models import Device
from smartdmt.utils.text import truncate

SERIAL_WIDTH = 20


class DeviceList(Vertical):
    """Filterable list of devices with a single highlighted entry."""

    class Changed(Message):
        """Selection or filter changed through user input."""

    BINDINGS = [
        Binding("escape", "clear_filter", "Clear filter", show=False),
    ]

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._devices: list[Device] = []
        self._visible: list[Device] = []

    def compose(self) -> ComposeResult:
        yield Input(placeholder="/ to filter", id="device-filter")
        yield OptionList(id="device-options")

    @property
    def options(self) -> OptionList:
        return self.query_one("#device-options", OptionList)

    @property
    def filter_input(self) -> Input:
        return self.query_one("#device-filter", Input)

    @property
    def selected(self) -> Device | None:
        index = self.options.highlighted
        if index is None or not 0 <= index < len(self._visible):
            return None
        return self._visible[index]

    @property
    def filtering(self) -> bool:
        return self.filter_input.has_focus or bool(self.filter_input.value)

    def set_devices(self, devices: Sequence[Device]) -> None:
        self._devices = list(devices)
        self._rebuild(keep_index=True)

    def select_path(self, path: str) -> bool:
        for index, device in enumerate(self._visible):
            if device.path == path:
                self.options.highlighted = index
                return True
        return False

    def focus_filter(self) -> None:
        self.filter_input.focus()

    def action_clear_filter(self) -> None:
        self.filter_input.value = ""
        self.options.focus()

    @on(Input.Changed, "#device-filter")
    def _filter_changed(self, event: Input.Changed) -> None:
        event.stop()
        self._rebuild(keep_index=False)
        self.post_message(self.Changed())

    @on(Input.Submitted, "#device-filter")
    def _filter_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.options.focus()

    @on(OptionList.OptionHighlighted, "#device-options")
    def _highlighted(self, event: OptionList.OptionHighlighted) -> None:
        event.stop()
        self.post_message(self.Changed())

    def _rebuild(self, keep_index: bool) -> None:
        options = self.options
        previous = options.highlighted
        needle = self.filter_input.value.strip().lower()
        self._visible = [
            device for device in self._devices if needle in device.filter_value.lower()
        ]

        options.clear_options()
        options.add_options([_device_option(device) for device in self._visible])
        if not self._visible:
            options.highlighted = None
        elif keep_index and previous is not None:
            options.highlighted = min(previous, len(self._visible) - 1)
        else:
            options.highlighted = 0


def _device_option(device: Device) -> Option:
    prompt = Text(device.name, style="bold")
    prompt.append("\n")
    prompt.append(truncate(device.serial, SERIAL_WIDTH), style="dim")
    return Option(prompt)


class ReportView(VerticalScroll, can_focus=False):
    """Scrollable smartctl output."""

    def compose(self) -> ComposeResult:
        yield Static(id="report-text")

    @property
    def y_offset(self) -> int:
        return round(self.scroll_y)

    @y_offset.setter
    def y_offset(self, value: int) -> None:
        # new content is measured on the next refresh
        self.call_after_refresh(self.scroll_to, y=value, animate=False)

    def set_content(self, text: str) -> None:
        self.query_one("#report-text", Static).update(Text(text.rstrip("\n")))

    def goto_top(self) -> None:
        self.scroll_home(animate=False)
