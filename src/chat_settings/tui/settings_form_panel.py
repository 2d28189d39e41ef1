"""Shared form panel infrastructure for the settings pages.

// [LAW:one-type-per-behavior] One FieldDef type describes every text input on both pages.
// [LAW:locality-or-seam] Pages provide field descriptors + a controller; input
//   binding and status display are centralized here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Button, Input, Label, Static

from snarfx import textual as stx


@dataclass(frozen=True)
class FieldDef:
    key: str
    label: str
    description: str = ""
    secret: bool = False


class SettingsFormPanel(VerticalScroll):
    """Base panel binding Inputs to a form controller's values()/set()."""

    DEFAULT_CSS = """
    SettingsFormPanel {
        padding: 0 1;
        height: 1fr;
        background: $panel;
        color: $text;
    }
    SettingsFormPanel .field-row {
        height: auto;
        width: 100%;
        margin-top: 1;
    }
    SettingsFormPanel .field-label {
        width: 24;
        text-style: bold;
        color: $text-secondary;
    }
    SettingsFormPanel .field-desc {
        color: $text-muted;
        text-style: italic;
        padding-left: 2;
    }
    SettingsFormPanel .form-error {
        color: $error;
        margin-top: 1;
    }
    SettingsFormPanel Input {
        width: 1fr;
    }
    """

    def __init__(self, *, panel_key: str, controller, id: str | None = None) -> None:
        super().__init__(id=id)
        self._panel_key = panel_key
        self.controller = controller
        self._disposers: list = []

    def _widget_id(self, field_key: str) -> str:
        return "{}-field-{}".format(self._panel_key, field_key)

    def _field_for(self, widget_id: str | None) -> str | None:
        prefix = "{}-field-".format(self._panel_key)
        if widget_id and widget_id.startswith(prefix):
            return widget_id[len(prefix):]
        return None

    def compose_field(self, field: FieldDef, value: object) -> ComposeResult:
        with Horizontal(classes="field-row"):
            yield Label(field.label, classes="field-label")
            yield Input(value=str(value), id=self._widget_id(field.key), password=field.secret)
        if field.description:
            yield Static(field.description, classes="field-desc")

    def compose_footer(self) -> ComposeResult:
        yield Static("", id=self._widget_id("error"), classes="form-error")
        yield Button(self.controller.status_label(), id=self._widget_id("save"), variant="primary")

    # ─── Reactions ────────────────────────────────────────────────────

    def bind_reactions(self) -> None:
        """Register store -> widget reactions. Called from on_mount."""
        app = self.app
        self._disposers.append(stx.reaction(app,
            lambda: self.controller.values(),
            self.push_values,
            fire_immediately=True,
        ))
        self._disposers.append(stx.reaction(app,
            lambda: (
                self.controller.status_label(),
                self.controller.status.error,
                self.controller.store.has_changes(),
            ),
            self.push_status,
            fire_immediately=True,
        ))

    def push_values(self, values: dict) -> None:
        for key, value in values.items():
            for widget in self.query("#{}".format(self._widget_id(key))):
                if isinstance(widget, Input) and widget.value != str(value):
                    widget.value = str(value)

    def push_status(self, state: tuple) -> None:
        label, error, has_changes = state
        button = self.query_one("#{}".format(self._widget_id("save")), Button)
        button.label = label
        button.display = has_changes
        self.query_one("#{}".format(self._widget_id("error")), Static).update(error or "")

    # ─── Events ───────────────────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        field = self._field_for(event.input.id)
        if field is None or field not in self.controller.values():
            return
        event.stop()
        self.controller.set(field, event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == self._widget_id("save"):
            event.stop()
            self.run_worker(self.controller.submit(), group="submit")

    def on_unmount(self) -> None:
        for disposer in self._disposers:
            disposer.dispose()
        self._disposers.clear()
        self.controller.dispose()


def field_defs(pack: dict | None, translate, specs: Sequence[tuple]) -> list[FieldDef]:
    """Build FieldDefs from (key, string_key, default_label, description, secret) rows."""
    return [
        FieldDef(key=key, label=translate(pack, string_key, label), description=desc, secret=secret)
        for key, string_key, label, desc, secret in specs
    ]
