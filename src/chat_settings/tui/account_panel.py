"""Account settings page: email, username, tag, images and password."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label

import chat_settings.app.languages
import chat_settings.app.window_store
from chat_settings.app.account_form import IMAGE_FIELDS, AccountFormController
from chat_settings.io.file_encoding import PathFilePicker
from chat_settings.tui.settings_form_panel import SettingsFormPanel, field_defs

from snarfx import textual as stx

_PROFILE_SPECS = (
    ("email", "settings.account.email", "Email", "", False),
    ("username", "settings.account.username", "Username", "", False),
    ("tag", "settings.account.tag", "Tag", "", False),
)
_NEW_PASSWORD_SPECS = (
    ("new_password", "settings.account.newPassword", "New Password",
     "Changing your password will log you out everywhere else.", True),
    ("confirm_new_password", "settings.account.confirmNewPassword", "Confirm New Password",
     "Confirm your new password", True),
)
_CURRENT_PASSWORD_SPECS = (
    ("password", "settings.account.currentPassword", "Confirm Password", "", True),
)
_IMAGE_LABELS = {
    "avatar": ("settings.account.avatar", "Avatar"),
    "banner": ("settings.account.banner", "Banner"),
}


class AccountSettingsPanel(SettingsFormPanel):
    def __init__(
        self,
        controller: AccountFormController,
        pickers: dict[str, PathFilePicker],
        pack: dict | None = None,
    ) -> None:
        super().__init__(panel_key="account", controller=controller, id="account-settings")
        self._pickers = pickers
        self._pack = pack

    def compose(self) -> ComposeResult:
        translate = chat_settings.app.languages.translate
        values = self.controller.values()
        for field in field_defs(self._pack, translate, _PROFILE_SPECS):
            yield from self.compose_field(field, values[field.key])

        for field in IMAGE_FIELDS:
            string_key, default_label = _IMAGE_LABELS[field]
            with Horizontal(classes="field-row"):
                yield Label(translate(self._pack, string_key, default_label), classes="field-label")
                yield Input(placeholder="path to image", id="account-path-{}".format(field))
                yield Button("Browse", id="account-browse-{}".format(field))
                yield Button("Clear", id="account-clear-{}".format(field), variant="error")

        yield Button(
            translate(self._pack, "settings.account.changePassword", "Change Password"),
            id="account-change-password",
        )
        with Vertical(id="account-new-password"):
            for field in field_defs(self._pack, translate, _NEW_PASSWORD_SPECS):
                yield from self.compose_field(field, values[field.key])
        with Vertical(id="account-current-password"):
            for field in field_defs(self._pack, translate, _CURRENT_PASSWORD_SPECS):
                yield from self.compose_field(field, values[field.key])
        yield from self.compose_footer()

    def on_mount(self) -> None:
        self.bind_reactions()
        app = self.app
        self._disposers.append(stx.reaction(app,
            lambda: self.controller.show_change_password.get(),
            lambda show: setattr(self.query_one("#account-new-password"), "display", show),
            fire_immediately=True,
        ))
        self._disposers.append(stx.reaction(app,
            lambda: self.controller.requires_current_password(),
            lambda show: setattr(self.query_one("#account-current-password"), "display", show),
            fire_immediately=True,
        ))
        self._disposers.append(stx.reaction(app,
            lambda: {field: bool(self.controller.values()[field]) for field in IMAGE_FIELDS},
            self._push_image_state,
            fire_immediately=True,
        ))

    def _push_image_state(self, picked: dict[str, bool]) -> None:
        for field, has_image in picked.items():
            self.query_one("#account-clear-{}".format(field)).display = has_image

    # Textual also dispatches to SettingsFormPanel handlers; prevent_default()
    # keeps them from seeing events handled here.

    def on_input_changed(self, event: Input.Changed) -> None:
        input_id = event.input.id or ""
        if not input_id.startswith("account-path-"):
            return
        event.stop()
        event.prevent_default()
        picker = self._pickers.get(input_id.removeprefix("account-path-"))
        if picker is not None:
            picker.select(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("account-browse-"):
            field = button_id.removeprefix("account-browse-")
            if not self.controller.pick_image(field):
                self.notify("No readable image at that path", severity="warning")
        elif button_id.startswith("account-clear-"):
            self.controller.clear_image(button_id.removeprefix("account-clear-"))
        elif button_id == "account-change-password":
            self.controller.toggle_change_password()
        else:
            return
        event.stop()
        event.prevent_default()

    def on_resize(self, event) -> None:
        window_store = getattr(self.app, "window_store", None)
        if window_store is not None:
            chat_settings.app.window_store.set_pane_width(window_store, event.size.width)
