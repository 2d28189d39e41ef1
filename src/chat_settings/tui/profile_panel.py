"""Profile settings page: multiline bio with a length counter."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.widgets import Label, Static, TextArea

import chat_settings.app.languages
from chat_settings.app.profile_form import BIO_MAX_LENGTH, ProfileFormController
from chat_settings.tui.settings_form_panel import SettingsFormPanel

from snarfx import textual as stx


class ProfileSettingsPanel(SettingsFormPanel):
    DEFAULT_CSS = """
    ProfileSettingsPanel TextArea {
        height: 8;
        margin-top: 1;
    }
    """

    def __init__(self, controller: ProfileFormController, pack: dict | None = None) -> None:
        super().__init__(panel_key="profile", controller=controller, id="profile-settings")
        self._pack = pack

    def compose(self) -> ComposeResult:
        translate = chat_settings.app.languages.translate
        yield Label(translate(self._pack, "settings.account.bio", "Bio"), classes="field-label")
        yield Static("Multiline and markup support", classes="field-desc")
        yield Static("", id="profile-bio-count", classes="field-desc")
        yield TextArea(str(self.controller.values()["bio"]), id=self._widget_id("bio"))
        yield from self.compose_footer()

    def on_mount(self) -> None:
        self.bind_reactions()
        self.controller.start()
        self._disposers.append(stx.reaction(self.app,
            lambda: self.controller.bio_length(),
            lambda n: self.query_one("#profile-bio-count", Static).update(
                "({} / {})".format(n, BIO_MAX_LENGTH)
            ),
            fire_immediately=True,
        ))

    def push_values(self, values: dict) -> None:
        text_area = self.query_one("#{}".format(self._widget_id("bio")), TextArea)
        bio = str(values["bio"])
        if text_area.text != bio:
            text_area.load_text(bio)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area.id == self._widget_id("bio"):
            event.stop()
            self.controller.set("bio", event.text_area.text)
