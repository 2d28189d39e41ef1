"""Settings TUI application using Textual.

// [LAW:locality-or-seam] Thin coordinator — form behavior lives in the controllers,
//   input binding in the panels.
// [LAW:one-source-of-truth] Account, header preview and window state are SnarfX stores
//   owned by the app instance.
"""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.widgets import ContentSwitcher, Footer, Static

import chat_settings.app.languages
import chat_settings.app.window_store
from chat_settings.app.account_form import IMAGE_FIELDS, AccountFormController
from chat_settings.app.account_store import AccountStore
from chat_settings.app.header_store import HeaderPreviewStore
from chat_settings.app.profile_form import ProfileFormController
from chat_settings.app.session import Session, SessionCredentials
from chat_settings.core.errors import RequestError
from chat_settings.io.file_encoding import PathFilePicker
from chat_settings.tui.account_panel import AccountSettingsPanel
from chat_settings.tui.profile_panel import ProfileSettingsPanel

from snarfx import Observable
from snarfx import textual as stx

logger = logging.getLogger(__name__)

_PAGES = {
    "account": "account-settings",
    "profile": "profile-settings",
}


class SettingsApp(App):
    TITLE = "Settings - Account"

    CSS = """
    #breadcrumb {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    #header-preview {
        height: 1;
        padding: 0 1;
        text-style: bold;
    }
    """

    BINDINGS = [
        ("f1", "show_page('account')", "Account"),
        ("f2", "show_page('profile')", "Profile"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        account: AccountStore,
        service,
        session: Session,
        pack: dict | None = None,
    ) -> None:
        super().__init__()
        self.account = account
        self.service = service
        self.session = session
        self.pack = pack
        self.header_store = HeaderPreviewStore()
        self.window_store = chat_settings.app.window_store.create()
        self.page: Observable[str] = Observable("account")
        self.pickers = {field: PathFilePicker() for field in IMAGE_FIELDS}
        self._disposers: list = []

    def compose(self) -> ComposeResult:
        yield Static("", id="breadcrumb")
        yield Static("", id="header-preview")
        account_form = AccountFormController(
            self.account,
            self.service,
            SessionCredentials(self.session),
            self.header_store,
            file_pickers=self.pickers,
        )
        profile_form = ProfileFormController(self.account, self.service)
        with ContentSwitcher(initial=_PAGES["account"], id="pages"):
            yield AccountSettingsPanel(account_form, self.pickers, self.pack)
            yield ProfileSettingsPanel(profile_form, self.pack)
        yield Footer()

    def on_mount(self) -> None:
        chat_settings.app.window_store.set_width(self.window_store, self.size.width)
        self._disposers.append(stx.reaction(self,
            lambda: self.page.get(),
            self._push_page,
            fire_immediately=True,
        ))
        self._disposers.append(stx.reaction(self,
            lambda: (self.account.user(), self.header_store.overrides()),
            self._push_header,
            fire_immediately=True,
        ))
        if self.account.user() is None:
            self.run_worker(self._load_account(), group="account")

    def on_resize(self, event) -> None:
        chat_settings.app.window_store.set_width(self.window_store, event.size.width)

    def on_unmount(self) -> None:
        for disposer in self._disposers:
            disposer.dispose()
        self._disposers.clear()

    async def _load_account(self) -> None:
        try:
            self.account.set_user(await self.service.get_self())
        except RequestError as e:
            logger.warning("failed to load account: %s", e.message)
            if e.status == 401:
                SessionCredentials(self.session).forget()
            self.notify(e.message, severity="error")

    def action_show_page(self, page: str) -> None:
        if page in _PAGES:
            self.page.set(page)

    # ─── Push targets ─────────────────────────────────────────────────

    def _push_page(self, page: str) -> None:
        translate = chat_settings.app.languages.translate
        crumbs = ["Dashboard", translate(self.pack, "settings.drawer.account", "Account")]
        if page == "profile":
            crumbs.append(translate(self.pack, "settings.drawer.profile", "Profile"))
        self.query_one("#breadcrumb", Static).update(" › ".join(crumbs))
        self.query_one("#pages", ContentSwitcher).current = _PAGES[page]

    def _push_header(self, state: tuple) -> None:
        user, overrides = state
        username = overrides.get("username") or (user.username if user else None) or "…"
        tag = overrides.get("tag") or (user.tag if user else None) or ""
        pending = [field for field in IMAGE_FIELDS if overrides.get(field)]
        text = "{}:{}".format(username, tag) if tag else username
        if pending:
            text += "  (pending {})".format(", ".join(pending))
        self.query_one("#header-preview", Static).update(text)
