"""Account settings form controller.

Owns one DiffStore over the signed-in user plus transient password and image
fields. submit() sends only the changed fields as a partial update.

// [LAW:single-enforcer] Password confirmation is validated in submit() only.
// [LAW:one-way-deps] No widget imports. UI binds to values()/diff()/status.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

import chat_settings.core.diff_store
from chat_settings.app.account_store import AccountStore
from chat_settings.app.form_status import SubmitStatus
from chat_settings.app.protocols import Credentials, FilePicker, HeaderObserver, UserTransport
from chat_settings.core.errors import SettingsError, ValidationError
from snarfx import Observable, transaction

logger = logging.getLogger(__name__)

PASSWORD_MISMATCH = "Confirm password does not match."

# Fields never sent to the server.
_LOCAL_ONLY = ("confirm_new_password",)
# Fields the server echoes back onto the user record after a save.
_PROFILE_FIELDS = ("email", "username", "tag")
# Fields cleared after every successful save.
_TRANSIENT_FIELDS = ("password", "new_password", "confirm_new_password", "avatar", "banner")
IMAGE_FIELDS = ("avatar", "banner")


class AccountFormController:
    def __init__(
        self,
        account: AccountStore,
        transport: UserTransport,
        credentials: Credentials,
        header: HeaderObserver,
        file_pickers: Mapping[str, FilePicker] | None = None,
    ) -> None:
        self._account = account
        self._transport = transport
        self._credentials = credentials
        self._header = header
        self._file_pickers = dict(file_pickers or {})
        self._disposed = False
        self.status = SubmitStatus()
        self.show_change_password: Observable[bool] = Observable(False)
        self.store = chat_settings.core.diff_store.DiffStore(self._default_input)

    def _default_input(self) -> dict[str, object]:
        user = self._account.user()
        return {
            "email": (user.email if user else None) or "",
            "username": (user.username if user else None) or "",
            "tag": (user.tag if user else None) or "",
            "password": "",
            "new_password": "",
            "confirm_new_password": "",
            "avatar": "",
            "banner": "",
        }

    # ─── Bindings ─────────────────────────────────────────────────────

    def values(self) -> dict[str, object]:
        return self.store.values()

    def diff(self) -> dict[str, object]:
        return self.store.diff()

    def set(self, field: str, value: object) -> None:
        self.store.set(field, value)

    def requires_current_password(self) -> bool:
        """The current password input is shown whenever anything changed."""
        return self.store.has_changes()

    def status_label(self) -> str:
        return self.status.label()

    def toggle_change_password(self) -> None:
        with transaction():
            self.store.set("new_password", "")
            self.store.set("confirm_new_password", "")
            self.show_change_password.set(not self.show_change_password.get())

    # ─── Avatar / banner side channel ─────────────────────────────────

    def pick_image(self, field: str) -> bool:
        """Ask the field's file picker for a payload. Returns True if one was applied."""
        picker = self._file_pickers.get(field)
        if picker is None:
            return False
        return self.apply_picked(field, picker.pick())

    def apply_picked(self, field: str, payloads: Sequence[str]) -> bool:
        if field not in IMAGE_FIELDS:
            raise KeyError(field)
        payloads = list(payloads)
        if not payloads or not payloads[0]:
            return False
        self.store.set(field, payloads[0])
        self._header.notify({field: payloads[0]})
        return True

    def clear_image(self, field: str) -> None:
        if field not in IMAGE_FIELDS:
            raise KeyError(field)
        self.store.set(field, "")
        self._header.notify({field: None})

    # ─── Submit ───────────────────────────────────────────────────────

    def _validate(self, values: dict[str, object]) -> None:
        new_password = values.get("new_password")
        if new_password and new_password != values.get("confirm_new_password"):
            raise ValidationError(PASSWORD_MISMATCH)

    def build_payload(self) -> dict[str, object]:
        payload = {k: v for k, v in self.store.diff().items() if k not in _LOCAL_ONLY}
        session_id = self._credentials.current_session_id()
        if session_id is not None:
            payload["socket_id"] = session_id
        return payload

    async def submit(self) -> bool:
        """Send the changed fields. Returns True on a successful save.

        A submit while one is in flight, or with nothing changed, is dropped.
        """
        if not self.store.has_changes():
            return False
        if not self.status.begin():
            logger.debug("account submit dropped: request already in flight")
            return False
        try:
            payload = self.build_payload()
            try:
                self._validate(self.store.values())
                result = await self._transport.update_user(payload)
            except SettingsError as e:
                logger.info("account update rejected: %s", e.message)
                self.status.fail(e.message)
                return False

            # Rotated credentials must be kept even if the form is gone.
            if result.new_token:
                self._credentials.persist(result.new_token)
            if self._disposed:
                return True
            self._apply_saved(payload)
            return True
        finally:
            self.status.finish()

    def _apply_saved(self, payload: dict[str, object]) -> None:
        saved = {k: payload[k] for k in _PROFILE_FIELDS if k in payload}
        with transaction():
            self._account.merge(saved)
            self.store.reset(*_TRANSIENT_FIELDS)
            self.show_change_password.set(False)
        self._header.reset()

    def dispose(self) -> None:
        """Tear down: roll back header previews. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._header.reset()
        self.store.dispose()
