"""Profile settings form controller (bio).

The baseline comes from an async details fetch keyed by the signed-in user's
id. After start() the fetch re-runs whenever that id changes; a result (or
error) for an id that is no longer current is dropped.

// [LAW:one-source-of-truth] Last-known details snapshot is the bio baseline.
// [LAW:single-enforcer] Blank bio -> None normalization happens in build_payload() only.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable, Coroutine

import chat_settings.core.diff_store
from chat_settings.app.account_store import AccountStore
from chat_settings.app.form_status import SubmitStatus
from chat_settings.app.protocols import UserDetails, UserTransport
from chat_settings.core.errors import RequestError, SettingsError, ValidationError
from snarfx import Observable, Reaction, reaction, transaction

logger = logging.getLogger(__name__)

BIO_MAX_LENGTH = 1000

Spawn = Callable[[Coroutine], object]


class ProfileFormController:
    def __init__(
        self,
        account: AccountStore,
        transport: UserTransport,
        *,
        spawn: Spawn | None = None,
    ) -> None:
        self._account = account
        self._transport = transport
        self._spawn = spawn or self._spawn_task
        self._tasks: set[asyncio.Task] = set()
        self._disposed = False
        self.status = SubmitStatus()
        self.details: Observable[UserDetails | None] = Observable(None)
        self.store = chat_settings.core.diff_store.DiffStore(self._default_input)
        self._identity_reaction: Reaction | None = None

    def _default_input(self) -> dict[str, object]:
        details = self.details.get()
        return {"bio": (details.bio if details else None) or ""}

    # ─── Fetch ────────────────────────────────────────────────────────

    def start(self) -> None:
        """Begin following the account identity. Call with the event loop running."""
        if self._identity_reaction is not None or self._disposed:
            return
        self._identity_reaction = reaction(
            lambda: self._account.user_id(),
            self._on_identity_changed,
            fire_immediately=True,
        )

    def _spawn_task(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _on_identity_changed(self, user_id: str | None) -> None:
        if user_id is None or self._disposed:
            return
        self._spawn(self.load(user_id))

    def _is_stale(self, user_id: str) -> bool:
        return self._disposed or self._account.user_id() != user_id

    async def load(self, user_id: str) -> UserDetails | None:
        """Fetch details for user_id and make them the baseline if still current."""
        try:
            details = await self._transport.get_user_details(user_id)
        except RequestError as e:
            if self._is_stale(user_id):
                logger.debug("ignoring failed profile fetch for stale user %s", user_id)
                return None
            logger.warning("failed to load profile for %s: %s", user_id, e.message)
            self.status.fail(e.message)
            return None
        if self._is_stale(user_id):
            logger.debug("discarding stale profile for %s", user_id)
            return None
        self.details.set(details)
        return details

    # ─── Bindings ─────────────────────────────────────────────────────

    def values(self) -> dict[str, object]:
        return self.store.values()

    def diff(self) -> dict[str, object]:
        return self.store.diff()

    def set(self, field: str, value: object) -> None:
        self.store.set(field, value)

    def bio_length(self) -> int:
        return len(str(self.store.values()["bio"]))

    def status_label(self) -> str:
        return self.status.label()

    # ─── Submit ───────────────────────────────────────────────────────

    def build_payload(self) -> dict[str, object]:
        bio = str(self.store.values()["bio"])
        return {"bio": bio.strip() or None}

    async def submit(self) -> bool:
        if not self.store.has_changes():
            return False
        if not self.status.begin():
            logger.debug("profile submit dropped: request already in flight")
            return False
        try:
            payload = self.build_payload()
            try:
                if self.bio_length() > BIO_MAX_LENGTH:
                    raise ValidationError(f"Bio must be at most {BIO_MAX_LENGTH} characters.")
                await self._transport.update_user(payload)
            except SettingsError as e:
                logger.info("profile update rejected: %s", e.message)
                self.status.fail(e.message)
                return False
            if not self._disposed:
                self._merge_saved(payload["bio"])
            return True
        finally:
            self.status.finish()

    def _merge_saved(self, bio: str | None) -> None:
        details = self.details.get()
        if details is None:
            details = UserDetails(user_id=self._account.user_id() or "")
        with transaction():
            self.details.set(dataclasses.replace(details, bio=bio))
            # An equal snapshot does not re-derive the baseline; drop the edit explicitly.
            self.store.reset("bio")

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if self._identity_reaction is not None:
            self._identity_reaction.dispose()
        self.store.dispose()
