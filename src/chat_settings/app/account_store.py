"""Account store — observable holder for the signed-in user.

Form baselines read the user through this store, so replacing the user
(initial load, server push, post-save merge) re-derives every baseline.

// [LAW:one-source-of-truth] The current User lives in one Observable.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from snarfx import Observable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    id: str
    email: str | None = None
    username: str | None = None
    tag: str | None = None
    avatar: str | None = None
    banner: str | None = None


_USER_FIELDS = frozenset(f.name for f in dataclasses.fields(User)) - {"id"}


class AccountStore:
    """Single owner of the current user. Mutate only through set_user/merge."""

    def __init__(self, user: User | None = None) -> None:
        self._user: Observable[User | None] = Observable(user)

    def user(self) -> User | None:
        return self._user.get()

    def user_id(self) -> str | None:
        user = self._user.get()
        return user.id if user is not None else None

    def set_user(self, user: User | None) -> None:
        self._user.set(user)

    def merge(self, fields: Mapping[str, object]) -> None:
        """Apply saved fields to the current user. Unknown keys are ignored."""
        user = self._user.get()
        if user is None:
            logger.debug("merge ignored: no user loaded")
            return
        known = {k: v for k, v in fields.items() if k in _USER_FIELDS}
        if known:
            self._user.set(dataclasses.replace(user, **known))
