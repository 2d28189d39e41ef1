"""Protocol definitions for the collaborators a settings form talks to.

This module has no dependencies on other project modules. Implementations
satisfy these structurally; nothing needs to inherit from them.

// [LAW:locality-or-seam] Transport, file picking, header previews and credential
//   storage are seams. Controllers see only these contracts.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class UpdateResult:
    """Result of a partial user update. new_token is set when credentials rotated."""

    new_token: str | None = None


@dataclass(frozen=True)
class UserDetails:
    """Profile snapshot for one user."""

    user_id: str
    bio: str | None = None


class UserTransport(Protocol):
    """Partial-update transport.

    update_user() receives only changed fields and raises RequestError with
    the server's message on failure.
    """

    async def update_user(self, fields: Mapping[str, object]) -> UpdateResult: ...

    async def get_user_details(self, user_id: str) -> UserDetails: ...


class FilePicker(Protocol):
    def pick(self) -> Sequence[str]:
        """Return one encoded payload string per selected file."""
        ...


class HeaderObserver(Protocol):
    """Fire-and-forget sink for optimistic header previews."""

    def notify(self, fields: Mapping[str, object]) -> None: ...

    def reset(self) -> None: ...


class Credentials(Protocol):
    def persist(self, token: str) -> None: ...

    def current_session_id(self) -> str | None: ...
