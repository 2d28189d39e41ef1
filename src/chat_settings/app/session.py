"""Session credentials — token persistence and the live session id.

// [LAW:single-enforcer] Token rotation is persisted and propagated in persist() only.
"""

import logging
import uuid

import chat_settings.io.settings
from chat_settings.io.settings import StorageKeys

logger = logging.getLogger(__name__)


class Session:
    """Live connection identity: the bearer token and a per-process session id."""

    def __init__(self, token: str | None = None, session_id: str | None = None) -> None:
        self.token = token
        self.session_id = session_id or uuid.uuid4().hex

    def update_token(self, token: str) -> None:
        self.token = token


class SessionCredentials:
    """Credentials collaborator for the account form."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def persist(self, token: str) -> None:
        chat_settings.io.settings.set_storage_string(StorageKeys.USER_TOKEN, token)
        self._session.update_token(token)
        logger.info("session token rotated")

    def forget(self) -> None:
        """Drop a token the server no longer accepts."""
        chat_settings.io.settings.remove_storage_key(StorageKeys.USER_TOKEN)
        self._session.token = None
        logger.info("stored session token cleared")

    def current_session_id(self) -> str | None:
        return self._session.session_id


def load_session(token: str | None = None) -> Session:
    """Build a session from an explicit token or the stored one."""
    if token is None:
        token = chat_settings.io.settings.get_storage_string(StorageKeys.USER_TOKEN)
    return Session(token=token)
