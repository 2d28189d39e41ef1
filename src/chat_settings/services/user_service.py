"""HTTP user service — partial updates and profile details.

Blocking urllib calls run in a worker thread via asyncio.to_thread so the
event loop stays responsive.

// [LAW:locality-or-seam] Wire naming (camelCase) is translated here; the rest of
//   the code uses snake_case field names.
"""

from __future__ import annotations

import asyncio
import json
import logging
import ssl
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable, Mapping

from chat_settings.app.account_store import User
from chat_settings.app.protocols import UpdateResult, UserDetails
from chat_settings.core.errors import RequestError

logger = logging.getLogger(__name__)

# [LAW:one-source-of-truth] Field name translation for the update endpoint.
WIRE_NAMES: dict[str, str] = {
    "new_password": "newPassword",
    "confirm_new_password": "confirmNewPassword",
    "socket_id": "socketId",
}

SELF_PATH = "/api/users/self"
UPDATE_PATH = "/api/users"
DETAILS_PATH = "/api/users/{user_id}"
TIMEOUT = 30


def to_wire(fields: Mapping[str, object]) -> dict[str, object]:
    return {WIRE_NAMES.get(k, k): v for k, v in fields.items()}


def _error_message(body: bytes, fallback: str) -> str:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return fallback
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return fallback


class UserService:
    def __init__(self, base_url: str, token: Callable[[], str | None]) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token

    def _request(self, method: str, path: str, body: dict | None = None) -> dict:
        url = self._base_url + path
        data = json.dumps(body).encode() if body is not None else None
        headers = {"Content-Type": "application/json"}
        token = self._token()
        if token:
            headers["Authorization"] = token
        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        try:
            ctx = ssl.create_default_context()
            with urllib.request.urlopen(req, context=ctx, timeout=TIMEOUT) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            message = _error_message(e.read(), e.reason or f"HTTP {e.code}")
            raise RequestError(message, status=e.code) from e
        except urllib.error.URLError as e:
            raise RequestError(f"Could not connect: {e.reason}") from e
        except OSError as e:
            raise RequestError(f"Could not connect: {e}") from e
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RequestError("Malformed response from server") from e
        return parsed if isinstance(parsed, dict) else {}

    async def get_self(self) -> User:
        data = await asyncio.to_thread(self._request, "GET", SELF_PATH)
        user = data.get("user", data)
        return User(
            id=str(user.get("id", "")),
            email=user.get("email"),
            username=user.get("username"),
            tag=user.get("tag"),
            avatar=user.get("avatar"),
            banner=user.get("banner"),
        )

    async def update_user(self, fields: Mapping[str, object]) -> UpdateResult:
        logger.debug("updating user fields: %s", sorted(fields))
        data = await asyncio.to_thread(self._request, "POST", UPDATE_PATH, to_wire(fields))
        token = data.get("newToken")
        return UpdateResult(new_token=token if isinstance(token, str) and token else None)

    async def get_user_details(self, user_id: str) -> UserDetails:
        path = DETAILS_PATH.format(user_id=urllib.parse.quote(user_id, safe=""))
        data = await asyncio.to_thread(self._request, "GET", path)
        profile = data.get("profile") or {}
        return UserDetails(user_id=user_id, bio=profile.get("bio"))
