"""Header preview store — pending header overrides pushed by the account form.

Picking an avatar or banner shows it in the header before it is saved. The
store holds those optimistic values; reset() drops them once canonical state
is expected to refresh.

// [LAW:one-source-of-truth] Preview overrides live only in this store.
"""

import logging
from collections.abc import Mapping

from snarfx import Store

logger = logging.getLogger(__name__)

SCHEMA: dict[str, object] = {
    "username": None,
    "tag": None,
    "avatar": None,
    "banner": None,
}


class HeaderPreviewStore(Store):
    """Store of header overrides. None means "show the saved value"."""

    def __init__(self) -> None:
        super().__init__(SCHEMA)

    def notify(self, fields: Mapping[str, object]) -> None:
        unknown = set(fields) - set(SCHEMA)
        if unknown:
            logger.debug("header preview ignoring keys: %s", sorted(unknown))
        self.update({k: v for k, v in fields.items() if k in SCHEMA})

    def reset(self) -> None:
        self.update(dict(SCHEMA))

    def overrides(self) -> dict[str, object]:
        """Only the keys currently overridden."""
        return {k: v for k in SCHEMA if (v := self.get(k)) is not None}
