"""Submission state shared by the settings form controllers.

State machine: idle -> sending -> idle, with an optional error message left
behind by the last attempt.

// [LAW:single-enforcer] The in-flight guard is checked and cleared only here.
"""

from __future__ import annotations

from snarfx import Observable, transaction

IDLE = "idle"
SENDING = "sending"


class SubmitStatus:
    def __init__(self) -> None:
        self._state: Observable[str] = Observable(IDLE)
        self._error: Observable[str | None] = Observable(None)

    @property
    def state(self) -> str:
        return self._state.get()

    @property
    def error(self) -> str | None:
        return self._error.get()

    def is_sending(self) -> bool:
        return self._state.get() == SENDING

    def begin(self) -> bool:
        """Enter sending. Returns False (and changes nothing) if already sending."""
        if self._state.get() == SENDING:
            return False
        with transaction():
            self._state.set(SENDING)
            self._error.set(None)
        return True

    def fail(self, message: str) -> None:
        self._error.set(message)

    def finish(self) -> None:
        self._state.set(IDLE)

    def label(self) -> str:
        return "Saving..." if self.is_sending() else "Save Changes"
