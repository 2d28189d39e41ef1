"""Error types shared by the settings forms.

// [LAW:one-source-of-truth] Every error a form can surface derives from SettingsError.
"""


class SettingsError(Exception):
    """Base class for errors surfaced on a settings form."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SettingsError):
    """Local, synchronous rejection of a submit (e.g. password mismatch)."""


class RequestError(SettingsError):
    """Remote failure reported by the transport. message is shown verbatim."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
