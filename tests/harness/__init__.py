"""Test harness for chat-settings.

Re-exports all public API for convenient imports:
    from tests.harness import run_app, FakeTransport, ...
"""

from tests.harness.fakes import FakeCredentials, FakeHeader, FakePicker, FakeTransport
from tests.harness.app_runner import run_app

__all__ = [
    "FakeCredentials",
    "FakeHeader",
    "FakePicker",
    "FakeTransport",
    "run_app",
]
