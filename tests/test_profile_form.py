"""Tests for ProfileFormController — identity-keyed fetch, bio normalization, merge."""

import asyncio
import dataclasses

import pytest

from chat_settings.app.account_store import AccountStore, User
from chat_settings.app.profile_form import BIO_MAX_LENGTH, ProfileFormController
from chat_settings.app.protocols import UserDetails


@pytest.fixture
def spawned():
    return []


@pytest.fixture
def form(account, transport, spawned):
    transport.details = {"u1": UserDetails(user_id="u1", bio="hello")}
    form = ProfileFormController(account, transport, spawn=spawned.append)
    form.start()
    return form


async def drain(spawned):
    while spawned:
        await spawned.pop(0)


class TestConstruction:
    def test_construct_without_event_loop(self, account, transport):
        form = ProfileFormController(account, transport)
        assert form.values() == {"bio": ""}
        assert transport.detail_requests == []
        form.dispose()

    def test_no_fetch_before_start(self, account, transport, spawned):
        ProfileFormController(account, transport, spawn=spawned.append)
        assert spawned == []

    def test_start_is_idempotent(self, account, transport, spawned):
        form = ProfileFormController(account, transport, spawn=spawned.append)
        form.start()
        form.start()
        assert len(spawned) == 1
        spawned.pop().close()

    def test_start_after_dispose_does_nothing(self, account, transport, spawned):
        form = ProfileFormController(account, transport, spawn=spawned.append)
        form.dispose()
        form.start()
        assert spawned == []


class TestFetch:
    async def test_fetches_for_current_user(self, form, transport, spawned):
        await drain(spawned)
        assert transport.detail_requests == ["u1"]
        assert form.values() == {"bio": "hello"}
        assert form.diff() == {}

    def test_no_fetch_without_user(self, transport, spawned):
        form = ProfileFormController(AccountStore(), transport, spawn=spawned.append)
        form.start()
        assert spawned == []

    async def test_identity_change_refetches(self, form, account, transport, spawned):
        await drain(spawned)
        transport.details["u2"] = UserDetails(user_id="u2", bio="other")
        account.set_user(User(id="u2"))
        await drain(spawned)
        assert transport.detail_requests == ["u1", "u2"]
        assert form.values() == {"bio": "other"}

    async def test_same_identity_does_not_refetch(self, form, account, user, spawned):
        await drain(spawned)
        account.set_user(dataclasses.replace(user, username="renamed"))
        assert spawned == []

    async def test_stale_result_discarded(self, form, account, transport, spawned):
        transport.details["u2"] = UserDetails(user_id="u2", bio="other")
        account.set_user(User(id="u2"))
        first, second = spawned
        assert await first is None
        assert form.details.get() is None
        await second
        assert form.values() == {"bio": "other"}

    async def test_fetch_error_recorded(self, form, transport, spawned):
        transport.detail_error = "Not found"
        await drain(spawned)
        assert form.status.error == "Not found"
        assert form.values() == {"bio": ""}

    async def test_stale_fetch_error_not_shown(self, form, account, transport, spawned):
        transport.detail_error = "Not found"
        account.set_user(User(id="u2"))
        first, second = spawned
        await first
        assert form.status.error is None
        second.close()

    async def test_fetch_error_after_dispose_not_shown(self, form, transport, spawned):
        transport.detail_error = "Not found"
        form.dispose()
        await drain(spawned)
        assert form.status.error is None

    async def test_result_after_dispose_discarded(self, form, spawned):
        form.dispose()
        await drain(spawned)
        assert form.details.get() is None

    async def test_default_spawn_runs_on_loop(self, account, transport):
        transport.details = {"u1": UserDetails(user_id="u1", bio="loop")}
        form = ProfileFormController(account, transport)
        form.start()
        for _ in range(3):
            await asyncio.sleep(0)
        assert form.values() == {"bio": "loop"}


class TestSubmit:
    async def test_sends_trimmed_bio(self, form, transport, spawned):
        await drain(spawned)
        form.set("bio", "  new bio  ")
        assert await form.submit() is True
        assert transport.updates == [{"bio": "new bio"}]

    async def test_blank_bio_sent_as_none(self, form, transport, spawned):
        await drain(spawned)
        form.set("bio", "   ")
        await form.submit()
        assert transport.updates == [{"bio": None}]

    async def test_save_merges_into_details(self, form, transport, spawned):
        await drain(spawned)
        form.set("bio", " updated ")
        await form.submit()
        assert form.details.get().bio == "updated"
        assert form.values() == {"bio": "updated"}
        assert form.diff() == {}

    async def test_save_equal_to_old_baseline_clears_diff(self, form, spawned):
        await drain(spawned)
        form.set("bio", "hello   ")
        await form.submit()
        assert form.values() == {"bio": "hello"}
        assert form.diff() == {}

    async def test_too_long_bio_rejected(self, form, transport, spawned):
        await drain(spawned)
        form.set("bio", "x" * (BIO_MAX_LENGTH + 1))
        assert await form.submit() is False
        assert transport.updates == []
        assert "1000" in form.status.error
        assert form.status.is_sending() is False

    async def test_bio_at_limit_accepted(self, form, transport, spawned):
        await drain(spawned)
        form.set("bio", "x" * BIO_MAX_LENGTH)
        assert form.bio_length() == BIO_MAX_LENGTH
        assert await form.submit() is True

    async def test_remote_error_keeps_edit(self, form, transport, spawned):
        await drain(spawned)
        transport.error = "Server down"
        form.set("bio", "draft")
        assert await form.submit() is False
        assert form.status.error == "Server down"
        assert form.diff() == {"bio": "draft"}

    async def test_unchanged_bio_is_noop(self, form, transport, spawned):
        await drain(spawned)
        assert await form.submit() is False
        assert transport.updates == []

    async def test_submit_while_sending_is_dropped(self, form, transport, spawned):
        await drain(spawned)
        transport.gate = asyncio.Event()
        form.set("bio", "draft")
        first = asyncio.ensure_future(form.submit())
        await asyncio.sleep(0)
        assert form.status.is_sending() is True
        assert form.status_label() == "Saving..."
        assert await form.submit() is False
        transport.gate.set()
        assert await first is True
        assert transport.updates == [{"bio": "draft"}]
        assert form.status_label() == "Save Changes"

    async def test_response_after_dispose_skips_merge(self, form, transport, spawned):
        await drain(spawned)
        transport.gate = asyncio.Event()
        form.set("bio", "draft")
        pending = asyncio.ensure_future(form.submit())
        await asyncio.sleep(0)
        form.dispose()
        transport.gate.set()
        assert await pending is True
        assert form.details.get().bio == "hello"
        assert form.status.is_sending() is False
