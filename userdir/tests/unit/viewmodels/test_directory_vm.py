from __future__ import annotations

import asyncio
from typing import Any, Callable, List

import pytest

from userdir.adapters.user_source_mock import UserSourceMock
from userdir.domain.entities import FilterKind, SortKey, UserPage
from userdir.usecases.fetch_user_page import FetchUserPage
from userdir.viewmodels.directory_vm import DirectoryVM

from userdir.tests.unit.viewmodels.helpers import make_user, make_users, make_vm, run


def test_initial_state_before_any_load() -> None:
    vm, source = make_vm(make_users(3))

    assert vm.server_page == 0
    assert vm.server_total_pages == 1
    assert vm.visible_window == 6
    assert vm.status.state == "idle"
    assert vm.visible_records == ()
    assert vm.has_more is True
    assert vm.empty_message is None
    assert source.calls == []


def test_load_next_merges_first_page() -> None:
    users = make_users(10)
    vm, source = make_vm(users)

    merged = run(vm.load_next())

    assert merged is True
    assert source.calls == [1]
    assert vm.accumulated == tuple(users[:6])
    assert vm.server_page == 1
    assert vm.server_total_pages == 2
    assert vm.status.state == "idle"
    assert len(vm.visible_records) == 6


def test_load_next_appends_pages_in_order_and_stops_at_last_page() -> None:
    users = make_users(10)
    vm, source = make_vm(users)

    async def scenario() -> List[bool]:
        return [await vm.load_next() for _ in range(3)]

    results = run(scenario())

    assert results == [True, True, False]
    assert source.calls == [1, 2]
    assert vm.accumulated == tuple(users)


def test_load_next_failure_leaves_accumulated_unchanged_and_allows_retry() -> None:
    users = make_users(12)
    vm, source = make_vm(users, fail_next=0)
    run(vm.load_next())
    before = vm.accumulated
    source.fail_next = 1

    failed = run(vm.load_next())

    assert failed is False
    assert vm.accumulated == before
    assert vm.status.is_failed
    assert vm.status.reason == "Request timed out. Check connection."
    assert vm.server_page == 1
    assert vm.error_message is not None
    assert vm.error_message.startswith("Failed to fetch users. Please try again.")

    retried = run(vm.load_next())

    assert retried is True
    assert source.calls == [1, 2, 2]
    assert vm.accumulated == tuple(users)
    assert vm.status.state == "idle"
    assert vm.error_message is None


def test_load_next_is_noop_while_a_fetch_is_in_flight() -> None:
    source = UserSourceMock(users=make_users(12), per_page=6)
    gate: List[asyncio.Event] = []

    async def gated(fn: Callable[[], Any]) -> Any:
        await gate[0].wait()
        return fn()

    vm = DirectoryVM(FetchUserPage(source), run_blocking=gated)

    async def scenario() -> tuple[bool, bool]:
        gate.append(asyncio.Event())
        first = asyncio.create_task(vm.load_next())
        await asyncio.sleep(0)
        assert vm.status.is_loading
        assert vm.is_initial_loading
        assert vm.can_load_more is False
        second = await vm.load_next()
        gate[0].set()
        return await first, second

    first, second = run(scenario())

    assert first is True
    assert second is False
    assert source.calls == [1]
    assert vm.server_page == 1


def test_load_next_default_runs_fetch_in_worker_thread() -> None:
    source = UserSourceMock(users=make_users(4))
    vm = DirectoryVM(FetchUserPage(source))

    assert run(vm.load_next()) is True
    assert len(vm.accumulated) == 4


def test_load_next_catches_errors_from_raw_callables() -> None:
    def broken(*, page: int) -> UserPage:
        raise ConnectionResetError("reset by peer")

    async def inline(fn: Callable[[], Any]) -> Any:
        return fn()

    vm = DirectoryVM(broken, run_blocking=inline)

    assert run(vm.load_next()) is False
    assert vm.status.is_failed
    assert vm.status.reason == "reset by peer"


def test_setters_rederive_without_fetching_or_shrinking_window() -> None:
    users = [
        make_user(1, "Alice", "Zeta", "alice@gmail.com"),
        make_user(2, "Bob", "Alpha", "bob@reqres.in"),
        make_user(3, "Anna", "Moss", "anna@reqres.in"),
    ]
    vm, source = make_vm(users)
    run(vm.load_next())
    vm.visible_window = 12

    vm.set_sort_key(SortKey.LAST_NAME)
    assert [r.last_name for r in vm.visible_records] == ["Alpha", "Moss", "Zeta"]

    vm.set_filter_kind("first_letter_a")
    assert [r.first_name for r in vm.visible_records] == ["Anna", "Alice"]

    vm.set_search_term("gmail")
    assert [r.id for r in vm.visible_records] == [1]

    vm.set_filter_kind(FilterKind.ALL)
    vm.set_search_term("")
    assert vm.total_matching == 3
    assert vm.visible_window == 12
    assert source.calls == [1]


def test_same_search_term_twice_yields_identical_view() -> None:
    vm, _ = make_vm(make_users(6))
    run(vm.load_next())
    changes: List[int] = []
    vm.on_change = lambda: changes.append(1)

    vm.set_search_term("user0")
    first = vm.derive_view()
    vm.set_search_term("user0")
    second = vm.derive_view()

    assert first is second
    assert changes == [1]


def test_derive_view_recomputes_after_accumulated_changes() -> None:
    vm, _ = make_vm(make_users(12))
    run(vm.load_next())
    before = vm.derive_view()

    run(vm.load_next())
    after = vm.derive_view()

    assert before is not after
    assert before.total_matching == 6
    assert after.total_matching == 12


def test_gmail_scenario_shows_exactly_two_records() -> None:
    users = [
        make_user(1, "George", email="george@reqres.in"),
        make_user(2, "Janet", email="janet@gmail.com"),
        make_user(3, "Emma", email="emma@reqres.in"),
        make_user(4, "Eve", email="eve@reqres.in"),
        make_user(5, "Charles", email="charles@gmail.com"),
        make_user(6, "Tracey", email="tracey@reqres.in"),
    ]
    vm, _ = make_vm(users)
    run(vm.load_next())

    vm.set_filter_kind(FilterKind.GMAIL_ONLY)

    assert vm.visible_window == 6
    assert len(vm.visible_records) == 2
    assert vm.total_matching == 2
    assert vm.pagination_text == "Showing 2 of 2 users"


def test_request_more_grows_window_without_fetch_when_all_loaded() -> None:
    vm, source = make_vm(make_users(10), per_page=10)
    run(vm.load_next())
    assert vm.visible_window == 6
    assert vm.total_matching == 10

    grown = run(vm.request_more())

    assert grown is True
    assert vm.visible_window == 12
    assert len(vm.visible_records) == 10
    assert source.calls == [1]
    assert vm.has_more is False


def test_request_more_fetches_next_page_when_window_outgrows_matches() -> None:
    vm, source = make_vm(make_users(10), per_page=6)
    run(vm.load_next())
    assert vm.total_matching == 6

    grown = run(vm.request_more())

    assert grown is True
    assert vm.visible_window == 12
    assert source.calls == [1, 2]
    assert len(vm.visible_records) == 10


def test_request_more_is_noop_when_everything_is_shown() -> None:
    vm, source = make_vm(make_users(4))
    run(vm.load_next())

    grown = run(vm.request_more())

    assert grown is False
    assert vm.visible_window == 6
    assert source.calls == [1]


def test_refresh_restarts_from_first_page_keeping_selection() -> None:
    vm, source = make_vm(make_users(12))
    run(vm.load_next())
    run(vm.request_more())
    vm.set_sort_key("email")
    assert vm.visible_window == 12

    refreshed = run(vm.refresh())

    assert refreshed is True
    assert source.calls == [1, 2, 1]
    assert vm.server_page == 1
    assert vm.visible_window == 6
    assert len(vm.accumulated) == 6
    assert vm.sort_key is SortKey.EMAIL


def test_refresh_failure_keeps_previous_records_and_counters() -> None:
    vm, source = make_vm(make_users(12))
    run(vm.load_next())
    run(vm.load_next())
    run(vm.request_more())
    before = vm.accumulated
    source.fail_next = 1

    refreshed = run(vm.refresh())

    assert refreshed is False
    assert source.calls == [1, 2, 1]
    assert vm.status.is_failed
    assert vm.accumulated == before
    assert vm.server_page == 2
    assert vm.server_total_pages == 2
    assert vm.visible_window == 12
    assert len(vm.visible_records) == 12

    assert run(vm.refresh()) is True
    assert vm.status.state == "idle"
    assert len(vm.accumulated) == 6
    assert vm.server_page == 1
    assert vm.visible_window == 6


def test_refresh_keeps_old_records_visible_while_page_one_loads() -> None:
    source = UserSourceMock(users=make_users(12), per_page=6)
    gate: List[asyncio.Event] = []

    async def gated(fn: Callable[[], Any]) -> Any:
        if gate:
            await gate[0].wait()
        return fn()

    vm = DirectoryVM(FetchUserPage(source), run_blocking=gated)

    async def scenario() -> None:
        await vm.load_next()
        await vm.load_next()
        gate.append(asyncio.Event())
        task = asyncio.create_task(vm.refresh())
        await asyncio.sleep(0)
        assert vm.status.is_loading
        assert len(vm.accumulated) == 12
        assert vm.server_page == 2
        assert vm.is_initial_loading is False
        gate[0].set()
        assert await task is True

    run(scenario())

    assert source.calls == [1, 2, 1]
    assert len(vm.accumulated) == 6


def test_cancelled_load_next_returns_to_idle_without_merging() -> None:
    source = UserSourceMock(users=make_users(12), per_page=6)
    gate: List[asyncio.Event] = []
    states: List[str] = []

    async def gated(fn: Callable[[], Any]) -> Any:
        if gate:
            await gate.pop().wait()
        return fn()

    vm = DirectoryVM(FetchUserPage(source), run_blocking=gated)
    vm.on_change = lambda: states.append(vm.status.state)

    async def scenario() -> bool:
        gate.append(asyncio.Event())
        task = asyncio.create_task(vm.load_next())
        await asyncio.sleep(0)
        assert vm.status.is_loading
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert vm.status.state == "idle"
        assert vm.accumulated == ()
        assert vm.server_page == 0
        return await vm.load_next()

    retried = run(scenario())

    assert states[:2] == ["loading", "idle"]
    assert retried is True
    assert source.calls == [1]
    assert vm.server_page == 1


def test_empty_message_after_load_with_no_matches() -> None:
    vm, _ = make_vm(make_users(3))
    run(vm.load_next())

    vm.set_search_term("nobody")

    assert vm.total_matching == 0
    assert vm.empty_message == "No users found matching your criteria."
    assert vm.pagination_text == "Showing 0 of 0 users"


def test_on_change_fires_for_loading_and_completion() -> None:
    vm, _ = make_vm(make_users(3))
    states: List[str] = []
    vm.on_change = lambda: states.append(vm.status.state)

    run(vm.load_next())

    assert states == ["loading", "idle"]
