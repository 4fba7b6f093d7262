from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Sequence

from userdir.adapters.user_source_mock import UserSourceMock
from userdir.domain.entities import UserRecord
from userdir.usecases.fetch_user_page import FetchUserPage
from userdir.viewmodels.directory_vm import DirectoryVM


def make_user(uid: int, first: str, last: str = "Doe", email: str | None = None) -> UserRecord:
    return UserRecord(
        id=uid,
        first_name=first,
        last_name=last,
        email=email or f"{first.lower()}.{last.lower()}@reqres.in",
        avatar_url=f"https://reqres.in/img/faces/{uid}-image.jpg",
    )


def make_users(count: int) -> List[UserRecord]:
    return [make_user(i + 1, f"User{i + 1:02d}") for i in range(count)]


async def run_inline(fn: Callable[[], Any]) -> Any:
    """Stand-in for ``asyncio.to_thread`` that calls ``fn`` on the loop."""
    return fn()


def make_vm(
    users: Sequence[UserRecord],
    *,
    per_page: int = 6,
    fail_next: int = 0,
) -> tuple[DirectoryVM, UserSourceMock]:
    source = UserSourceMock(users=users, per_page=per_page, fail_next=fail_next)
    vm = DirectoryVM(FetchUserPage(source), run_blocking=run_inline)
    return vm, source


def run(coro: Any) -> Any:
    return asyncio.run(coro)


__all__ = ["make_user", "make_users", "make_vm", "run", "run_inline"]
