from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from userdir.adapters.api_errors import ApiTimeoutError
from userdir.domain.entities import UserPage, UserRecord
from userdir.domain.ports import UserSourcePort

DEMO_USERS: tuple[UserRecord, ...] = tuple(
    UserRecord(
        id=index + 1,
        first_name=first,
        last_name=last,
        email=email,
        avatar_url=f"https://reqres.in/img/faces/{index + 1}-image.jpg",
    )
    for index, (first, last, email) in enumerate(
        [
            ("George", "Bluth", "george.bluth@reqres.in"),
            ("Janet", "Weaver", "janet.weaver@gmail.com"),
            ("Emma", "Wong", "emma.wong@reqres.in"),
            ("Eve", "Holt", "eve.holt@reqres.in"),
            ("Charles", "Morris", "charles.morris@gmail.com"),
            ("Tracey", "Ramos", "tracey.ramos@reqres.in"),
            ("Michael", "Lawson", "michael.lawson@reqres.in"),
            ("Lindsay", "Ferguson", "lindsay.ferguson@gmail.com"),
            ("Tobias", "Funke", "tobias.funke@reqres.in"),
            ("Byron", "Fields", "byron.fields@reqres.in"),
            ("Amelia", "Edwards", "amelia.edwards@gmail.com"),
            ("Rachel", "Howell", "rachel.howell@reqres.in"),
        ]
    )
)


@dataclass
class UserSourceMock(UserSourcePort):
    """Offline substitute for ``UserRestAdapter`` with deterministic pages.

    ``fail_next`` makes the next N calls raise ``ApiTimeoutError``, which the
    use case maps like a real transport failure.
    """

    users: Sequence[UserRecord] = DEMO_USERS
    per_page: int = 6
    fail_next: int = 0
    calls: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.per_page < 1:
            raise ValueError("per_page must be >= 1")
        self.users = tuple(self.users)

    @property
    def total_pages(self) -> int:
        return max(1, -(-len(self.users) // self.per_page))

    def fetch_page(self, page: int) -> UserPage:
        if page < 1:
            raise ValueError(f"Page number must be >= 1, got {page!r}")
        self.calls.append(page)
        if self.fail_next > 0:
            self.fail_next -= 1
            raise ApiTimeoutError(f"Timeout contacting mock page {page}", context=f"GET mock/users?page={page}")
        start = (page - 1) * self.per_page
        chunk = tuple(self.users[start:start + self.per_page])
        return UserPage(page=page, records=chunk, total_pages=self.total_pages)


__all__ = ["DEMO_USERS", "UserSourceMock"]
