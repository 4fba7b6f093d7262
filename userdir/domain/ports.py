from __future__ import annotations

from typing import Protocol

from .entities import UserPage


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


# ---- Ports (Hexagonal boundaries) ----
class UserSourcePort(Protocol):
    """Paginated user listing (``GET /users?page=N``).

    Implementations are synchronous; callers that must not block run them in
    a worker thread.
    """

    def fetch_page(self, page: int) -> UserPage: ...
