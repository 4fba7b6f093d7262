"""Domain-level error types for use-case and adapter mapping.

``NetworkError`` is the only failure the view model ever sees: any problem
fetching or parsing a page is converted into it before crossing the use-case
boundary.
"""

from __future__ import annotations

from .ports import UseCaseError


class NetworkError(UseCaseError):
    """A page could not be fetched or its payload could not be parsed."""

    def __init__(self, code: str, message: str, *, page: int | None = None):
        super().__init__(code, message)
        self.page = page

    @property
    def reason(self) -> str:
        return self.message


__all__ = ["NetworkError"]
