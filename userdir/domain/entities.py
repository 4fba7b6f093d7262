"""Domain value objects shared across adapters, use cases, and view models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Tuple


class SortKey(str, Enum):
    """Record field used to order the directory listing."""

    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    EMAIL = "email"

    @classmethod
    def coerce(cls, value: "SortKey | str") -> "SortKey":
        """Accept an enum member or its wire value (``"last_name"``)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported sort key: {value!r}") from exc


class FilterKind(str, Enum):
    """Preset filters offered next to the search box."""

    ALL = "all"
    GMAIL_ONLY = "gmail"
    FIRST_LETTER_A = "first_letter_a"

    @classmethod
    def coerce(cls, value: "FilterKind | str") -> "FilterKind":
        """Accept an enum member or its wire value (``"gmail"``)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported filter kind: {value!r}") from exc


@dataclass(frozen=True)
class UserRecord:
    """One user as returned by the directory API.

    Records are never mutated after creation; new pages only append.
    """

    id: int
    first_name: str
    last_name: str
    email: str
    avatar_url: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def value_for(self, key: SortKey) -> str:
        """Return the text value addressed by ``key``."""
        if key is SortKey.FIRST_NAME:
            return self.first_name
        if key is SortKey.LAST_NAME:
            return self.last_name
        return self.email

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UserRecord":
        """Build a record from one wire entry.

        Wire names map as ``first_name`` -> ``first_name``, ``last_name`` ->
        ``last_name``, ``avatar`` -> ``avatar_url``; ``id`` and ``email`` are
        taken verbatim.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If ``id`` is not an integer.
        """
        raw_id = payload["id"]
        if isinstance(raw_id, bool):
            raise ValueError(f"Invalid user id: {raw_id!r}")
        return cls(
            id=int(raw_id),
            first_name=str(payload["first_name"]),
            last_name=str(payload["last_name"]),
            email=str(payload["email"]),
            avatar_url=str(payload.get("avatar") or ""),
        )


@dataclass(frozen=True)
class UserPage:
    """One server-side batch of records plus the total page count."""

    page: int
    records: Tuple[UserRecord, ...]
    total_pages: int

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("UserPage.page must be >= 1.")
        if self.total_pages < 1:
            raise ValueError("UserPage.total_pages must be >= 1.")


__all__ = ["FilterKind", "SortKey", "UserPage", "UserRecord"]
