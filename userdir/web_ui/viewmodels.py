"""Thin web-facing projections for NiceGUI bindings.

These helpers turn domain records into table rows and provide the option
maps for the select controls. No I/O happens here.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List

from userdir.domain.entities import FilterKind, SortKey, UserRecord

SORT_OPTIONS: Dict[str, str] = {
    SortKey.FIRST_NAME.value: "Sort by First Name",
    SortKey.LAST_NAME.value: "Sort by Last Name",
    SortKey.EMAIL.value: "Sort by Email",
}

FILTER_OPTIONS: Dict[str, str] = {
    FilterKind.ALL.value: "All Users",
    FilterKind.GMAIL_ONLY.value: "Gmail Users",
    FilterKind.FIRST_LETTER_A.value: "Names starting with A",
}

TABLE_COLUMNS: List[Dict[str, str]] = [
    {"name": "avatar", "label": "Avatar", "field": "avatar", "align": "left"},
    {"name": "name", "label": "Name", "field": "name", "align": "left"},
    {"name": "email", "label": "Email", "field": "email", "align": "left"},
    {"name": "id", "label": "ID", "field": "id", "align": "right"},
]


@dataclass(frozen=True)
class UserRow:
    """Display row consumed by the results table."""

    key: str
    id: int
    avatar: str
    name: str
    email: str


def user_rows(records: Iterable[UserRecord]) -> List[Dict[str, object]]:
    """Convert records into table rows.

    Row keys include the position because duplicate ids across pages are kept.
    """
    return [
        asdict(
            UserRow(
                key=f"{index}:{record.id}",
                id=record.id,
                avatar=record.avatar_url,
                name=record.full_name,
                email=record.email,
            )
        )
        for index, record in enumerate(records)
    ]


__all__ = ["FILTER_OPTIONS", "SORT_OPTIONS", "TABLE_COLUMNS", "UserRow", "user_rows"]
