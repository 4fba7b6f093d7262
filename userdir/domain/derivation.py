"""Pure filter -> sort -> window pipeline for the directory listing.

Nothing in here performs I/O or mutates its inputs. ``DirectoryVM`` calls
``derive_view`` with its current state and memoizes the result.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from .entities import FilterKind, SortKey, UserRecord

GMAIL_SUFFIX = "@gmail.com"


@dataclass(frozen=True)
class DirectoryView:
    """Projection handed to the display surface."""

    visible_records: Tuple[UserRecord, ...]
    total_matching: int
    has_more: bool


def _fold(text: str) -> str:
    """Lower-case and strip combining marks so ``Élodie`` matches ``elodie``."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def collation_key(text: str) -> Tuple[str, str, str]:
    """Locale-style sort key.

    Primary level ignores accents and case, the secondary level keeps accents,
    and the tertiary level orders lowercase before uppercase. Strings that are
    equal at all three levels are equal, so ``sorted`` keeps their order.
    """
    return (_fold(text), text.casefold(), text.swapcase())


def matches_search(record: UserRecord, term: str) -> bool:
    """Case-insensitive substring match against first name, last name or email."""
    if not term:
        return True
    needle = term.casefold()
    return (
        needle in record.first_name.casefold()
        or needle in record.last_name.casefold()
        or needle in record.email.casefold()
    )


_FILTERS: Dict[FilterKind, Callable[[UserRecord], bool]] = {
    FilterKind.ALL: lambda record: True,
    FilterKind.GMAIL_ONLY: lambda record: record.email.casefold().endswith(GMAIL_SUFFIX),
    FilterKind.FIRST_LETTER_A: lambda record: record.first_name.casefold().startswith("a"),
}


def matches_filter(record: UserRecord, kind: FilterKind) -> bool:
    return _FILTERS[kind](record)


def filter_records(
    records: Iterable[UserRecord], *, search_term: str, filter_kind: FilterKind
) -> List[UserRecord]:
    return [
        record
        for record in records
        if matches_search(record, search_term) and matches_filter(record, filter_kind)
    ]


def sort_records(records: Sequence[UserRecord], sort_key: SortKey) -> List[UserRecord]:
    # sorted() is stable: equal keys keep their accumulated order.
    return sorted(records, key=lambda record: collation_key(record.value_for(sort_key)))


def derive_view(
    records: Sequence[UserRecord],
    *,
    search_term: str = "",
    sort_key: SortKey = SortKey.FIRST_NAME,
    filter_kind: FilterKind = FilterKind.ALL,
    visible_window: int,
    server_page: int = 0,
    server_total_pages: int = 1,
) -> DirectoryView:
    """Filter, sort and truncate ``records`` into a ``DirectoryView``.

    Args:
        records: Accumulated records in server page order.
        search_term: Free text matched against names and email.
        sort_key: Field to sort ascending on.
        filter_kind: Preset filter applied on top of the search.
        visible_window: Number of records exposed to the display surface.
        server_page: Last server page merged (0 before the first load).
        server_total_pages: Page count reported by the server.

    Returns:
        ``DirectoryView`` with at most ``visible_window`` records; ``has_more``
        is true while the window is smaller than the match count or more
        server pages remain.
    """
    window = max(0, int(visible_window))
    matching = filter_records(
        records,
        search_term=search_term,
        filter_kind=FilterKind.coerce(filter_kind),
    )
    ordered = sort_records(matching, SortKey.coerce(sort_key))
    total = len(ordered)
    return DirectoryView(
        visible_records=tuple(ordered[:window]),
        total_matching=total,
        has_more=window < total or server_page < server_total_pages,
    )


__all__ = [
    "DirectoryView",
    "GMAIL_SUFFIX",
    "collation_key",
    "derive_view",
    "filter_records",
    "matches_filter",
    "matches_search",
    "sort_records",
]
