from __future__ import annotations

from typing import List

from userdir.domain.derivation import collation_key, derive_view, matches_search
from userdir.domain.entities import FilterKind, SortKey, UserRecord


def _user(uid: int, first: str, last: str, email: str) -> UserRecord:
    return UserRecord(id=uid, first_name=first, last_name=last, email=email, avatar_url="")


def _six_users() -> List[UserRecord]:
    return [
        _user(1, "George", "Bluth", "george.bluth@reqres.in"),
        _user(2, "Janet", "Weaver", "janet.weaver@gmail.com"),
        _user(3, "Emma", "Wong", "emma.wong@reqres.in"),
        _user(4, "Eve", "Holt", "eve.holt@reqres.in"),
        _user(5, "Charles", "Morris", "charles.morris@GMAIL.com"),
        _user(6, "Tracey", "Ramos", "tracey.ramos@reqres.in"),
    ]


def test_gmail_filter_keeps_only_gmail_addresses() -> None:
    view = derive_view(_six_users(), filter_kind=FilterKind.GMAIL_ONLY, visible_window=6)

    assert [r.id for r in view.visible_records] == [5, 2]
    assert view.total_matching == 2


def test_gmail_filter_requires_suffix_not_substring() -> None:
    records = [_user(1, "Ann", "X", "ann@gmail.com.evil.org"), _user(2, "Bo", "Y", "bo@gmail.com")]

    view = derive_view(records, filter_kind="gmail", visible_window=6)

    assert [r.id for r in view.visible_records] == [2]


def test_first_letter_a_filter_is_case_insensitive() -> None:
    records = [
        _user(1, "amelia", "E", "a@x.io"),
        _user(2, "Byron", "F", "b@x.io"),
        _user(3, "Alice", "G", "c@x.io"),
    ]

    view = derive_view(records, filter_kind=FilterKind.FIRST_LETTER_A, visible_window=6)

    assert [r.first_name for r in view.visible_records] == ["Alice", "amelia"]


def test_search_matches_first_last_or_email_case_insensitively() -> None:
    record = _user(1, "Janet", "Weaver", "janet.weaver@gmail.com")

    assert matches_search(record, "JAN")
    assert matches_search(record, "weav")
    assert matches_search(record, "@GMAIL")
    assert matches_search(record, "")
    assert not matches_search(record, "bluth")


def test_search_and_filter_combine() -> None:
    view = derive_view(
        _six_users(),
        search_term="morris",
        filter_kind=FilterKind.GMAIL_ONLY,
        visible_window=6,
    )

    assert [r.id for r in view.visible_records] == [5]


def test_sort_by_last_name_orders_ascending() -> None:
    records = [_user(1, "A", "Zeta", "z@x.io"), _user(2, "B", "Alpha", "a@x.io")]

    view = derive_view(records, sort_key=SortKey.LAST_NAME, visible_window=6)

    assert [r.last_name for r in view.visible_records] == ["Alpha", "Zeta"]


def test_sort_is_stable_for_equal_keys() -> None:
    records = [
        _user(10, "Sam", "Lee", "s1@x.io"),
        _user(11, "Ada", "Lee", "a@x.io"),
        _user(12, "Kim", "Lee", "s2@x.io"),
        _user(13, "Bo", "Diaz", "b@x.io"),
    ]

    view = derive_view(records, sort_key=SortKey.LAST_NAME, visible_window=10)

    assert [r.id for r in view.visible_records] == [13, 10, 11, 12]


def test_collation_ignores_case_and_accents_at_primary_level() -> None:
    names = ["émile", "Zoe", "adam", "Bob"]

    assert sorted(names, key=collation_key) == ["adam", "Bob", "émile", "Zoe"]
    assert sorted(["A", "a"], key=collation_key) == ["a", "A"]


def test_window_truncates_and_never_pads() -> None:
    records = _six_users()

    small = derive_view(records, visible_window=4, server_page=1, server_total_pages=1)
    large = derive_view(records, visible_window=12, server_page=1, server_total_pages=1)

    assert len(small.visible_records) == 4
    assert small.total_matching == 6
    assert small.has_more is True
    assert len(large.visible_records) == 6
    assert large.has_more is False


def test_has_more_reflects_remaining_server_pages() -> None:
    view = derive_view(_six_users(), visible_window=6, server_page=1, server_total_pages=2)

    assert view.has_more is True


def test_visible_records_are_matching_subset_of_input() -> None:
    records = _six_users()

    for term in ("", "e", "reqres", "zzz", "WONG"):
        view = derive_view(records, search_term=term, visible_window=3)
        assert len(view.visible_records) == min(3, view.total_matching)
        for record in view.visible_records:
            assert record in records
            assert matches_search(record, term)


def test_duplicate_ids_are_kept() -> None:
    dup = _user(1, "George", "Bluth", "george.bluth@reqres.in")

    view = derive_view([dup, dup], visible_window=6)

    assert view.total_matching == 2
