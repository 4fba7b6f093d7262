"""State owner for the user directory page.

``DirectoryVM`` accumulates fetched pages, holds the search/sort/filter
selection and the visible window, and exposes a memoized projection for the
display surface. ``load_next``, ``request_more`` and ``refresh`` are the only
operations that suspend; everything else is synchronous.

Call context:
    ``WebRuntime`` constructs one view model per browser session and binds the
    NiceGUI controls to the setters and commands below.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from userdir.domain.derivation import DirectoryView, derive_view as derive_directory_view
from userdir.domain.entities import FilterKind, SortKey, UserPage, UserRecord
from userdir.usecases.error_mapping import map_api_error

from .status_format import (
    NO_RESULTS_MESSAGE,
    error_message,
    load_more_label,
    pagination_label,
    status_label,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 6

FetchPageFn = Callable[..., UserPage]
RunBlockingFn = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class LoadStatus:
    """Fetch state: ``idle``, ``loading`` or ``failed`` with a reason."""

    state: str = "idle"
    reason: Optional[str] = None

    @classmethod
    def idle(cls) -> "LoadStatus":
        return cls("idle")

    @classmethod
    def loading(cls) -> "LoadStatus":
        return cls("loading")

    @classmethod
    def failed(cls, reason: str) -> "LoadStatus":
        return cls("failed", reason)

    @property
    def is_loading(self) -> bool:
        return self.state == "loading"

    @property
    def is_failed(self) -> bool:
        return self.state == "failed"


class DirectoryVM:
    """View model for the searchable, sortable, incrementally paged directory.

    Args:
        fetch_page: Blocking callable ``fetch_page(page=N) -> UserPage`` that
            raises ``NetworkError`` on failure (usually ``FetchUserPage``).
        page_size: Step by which the visible window grows.
        on_change: Invoked after every state change so views can refresh.
        run_blocking: Coroutine function used to run ``fetch_page`` off the
            event loop. Defaults to ``asyncio.to_thread``.
    """

    def __init__(
        self,
        fetch_page: FetchPageFn,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        on_change: Optional[Callable[[], None]] = None,
        run_blocking: Optional[RunBlockingFn] = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._fetch_page = fetch_page
        self._run_blocking = run_blocking or asyncio.to_thread
        self.on_change = on_change
        self.page_size = int(page_size)

        self._accumulated: List[UserRecord] = []
        self._version = 0

        self.search_term: str = ""
        self.sort_key: SortKey = SortKey.FIRST_NAME
        self.filter_kind: FilterKind = FilterKind.ALL
        self.server_page: int = 0
        self.server_total_pages: int = 1
        self.visible_window: int = self.page_size
        self.status: LoadStatus = LoadStatus.idle()

        self._memo: Optional[Tuple[tuple, DirectoryView]] = None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    async def load_next(self) -> bool:
        """Fetch and merge the next server page.

        Returns:
            ``True`` when a page was merged. ``False`` when the call was a
            no-op (already loading, no pages left) or the fetch failed.
        """
        if self.status.is_loading:
            LOGGER.debug("load_next ignored: page %d still loading", self.server_page + 1)
            return False
        if self.server_page >= self.server_total_pages:
            LOGGER.debug("load_next ignored: all %d pages loaded", self.server_total_pages)
            return False

        page = self.server_page + 1
        result = await self._fetch(page)
        if result is None:
            return False

        self._accumulated.extend(result.records)
        self._merged(result, page)
        return True

    async def request_more(self) -> bool:
        """Grow the visible window by one page size.

        Also fetches the next server page when the grown window is larger than
        the current match count and the server has more pages.

        Returns:
            ``False`` when nothing is left to show or fetch.
        """
        view = self.derive_view()
        more_server_pages = self.server_page < self.server_total_pages
        if self.visible_window >= view.total_matching and not more_server_pages:
            return False

        self.visible_window += self.page_size
        self._notify()
        if self.visible_window > view.total_matching and more_server_pages:
            await self.load_next()
        return True

    async def refresh(self) -> bool:
        """Load page 1 again and replace everything fetched so far.

        The old records, counters and window stay in place until page 1
        arrives; a failed fetch leaves them untouched. Search, sort and
        filter selections are kept.
        """
        if self.status.is_loading:
            return False
        page = 1
        result = await self._fetch(page)
        if result is None:
            return False

        self._accumulated = list(result.records)
        self.visible_window = self.page_size
        self._merged(result, page)
        return True

    async def _fetch(self, page: int) -> Optional[UserPage]:
        """Run one fetch; on failure set the failed status and return ``None``."""
        self.status = LoadStatus.loading()
        self._notify()
        LOGGER.debug("Fetching users page %d", page)
        try:
            return await self._run_blocking(functools.partial(self._fetch_page, page=page))
        except asyncio.CancelledError:
            self.status = LoadStatus.idle()
            self._notify()
            raise
        except Exception as exc:
            err = map_api_error(exc, page=page)
            LOGGER.warning("Fetching users page %d failed [%s]: %s", page, err.code, err.reason)
            self.status = LoadStatus.failed(err.reason)
            self._notify()
            return None

    def _merged(self, result: UserPage, page: int) -> None:
        self._version += 1
        self.server_total_pages = max(1, int(result.total_pages))
        self.server_page = page
        self.status = LoadStatus.idle()
        LOGGER.info(
            "Merged users page %d/%d (%d records, %d total)",
            page,
            self.server_total_pages,
            len(result.records),
            len(self._accumulated),
        )
        self._notify()

    # ------------------------------------------------------------------
    # Setters (no fetch, no window change)
    # ------------------------------------------------------------------
    def set_search_term(self, term: Optional[str]) -> None:
        value = str(term or "")
        if value == self.search_term:
            return
        self.search_term = value
        self._notify()

    def set_sort_key(self, key: SortKey | str) -> None:
        value = SortKey.coerce(key)
        if value is self.sort_key:
            return
        self.sort_key = value
        self._notify()

    def set_filter_kind(self, kind: FilterKind | str) -> None:
        value = FilterKind.coerce(kind)
        if value is self.filter_kind:
            return
        self.filter_kind = value
        self._notify()

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------
    def derive_view(self) -> DirectoryView:
        """Return the filtered, sorted and windowed projection.

        The result is cached until one of its inputs changes.
        """
        key = (
            self.search_term,
            self.sort_key,
            self.filter_kind,
            self.visible_window,
            self._version,
            self.server_page,
            self.server_total_pages,
        )
        if self._memo is not None and self._memo[0] == key:
            return self._memo[1]
        view = derive_directory_view(
            self._accumulated,
            search_term=self.search_term,
            sort_key=self.sort_key,
            filter_kind=self.filter_kind,
            visible_window=self.visible_window,
            server_page=self.server_page,
            server_total_pages=self.server_total_pages,
        )
        self._memo = (key, view)
        return view

    # ------------------------------------------------------------------
    # Display surface
    # ------------------------------------------------------------------
    @property
    def accumulated(self) -> Tuple[UserRecord, ...]:
        return tuple(self._accumulated)

    @property
    def visible_records(self) -> Tuple[UserRecord, ...]:
        return self.derive_view().visible_records

    @property
    def total_matching(self) -> int:
        return self.derive_view().total_matching

    @property
    def has_more(self) -> bool:
        return self.derive_view().has_more

    @property
    def is_loading(self) -> bool:
        return self.status.is_loading

    @property
    def is_initial_loading(self) -> bool:
        """Spinner state: a fetch is running and nothing is visible yet."""
        return self.status.is_loading and not self.visible_records

    @property
    def can_load_more(self) -> bool:
        return self.has_more and not self.status.is_loading

    @property
    def status_text(self) -> str:
        return status_label(self.status.state)

    @property
    def load_more_text(self) -> str:
        return load_more_label(self.status.is_loading)

    @property
    def pagination_text(self) -> str:
        view = self.derive_view()
        return pagination_label(len(view.visible_records), view.total_matching)

    @property
    def empty_message(self) -> Optional[str]:
        if self.status.is_loading or self.server_page == 0 or self.total_matching:
            return None
        return NO_RESULTS_MESSAGE

    @property
    def error_message(self) -> Optional[str]:
        if not self.status.is_failed:
            return None
        return error_message(self.status.reason)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()


__all__ = ["DEFAULT_PAGE_SIZE", "DirectoryVM", "LoadStatus"]
