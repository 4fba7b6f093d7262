"""Use case for fetching one page of the user directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from userdir.domain.entities import UserPage
from userdir.domain.errors import NetworkError
from userdir.domain.ports import UserSourcePort
from userdir.usecases.error_mapping import map_api_error

LOGGER = logging.getLogger(__name__)


@dataclass
class FetchUserPage:
    """Fetch ``page`` through ``UserSourcePort``; every failure is a ``NetworkError``."""

    source: UserSourcePort

    def __call__(self, *, page: int) -> UserPage:
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise NetworkError("INVALID_PAGE", f"Invalid page number: {page!r}", page=None)
        try:
            return self.source.fetch_page(page)
        except NetworkError:
            raise
        except Exception as exc:
            mapped = map_api_error(
                exc,
                default_code="FETCH_FAILED",
                default_message="Failed to fetch users.",
                page=page,
            )
            LOGGER.debug("fetch_page(%d) failed: %s", page, exc)
            raise mapped from exc


__all__ = ["FetchUserPage"]
