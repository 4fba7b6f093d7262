"""Runtime composition for the directory web UI.

Builds the user source, the fetch use case and one ``DirectoryVM`` per
browser session. Kept free of NiceGUI imports so it can be exercised in tests.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from userdir.adapters.user_rest import UserRestAdapter
from userdir.adapters.user_source_mock import UserSourceMock
from userdir.app.settings import DirectorySettings
from userdir.domain.ports import UserSourcePort
from userdir.usecases.fetch_user_page import FetchUserPage
from userdir.viewmodels.directory_vm import DirectoryVM, RunBlockingFn

LOGGER = logging.getLogger(__name__)


class WebRuntime:
    """Orchestration state used by the NiceGUI page."""

    def __init__(
        self,
        settings: Optional[DirectorySettings] = None,
        *,
        source: Optional[UserSourcePort] = None,
    ) -> None:
        self.settings = settings or DirectorySettings.from_env()
        self.source = source or self._build_source(self.settings)
        self.uc_fetch_page = FetchUserPage(self.source)

    def new_directory_vm(
        self,
        *,
        on_change: Optional[Callable[[], None]] = None,
        run_blocking: Optional[RunBlockingFn] = None,
    ) -> DirectoryVM:
        """Return a fresh view model; each browser session owns its own."""
        return DirectoryVM(
            self.uc_fetch_page,
            page_size=self.settings.page_size,
            on_change=on_change,
            run_blocking=run_blocking,
        )

    def describe_source(self) -> str:
        if isinstance(self.source, UserSourceMock):
            return "offline demo data"
        if isinstance(self.source, UserRestAdapter):
            return self.source.base_url
        return type(self.source).__name__

    @staticmethod
    def _build_source(settings: DirectorySettings) -> UserSourcePort:
        if settings.use_mock:
            LOGGER.info("Using offline demo user source")
            return UserSourceMock(per_page=settings.page_size)
        LOGGER.info("Using REST user source at %s", settings.api_base_url)
        return UserRestAdapter(
            settings.api_base_url,
            api_key=settings.api_key or None,
            request_timeout_s=settings.request_timeout_s,
            retries=settings.retries,
        )


__all__ = ["WebRuntime"]
