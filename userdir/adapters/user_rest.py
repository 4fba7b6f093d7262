from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from userdir.domain.entities import UserPage, UserRecord
from userdir.domain.ports import UserSourcePort

from .api_errors import (
    ApiClientError,
    ApiError,
    ApiResponseError,
    ApiServerError,
    build_error_message,
    extract_error_code,
    extract_error_hint,
    parse_error_payload,
)
from .http_client import HttpConfig, RetryingSession

LOGGER = logging.getLogger(__name__)


class UserRestAdapter(UserSourcePort):
    """REST adapter for the paginated ``/users`` listing."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        request_timeout_s: int = 10,
        retries: int = 2,
    ) -> None:
        cleaned = str(base_url or "").strip()
        if not cleaned:
            raise ValueError("UserRestAdapter requires a base URL")

        self.base_url = cleaned.rstrip("/")
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.session = RetryingSession(api_key, self.cfg)

    def fetch_page(self, page: int) -> UserPage:
        if isinstance(page, bool) or int(page) < 1:
            raise ValueError(f"Page number must be >= 1, got {page!r}")
        page = int(page)
        ctx = f"users[page={page}]"

        resp = self.session.get(self._make_url("/users"), params={"page": page})
        self._ensure_ok(resp, ctx)
        payload = self._json_any(resp, ctx)
        result = self._parse_page(payload, page=page, ctx=ctx)
        LOGGER.debug(
            "%s: %d records, total_pages=%d", ctx, len(result.records), result.total_pages
        )
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _make_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _parse_page(payload: Any, *, page: int, ctx: str) -> UserPage:
        if not isinstance(payload, dict):
            raise ApiResponseError(f"{ctx}: expected object response", payload=payload, context=ctx)

        entries = payload.get("data")
        if not isinstance(entries, list):
            raise ApiResponseError(f"{ctx}: missing 'data' list", payload=payload, context=ctx)

        total_pages = payload.get("total_pages")
        if isinstance(total_pages, bool) or not isinstance(total_pages, int) or total_pages < 1:
            raise ApiResponseError(
                f"{ctx}: invalid 'total_pages' value {total_pages!r}",
                payload=payload,
                context=ctx,
            )

        records: List[UserRecord] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ApiResponseError(
                    f"{ctx}: entry {index} is not an object", payload=payload, context=ctx
                )
            try:
                records.append(UserRecord.from_payload(entry))
            except (KeyError, TypeError, ValueError) as exc:
                raise ApiResponseError(
                    f"{ctx}: malformed entry {index}: {exc}", payload=payload, context=ctx
                ) from exc
        return UserPage(page=page, records=tuple(records), total_pages=total_pages)

    @staticmethod
    def _ensure_ok(resp: requests.Response, ctx: str) -> None:
        if 200 <= resp.status_code < 300:
            return
        status = resp.status_code
        payload = parse_error_payload(resp)
        message = build_error_message(ctx, status, payload)
        if 400 <= status < 500:
            raise ApiClientError(
                message,
                status=status,
                code=extract_error_code(payload),
                hint=extract_error_hint(payload),
                payload=payload,
                context=ctx,
            )
        if 500 <= status < 600:
            raise ApiServerError(message, status=status, payload=payload, context=ctx)
        raise ApiError(message, status=status, payload=payload, context=ctx)

    @staticmethod
    def _json_any(resp: requests.Response, ctx: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            snippet = getattr(resp, "text", "")[:400]
            raise ApiResponseError(
                f"{ctx}: invalid JSON response: {snippet}", context=ctx
            ) from exc


__all__ = ["UserRestAdapter"]
