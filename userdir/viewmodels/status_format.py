"""Display labels for the directory view model.

Call context:
    ``DirectoryVM`` uses these helpers to turn load status and counts into
    the strings shown next to the results table.
"""

from __future__ import annotations

from typing import Optional

FETCH_FAILED_MESSAGE = "Failed to fetch users. Please try again."
NO_RESULTS_MESSAGE = "No users found matching your criteria."


def status_label(state: Optional[str]) -> str:
    """Convert a load-state token into operator-facing label text."""
    key = (state or "").strip().lower()
    mapping = {
        "idle": "Ready",
        "loading": "Loading...",
        "failed": "Failed",
    }
    if not key:
        return "Ready"
    return mapping.get(key, key.replace("_", " ").title())


def pagination_label(visible: int, total: int) -> str:
    noun = "user" if total == 1 else "users"
    return f"Showing {visible} of {total} {noun}"


def error_message(reason: Optional[str]) -> str:
    detail = (reason or "").strip()
    if detail:
        return f"{FETCH_FAILED_MESSAGE} ({detail})"
    return FETCH_FAILED_MESSAGE


def load_more_label(loading: bool) -> str:
    return "Loading..." if loading else "Load More"


__all__ = [
    "FETCH_FAILED_MESSAGE",
    "NO_RESULTS_MESSAGE",
    "error_message",
    "load_more_label",
    "pagination_label",
    "status_label",
]
