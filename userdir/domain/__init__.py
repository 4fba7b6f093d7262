"""Domain package exports for value objects, ports and the derivation pipeline."""

from .derivation import DirectoryView, derive_view
from .entities import FilterKind, SortKey, UserPage, UserRecord
from .errors import NetworkError
from .ports import UseCaseError, UserSourcePort

__all__ = [
    "DirectoryView",
    "FilterKind",
    "NetworkError",
    "SortKey",
    "UseCaseError",
    "UserPage",
    "UserRecord",
    "UserSourcePort",
    "derive_view",
]
