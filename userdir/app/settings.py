from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping, Optional

DEFAULT_API_BASE_URL = "https://reqres.in/api"
DEFAULT_API_KEY = "reqres-free-v1"

_ENV_KEYS = {
    "api_base_url": "USERDIR_API_BASE_URL",
    "api_key": "USERDIR_API_KEY",
    "request_timeout_s": "USERDIR_REQUEST_TIMEOUT_S",
    "retries": "USERDIR_RETRIES",
    "page_size": "USERDIR_PAGE_SIZE",
    "use_mock": "USERDIR_USE_MOCK",
}


@dataclass(frozen=True)
class DirectorySettings:
    """Typed runtime settings for the directory browser."""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_key: str = DEFAULT_API_KEY
    request_timeout_s: int = 10
    retries: int = 2
    page_size: int = 6
    use_mock: bool = False

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        base: Optional["DirectorySettings"] = None,
    ) -> "DirectorySettings":
        """Apply ``USERDIR_*`` environment overrides on top of ``base``.

        Raises:
            ValueError: If an override cannot be coerced.
        """
        env = os.environ if environ is None else environ
        payload = {
            field_name: env[var]
            for field_name, var in _ENV_KEYS.items()
            if env.get(var, "").strip()
        }
        return (base or cls()).apply_dict(payload)

    def apply_dict(self, payload: Mapping[str, Any]) -> "DirectorySettings":
        """Return a copy with ``payload`` applied; unknown keys are rejected."""
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        unknown = set(payload.keys()) - set(_ENV_KEYS)
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(k) for k in unknown))}")

        updates = {key: self._coerce(key, raw) for key, raw in payload.items()}
        return replace(self, **updates) if updates else self

    def to_dict(self) -> dict:
        return asdict(self)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @classmethod
    def _coerce(cls, key: str, raw: Any) -> Any:
        if key == "api_base_url":
            text = str(raw or "").strip()
            if not text:
                raise ValueError("api_base_url must be a non-empty URL.")
            return text.rstrip("/")
        if key == "api_key":
            return "" if raw is None else str(raw).strip()
        if key == "use_mock":
            return cls._coerce_bool(raw)
        if key == "retries":
            return cls._coerce_int(key, raw, minimum=0)
        return cls._coerce_int(key, raw, minimum=1)

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, minimum: int) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        try:
            coerced = int(value.strip()) if isinstance(value, str) else int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name} must be an integer.") from exc
        if coerced < minimum:
            raise ValueError(f"{name} must be >= {minimum}.")
        return coerced


__all__ = ["DEFAULT_API_BASE_URL", "DEFAULT_API_KEY", "DirectorySettings"]
