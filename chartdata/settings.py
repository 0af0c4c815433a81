"""Runtime settings for chartdata.

Settings are driven by environment variables so host applications can switch
behaviour (for example strict validation in CI) without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, *, default: bool) -> bool:
    """Parse a boolean environment variable.

    Args:
        name: Environment variable name.
        default: Value when the variable is not set.

    Returns:
        Parsed boolean value.
    """

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass(frozen=True, slots=True)
class ChartDataSettings:
    """Parsed chartdata settings.

    Args:
        strict: Default strictness for new ChartData stores. Strict stores raise
            validation errors instead of logging them and returning None.
        duplicate_warnings: Whether duplicate join-key rows found during frame
            interpolation emit a DataQualityWarning.
    """

    strict: bool = False
    duplicate_warnings: bool = True


_SETTINGS: ChartDataSettings | None = None


def load_settings() -> ChartDataSettings:
    """Read settings from the environment without caching."""

    return ChartDataSettings(
        strict=_env_bool("CHARTDATA_STRICT", default=False),
        duplicate_warnings=_env_bool("CHARTDATA_DUPLICATE_WARNINGS", default=True),
    )


def get_settings() -> ChartDataSettings:
    """Return the process-wide settings, parsing the environment on first use."""

    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = load_settings()
    return _SETTINGS


def reset_settings() -> None:
    """Forget cached settings so the next `get_settings` call re-reads the environment."""

    global _SETTINGS
    _SETTINGS = None
