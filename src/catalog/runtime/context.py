"""Process-wide configuration, overridable per context.

``get_config()`` returns the configuration loaded from ``config.yaml`` at
import time unless a caller (usually a test or a CLI command) has entered
``with_context`` with a partial override.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel

from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.config.config_template import load_config


@dataclass(frozen=True)
class AppContext:
    config: ConfigData


_app_context: ContextVar[AppContext] = ContextVar(
    "catalog_app_context", default=AppContext(config=load_config())
)


def get_context() -> AppContext:
    return _app_context.get()


def get_config() -> ConfigData:
    """Configuration in effect for the current context."""
    return _app_context.get().config


def _explicit_values(model: BaseModel) -> dict[str, Any]:
    """Values the caller actually passed, descending into nested sections.

    ``ConfigData(jwt=JWTConfig(expires_in="1h"))`` yields
    ``{"jwt": {"expires_in": "1h"}}`` rather than a full ``jwt`` section.
    """
    values: dict[str, Any] = {}
    for name in model.model_fields_set:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            values[name] = _explicit_values(value)
        else:
            values[name] = value
    return values


def _deep_update(base: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_update(merged[key], value)
        else:
            merged[key] = value
    return merged


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Layer ``config_override`` on top of the current configuration.

    Only explicitly set fields replace inherited values, and the previous
    configuration is restored on exit.

    Example:
        with with_context(ConfigData(database=DatabaseConfig(url="sqlite://"))):
            DbSessionService().create_all()
    """
    if config_override is None:
        yield get_config()
        return

    if not isinstance(config_override, ConfigData):
        raise TypeError(
            f"config_override must be ConfigData or None, got {type(config_override)}"
        )

    current = get_context()
    merged = ConfigData.model_validate(
        _deep_update(current.config.model_dump(), _explicit_values(config_override))
    )
    token = _app_context.set(replace(current, config=merged))
    try:
        yield merged
    finally:
        _app_context.reset(token)
