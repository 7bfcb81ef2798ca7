"""Config loaders – EnvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from enum import Enum
from typing import Any, TypeVar

from mp_fcm.config.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from mp_fcm.config.settings import Settings

T = TypeVar("T", bound=Settings)


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Load settings from OS environment variables.

    ``MessagingSettings.timeout_seconds`` is read from ``FCM_TIMEOUT_SECONDS``.
    Tuple fields take a comma-separated list.
    """

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        prefix = getattr(settings_class, "_prefix", "").upper()
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            env_key = f"{prefix}_{field.name}".upper().lstrip("_")
            raw = environ.get(env_key)

            if raw is None:
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
                ):
                    raise MissingRequiredSettingError(env_key)
                continue

            try:
                kwargs[field.name] = self._coerce(raw, field)
            except ValueError as exc:
                raise InvalidSettingValueError(env_key, raw, str(exc)) from exc

        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load settings: {exc}") from exc

    def _coerce(self, value: str, field: dataclasses.Field[Any]) -> Any:  # noqa: PLR0911
        type_hint = field.type
        if isinstance(field.default, Enum):
            return type(field.default)(value)
        if type_hint is bool or type_hint == "bool":
            return value.lower() in ("1", "true", "yes", "on")
        if type_hint is int or type_hint == "int":
            return int(value)
        if type_hint is float or type_hint == "float":
            return float(value)
        if type_hint == "tuple[int, ...]":
            return tuple(int(v.strip()) for v in value.split(",") if v.strip())
        return value


__all__ = ["EnvSettingsLoader", "SettingsLoader"]
