"""Visualizer settings resolved from defaults, YAML, environment and flags.

Precedence, lowest first: built-in defaults, the YAML file named by the
``-config`` flag or ``SMVIZ_CONFIG``, ``SMVIZ_*`` environment variables and
finally keyword overrides coming from the command line."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml

CONFIG_ENV = "SMVIZ_CONFIG"

_ENV_KEYS: Dict[str, str] = {
    "impl_suffix": "SMVIZ_IMPL_SUFFIX",
    "factory_field": "SMVIZ_FACTORY_FIELD",
    "plugins": "SMVIZ_PLUGINS",
    "log_level": "SMVIZ_LOG_LEVEL",
}


@dataclass(frozen=True)
class VisualizerSettings:
    """Knobs that tie the visualizer to the naming scheme of the inspected code."""

    impl_suffix: str = "Impl"
    factory_field: str = "state_machine_factory"
    plugins: Tuple[str, ...] = ()
    log_level: Optional[str] = None


def _split_modules(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ValueError(f"plugins must be a list or a comma-separated string, got {value!r}")
    return tuple(str(item).strip() for item in items if str(item).strip())


def _coerce(key: str, value: Any) -> Any:
    if key == "plugins":
        return _split_modules(value)
    if value is None:
        return None if key == "log_level" else ""
    return str(value)


def _load_file(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    known = {item.name for item in fields(VisualizerSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings in {path}: {', '.join(unknown)}")
    return {key: _coerce(key, value) for key, value in data.items()}


def _load_env() -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, env_key in _ENV_KEYS.items():
        raw = os.environ.get(env_key)
        if raw is None:
            continue
        values[key] = _coerce(key, raw.strip())
    return values


def load_settings(path: str | os.PathLike[str] | None = None, **overrides: Any) -> VisualizerSettings:
    """Return the effective settings.

    Parameters
    ----------
    path:
        Optional YAML file. Falls back to ``SMVIZ_CONFIG`` when omitted.
    overrides:
        Field values that win over every other source. ``None`` values are
        ignored so that unset CLI flags do not mask the file or environment.
    """

    settings = VisualizerSettings()
    config_path = path or os.environ.get(CONFIG_ENV)
    if config_path:
        settings = replace(settings, **_load_file(Path(config_path)))
    settings = replace(settings, **_load_env())
    explicit = {key: _coerce(key, value) for key, value in overrides.items() if value is not None}
    return replace(settings, **explicit)
