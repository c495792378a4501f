"""Lookup of state machine factories by type name.

Names registered explicitly win; anything else is treated as a dotted
``package.module.ClassName`` path and imported on demand."""
from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from common.config import VisualizerSettings
from common.logging import get_logger
from visualizer.state_machine import StateMachineFactory

LOGGER = get_logger(__name__)

FactoryAccessor = Callable[[], Any]
ClassT = TypeVar("ClassT", bound=type)

_REGISTRY: Dict[str, "_Entry"] = {}


class StateMachineResolutionError(LookupError):
    """Raised when a class reference cannot be turned into a factory."""


class UnregisteredStateMachineError(StateMachineResolutionError):
    """Raised for names that are neither registered nor importable."""


class FactoryTypeError(StateMachineResolutionError, TypeError):
    """Raised when the factory field holds something that is not a factory."""


@dataclass(frozen=True)
class _Entry:
    simple_name: str
    accessor: Optional[FactoryAccessor] = None
    cls: type = object
    field_name: Optional[str] = None

    def factory(self, field_name: str) -> Any:
        if self.accessor is not None:
            return self.accessor()
        return _read_field(self.cls, self.field_name or field_name)


@dataclass(frozen=True)
class ResolvedStateMachine:
    class_ref: str
    simple_name: str
    factory: StateMachineFactory


def _normalize(name: str) -> str:
    return (name or "").strip()


def register_state_machine(
    name: str,
    accessor: FactoryAccessor,
    *,
    simple_name: Optional[str] = None,
) -> None:
    key = _normalize(name)
    if not key:
        raise ValueError("State machine name must not be empty")
    _store(key, _Entry(simple_name or key.rsplit(".", 1)[-1], accessor=accessor))


def register_class(cls: ClassT, *, field_name: Optional[str] = None) -> ClassT:
    """Register ``cls`` under its dotted path; usable as a class decorator.

    Without ``field_name`` the factory field is read at resolution time, so the
    configured ``factory_field`` applies.
    """

    _store(f"{cls.__module__}.{cls.__qualname__}", _Entry(cls.__name__, cls=cls, field_name=field_name))
    return cls


def _store(key: str, entry: _Entry) -> None:
    _REGISTRY[key] = entry
    LOGGER.debug("Registered state machine %s", key)


def unregister_state_machine(name: str) -> None:
    _REGISTRY.pop(_normalize(name), None)


def registered_names() -> List[str]:
    return sorted(_REGISTRY)


def load_plugins(modules: Iterable[str]) -> None:
    """Import plugin modules so they can register their state machines."""

    for module_name in modules:
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            raise StateMachineResolutionError(f"Cannot import plugin module {module_name!r}: {exc}") from exc
        LOGGER.debug("Loaded plugin module %s", module_name)


def resolve_state_machine(class_ref: str, *, field_name: Optional[str] = None) -> ResolvedStateMachine:
    key = _normalize(class_ref)
    entry = _REGISTRY.get(key)
    if entry is not None:
        simple_name = entry.simple_name
        factory = entry.factory(field_name or VisualizerSettings().factory_field)
        LOGGER.debug("Resolved %s from registry", key)
    else:
        cls = _import_class(key)
        simple_name = cls.__name__
        factory = _read_field(cls, field_name or VisualizerSettings().factory_field)
        LOGGER.debug("Resolved %s by import", key)
    if not isinstance(factory, StateMachineFactory):
        raise FactoryTypeError(
            f"{key} provides {type(factory).__name__}, expected {StateMachineFactory.__name__}"
        )
    return ResolvedStateMachine(class_ref=key, simple_name=simple_name, factory=factory)


def _import_class(class_ref: str) -> type:
    parts = class_ref.split(".")
    if len(parts) < 2 or not all(parts):
        raise UnregisteredStateMachineError(f"Unregistered type {class_ref!r}")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            target: Any = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            if exc.name and (module_name == exc.name or module_name.startswith(exc.name + ".")):
                continue
            raise
        try:
            for attr in parts[split:]:
                target = getattr(target, attr)
        except AttributeError as exc:
            raise UnregisteredStateMachineError(
                f"Unregistered type {class_ref!r}: {module_name} has no {'.'.join(parts[split:])}"
            ) from exc
        if not isinstance(target, type):
            raise UnregisteredStateMachineError(f"{class_ref} is not a class")
        return target
    raise UnregisteredStateMachineError(f"Unregistered type {class_ref!r}")


def _read_field(cls: type, field_name: str) -> Any:
    # Declared on the class itself; inherited tables do not count.
    try:
        return vars(cls)[field_name]
    except KeyError as exc:
        raise StateMachineResolutionError(
            f"{cls.__module__}.{cls.__qualname__} has no field {field_name!r}"
        ) from exc
