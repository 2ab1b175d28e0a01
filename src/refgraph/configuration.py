"""Configuration objects consumed when references and engines are built.

PropertyConfiguration describes one reference: its starting value, an
optional updater and optional "changed" listeners. EngineConfiguration
declares the global properties an Engine seeds at construction.

Both are fluent builders:

    config = (
        PropertyConfiguration({"count": 0})
        .with_updater(lambda current, parent, engine: current)
        .with_listener(lambda value, ref, engine: print(value))
    )
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable

from refgraph._errors import ConfigurationError, InvalidListenerTarget
from refgraph._shape import check_reserved_tree, is_structural

if TYPE_CHECKING:
    from refgraph.engine import Engine
    from refgraph.reference import Reference

Updater = Callable[[Any, Any, "Engine"], Any]
Listener = Callable[[Any, "Reference", "Engine"], None]

DEFAULT_MAX_UPDATE_DEPTH = 500


class PropertyConfiguration:
    """Starting value, updater and listeners for a single reference."""

    __slots__ = ("_starting_value", "_updater", "_listeners")

    def __init__(self, starting_value: Any = None, updater: Updater | None = None) -> None:
        check_reserved_tree(starting_value)
        self._starting_value = starting_value
        self._updater = updater
        self._listeners: list[Listener] = []

    @property
    def starting_value(self) -> Any:
        return self._starting_value

    @property
    def updater(self) -> Updater | None:
        return self._updater

    @property
    def listeners(self) -> tuple[Listener, ...]:
        return tuple(self._listeners)

    def with_updater(self, updater: Updater) -> PropertyConfiguration:
        self._updater = updater
        return self

    def with_listener(self, listener: Listener) -> PropertyConfiguration:
        """Attach a "changed" listener. Only objects and arrays take listeners."""
        if not is_structural(self._starting_value):
            raise InvalidListenerTarget(
                "Listeners can only be added to objects or arrays, "
                f"not {type(self._starting_value).__name__}"
            )
        self._listeners.append(listener)
        return self

    def __repr__(self) -> str:
        updater = getattr(self._updater, "__name__", None)
        return (
            f"PropertyConfiguration({self._starting_value!r}, updater={updater}, "
            f"listeners={len(self._listeners)})"
        )


class EngineConfiguration:
    """Global properties and limits an Engine is started with."""

    def __init__(self) -> None:
        self._globals: dict[str, PropertyConfiguration] = {}
        self.max_update_depth = DEFAULT_MAX_UPDATE_DEPTH

    @property
    def globals(self) -> Mapping[str, PropertyConfiguration]:
        return self._globals

    def with_global_properties(self, properties: Mapping[str, Any]) -> EngineConfiguration:
        """Declare global properties.

        Values may be PropertyConfigurations or plain scalars, which are
        wrapped. A bare dict or list is rejected: structured globals have to
        be declared through a PropertyConfiguration.
        """
        for name, declaration in properties.items():
            if isinstance(declaration, PropertyConfiguration):
                self._globals[name] = declaration
            elif is_structural(declaration):
                raise ConfigurationError(
                    f"Global property {name!r} must be declared with a "
                    f"PropertyConfiguration, got {type(declaration).__name__}"
                )
            else:
                self._globals[name] = PropertyConfiguration(declaration)
        return self

    def with_max_update_depth(self, depth: int) -> EngineConfiguration:
        if depth < 1:
            raise ConfigurationError(f"max_update_depth must be at least 1, got {depth}")
        self.max_update_depth = depth
        return self
