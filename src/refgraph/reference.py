"""References — addressable, observable containers in the value graph.

A Reference wraps one value. Object and array values are held as a dict or
list of child References, materialized by the Engine when the reference is
built. Every child knows its parent's id; a "changed" event fires on the
reference itself and then on each ancestor in turn.

Internal state (id, listeners, updater, parent link) lives in private slots,
so structural property names never share a namespace with operations.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, Callable

from refgraph._errors import (
    MissingChild,
    ReservedNameCollision,
    ShapeError,
    UpdateDepthExceeded,
)
from refgraph._shape import (
    ARRAY,
    OBJECT,
    RESERVED_NAMES,
    check_reserved,
    check_reserved_tree,
    shape_of,
)

if TYPE_CHECKING:
    from refgraph.configuration import Listener, PropertyConfiguration, Updater
    from refgraph.engine import Engine

CHANGED = "changed"


class Reference:
    """One node of the value graph. Build through Engine.create_reference()."""

    __slots__ = ("_id", "_engine", "_value", "_updater", "_listeners", "_parent_id")

    def __init__(
        self,
        id: int,
        engine: Engine,
        configuration: PropertyConfiguration,
        parent_id: int | None = None,
    ) -> None:
        self._id = id
        self._engine = engine
        self._parent_id = parent_id
        self._updater: Updater | None = configuration.updater
        self._listeners: dict[str, list[Listener]] = {}
        self._value = self._materialize(configuration.starting_value)
        for listener in configuration.listeners:
            self.on(CHANGED, listener)

    @property
    def id(self) -> int:
        return self._id

    @property
    def parent(self) -> Reference | None:
        return self._engine.get_reference(self._parent_id)

    # --- Read / write ---

    def get(self) -> Any:
        """The current value. Objects and arrays come back as their children."""
        return self._value

    def set(self, value: Any) -> None:
        """Replace the value as-is and fire "changed".

        Nested structure is not re-wrapped; members are materialized on
        demand by child() / get_or_create_child(). Use assign() to rebuild
        the child tree eagerly.
        """
        self._value = value
        self._dispatch(CHANGED)

    def assign(self, value: Any) -> None:
        """Replace the value, building child References like construction does."""
        check_reserved_tree(value)
        self._value = self._materialize(value)
        self._dispatch(CHANGED)

    def on(self, event: str, listener: Listener) -> None:
        """Call listener(value, reference, engine) whenever event fires here or below."""
        self._listeners.setdefault(event, []).append(listener)

    @property
    def push(self) -> Callable[[Any], Reference] | None:
        """Appender for array values, None for anything else.

        Appending fires "changed" on this reference (and its ancestors).
        """
        if shape_of(self._value) != ARRAY:
            return None
        return self._append

    def _append(self, item: Any) -> Reference:
        child = self._engine.create_reference(item, parent=self)
        self._mutable_value().append(child)
        self._dispatch(CHANGED)
        return child

    # --- Navigation ---

    def child(self, name: str | int) -> Reference:
        """Strict lookup of a structural member. Raises MissingChild."""
        shape = shape_of(self._value)
        if shape == OBJECT:
            if name not in self._value:
                raise MissingChild(name)
        elif shape == ARRAY:
            if not isinstance(name, int) or not -len(self._value) <= name < len(self._value):
                raise MissingChild(name)
        else:
            raise MissingChild(name)
        return self._adopt(name)

    def __getitem__(self, name: str | int) -> Reference:
        return self.child(name)

    def get_or_create_child(self, name: str) -> Reference:
        """Lookup that extends the tree: an unknown name gets an empty-object child."""
        if name in RESERVED_NAMES:
            raise ReservedNameCollision(name)
        if self._value is None:
            self._value = {}
        if shape_of(self._value) != OBJECT:
            raise ShapeError(
                f"Reference {self._id} holds {type(self._value).__name__}, "
                f"cannot create child {name!r}"
            )
        if name not in self._value:
            self._mutable_value()[name] = self._engine.create_reference({}, parent=self)
        return self._adopt(name)

    def _adopt(self, key: str | int) -> Reference:
        """Return the member under key, wrapping a raw member in place."""
        member = self._value[key]
        if isinstance(member, Reference):
            return member
        child = self._engine.create_reference(member, parent=self)
        self._mutable_value()[key] = child
        return child

    def _mutable_value(self) -> MutableMapping | list:
        # Values stored through set() may be read-only containers.
        if isinstance(self._value, tuple):
            self._value = list(self._value)
        elif isinstance(self._value, Mapping) and not isinstance(self._value, MutableMapping):
            self._value = dict(self._value)
        return self._value

    def _children(self) -> list[Reference]:
        shape = shape_of(self._value)
        if shape == OBJECT:
            members = self._value.values()
        elif shape == ARRAY:
            members = self._value
        else:
            return []
        return [member for member in members if isinstance(member, Reference)]

    # --- Update cascade ---

    def update(self) -> None:
        """Re-derive this value, then every child's, depth-first, parents first."""
        self._update(0)

    def _update(self, depth: int) -> None:
        limit = self._engine.max_update_depth
        if depth >= limit:
            raise UpdateDepthExceeded(
                f"Update cascade exceeded depth {limit} at reference {self._id}"
            )
        if self._updater is not None:
            parent = self.parent
            parent_value = parent.get() if parent is not None else None
            self._value = self._updater(self._value, parent_value, self._engine)
            self._dispatch(CHANGED)
        for child in self._children():
            child._update(depth + 1)

    # --- Internals ---

    def _materialize(self, value: Any) -> Any:
        shape = shape_of(value)
        if shape == OBJECT:
            check_reserved(value.keys())
            return {
                name: self._engine.create_reference(member, parent=self)
                for name, member in value.items()
            }
        if shape == ARRAY:
            return [self._engine.create_reference(member, parent=self) for member in value]
        return value

    def _dispatch(self, event: str) -> None:
        """Fire event here, then on each ancestor with the ancestor's own value."""
        reference = self
        while reference is not None:
            for listener in list(reference._listeners.get(event, ())):
                listener(reference._value, reference, reference._engine)
            reference = reference.parent

    def snapshot(self) -> Any:
        """Deep copy of the value with every child Reference unwrapped."""
        return _unwrap(self._value)

    def __repr__(self) -> str:
        return f"Reference(id={self._id}, {self._value!r})"


def _unwrap(value: Any) -> Any:
    if isinstance(value, Reference):
        return value.snapshot()
    if isinstance(value, Mapping):
        return {name: _unwrap(member) for name, member in value.items()}
    if isinstance(value, (list, tuple)):
        return [_unwrap(member) for member in value]
    return value
