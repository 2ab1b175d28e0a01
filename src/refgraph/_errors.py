"""refgraph error hierarchy.

All refgraph errors inherit from RefGraphError. Each also inherits the
builtin exception it refines, so callers catching ValueError/KeyError/etc.
keep working.
"""


class RefGraphError(Exception):
    """Base error for all refgraph operations."""


class ReservedNameCollision(RefGraphError, ValueError):
    """A structural key matches a reserved operation name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name!r} is a reserved name and cannot be used as a property")
        self.name = name


class InvalidListenerTarget(RefGraphError, TypeError):
    """A listener was attached to a configuration holding a scalar value."""


class ConfigurationError(RefGraphError, ValueError):
    """Invalid engine configuration."""


class MissingChild(RefGraphError, KeyError):
    """Strict child lookup found nothing under the given name."""


class ShapeError(RefGraphError, TypeError):
    """An operation needs an object-shaped value and got something else."""


class UpdateDepthExceeded(RefGraphError, RecursionError):
    """The update cascade went deeper than the engine allows."""
