"""refgraph: a reactive graph of named, observable, recomputable values."""

from importlib.metadata import version as _version

__version__ = _version("refgraph")

from refgraph._errors import (
    ConfigurationError,
    InvalidListenerTarget,
    MissingChild,
    RefGraphError,
    ReservedNameCollision,
    ShapeError,
    UpdateDepthExceeded,
)
from refgraph._shape import RESERVED_NAMES
from refgraph.configuration import EngineConfiguration, PropertyConfiguration
from refgraph.reference import CHANGED, Reference
from refgraph.engine import Engine

__all__ = [
    "Engine",
    "EngineConfiguration",
    "PropertyConfiguration",
    "Reference",
    "CHANGED",
    "RESERVED_NAMES",
    "RefGraphError",
    "ReservedNameCollision",
    "InvalidListenerTarget",
    "ConfigurationError",
    "MissingChild",
    "ShapeError",
    "UpdateDepthExceeded",
]
