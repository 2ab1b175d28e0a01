"""Engine — owner of reference identity and the id -> Reference registry.

The Engine is the only place References are built. Ids come from a single
monotonic counter and are never reused. Children find their parent through
get_reference(), so the registry is also the upward link of the graph.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from refgraph._shape import shape_of
from refgraph.configuration import EngineConfiguration, PropertyConfiguration
from refgraph.reference import Reference

logger = logging.getLogger("refgraph.engine")


class Engine:
    """Reference factory and registry, seeded from an EngineConfiguration."""

    def __init__(self, configuration: EngineConfiguration | None = None) -> None:
        configuration = configuration or EngineConfiguration()
        self._ids = itertools.count(1)
        self._registry: dict[int, Reference] = {}
        self._globals: dict[str, Reference] = {}
        self.max_update_depth = configuration.max_update_depth

        for name, declaration in configuration.globals.items():
            self._globals[name] = self.create_reference(declaration)
        if self._globals:
            logger.info("Engine seeded with %d global properties", len(self._globals))

    @property
    def globals(self) -> Mapping[str, Reference]:
        return MappingProxyType(self._globals)

    def global_reference(self, name: str) -> Reference:
        return self._globals[name]

    def create_reference(
        self,
        configuration_or_value: Any = None,
        parent: Reference | int | None = None,
    ) -> Reference:
        """Build a Reference (and its child tree) and register it.

        Raw values are wrapped in a PropertyConfiguration first, so reserved
        names are rejected before any id is handed out.
        """
        if isinstance(configuration_or_value, PropertyConfiguration):
            configuration = configuration_or_value
        else:
            configuration = PropertyConfiguration(configuration_or_value)
        parent_id = parent.id if isinstance(parent, Reference) else parent

        reference_id = next(self._ids)
        reference = Reference(reference_id, self, configuration, parent_id)
        self._registry[reference_id] = reference
        logger.debug(
            "Created reference %d (parent=%s, shape=%s)",
            reference_id, parent_id, shape_of(configuration.starting_value),
        )
        return reference

    def get_reference(self, reference_id: int | None) -> Reference | None:
        if reference_id is None:
            return None
        return self._registry.get(reference_id)

    def update(self) -> None:
        """Run the update cascade on every global property, in declaration order."""
        for name, reference in self._globals.items():
            logger.debug("Updating global %r (reference %d)", name, reference.id)
            reference.update()

    def __len__(self) -> int:
        return len(self._registry)

    def __contains__(self, reference_id: object) -> bool:
        return reference_id in self._registry

    def __repr__(self) -> str:
        return f"Engine(references={len(self._registry)}, globals={list(self._globals)})"
