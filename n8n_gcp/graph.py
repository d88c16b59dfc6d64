"""
Explicit component dependency graph.

Pulumi already orders individual resources from the Outputs they read and
their depends_on options. This graph sits one level above: it records which
component group consumes which other group's outputs, validates the edge list
before any provider call is made, and only hands each builder the outputs it
declared. A builder that reaches for an undeclared node fails immediately
instead of silently creating an edge the graph does not know about.

Usage:
    graph = ResourceGraph()
    graph.add("services", lambda deps: enable_core_services(project))
    graph.add(
        "identity",
        lambda deps: create_service_account(..., depends_on=[deps["services"].resource_manager_api]),
        depends_on=["services"],
    )
    built = graph.build()
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from graphlib import CycleError, TopologicalSorter
from typing import Any, Callable

import structlog

from n8n_gcp.core.exceptions import DependencyCycleError, DependencyOrderingError

logger = structlog.get_logger(__name__)

Builder = Callable[["NodeOutputs"], Any]


@dataclass(frozen=True)
class GraphNode:
    """A component group and the groups it consumes."""

    name: str
    builder: Builder
    depends_on: tuple[str, ...] = field(default_factory=tuple)


class NodeOutputs(Mapping[str, Any]):
    """Read-only view of the outputs a single node is allowed to read."""

    def __init__(self, node: str, outputs: Mapping[str, Any], allowed: tuple[str, ...]):
        self._node = node
        self._outputs = outputs
        self._allowed = allowed

    def __getitem__(self, key: str) -> Any:
        if key not in self._allowed:
            raise DependencyOrderingError(
                self._node,
                f"reads '{key}' without declaring it as a dependency",
            )
        return self._outputs[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._allowed)

    def __len__(self) -> int:
        return len(self._allowed)


class ResourceGraph:
    """Ordered set of component builders with validated dependency edges."""

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}

    def add(self, name: str, builder: Builder, depends_on: tuple[str, ...] | list[str] = ()) -> None:
        """Declare a node. Prerequisites may be declared later, but before order()."""
        if name in self._nodes:
            raise DependencyOrderingError(name, "declared more than once")
        self._nodes[name] = GraphNode(name=name, builder=builder, depends_on=tuple(depends_on))

    def edges(self) -> list[tuple[str, str]]:
        """Return (prerequisite, dependent) pairs."""
        return [(dep, node.name) for node in self._nodes.values() for dep in node.depends_on]

    def order(self) -> list[str]:
        """
        Validate the edge list and return a creation order.

        Raises:
            DependencyOrderingError: A node depends on an undeclared node.
            DependencyCycleError: The edges contain a cycle.
        """
        for node in self._nodes.values():
            for dep in node.depends_on:
                if dep not in self._nodes:
                    raise DependencyOrderingError(node.name, f"depends on undeclared node '{dep}'")

        sorter = TopologicalSorter({name: node.depends_on for name, node in self._nodes.items()})
        try:
            return list(sorter.static_order())
        except CycleError as e:
            raise DependencyCycleError(list(e.args[1])) from e

    def build(self) -> dict[str, Any]:
        """Run every builder in dependency order and return their outputs by node name."""
        order = self.order()
        logger.debug("resource_graph_ordered", order=order, edges=len(self.edges()))

        outputs: dict[str, Any] = {}
        for name in order:
            node = self._nodes[name]
            outputs[name] = node.builder(NodeOutputs(name, outputs, node.depends_on))
        return outputs
