"""Deterministic creation and drop ordering.

Kahn's algorithm over a ``DependencyGraph``.  Among objects whose
dependencies are all satisfied, the one with the lowest
``(kind priority, insertion index)`` is emitted next, so the same model
always yields the same order.

An unresolved reference is a dependency that is never satisfied: the
object declaring it, and everything depending on that object, end up in
``OrderingResult.blocked`` together with the members of any cycle.
"""

import heapq
import logging

from ddl_order.ordering.graph import DependencyGraph
from ddl_order.schema.identifier import Identifier
from ddl_order.schema.models import ObjectKind, OrderingResult, SchemaObject

logger = logging.getLogger(__name__)


class Orderer:
    """Computes ordering results for one graph.

    Args:
        graph: Graph built from the model being ordered.
        cycle_limit: Maximum number of cycles to report on failure.
    """

    def __init__(self, graph: DependencyGraph, cycle_limit: int | None = 100) -> None:
        self.graph = graph
        self.cycle_limit = cycle_limit

    def _sort_key(self, identifier: Identifier) -> tuple[int, int]:
        obj = self.graph.node(identifier)
        return ObjectKind(obj.kind).priority, self.graph.insertion_index(identifier)

    def compute(self) -> OrderingResult:
        """Return the creation order, or the ordered prefix plus diagnostics."""
        graph = self.graph
        pending: dict[Identifier, int] = {}
        ready: list[tuple[tuple[int, int], Identifier]] = []

        for node in graph.nodes:
            pending[node] = len(graph.dependencies_of(node)) + len(graph.unresolved_of(node))
            if pending[node] == 0:
                heapq.heappush(ready, (self._sort_key(node), node))

        ordered: list[SchemaObject] = []
        emitted: set[Identifier] = set()
        while ready:
            _, node = heapq.heappop(ready)
            ordered.append(graph.node(node))
            emitted.add(node)
            for dependent in graph.dependents_of(node):
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    heapq.heappush(ready, (self._sort_key(dependent), dependent))

        if len(ordered) == len(graph):
            return OrderingResult(creation_order=ordered)

        blocked = [n for n in graph.nodes if n not in emitted]
        cycles = graph.detect_cycles(limit=self.cycle_limit)

        logger.warning(
            "Ordering incomplete: %d of %d objects ordered, %d unresolved references, %d cycles",
            len(ordered),
            len(graph),
            len(graph.unresolved),
            len(cycles),
        )

        return OrderingResult(
            creation_order=ordered,
            cycles=cycles,
            unresolved=list(graph.unresolved),
            blocked=blocked,
        )
