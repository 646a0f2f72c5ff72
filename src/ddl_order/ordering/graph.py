"""Dependency graph derived from a schema model.

Edges point from an object to the objects it depends on.  References are
resolved through the model when the graph is built; the graph never holds
references between declaration objects themselves.

Usage:
    from ddl_order.ordering.graph import DependencyGraph

    graph = DependencyGraph.build(model)
    graph.dependencies_of(Identifier.parse("schema1.tab3"))
    # (Identifier(namespace='schema1', name='domain2'), ...)
    graph.detect_cycles()
    # []
"""

from collections import deque
from collections.abc import Iterator
from typing import TYPE_CHECKING

from ddl_order.schema.identifier import Identifier
from ddl_order.schema.models import Cycle, SchemaObject, Unresolved

if TYPE_CHECKING:
    from ddl_order.schema.schema_model import SchemaModel


class DependencyGraph:
    """Directed graph of resolved dependencies between schema objects.

    Nodes are the model's qualified keys in insertion order.  Unresolved
    references are kept in ``unresolved``, self-references in
    ``self_references``; neither becomes an edge.
    """

    def __init__(self, default_namespace: str = "dbo") -> None:
        self.default_namespace = default_namespace
        self._nodes: dict[Identifier, SchemaObject] = {}
        self._index: dict[Identifier, int] = {}
        self._dependencies: dict[Identifier, list[Identifier]] = {}
        self._dependents: dict[Identifier, list[Identifier]] = {}
        self._missing: dict[Identifier, list[Identifier]] = {}
        self.unresolved: list[Unresolved] = []
        self.self_references: list[Identifier] = []

    @classmethod
    def build(cls, model: "SchemaModel") -> "DependencyGraph":
        """Build the graph for every object in *model*.

        Deterministic: nodes, edges and diagnostics follow insertion order
        and declaration order.
        """
        graph = cls(default_namespace=model.default_namespace)

        for index, obj in enumerate(model):
            key = model.key_for(obj)
            graph._nodes[key] = obj
            graph._index[key] = index
            graph._dependencies[key] = []
            graph._dependents[key] = []
            graph._missing[key] = []

        for key, obj in graph._nodes.items():
            owner = model.owner_of(obj)
            if owner is not None:
                graph._link(key, owner, model.namespace(owner.name), model)

            for ref in obj.dependencies():
                target = model.resolve(ref, referrer=key)
                if ref.is_qualified:
                    reported = ref
                else:
                    reported = ref.qualify(key.namespace or model.default_namespace)
                graph._link(key, reported, target, model)

        return graph

    def _link(
        self,
        source: Identifier,
        reference: Identifier,
        target: SchemaObject | None,
        model: "SchemaModel",
    ) -> None:
        if target is None:
            if reference not in self._missing[source]:
                self._missing[source].append(reference)
                self.unresolved.append(Unresolved(source=source, target=reference))
            return

        target_key = model.key_for(target)
        if target_key == source:
            if source not in self.self_references:
                self.self_references.append(source)
            return

        if target_key not in self._dependencies[source]:
            self._dependencies[source].append(target_key)
            self._dependents[target_key].append(source)

    # ------------------------------------------------------------------
    # Node access
    # ------------------------------------------------------------------

    def _lookup(self, identifier: Identifier) -> Identifier:
        # node keys first: namespaces are keyed by their bare name
        if identifier in self._nodes:
            return identifier
        qualified = identifier.qualify(self.default_namespace)
        if qualified in self._nodes:
            return qualified
        raise KeyError(f"{identifier} is not in the dependency graph")

    @property
    def nodes(self) -> list[Identifier]:
        return list(self._nodes)

    def node(self, identifier: Identifier) -> SchemaObject:
        return self._nodes[self._lookup(identifier)]

    def insertion_index(self, identifier: Identifier) -> int:
        return self._index[self._lookup(identifier)]

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, Identifier):
            return False
        try:
            self._lookup(identifier)
        except KeyError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._nodes)

    def edges(self) -> Iterator[tuple[Identifier, Identifier]]:
        """Yield ``(dependent, dependency)`` pairs."""
        for source, targets in self._dependencies.items():
            for target in targets:
                yield source, target

    # ------------------------------------------------------------------
    # Adjacency queries
    # ------------------------------------------------------------------

    def dependencies_of(self, identifier: Identifier) -> tuple[Identifier, ...]:
        """Objects *identifier* directly depends on."""
        return tuple(self._dependencies[self._lookup(identifier)])

    def dependents_of(self, identifier: Identifier) -> tuple[Identifier, ...]:
        """Objects that directly depend on *identifier*."""
        return tuple(self._dependents[self._lookup(identifier)])

    def unresolved_of(self, identifier: Identifier) -> tuple[Identifier, ...]:
        """Unresolved references declared by *identifier*."""
        return tuple(self._missing[self._lookup(identifier)])

    def transitive_dependents(self, identifier: Identifier) -> list[Identifier]:
        """Everything that directly or indirectly depends on *identifier*.

        Breadth-first discovery order; *identifier* itself is excluded.
        """
        start = self._lookup(identifier)
        seen: set[Identifier] = {start}
        found: list[Identifier] = []
        queue: deque[Identifier] = deque([start])

        while queue:
            current = queue.popleft()
            for dependent in self._dependents[current]:
                if dependent not in seen:
                    seen.add(dependent)
                    found.append(dependent)
                    queue.append(dependent)

        return found

    # ------------------------------------------------------------------
    # Cycle detection
    # ------------------------------------------------------------------

    def strongly_connected_components(self) -> list[list[Identifier]]:
        """Components with more than one member (iterative Tarjan)."""
        index_of: dict[Identifier, int] = {}
        low: dict[Identifier, int] = {}
        on_stack: set[Identifier] = set()
        stack: list[Identifier] = []
        components: list[list[Identifier]] = []
        counter = 0

        for root in self._nodes:
            if root in index_of:
                continue

            index_of[root] = low[root] = counter
            counter += 1
            stack.append(root)
            on_stack.add(root)
            work = [(root, iter(self._dependencies[root]))]

            while work:
                node, successors = work[-1]
                descended = False
                for succ in successors:
                    if succ not in index_of:
                        index_of[succ] = low[succ] = counter
                        counter += 1
                        stack.append(succ)
                        on_stack.add(succ)
                        work.append((succ, iter(self._dependencies[succ])))
                        descended = True
                        break
                    if succ in on_stack:
                        low[node] = min(low[node], index_of[succ])
                if descended:
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    low[parent] = min(low[parent], low[node])

                if low[node] == index_of[node]:
                    component: list[Identifier] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node:
                            break
                    if len(component) > 1:
                        component.sort(key=self._index.__getitem__)
                        components.append(component)

        components.sort(key=lambda c: self._index[c[0]])
        return components

    def detect_cycles(self, limit: int | None = None) -> list[Cycle]:
        """Return the elementary cycles of the graph, empty when acyclic.

        Self-references are not edges and are never reported.  Each cycle
        starts at its earliest-inserted member and follows dependency
        edges.  *limit* caps the number of cycles returned.
        """
        cycles: list[Cycle] = []

        for component in self.strongly_connected_components():
            for position, start in enumerate(component):
                allowed = set(component[position:])
                for path in self._cycles_from(start, allowed):
                    cycles.append(Cycle(identifiers=path))
                    if limit is not None and len(cycles) >= limit:
                        return self._sorted_cycles(cycles)

        return self._sorted_cycles(cycles)

    def _cycles_from(self, start: Identifier, allowed: set[Identifier]) -> Iterator[list[Identifier]]:
        """Yield simple paths that leave *start* and return to it within *allowed*."""
        path = [start]
        on_path = {start}
        stack = [iter(self._dependencies[start])]

        while stack:
            for succ in stack[-1]:
                if succ not in allowed:
                    continue
                if succ == start:
                    yield list(path)
                elif succ not in on_path:
                    path.append(succ)
                    on_path.add(succ)
                    stack.append(iter(self._dependencies[succ]))
                    break
            else:
                stack.pop()
                on_path.discard(path.pop())

    def _sorted_cycles(self, cycles: list[Cycle]) -> list[Cycle]:
        return sorted(cycles, key=lambda c: [self._index[i] for i in c.identifiers])
