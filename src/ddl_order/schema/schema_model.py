"""Schema model: the aggregate that owns declared objects.

Objects are keyed by their qualified identifier.  Namespaces share one
identifier space; every other kind shares one identifier space per
namespace, so a table and a domain cannot both be ``schema1.x``.

A ``SchemaModel`` is meant to be owned by a single caller.  Mutations and
reads must not be interleaved from several threads; take a ``snapshot()``
and share that instead.

Usage:
    from ddl_order.schema import SchemaModel, Namespace, Table, Identifier

    model = SchemaModel()
    model.add(Namespace(identifier="schema1"))
    model.add(Table(identifier="schema1.tab2", columns=[...]))

    for obj in model.creation_order():
        render(obj)
"""

import logging
from collections.abc import Iterator

from ddl_order.ordering.graph import DependencyGraph
from ddl_order.ordering.orderer import Orderer
from ddl_order.schema.errors import (
    DuplicateIdentifier,
    FrozenModelError,
    NotFound,
    OrderingFailed,
)
from ddl_order.schema.identifier import Identifier
from ddl_order.schema.models import ObjectKind, OrderingResult, SchemaObject

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "dbo"

_TABLE_BOUND = frozenset(kind.value for kind in (ObjectKind.INDEX, ObjectKind.TRIGGER, ObjectKind.CONSTRAINT))


class SchemaModel:
    """Declared schema objects plus cached graph and ordering views.

    Args:
        default_namespace: Namespace for objects declared without one.
        resolve_unqualified_in_default: When True, a bare reference that
            misses in the referrer's own namespace is retried in the
            default namespace.
        cycle_limit: Maximum number of cycles reported by ``ordering()``.
    """

    def __init__(
        self,
        default_namespace: str = DEFAULT_NAMESPACE,
        resolve_unqualified_in_default: bool = False,
        cycle_limit: int | None = 100,
    ) -> None:
        self.default_namespace = default_namespace
        self.resolve_unqualified_in_default = resolve_unqualified_in_default
        self.cycle_limit = cycle_limit
        self._objects: dict[Identifier, SchemaObject] = {}
        self._frozen = False
        self._graph: DependencyGraph | None = None
        self._ordering: OrderingResult | None = None

    # ------------------------------------------------------------------
    # Keys and resolution
    # ------------------------------------------------------------------

    def key(self, identifier: Identifier, kind: ObjectKind | str) -> Identifier:
        """Return the qualified key an object of *kind* is stored under.

        A bare index, trigger or constraint name is qualified by its table's
        namespace, which only ``key_for()`` can see.  Look those up by their
        qualified name.
        """
        if ObjectKind(kind) is ObjectKind.NAMESPACE:
            return Identifier(name=identifier.name)
        return identifier.qualify(self.default_namespace)

    def key_for(self, obj: SchemaObject) -> Identifier:
        if obj.kind in _TABLE_BOUND and not obj.identifier.is_qualified:
            return obj.identifier.qualify(obj.table.namespace or self.default_namespace)
        return self.key(obj.identifier, obj.kind)

    def owner_of(self, obj: SchemaObject) -> Identifier | None:
        """Return the namespace key *obj* depends on, if it has one.

        Objects in the default namespace only depend on it when the default
        namespace itself has been declared.
        """
        if obj.kind == ObjectKind.NAMESPACE:
            return None
        owner = Identifier(name=self.key_for(obj).namespace)
        if owner.name.casefold() == self.default_namespace.casefold() and owner not in self._objects:
            return None
        return owner

    def resolve(
        self, identifier: Identifier, referrer: Identifier | None = None
    ) -> SchemaObject | None:
        """Resolve a reference to a non-namespace object.

        A qualified identifier resolves globally.  A bare one resolves in the
        referrer's namespace (the default namespace when there is no
        referrer).  Returns None when the reference is unresolved.
        """
        if identifier.is_qualified:
            return self._objects.get(identifier)

        home = referrer.namespace if referrer is not None and referrer.namespace else self.default_namespace
        found = self._objects.get(Identifier(namespace=home, name=identifier.name))
        if found is None and self.resolve_unqualified_in_default:
            found = self._objects.get(identifier.qualify(self.default_namespace))
        return found

    def namespace(self, name: str) -> SchemaObject | None:
        return self._objects.get(Identifier(name=name))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, identifier: Identifier, kind: ObjectKind | str | None = None) -> SchemaObject | None:
        """Look up an object by identifier, optionally restricted to *kind*.

        Without *kind*, a bare name matches a namespace first and then an
        object in the default namespace, the same precedence the dependency
        graph uses.
        """
        if kind is not None:
            obj = self._objects.get(self.key(identifier, kind))
            return obj if obj is not None and obj.kind == ObjectKind(kind) else None
        obj = self._objects.get(identifier)
        if obj is None:
            obj = self._objects.get(identifier.qualify(self.default_namespace))
        return obj

    def objects_by_kind(self, kind: ObjectKind | str) -> Iterator[SchemaObject]:
        """Yield objects of *kind* in insertion order."""
        kind = ObjectKind(kind)
        for obj in self._objects.values():
            if obj.kind == kind:
                yield obj

    def members_of(self, namespace: str) -> list[SchemaObject]:
        """Objects declared inside *namespace* (the namespace itself excluded)."""
        folded = namespace.casefold()
        return [
            obj
            for key, obj in self._objects.items()
            if key.namespace is not None and key.namespace.casefold() == folded
        ]

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, Identifier):
            return False
        return self.get(identifier) is not None

    def __iter__(self) -> Iterator[SchemaObject]:
        return iter(self._objects.values())

    def __len__(self) -> int:
        return len(self._objects)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenModelError("Schema model snapshot is read-only")

    def _invalidate(self) -> None:
        self._graph = None
        self._ordering = None

    def add(self, obj: SchemaObject) -> None:
        """Add an object.

        Raises:
            DuplicateIdentifier: If the qualified identifier is already used.
        """
        self._check_mutable()
        key = self.key_for(obj)
        existing = self._objects.get(key)
        if existing is not None:
            raise DuplicateIdentifier(key, existing.kind)

        self._objects[key] = obj
        self._invalidate()
        logger.debug("Added %s %s", obj.kind, key)

    def remove(self, identifier: Identifier, kind: ObjectKind | str) -> list[Identifier]:
        """Remove an object without cascading.

        Returns:
            Keys of the objects that referenced the removed one.  Their
            references dangle until they are removed or the object returns.

        Raises:
            NotFound: If no object of *kind* has this identifier.
        """
        self._check_mutable()
        kind = ObjectKind(kind)
        key = self.key(identifier, kind)
        existing = self._objects.get(key)
        if existing is None or existing.kind != kind:
            raise NotFound(key, kind.value)

        dangling = [ref for ref in self.graph().dependents_of(key) if ref != key]

        del self._objects[key]
        self._invalidate()

        if kind is ObjectKind.NAMESPACE and dangling:
            logger.warning(
                "Removed namespace %s while %d dependent objects remain: %s",
                key,
                len(dangling),
                ", ".join(str(ref) for ref in dangling),
            )
        else:
            logger.debug("Removed %s %s", kind.value, key)

        return dangling

    def replace(self, obj: SchemaObject) -> None:
        """Drop and recreate an object under the same identifier.

        The object moves to the end of insertion order.  Dependents are
        left untouched and are not re-validated.

        Raises:
            NotFound: If there is no object of the same kind to replace.
        """
        self._check_mutable()
        key = self.key_for(obj)
        existing = self._objects.get(key)
        if existing is None or existing.kind != obj.kind:
            raise NotFound(key, obj.kind)

        del self._objects[key]
        self._objects[key] = obj
        self._invalidate()
        logger.debug("Replaced %s %s", obj.kind, key)

    # ------------------------------------------------------------------
    # Graph and ordering views
    # ------------------------------------------------------------------

    def graph(self) -> DependencyGraph:
        if self._graph is None:
            self._graph = DependencyGraph.build(self)
        return self._graph

    def ordering(self) -> OrderingResult:
        """Compute (or return the cached) ordering result.  Never raises."""
        if self._ordering is None:
            self._ordering = Orderer(self.graph(), cycle_limit=self.cycle_limit).compute()
        return self._ordering

    def creation_order(self) -> list[SchemaObject]:
        """Objects in creation order.

        Raises:
            OrderingFailed: If any object could not be ordered.
        """
        result = self.ordering()
        if not result.ok:
            raise OrderingFailed(result)
        return list(result.creation_order)

    def drop_order(self) -> list[SchemaObject]:
        """Objects in drop order (exact reverse of creation order).

        Raises:
            OrderingFailed: If any object could not be ordered.
        """
        result = self.ordering()
        if not result.ok:
            raise OrderingFailed(result)
        return result.drop_order

    def snapshot(self) -> "SchemaModel":
        """Return a read-only copy with its graph and ordering precomputed."""
        snap = SchemaModel(
            default_namespace=self.default_namespace,
            resolve_unqualified_in_default=self.resolve_unqualified_in_default,
            cycle_limit=self.cycle_limit,
        )
        snap._objects = {key: obj.model_copy(deep=True) for key, obj in self._objects.items()}
        snap.ordering()
        snap._frozen = True
        return snap
