"""Drop/recreate planning for a single object.

Replacing an object that other objects depend on means dropping those
dependents first and recreating them afterwards.  ``plan_recreate`` works
out which objects are affected and the order for both phases.

Usage:
    from ddl_order.ordering.plan import plan_recreate

    plan = plan_recreate(model, Identifier.parse("schema1.tab2"), "table")
    if plan.error is None:
        for ident in plan.drop_order:
            renderer.drop(model.get(ident))
        model.replace(new_tab2)
        for ident in plan.create_order:
            renderer.create(model.get(ident))
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ddl_order.schema.errors import NotFound
from ddl_order.schema.identifier import Identifier
from ddl_order.schema.models import ObjectKind

if TYPE_CHECKING:
    from ddl_order.schema.schema_model import SchemaModel

logger = logging.getLogger(__name__)


@dataclass
class RecreatePlan:
    """Plan for dropping and recreating one object and its dependents.

    Attributes:
        target: Qualified key of the object being recreated.
        drop_order: Affected objects, dependents before dependencies.
        create_order: Affected objects, dependencies before dependents.
        error: Ordering report if the affected objects cannot all be ordered.
    """

    target: Identifier
    drop_order: list[Identifier] = field(default_factory=list)
    create_order: list[Identifier] = field(default_factory=list)
    error: str | None = None

    @property
    def dependents(self) -> list[Identifier]:
        """Affected objects other than the target."""
        return [ident for ident in self.create_order if ident != self.target]

    @property
    def statement_count(self) -> int:
        """Number of drop plus create statements the plan implies."""
        return len(self.drop_order) + len(self.create_order)


def plan_recreate(
    model: "SchemaModel",
    identifier: Identifier,
    kind: ObjectKind | str,
) -> RecreatePlan:
    """Plan the drop and recreate of *identifier* and everything depending on it.

    Args:
        model: Model containing the object.
        identifier: Object to recreate.
        kind: Kind of the object.

    Returns:
        ``RecreatePlan``.  ``error`` is set, and the orders only hold what
        could be ordered, when the affected objects include cycles or
        unresolved references.

    Raises:
        NotFound: If the model has no such object.
    """
    kind = ObjectKind(kind)
    if model.get(identifier, kind) is None:
        raise NotFound(model.key(identifier, kind), kind.value)

    target = model.key(identifier, kind)
    affected = {target, *model.graph().transitive_dependents(target)}

    result = model.ordering()
    create_order = [
        key for key in (model.key_for(obj) for obj in result.creation_order) if key in affected
    ]

    plan = RecreatePlan(
        target=target,
        drop_order=list(reversed(create_order)),
        create_order=create_order,
    )

    if len(plan.create_order) != len(affected):
        plan.error = result.format_report()
        logger.warning("Recreate plan for %s is incomplete", target)

    return plan

