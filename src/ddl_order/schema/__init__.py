"""Schema object model: identifiers, declarations, diagnostics, and the model.

Provides the declaration variants (``Namespace``, ``Domain``, ``TableType``,
``Function``, ``Procedure``, ``Table``, ``Index``, ``Trigger``,
``Constraint``), the ``SchemaModel`` aggregate, and the structured
diagnostics it reports.

Usage:
    from ddl_order.schema import SchemaModel, Identifier, Table, TypeRef
    from ddl_order.schema import DuplicateIdentifier, NotFound, OrderingFailed
"""

from ddl_order.schema.identifier import Identifier
from ddl_order.schema.models import (
    ColumnDef,
    Constraint,
    Cycle,
    Domain,
    ForeignKeyRef,
    Function,
    Index,
    Namespace,
    ObjectKind,
    OrderingResult,
    Parameter,
    Procedure,
    ProcedureParameter,
    SchemaObject,
    Table,
    TableColumn,
    TableType,
    Trigger,
    TypeRef,
    Unresolved,
)
from ddl_order.schema.errors import (
    DuplicateIdentifier,
    FrozenModelError,
    NotFound,
    OrderingFailed,
    SchemaModelError,
)
from ddl_order.schema.schema_model import DEFAULT_NAMESPACE, SchemaModel

__all__ = [
    "Identifier",
    "ObjectKind",
    "SchemaObject",
    "Namespace",
    "Domain",
    "TableType",
    "Function",
    "Procedure",
    "Table",
    "Index",
    "Trigger",
    "Constraint",
    "TypeRef",
    "ColumnDef",
    "TableColumn",
    "Parameter",
    "ProcedureParameter",
    "ForeignKeyRef",
    "Unresolved",
    "Cycle",
    "OrderingResult",
    "SchemaModelError",
    "DuplicateIdentifier",
    "NotFound",
    "FrozenModelError",
    "OrderingFailed",
    "SchemaModel",
    "DEFAULT_NAMESPACE",
]
