"""ddl-order: schema object model and dependency ordering.

Models database objects (namespaces, domains, table types, functions,
procedures, tables, indexes, triggers, constraints) and their declared
references, and computes a deterministic creation order and its reverse
as the drop order.  Parsing SQL text and executing DDL are left to the
caller.

Usage:
    from ddl_order import SchemaModel, Identifier, Namespace, Domain, Table
    from ddl_order import load_manifest, build_model, load_order_config
    from ddl_order import plan_recreate
"""

__version__ = "0.1.0"

# Schema model (imported before ordering, which depends on it)
from ddl_order.schema import (
    ColumnDef,
    Constraint,
    Cycle,
    Domain,
    DuplicateIdentifier,
    ForeignKeyRef,
    FrozenModelError,
    Function,
    Identifier,
    Index,
    Namespace,
    NotFound,
    ObjectKind,
    OrderingFailed,
    OrderingResult,
    Parameter,
    Procedure,
    ProcedureParameter,
    SchemaModel,
    SchemaModelError,
    SchemaObject,
    Table,
    TableColumn,
    TableType,
    Trigger,
    TypeRef,
    Unresolved,
)

# Ordering
from ddl_order.ordering import DependencyGraph, Orderer, RecreatePlan, plan_recreate

# Config
from ddl_order.config import OrderConfig, load_order_config

# Manifest
from ddl_order.manifest import build_model, dump_manifest, load_manifest

__all__ = [
    # Schema
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
    "SchemaModel",
    # Diagnostics
    "Unresolved",
    "Cycle",
    "OrderingResult",
    "SchemaModelError",
    "DuplicateIdentifier",
    "NotFound",
    "FrozenModelError",
    "OrderingFailed",
    # Ordering
    "DependencyGraph",
    "Orderer",
    "RecreatePlan",
    "plan_recreate",
    # Config
    "OrderConfig",
    "load_order_config",
    # Manifest
    "load_manifest",
    "dump_manifest",
    "build_model",
]
