"""Pydantic models for schema object declarations and ordering results.

This module contains:
- Object kinds: ObjectKind (declaration order is the creation priority)
- Declaration models: Namespace, Domain, TableType, Function, Procedure,
  Table, Index, Trigger, Constraint, and the SchemaObject tagged union
- Diagnostics: Unresolved, Cycle
- Ordering result: OrderingResult

Every declaration variant exposes ``identifier``, ``kind`` and
``dependencies()``.  The graph derives the owning-namespace edge from the
identifier itself, so ``dependencies()`` only lists explicit references.
Declarations are frozen; change one with ``SchemaModel.replace()``.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ddl_order.schema.identifier import Identifier


# ============================================================================
# Object kinds
# ============================================================================


class ObjectKind(str, Enum):
    """Kinds of schema object, in creation priority order."""

    NAMESPACE = "namespace"
    DOMAIN = "domain"
    TABLE_TYPE = "table_type"
    FUNCTION = "function"
    PROCEDURE = "procedure"
    TABLE = "table"
    INDEX = "index"
    TRIGGER = "trigger"
    CONSTRAINT = "constraint"

    @property
    def priority(self) -> int:
        """Tie-break rank used when several objects are ready at once."""
        return _KIND_PRIORITY[self]


_KIND_PRIORITY: dict[ObjectKind, int] = {kind: rank for rank, kind in enumerate(ObjectKind)}


def _unique(refs: list[Identifier]) -> tuple[Identifier, ...]:
    seen: set[Identifier] = set()
    result: list[Identifier] = []
    for ref in refs:
        if ref not in seen:
            seen.add(ref)
            result.append(ref)
    return tuple(result)


# ============================================================================
# Component models
# ============================================================================


class TypeRef(BaseModel):
    """A type reference as written in a declaration.

    Built-in types (``int``, ``nvarchar(max)``) never produce dependencies;
    user-defined ones (domains, table types) do.

    Example:
        >>> TypeRef.user("schema1.domain2").identifier
        Identifier(namespace='schema1', name='domain2')
        >>> TypeRef.model_validate("int").user_defined
        False
    """

    model_config = ConfigDict(frozen=True)

    name: str
    user_defined: bool = False

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data

    @classmethod
    def builtin(cls, name: str) -> "TypeRef":
        return cls(name=name)

    @classmethod
    def user(cls, name: str) -> "TypeRef":
        return cls(name=name, user_defined=True)

    @property
    def identifier(self) -> Identifier | None:
        if not self.user_defined:
            return None
        return Identifier.parse(self.name)


class ColumnDef(BaseModel):
    """A column of a table type or a table-shaped function result."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeRef


class TableColumn(BaseModel):
    """A table column."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeRef
    primary_key: bool = False
    nullable: bool = True


class Parameter(BaseModel):
    """A function parameter."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeRef


class ProcedureParameter(BaseModel):
    """A procedure parameter (``out`` for output parameters)."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeRef
    direction: Literal["in", "out"] = "in"
    readonly: bool = False  # table-valued parameters


class ForeignKeyRef(BaseModel):
    """Inline foreign key on a table column list."""

    model_config = ConfigDict(frozen=True)

    columns: tuple[str, ...] = ()
    references: Identifier
    referenced_columns: tuple[str, ...] = ()


def _type_refs(types: list[TypeRef]) -> list[Identifier]:
    return [t.identifier for t in types if t.identifier is not None]


# ============================================================================
# Declaration variants
# ============================================================================


class Namespace(BaseModel):
    """A schema container (``create schema``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["namespace"] = "namespace"
    identifier: Identifier

    @model_validator(mode="after")
    def _unqualified(self) -> "Namespace":
        if self.identifier.is_qualified:
            raise ValueError(f"Namespace name cannot be qualified: {self.identifier}")
        return self

    def dependencies(self) -> tuple[Identifier, ...]:
        return ()


class Domain(BaseModel):
    """A scalar type alias (``create type x from nvarchar(max) not null``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["domain"] = "domain"
    identifier: Identifier
    base_type: str
    nullable: bool = True

    def dependencies(self) -> tuple[Identifier, ...]:
        return ()


class TableType(BaseModel):
    """A table-valued type usable as a parameter or return shape."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["table_type"] = "table_type"
    identifier: Identifier
    columns: tuple[ColumnDef, ...] = ()

    def dependencies(self) -> tuple[Identifier, ...]:
        return _unique(_type_refs([c.type for c in self.columns]))


class Function(BaseModel):
    """A scalar, inline-table or multi-statement-table function.

    ``references`` lists objects used by the body.  They are declared by the
    ingestion side; bodies are never parsed here.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["function"] = "function"
    identifier: Identifier
    function_kind: Literal["scalar", "inline_table", "multi_statement_table"] = "scalar"
    parameters: tuple[Parameter, ...] = ()
    returns: TypeRef | None = None
    returns_columns: tuple[ColumnDef, ...] = ()
    references: tuple[Identifier, ...] = ()

    def dependencies(self) -> tuple[Identifier, ...]:
        types = [p.type for p in self.parameters]
        if self.returns is not None:
            types.append(self.returns)
        types.extend(c.type for c in self.returns_columns)
        return _unique(_type_refs(types) + list(self.references))


class Procedure(BaseModel):
    """A stored procedure."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["procedure"] = "procedure"
    identifier: Identifier
    parameters: tuple[ProcedureParameter, ...] = ()
    references: tuple[Identifier, ...] = ()

    def dependencies(self) -> tuple[Identifier, ...]:
        return _unique(_type_refs([p.type for p in self.parameters]) + list(self.references))


class Table(BaseModel):
    """A table with its columns and inline foreign keys."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["table"] = "table"
    identifier: Identifier
    columns: tuple[TableColumn, ...] = ()
    foreign_keys: tuple[ForeignKeyRef, ...] = ()

    @property
    def primary_key(self) -> list[str]:
        return [c.name for c in self.columns if c.primary_key]

    def dependencies(self) -> tuple[Identifier, ...]:
        refs = _type_refs([c.type for c in self.columns])
        refs.extend(fk.references for fk in self.foreign_keys)
        return _unique(refs)


class Index(BaseModel):
    """An index on a table."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["index"] = "index"
    identifier: Identifier
    table: Identifier
    columns: tuple[str, ...] = ()
    clustered: bool = False
    unique: bool = False

    def dependencies(self) -> tuple[Identifier, ...]:
        return (self.table,)


class Trigger(BaseModel):
    """A DML trigger on a table."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["trigger"] = "trigger"
    identifier: Identifier
    table: Identifier
    events: tuple[Literal["insert", "update", "delete"], ...] = ()
    timing: Literal["after", "instead_of"] = "after"
    references: tuple[Identifier, ...] = ()

    def dependencies(self) -> tuple[Identifier, ...]:
        return _unique([self.table, *self.references])


class Constraint(BaseModel):
    """A table constraint added after the table (``alter table ... add constraint``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["constraint"] = "constraint"
    identifier: Identifier
    table: Identifier
    constraint_kind: Literal["check", "foreign_key", "unique"] = "check"
    columns: tuple[str, ...] = ()
    expression: str | None = None
    references: Identifier | None = None

    @model_validator(mode="after")
    def _foreign_key_needs_target(self) -> "Constraint":
        if self.constraint_kind == "foreign_key" and self.references is None:
            raise ValueError(f"Foreign key constraint {self.identifier} has no referenced table")
        return self

    def dependencies(self) -> tuple[Identifier, ...]:
        refs = [self.table]
        if self.constraint_kind == "foreign_key" and self.references is not None:
            refs.append(self.references)
        return _unique(refs)


SchemaObject = Annotated[
    Union[Namespace, Domain, TableType, Function, Procedure, Table, Index, Trigger, Constraint],
    Field(discriminator="kind"),
]


# ============================================================================
# Diagnostics
# ============================================================================


class Unresolved(BaseModel):
    """A declared reference that names no object in the model."""

    source: Identifier
    target: Identifier

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"


class Cycle(BaseModel):
    """One elementary dependency cycle, starting at its earliest-added member."""

    identifiers: list[Identifier]

    def __str__(self) -> str:
        names = [str(i) for i in self.identifiers]
        return " -> ".join(names + names[:1])


# ============================================================================
# Ordering Result
# ============================================================================


class OrderingResult(BaseModel):
    """Result of ordering a schema model.

    ``creation_order`` always holds every object that could be ordered, even
    when ``ok`` is False.  ``blocked`` lists what was left over.

    Example:
        >>> result = OrderingResult()
        >>> result.ok
        True
        >>> result.format_report()
        'Ordering valid (0 objects)'
    """

    creation_order: list[SchemaObject] = Field(default_factory=list)
    cycles: list[Cycle] = Field(default_factory=list)
    unresolved: list[Unresolved] = Field(default_factory=list)
    blocked: list[Identifier] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.blocked and not self.unresolved and not self.cycles

    @property
    def drop_order(self) -> list[SchemaObject]:
        """Exact reverse of ``creation_order``."""
        return list(reversed(self.creation_order))

    @property
    def error_count(self) -> int:
        return len(self.cycles) + len(self.unresolved)

    def identifiers(self, drop: bool = False) -> list[Identifier]:
        objects = self.drop_order if drop else self.creation_order
        return [obj.identifier for obj in objects]

    def format_report(self) -> str:
        """Format the result as a human-readable report."""
        if self.ok:
            return f"Ordering valid ({len(self.creation_order)} objects)"

        lines = ["Ordering failed:"]

        if self.unresolved:
            lines.append(f"\n  Unresolved references ({len(self.unresolved)}):")
            for ref in self.unresolved:
                lines.append(f"    - {ref}")

        if self.cycles:
            lines.append(f"\n  Cycles ({len(self.cycles)}):")
            for cycle in self.cycles:
                lines.append(f"    - {cycle}")

        if self.blocked:
            lines.append(f"\n  Not ordered: {', '.join(str(i) for i in self.blocked)}")

        lines.append(f"\n  Ordered: {len(self.creation_order)} objects")

        return "\n".join(lines)
