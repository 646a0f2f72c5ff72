"""Shared fixtures: the schema1 test database as declarations.

``schema1_objects`` mirrors every object of a small SQL Server test
database (namespace, domains, table types, functions, procedures, tables,
indexes, triggers, constraints) in the order they were created there.
"""

from pathlib import Path

import pytest

from ddl_order.schema import (
    ColumnDef,
    Constraint,
    Domain,
    ForeignKeyRef,
    Function,
    Index,
    Namespace,
    Parameter,
    Procedure,
    ProcedureParameter,
    SchemaModel,
    Table,
    TableColumn,
    TableType,
    Trigger,
    TypeRef,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"

INT = TypeRef.builtin("int")


def _scalar_function(name: str, param: TypeRef, returns: TypeRef) -> Function:
    return Function(
        identifier=name,
        parameters=[Parameter(name="@param1", type=param)],
        returns=returns,
    )


def _out_procedure(name: str, param_type: TypeRef) -> Procedure:
    return Procedure(
        identifier=name,
        parameters=[
            ProcedureParameter(name="@param1", type=param_type),
            ProcedureParameter(name="@param2", type=param_type, direction="out"),
        ],
    )


def build_schema1_objects() -> list:
    domain1 = TypeRef.user("domain1")
    domain2 = TypeRef.user("schema1.domain2")

    return [
        Namespace(identifier="schema1"),
        Domain(identifier="domain1", base_type="nvarchar(max)", nullable=False),
        Domain(identifier="schema1.domain2", base_type="nvarchar(max)", nullable=False),
        TableType(
            identifier="tabletype1",
            columns=[ColumnDef(name="id", type=INT), ColumnDef(name="val", type=domain1)],
        ),
        TableType(
            identifier="schema1.tabletype2",
            columns=[ColumnDef(name="id", type=INT), ColumnDef(name="val", type=domain2)],
        ),
        _scalar_function("func1", INT, INT),
        _scalar_function("schema1.func2", INT, INT),
        _scalar_function("func3", domain1, domain1),
        _scalar_function("schema1.func4", domain1, domain1),
        Function(
            identifier="func5",
            function_kind="inline_table",
            parameters=[Parameter(name="@param1", type=domain1)],
            references=["domain1"],
        ),
        Function(
            identifier="schema1.func6",
            function_kind="inline_table",
            parameters=[Parameter(name="@param1", type=domain1)],
            references=["schema1.domain2"],
        ),
        Function(
            identifier="func7",
            function_kind="multi_statement_table",
            parameters=[Parameter(name="@param1", type=domain1)],
            returns_columns=[ColumnDef(name="id1", type=INT), ColumnDef(name="val1", type=domain1)],
        ),
        Function(
            identifier="schema1.func8",
            function_kind="multi_statement_table",
            parameters=[Parameter(name="@param1", type=domain1)],
            returns_columns=[ColumnDef(name="id1", type=INT), ColumnDef(name="val1", type=domain1)],
        ),
        _out_procedure("proc1", INT),
        _out_procedure("schema1.proc2", INT),
        _out_procedure("proc3", domain1),
        _out_procedure("schema1.proc4", domain2),
        Procedure(
            identifier="proc5",
            parameters=[
                ProcedureParameter(name="@param1", type=TypeRef.user("tabletype1"), readonly=True)
            ],
        ),
        Procedure(
            identifier="schema1.proc6",
            parameters=[
                ProcedureParameter(
                    name="@param1", type=TypeRef.user("schema1.tabletype2"), readonly=True
                )
            ],
        ),
        Table(
            identifier="tab1",
            columns=[
                TableColumn(name="id", type=INT, primary_key=True),
                TableColumn(name="val", type=domain1),
            ],
        ),
        Table(
            identifier="schema1.tab2",
            columns=[
                TableColumn(name="id", type=INT, primary_key=True),
                TableColumn(name="val", type=domain2),
            ],
        ),
        Table(
            identifier="schema1.tab3",
            columns=[
                TableColumn(name="id", type=INT, primary_key=True),
                TableColumn(name="val", type=domain2),
                TableColumn(name="parent_id", type=INT),
            ],
            foreign_keys=[
                ForeignKeyRef(
                    columns=["parent_id"], references="schema1.tab2", referenced_columns=["id"]
                )
            ],
        ),
        Index(identifier="index1", table="tab1", columns=["id"], clustered=True),
        Index(identifier="index2", table="schema1.tab2", columns=["id"], clustered=True),
        Trigger(
            identifier="trig1",
            table="tab1",
            events=["insert", "update"],
            references=["schema1.tab2"],
        ),
        Trigger(
            identifier="schema1.trig2",
            table="schema1.tab2",
            events=["insert", "update"],
            references=["schema1.tab3"],
        ),
        Constraint(identifier="constr1", table="tab1", expression="id >= 42"),
        Constraint(identifier="schema1.constr2", table="schema1.tab2", expression="id >= 42"),
    ]


def build_scenario_objects() -> list:
    """The reduced schema1 scenario: one object of most kinds."""
    return [
        Namespace(identifier="schema1"),
        Domain(identifier="domain1", base_type="nvarchar(max)", nullable=False),
        Domain(identifier="schema1.domain2", base_type="nvarchar(max)", nullable=False),
        _scalar_function("func3", TypeRef.user("domain1"), TypeRef.user("domain1")),
        Table(
            identifier="tab1",
            columns=[
                TableColumn(name="id", type=INT, primary_key=True),
                TableColumn(name="val", type=TypeRef.user("domain1")),
            ],
        ),
        Table(
            identifier="schema1.tab2",
            columns=[
                TableColumn(name="id", type=INT, primary_key=True),
                TableColumn(name="val", type=TypeRef.user("schema1.domain2")),
            ],
        ),
        Table(
            identifier="schema1.tab3",
            columns=[
                TableColumn(name="id", type=INT, primary_key=True),
                TableColumn(name="parent_id", type=INT),
            ],
            foreign_keys=[ForeignKeyRef(columns=["parent_id"], references="schema1.tab2")],
        ),
        Trigger(identifier="trig1", table="tab1", events=["insert", "update"], references=["schema1.tab2"]),
        Constraint(identifier="constr1", table="tab1", expression="id >= 42"),
    ]


@pytest.fixture
def schema1_objects() -> list:
    return build_schema1_objects()


@pytest.fixture
def schema1_model() -> SchemaModel:
    """Full schema1 database, with bare references falling back to dbo."""
    model = SchemaModel(resolve_unqualified_in_default=True)
    for obj in build_schema1_objects():
        model.add(obj)
    return model


@pytest.fixture
def scenario_model() -> SchemaModel:
    model = SchemaModel()
    for obj in build_scenario_objects():
        model.add(obj)
    return model


@pytest.fixture
def schema1_manifest() -> Path:
    return FIXTURES_DIR / "schema1.json"
