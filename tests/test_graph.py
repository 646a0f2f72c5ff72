"""Tests for DependencyGraph construction, adjacency queries and cycles."""

import pytest

from ddl_order.ordering.graph import DependencyGraph
from ddl_order.schema import (
    ForeignKeyRef,
    Identifier,
    SchemaModel,
    Table,
    TableColumn,
    TypeRef,
)


def ident(text: str) -> Identifier:
    return Identifier.parse(text)


def fk_table(name: str, *targets: str) -> Table:
    return Table(
        identifier=name,
        columns=[TableColumn(name="id", type="int", primary_key=True)],
        foreign_keys=[ForeignKeyRef(references=t) for t in targets],
    )


def model_of(*objects) -> SchemaModel:
    model = SchemaModel()
    for obj in objects:
        model.add(obj)
    return model


class TestBuild:
    """Edges come from owners and declared references."""

    def test_owner_edge_precedes_declared_references(self, scenario_model: SchemaModel) -> None:
        graph = DependencyGraph.build(scenario_model)
        assert graph.dependencies_of(ident("schema1.tab3")) == (
            Identifier(name="schema1"),
            ident("schema1.tab2"),
        )

    def test_default_namespace_objects_have_no_owner_edge(self, scenario_model: SchemaModel) -> None:
        graph = scenario_model.graph()
        assert graph.dependencies_of(ident("domain1")) == ()
        assert graph.dependencies_of(ident("schema1.domain2")) == (Identifier(name="schema1"),)

    def test_dependents_of(self, scenario_model: SchemaModel) -> None:
        graph = scenario_model.graph()
        assert graph.dependents_of(ident("tab1")) == (ident("dbo.trig1"), ident("dbo.constr1"))

    def test_nodes_follow_insertion_order(self, scenario_model: SchemaModel) -> None:
        graph = scenario_model.graph()
        assert graph.nodes[0] == Identifier(name="schema1")
        assert graph.insertion_index(ident("constr1")) == len(graph) - 1

    def test_edges_iterates_dependent_dependency_pairs(self) -> None:
        graph = model_of(fk_table("parent"), fk_table("child", "parent")).graph()
        assert list(graph.edges()) == [(ident("dbo.child"), ident("dbo.parent"))]

    def test_unknown_identifier_raises_key_error(self, scenario_model: SchemaModel) -> None:
        with pytest.raises(KeyError):
            scenario_model.graph().dependencies_of(ident("nope"))
        assert ident("nope") not in scenario_model.graph()

    def test_self_reference_is_not_an_edge(self) -> None:
        graph = model_of(fk_table("tree", "tree")).graph()
        assert graph.self_references == [ident("dbo.tree")]
        assert graph.dependencies_of(ident("tree")) == ()

    def test_unresolved_recorded_once_per_target(self) -> None:
        table = Table(
            identifier="tab1",
            columns=[
                TableColumn(name="a", type=TypeRef.user("missing")),
                TableColumn(name="b", type=TypeRef.user("MISSING")),
            ],
        )
        graph = model_of(table).graph()
        assert len(graph.unresolved) == 1
        assert graph.unresolved[0].source == ident("dbo.tab1")
        assert graph.unresolved[0].target == ident("dbo.missing")
        assert graph.unresolved_of(ident("tab1")) == (ident("dbo.missing"),)

    def test_unresolved_bare_reference_reported_in_referrer_namespace(self) -> None:
        table = Table(
            identifier="schema1.tab2",
            columns=[TableColumn(name="val", type=TypeRef.user("domain2"))],
        )
        graph = model_of(table).graph()
        targets = [str(u.target) for u in graph.unresolved]
        assert targets == ["schema1", "schema1.domain2"]

    def test_transitive_dependents(self, scenario_model: SchemaModel) -> None:
        graph = scenario_model.graph()
        assert graph.transitive_dependents(ident("schema1.domain2")) == [
            ident("schema1.tab2"),
            ident("schema1.tab3"),
            ident("dbo.trig1"),
        ]


class TestCycles:
    """detect_cycles() reports elementary cycles only."""

    def test_acyclic_graph_has_no_cycles(self, schema1_model: SchemaModel) -> None:
        assert schema1_model.graph().detect_cycles() == []

    def test_mutual_dependency(self) -> None:
        graph = model_of(fk_table("a", "b"), fk_table("b", "a")).graph()
        cycles = graph.detect_cycles()
        assert len(cycles) == 1
        assert cycles[0].identifiers == [ident("dbo.a"), ident("dbo.b")]

    def test_self_reference_is_not_a_cycle(self) -> None:
        graph = model_of(fk_table("tree", "tree")).graph()
        assert graph.detect_cycles() == []
        assert graph.strongly_connected_components() == []

    def test_overlapping_cycles(self) -> None:
        graph = model_of(
            fk_table("a", "b"),
            fk_table("b", "a", "c"),
            fk_table("c", "a"),
        ).graph()
        cycles = [[str(i) for i in c.identifiers] for c in graph.detect_cycles()]
        assert cycles == [["dbo.a", "dbo.b"], ["dbo.a", "dbo.b", "dbo.c"]]

    def test_separate_components(self) -> None:
        graph = model_of(
            fk_table("a", "b"),
            fk_table("b", "a"),
            fk_table("ok"),
            fk_table("x", "y"),
            fk_table("y", "x"),
        ).graph()
        components = graph.strongly_connected_components()
        assert [[str(i) for i in c] for c in components] == [["dbo.a", "dbo.b"], ["dbo.x", "dbo.y"]]
        assert len(graph.detect_cycles()) == 2

    def test_limit_caps_reported_cycles(self) -> None:
        graph = model_of(
            fk_table("a", "b", "c"),
            fk_table("b", "a", "c"),
            fk_table("c", "a", "b"),
        ).graph()
        assert len(graph.detect_cycles()) == 5
        assert len(graph.detect_cycles(limit=2)) == 2
