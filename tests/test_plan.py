"""Tests for plan_recreate()."""

import pytest

from ddl_order.ordering.plan import RecreatePlan, plan_recreate
from ddl_order.schema import (
    ForeignKeyRef,
    Identifier,
    NotFound,
    SchemaModel,
    Table,
    TableColumn,
)


def ident(text: str) -> Identifier:
    return Identifier.parse(text)


def fk_table(name: str, *targets: str) -> Table:
    return Table(
        identifier=name,
        columns=[TableColumn(name="id", type="int", primary_key=True)],
        foreign_keys=[ForeignKeyRef(references=t) for t in targets],
    )


class TestPlanRecreate:
    """Dependents are dropped first and recreated last."""

    def test_affected_objects(self, schema1_model: SchemaModel) -> None:
        plan = plan_recreate(schema1_model, ident("schema1.tab2"), "table")

        assert isinstance(plan, RecreatePlan)
        assert plan.error is None
        assert plan.target == ident("schema1.tab2")
        assert {str(i) for i in plan.create_order} == {
            "schema1.tab2",
            "schema1.tab3",
            "schema1.index2",
            "dbo.trig1",
            "schema1.trig2",
            "schema1.constr2",
        }
        assert plan.create_order[0] == ident("schema1.tab2")
        assert plan.drop_order == list(reversed(plan.create_order))

    def test_orders_respect_dependencies(self, schema1_model: SchemaModel) -> None:
        plan = plan_recreate(schema1_model, ident("schema1.tab2"), "table")
        position = {key: i for i, key in enumerate(plan.create_order)}
        assert position[ident("schema1.tab3")] < position[ident("schema1.trig2")]

    def test_dependents_and_statement_count(self, schema1_model: SchemaModel) -> None:
        plan = plan_recreate(schema1_model, ident("schema1.tab2"), "table")
        assert ident("schema1.tab2") not in plan.dependents
        assert len(plan.dependents) == 5
        assert plan.statement_count == 12

    def test_leaf_object_plans_only_itself(self, scenario_model: SchemaModel) -> None:
        plan = plan_recreate(scenario_model, ident("constr1"), "constraint")
        assert plan.create_order == [ident("dbo.constr1")]
        assert plan.dependents == []

    def test_missing_object_raises(self, scenario_model: SchemaModel) -> None:
        with pytest.raises(NotFound, match="No table named dbo.nope"):
            plan_recreate(scenario_model, ident("nope"), "table")

    def test_wrong_kind_raises(self, scenario_model: SchemaModel) -> None:
        with pytest.raises(NotFound):
            plan_recreate(scenario_model, ident("tab1"), "index")

    def test_cycle_among_affected_sets_error(self) -> None:
        model = SchemaModel()
        for obj in (fk_table("a", "b"), fk_table("b", "a"), fk_table("c", "a")):
            model.add(obj)

        plan = plan_recreate(model, ident("a"), "table")

        assert plan.error is not None
        assert "Cycles (1)" in plan.error
        assert plan.create_order == []

    def test_cycle_elsewhere_does_not_affect_plan(self) -> None:
        model = SchemaModel()
        for obj in (fk_table("a", "b"), fk_table("b", "a"), fk_table("ok")):
            model.add(obj)

        plan = plan_recreate(model, ident("ok"), "table")

        assert plan.error is None
        assert plan.create_order == [ident("dbo.ok")]
