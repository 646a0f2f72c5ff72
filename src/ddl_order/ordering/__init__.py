"""Dependency graph, deterministic ordering, and recreate planning.

Usage:
    from ddl_order.ordering import DependencyGraph, Orderer, plan_recreate
"""

from ddl_order.ordering.graph import DependencyGraph
from ddl_order.ordering.orderer import Orderer
from ddl_order.ordering.plan import RecreatePlan, plan_recreate

__all__ = [
    "DependencyGraph",
    "Orderer",
    "RecreatePlan",
    "plan_recreate",
]
