"""CLI for ordering schema object manifests.

Reads a manifest of declarations (see ``ddl_order.manifest``) and reports
creation order, drop order, diagnostics, direct dependencies, or a
drop/recreate plan.

Usage:
    ddl-order order schema1.json
    ddl-order order schema1.json --drop --json
    ddl-order check schema1.json
    ddl-order deps schema1.json schema1.tab2 --reverse
    ddl-order deps schema1.json schema1 --kind namespace
    ddl-order plan schema1.json schema1.tab2 --kind table

Commands:
    order  - Print creation order (or drop order with --drop)
    check  - Report unresolved references and cycles
    deps   - Show direct dependencies (or dependents) of one object
    plan   - Show the drop/recreate plan for one object
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ddl_order.config.loader import load_order_config
from ddl_order.config.models import OrderConfig
from ddl_order.manifest.loader import build_model, load_manifest
from ddl_order.ordering.plan import plan_recreate
from ddl_order.schema.errors import SchemaModelError
from ddl_order.schema.identifier import Identifier
from ddl_order.schema.models import ObjectKind, OrderingResult
from ddl_order.schema.schema_model import SchemaModel

console = Console()
logger = logging.getLogger(__name__)


# ============================================================================
# Helpers
# ============================================================================


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(args: argparse.Namespace) -> tuple[OrderConfig, SchemaModel]:
    """Load config and manifest into a model.

    Raises:
        FileNotFoundError: If the config or manifest file is missing.
        ValueError: If either file is invalid.
        SchemaModelError: If the manifest declares duplicate identifiers.
    """
    config_path = Path(args.config) if getattr(args, "config", None) else None
    config = load_order_config(config_path)
    logger.debug("Configuration: %s", config)
    objects = load_manifest(args.manifest)
    return config, build_model(objects, config)


def _wants_json(args: argparse.Namespace, config: OrderConfig) -> bool:
    return bool(getattr(args, "json", False)) or config.output_format == "json"


def _print_failure(result: OrderingResult) -> None:
    console.print(f"[bold red]x[/bold red] {result.format_report()}")


def _result_payload(model: SchemaModel, result: OrderingResult, drop: bool = False) -> dict:
    objects = result.drop_order if drop else result.creation_order
    return {
        "ok": result.ok,
        "order": [str(model.key_for(obj)) for obj in objects],
        "unresolved": [
            {"source": str(u.source), "target": str(u.target)} for u in result.unresolved
        ],
        "cycles": [[str(i) for i in c.identifiers] for c in result.cycles],
        "blocked": [str(i) for i in result.blocked],
    }


# ============================================================================
# Command implementations
# ============================================================================


def cmd_order(args: argparse.Namespace) -> int:
    """Print creation or drop order.

    Args:
        args: Parsed arguments with manifest, drop, json.

    Returns:
        0 when every object was ordered, 1 otherwise.
    """
    config, model = _load(args)
    result = model.ordering()
    drop = bool(getattr(args, "drop", False))

    if _wants_json(args, config):
        console.print_json(json.dumps(_result_payload(model, result, drop=drop)))
        return 0 if result.ok else 1

    objects = result.drop_order if drop else result.creation_order
    table = Table(
        title="Drop Order" if drop else "Creation Order",
        show_header=True,
        header_style="bold",
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind")
    table.add_column("Object", style="cyan")
    table.add_column("Depends on", style="dim")

    graph = model.graph()
    for position, obj in enumerate(objects, start=1):
        key = model.key_for(obj)
        deps = ", ".join(str(d) for d in graph.dependencies_of(key))
        table.add_row(str(position), obj.kind, str(key), deps)

    console.print(table)

    if not result.ok:
        console.print()
        _print_failure(result)
        return 1

    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Report diagnostics for a manifest.

    Returns:
        0 when the manifest orders completely, 1 otherwise.
    """
    config, model = _load(args)
    result = model.ordering()

    if _wants_json(args, config):
        console.print_json(json.dumps(_result_payload(model, result)))
        return 0 if result.ok else 1

    if result.ok:
        console.print(f"[bold green]v[/bold green] {result.format_report()}")
        graph = model.graph()
        if graph.self_references:
            console.print(
                f"  Self-references: [yellow]"
                f"{', '.join(str(i) for i in graph.self_references)}[/yellow]"
            )
        return 0

    _print_failure(result)
    return 1


def cmd_deps(args: argparse.Namespace) -> int:
    """Show direct dependencies or dependents of one object.

    Returns:
        0 on success, 1 if the object is not in the manifest.
    """
    config, model = _load(args)
    graph = model.graph()
    obj = model.get(Identifier.parse(args.identifier), getattr(args, "kind", None))

    if obj is None:
        console.print(f"[red]Error: {args.identifier} is not declared in the manifest[/red]")
        return 1

    identifier = model.key_for(obj)

    reverse = bool(getattr(args, "reverse", False))
    related = graph.dependents_of(identifier) if reverse else graph.dependencies_of(identifier)
    missing = () if reverse else graph.unresolved_of(identifier)

    if _wants_json(args, config):
        console.print_json(
            json.dumps(
                {
                    "object": str(identifier),
                    "dependents" if reverse else "dependencies": [str(i) for i in related],
                    "unresolved": [str(i) for i in missing],
                }
            )
        )
        return 0

    label = "Dependents" if reverse else "Dependencies"
    console.print(f"{label} of [bold cyan]{identifier}[/bold cyan]:")
    if not related and not missing:
        console.print("  [dim](none)[/dim]")
    for ident in related:
        console.print(f"  - {ident} [dim]({graph.node(ident).kind})[/dim]")
    for ident in missing:
        console.print(f"  - {ident} [yellow](unresolved)[/yellow]")

    return 0


def cmd_plan(args: argparse.Namespace) -> int:
    """Show the drop/recreate plan for one object.

    Returns:
        0 on success, 1 if the plan is incomplete or the object is unknown.
    """
    config, model = _load(args)
    identifier = Identifier.parse(args.identifier)

    plan = plan_recreate(model, identifier, args.kind)

    if _wants_json(args, config):
        console.print_json(
            json.dumps(
                {
                    "target": str(plan.target),
                    "drop_order": [str(i) for i in plan.drop_order],
                    "create_order": [str(i) for i in plan.create_order],
                    "error": plan.error,
                }
            )
        )
        return 0 if plan.error is None else 1

    console.print(f"Recreate plan for [bold cyan]{plan.target}[/bold cyan]:")
    console.print("\n[bold]Drop:[/bold]")
    for ident in plan.drop_order:
        console.print(f"  - {ident}")
    console.print("\n[bold]Create:[/bold]")
    for ident in plan.create_order:
        console.print(f"  - {ident}")

    if plan.error is not None:
        console.print()
        console.print(f"[bold red]x[/bold red] {plan.error}")
        return 1

    return 0


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ddl-order",
        description="Dependency ordering for schema object declarations",
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to ddl-order.toml (default: ./ddl-order.toml if present)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # order command
    p_order = subparsers.add_parser("order", help="Print creation or drop order")
    p_order.add_argument("manifest", help="Path to a .json or .toml manifest")
    p_order.add_argument("--drop", action="store_true", help="Print drop order instead")
    p_order.add_argument("--json", action="store_true", help="Emit JSON")
    p_order.set_defaults(func=cmd_order)

    # check command
    p_check = subparsers.add_parser("check", help="Report unresolved references and cycles")
    p_check.add_argument("manifest", help="Path to a .json or .toml manifest")
    p_check.add_argument("--json", action="store_true", help="Emit JSON")
    p_check.set_defaults(func=cmd_check)

    # deps command
    p_deps = subparsers.add_parser("deps", help="Show direct dependencies of one object")
    p_deps.add_argument("manifest", help="Path to a .json or .toml manifest")
    p_deps.add_argument("identifier", help="Object identifier, e.g. schema1.tab2")
    p_deps.add_argument("--reverse", action="store_true", help="Show dependents instead")
    p_deps.add_argument(
        "--kind",
        choices=[kind.value for kind in ObjectKind],
        help="Kind of the object, to tell a namespace from a same-named object",
    )
    p_deps.add_argument("--json", action="store_true", help="Emit JSON")
    p_deps.set_defaults(func=cmd_deps)

    # plan command
    p_plan = subparsers.add_parser("plan", help="Show the drop/recreate plan for one object")
    p_plan.add_argument("manifest", help="Path to a .json or .toml manifest")
    p_plan.add_argument("identifier", help="Object identifier, e.g. schema1.tab2")
    p_plan.add_argument(
        "--kind",
        required=True,
        choices=[kind.value for kind in ObjectKind],
        help="Kind of the object",
    )
    p_plan.add_argument("--json", action="store_true", help="Emit JSON")
    p_plan.set_defaults(func=cmd_plan)

    return parser


def main() -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = build_parser()
    args = parser.parse_args()
    _configure_logging(args.verbose)

    try:
        return args.func(args)
    except (FileNotFoundError, ValueError, SchemaModelError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
