"""Manifest files: schema object declarations as JSON or TOML.

A manifest is what a dialect parser hands over: fully formed declarations,
one per object, in the order they were declared.

JSON layout::

    {
      "objects": [
        {"kind": "namespace", "identifier": "schema1"},
        {"kind": "domain", "identifier": "schema1.domain2",
         "base_type": "nvarchar(max)", "nullable": false},
        {"kind": "table", "identifier": "schema1.tab3",
         "columns": [{"name": "id", "type": "int", "primary_key": true}],
         "foreign_keys": [{"columns": ["parent_id"], "references": "schema1.tab2"}]}
      ]
    }

TOML manifests use an ``[[objects]]`` array of tables with the same keys.

Usage:
    from ddl_order.manifest import load_manifest, build_model

    objects = load_manifest(Path("schema1.json"))
    model = build_model(objects, config)
"""

import json
import logging
import tomllib
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ddl_order.config.models import OrderConfig
from ddl_order.schema.models import SchemaObject
from ddl_order.schema.schema_model import SchemaModel

logger = logging.getLogger(__name__)

_OBJECTS = TypeAdapter(list[SchemaObject])


def _read_manifest_data(manifest_path: Path) -> dict:
    suffix = manifest_path.suffix.lower()

    if suffix == ".json":
        try:
            with open(manifest_path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {manifest_path.name}: {e}") from e

    if suffix == ".toml":
        try:
            with open(manifest_path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {manifest_path.name}: {e}") from e

    raise ValueError(f"Unsupported manifest format: {manifest_path.name} (expected .json or .toml)")


def load_manifest(manifest_path: str | Path) -> list[SchemaObject]:
    """Load and validate declarations from a manifest file.

    Args:
        manifest_path: Path to a ``.json`` or ``.toml`` manifest.

    Returns:
        Declarations in file order.

    Raises:
        FileNotFoundError: If the manifest does not exist.
        ValueError: If the file cannot be parsed or a declaration is invalid.
    """
    manifest_path = Path(manifest_path)
    if not manifest_path.exists():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    data = _read_manifest_data(manifest_path)
    if not isinstance(data, dict) or "objects" not in data:
        raise ValueError(f"Manifest {manifest_path.name} has no 'objects' list")

    try:
        objects = _OBJECTS.validate_python(data["objects"])
    except ValidationError as e:
        raise ValueError(f"Invalid declaration in {manifest_path.name}: {e}") from e

    logger.debug("Loaded %d declarations from %s", len(objects), manifest_path)
    return objects


def dump_manifest(objects: list[SchemaObject]) -> str:
    """Serialize declarations to JSON text readable by ``load_manifest``."""
    payload = {"objects": _OBJECTS.dump_python(objects, mode="json", exclude_defaults=True)}
    # kind is a defaulted discriminator, so put it back
    for entry, obj in zip(payload["objects"], objects):
        entry["kind"] = obj.kind
    return json.dumps(payload, indent=2)


def build_model(objects: list[SchemaObject], config: OrderConfig | None = None) -> SchemaModel:
    """Create a ``SchemaModel`` from declarations, adding them in order.

    Raises:
        DuplicateIdentifier: If two declarations share an identifier.
    """
    config = config or OrderConfig()
    model = SchemaModel(
        default_namespace=config.default_namespace,
        resolve_unqualified_in_default=config.resolve_unqualified_in_default,
        cycle_limit=config.cycle_limit,
    )
    for obj in objects:
        model.add(obj)
    return model
