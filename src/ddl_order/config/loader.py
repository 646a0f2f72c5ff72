"""Load ddl-order configuration from a TOML file.

Layout::

    [ordering]
    default_namespace = "dbo"
    resolve_unqualified_in_default = false
    cycle_limit = 100

    [output]
    format = "table"    # or "json"
"""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from ddl_order.config.models import OrderConfig

DEFAULT_CONFIG_NAME = "ddl-order.toml"


def load_order_config(config_path: Path | None = None) -> OrderConfig:
    """Load configuration from TOML file.

    Args:
        config_path: Path to the TOML file.  When omitted,
            ``./ddl-order.toml`` is read if it exists and defaults are
            used otherwise.

    Returns:
        OrderConfig

    Raises:
        FileNotFoundError: If an explicit config_path doesn't exist
        ValueError: If the file is not valid TOML or has invalid values
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            return OrderConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path.name}: {e}") from e

    ordering = data.get("ordering", {})
    output = data.get("output", {})

    settings = {
        key: ordering[key]
        for key in ("default_namespace", "resolve_unqualified_in_default", "cycle_limit")
        if key in ordering
    }
    if "format" in output:
        settings["output_format"] = output["format"]

    try:
        return OrderConfig(**settings)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path.name}: {e}") from e
