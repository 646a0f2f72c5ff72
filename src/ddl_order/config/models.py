"""Pydantic models for ddl-order configuration."""

from typing import Literal

from pydantic import BaseModel, Field


# ============================================================================
# Configuration Models
# ============================================================================


class OrderConfig(BaseModel):
    """Complete configuration from ddl-order.toml."""

    default_namespace: str = Field(default="dbo", min_length=1)
    resolve_unqualified_in_default: bool = False
    cycle_limit: int | None = Field(default=100, ge=1)
    output_format: Literal["table", "json"] = "table"
