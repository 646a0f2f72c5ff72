"""Configuration management: TOML loading and config models.

Usage:
    >>> from ddl_order.config import load_order_config, OrderConfig
"""

from ddl_order.config.loader import load_order_config
from ddl_order.config.models import OrderConfig

__all__ = ["load_order_config", "OrderConfig"]
