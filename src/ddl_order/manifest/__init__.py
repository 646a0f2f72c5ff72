"""Manifest ingestion: declarations from JSON/TOML files into a model.

Usage:
    from ddl_order.manifest import load_manifest, dump_manifest, build_model
"""

from ddl_order.manifest.loader import build_model, dump_manifest, load_manifest

__all__ = ["load_manifest", "dump_manifest", "build_model"]
