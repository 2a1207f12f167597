"""Component Catalog."""

from .components import (
    CATALOG,
    ComponentSpec,
    ComponentType,
    PropType,
    describe_catalog,
    get_spec,
    normalize_props,
    resolve_type,
)

__all__ = [
    "CATALOG",
    "ComponentSpec",
    "ComponentType",
    "PropType",
    "describe_catalog",
    "get_spec",
    "normalize_props",
    "resolve_type",
]
