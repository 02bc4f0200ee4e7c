"""Hierarchy analysis exports."""

from .type_hierarchy import (
    MAX_HIERARCHY_DEPTH,
    NO_XSI_TYPE,
    base_ref,
    get_ancestor_refs,
    get_extensions,
    get_sub_types,
    get_xsi_type,
    in_poly_hierarchy,
)

__all__ = [
    "MAX_HIERARCHY_DEPTH",
    "NO_XSI_TYPE",
    "base_ref",
    "get_ancestor_refs",
    "get_extensions",
    "get_sub_types",
    "get_xsi_type",
    "in_poly_hierarchy",
]
