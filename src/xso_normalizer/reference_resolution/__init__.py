"""Reference resolution exports."""

from .reference_index import (
    COMPONENTS_PREFIX,
    DEFINITIONS_PREFIX,
    def_name_from_ref,
    find_refs,
    get_def,
    get_ref,
    ref_prefix,
    ref_to,
    replace_refs,
    verify_reference_integrity,
)
from .reference_models import ReferenceIndex, RefUsage, UnresolvedReferenceError

__all__ = [
    "COMPONENTS_PREFIX",
    "DEFINITIONS_PREFIX",
    "ReferenceIndex",
    "RefUsage",
    "UnresolvedReferenceError",
    "def_name_from_ref",
    "find_refs",
    "get_def",
    "get_ref",
    "ref_prefix",
    "ref_to",
    "replace_refs",
    "verify_reference_integrity",
]
