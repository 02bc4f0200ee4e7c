"""Rewrite passes domain exports."""

from .complex_restriction import process_complex_content_restriction
from .default_adjustment import adjust_defaults, convert_to
from .definition_cleanup import cleanup_definitions, inline_swagger_attributes
from .nillability_split import NullabilityUsage, find_refs_and_nullables, fixup_for_nil_and_non_nil
from .occurrence_propagation import remove_unnamed_occurrence
from .polymorphic_duplication import (
    ELEMENT_OPTIMIZATION_THRESHOLD,
    duplicate_poly_hierarchy,
    optimize_root_elements_map,
)
from .rewrite_models import FOR_SUFFIX, NIL_SUFFIX, UNBOUNDED, CloneTarget, UnexpectedTransformError
from .structural_simplification import remove_any_ofs, remove_one_ofs, squash_all_of, squash_all_ofs
from .typeof_expansion import build_discriminator_mapping, expand_type_ofs

__all__ = [
    "ELEMENT_OPTIMIZATION_THRESHOLD",
    "FOR_SUFFIX",
    "NIL_SUFFIX",
    "UNBOUNDED",
    "CloneTarget",
    "UnexpectedTransformError",
    "NullabilityUsage",
    "adjust_defaults",
    "build_discriminator_mapping",
    "cleanup_definitions",
    "convert_to",
    "duplicate_poly_hierarchy",
    "expand_type_ofs",
    "find_refs_and_nullables",
    "fixup_for_nil_and_non_nil",
    "inline_swagger_attributes",
    "optimize_root_elements_map",
    "process_complex_content_restriction",
    "remove_any_ofs",
    "remove_one_ofs",
    "remove_unnamed_occurrence",
    "squash_all_of",
    "squash_all_ofs",
]
