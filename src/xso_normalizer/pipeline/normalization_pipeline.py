"""Ordered post-generation normalization of a definitions graph."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from xso_normalizer.canonicalization import (
    c14n_xml_objects,
    c14n_xso,
    remove_redundant_prefixes,
    sort_definitions,
)
from xso_normalizer.configuration import ConfigurationError, load_configuration
from xso_normalizer.configuration.runtime_settings import NamespaceDictionary, NormalizationOptions
from xso_normalizer.document_io import DocumentError, load_dictionary, load_document, write_document
from xso_normalizer.pruning import remove_unreferenced_definitions
from xso_normalizer.reference_resolution import (
    UnresolvedReferenceError,
    verify_reference_integrity,
)
from xso_normalizer.rewrite_passes import (
    adjust_defaults,
    cleanup_definitions,
    duplicate_poly_hierarchy,
    expand_type_ofs,
    fixup_for_nil_and_non_nil,
    inline_swagger_attributes,
    process_complex_content_restriction,
    remove_any_ofs,
    remove_one_ofs,
    remove_unnamed_occurrence,
    squash_all_ofs,
)
from xso_normalizer.schema_traversal import SchemaObject, definitions_of

from .pipeline_contracts import NormalizationOutcome, NormalizationRequest

_LOGGER = logging.getLogger("xso_normalizer.pipeline")

Pass = tuple[str, Callable[[SchemaObject], Any]]


class NormalizationError(Exception):
    """Raised when a normalization request cannot be completed."""


def normalize_document(
    document: SchemaObject,
    dictionary: NamespaceDictionary,
    options: NormalizationOptions | None = None,
) -> NormalizationOutcome:
    """Run every normalization pass over ``document`` in place.

    Raises UnresolvedReferenceError when a pass meets, or leaves behind, a
    ``$ref`` that does not resolve.
    """
    options = options or NormalizationOptions()
    request_context = dictionary.create_options.request_context
    definitions_before = len(definitions_of(document))
    removed: list[str] = []

    def prune(target: SchemaObject) -> None:
        removed.extend(
            remove_unreferenced_definitions(target, keep_root_elements=options.keep_root_elements)
        )

    passes: tuple[Pass, ...] = (
        ("duplicate_poly_hierarchy", lambda doc: duplicate_poly_hierarchy(doc, dictionary)),
        ("fixup_for_nil_and_non_nil", fixup_for_nil_and_non_nil),
        (
            "expand_type_ofs",
            lambda doc: expand_type_ofs(
                doc, dictionary, v3_discriminator=options.v3_discriminator
            ),
        ),
        ("process_complex_content_restriction", process_complex_content_restriction),
        ("squash_all_ofs", squash_all_ofs),
        ("remove_any_ofs", lambda doc: remove_any_ofs(doc, request_context=request_context)),
        ("remove_one_ofs", remove_one_ofs),
        (
            "remove_unnamed_occurrence",
            lambda doc: remove_unnamed_occurrence(doc, request_context=request_context),
        ),
        ("adjust_defaults", lambda doc: adjust_defaults(doc, request_context=request_context)),
        ("remove_unreferenced_definitions", prune),
        ("cleanup_definitions", cleanup_definitions),
        ("inline_swagger_attributes", inline_swagger_attributes),
        ("c14n_xml_objects", lambda doc: c14n_xml_objects(doc, options.pure_xml)),
        ("remove_redundant_prefixes", remove_redundant_prefixes),
        ("c14n_xso", lambda doc: c14n_xso(doc, options.v3_nullable)),
        ("sort_definitions", sort_definitions),
    )

    for name, run_pass in passes:
        run_pass(document)
        _LOGGER.debug("%s: %d definitions", name, len(definitions_of(document)))
        if options.verify_references:
            verify_reference_integrity(document, request_context=request_context)

    return NormalizationOutcome(
        document=document,
        passes=tuple(name for name, _ in passes),
        definitions_before=definitions_before,
        definitions_after=len(definitions_of(document)),
        removed_definitions=tuple(removed),
    )


def run_normalization(request: NormalizationRequest) -> NormalizationOutcome:
    """Load the input files, normalize the document and write the result."""
    try:
        options = (
            load_configuration(request.config_path).normalization
            if request.config_path
            else NormalizationOptions()
        )
        document = load_document(request.input_path)
        dictionary = load_dictionary(request.dictionary_path)
    except (ConfigurationError, DocumentError) as exc:
        raise NormalizationError(str(exc)) from exc

    try:
        outcome = normalize_document(document, dictionary, options)
    except UnresolvedReferenceError as exc:
        raise NormalizationError(str(exc)) from exc

    try:
        output_path = write_document(outcome.document, request.output_path)
    except DocumentError as exc:
        raise NormalizationError(str(exc)) from exc

    _LOGGER.info(
        "Normalized %s: %d definitions in, %d out.",
        request.input_path,
        outcome.definitions_before,
        outcome.definitions_after,
    )
    return NormalizationOutcome(
        document=outcome.document,
        passes=outcome.passes,
        definitions_before=outcome.definitions_before,
        definitions_after=outcome.definitions_after,
        removed_definitions=outcome.removed_definitions,
        output_path=output_path,
    )
