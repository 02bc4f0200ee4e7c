"""Canonicalization domain exports."""

from .key_ordering import XML_KEYS, XSO_KEYS, XSO_TEMP_KEYS, c14n_object, c14n_xso, sort_definitions
from .xml_namespaces import c14n_xml_objects, remove_redundant_prefixes

__all__ = [
    "XML_KEYS",
    "XSO_KEYS",
    "XSO_TEMP_KEYS",
    "c14n_object",
    "c14n_xso",
    "sort_definitions",
    "c14n_xml_objects",
    "remove_redundant_prefixes",
]
