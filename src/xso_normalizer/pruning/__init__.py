"""Pruning domain exports."""

from .reachability import HEADER_SUFFIX, SECURITY_DEFINITION, remove_unreferenced_definitions

__all__ = [
    "HEADER_SUFFIX",
    "SECURITY_DEFINITION",
    "remove_unreferenced_definitions",
]
