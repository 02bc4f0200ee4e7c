"""Document input/output exports."""

from .document_files import (
    DocumentError,
    load_dictionary,
    load_document,
    parse_dictionary,
    write_document,
)

__all__ = [
    "DocumentError",
    "load_dictionary",
    "load_document",
    "parse_dictionary",
    "write_document",
]
