"""Document assembly exports."""

from .http_xml_skeleton import (
    DEFAULT_GATEWAY,
    MAX_NAME_LENGTH,
    initialize_swagger,
    service_base_name,
    slugify_name,
)

__all__ = [
    "DEFAULT_GATEWAY",
    "MAX_NAME_LENGTH",
    "initialize_swagger",
    "service_base_name",
    "slugify_name",
]
