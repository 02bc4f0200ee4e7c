"""Initial HTTP-XML Swagger 2.0 document for a proxied SOAP service."""

from __future__ import annotations

import re
from typing import Any

DISAMBIGUATION_MARKER = "-from-"
MAX_NAME_LENGTH = 240
DEFAULT_GATEWAY = "datapower-gateway"

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def service_base_name(service_name: str) -> str:
    """Strip the ``-from-<path>`` suffix added to disambiguate same-named services."""
    index = service_name.find(DISAMBIGUATION_MARKER)
    return service_name[:index] if index > 0 else service_name


def slugify_name(text: str) -> str:
    """Lowercase ``text`` and join its alphanumeric runs with dashes."""
    return _SLUG_SEPARATORS.sub("-", text.lower()).strip("-")


def initialize_swagger(
    service_name: str,
    endpoint_url: str,
    *,
    port: int | str | None = None,
    gateway: str | None = None,
) -> dict[str, Any]:
    """Build the empty Swagger document that proxies ``endpoint_url``.

    The title is the service name, plus the port when one was given explicitly
    so that services on different ports stay distinguishable. Title and
    ``x-ibm-name`` are truncated to MAX_NAME_LENGTH characters since product
    names derived from them are limited in length.
    """
    title = service_name
    if port:
        title += f" using port {port}"
    ibm_name = slugify_name(title)[:MAX_NAME_LENGTH]
    title = title[:MAX_NAME_LENGTH]

    return {
        "swagger": "2.0",
        "info": {
            "title": title,
            "description": "",
            "x-ibm-name": ibm_name,
            "version": "1.0.0",
        },
        "schemes": ["https"],
        "basePath": "/",
        "produces": ["application/xml"],
        "consumes": ["text/xml"],
        "securityDefinitions": {
            "clientID": {
                "type": "apiKey",
                "name": "X-IBM-Client-Id",
                "in": "header",
                "description": "",
            },
        },
        "security": [{"clientID": []}],
        "x-ibm-configuration": {
            "type": "rest",
            "phase": "realized",
            "enforced": True,
            "testable": True,
            "gateway": gateway or DEFAULT_GATEWAY,
            "cors": {"enabled": True},
            "assembly": {
                "execute": [{"proxy": {"title": "proxy", "target-url": endpoint_url}}],
            },
        },
        "paths": {},
        "definitions": {},
    }
