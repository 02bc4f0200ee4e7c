"""Canonicalization of ``xml`` objects."""

from __future__ import annotations

from xso_normalizer.schema_traversal import SchemaObject, SchemaWalk, walk_schema_objects


def c14n_xml_objects(document: SchemaObject, pure: bool = True) -> SchemaObject:
    """Give every object the namespace of its nearest enclosing ``xml`` object.

    Every ``xml`` object ends up with a ``namespace`` (possibly empty). With
    ``pure`` set, ``xml`` objects are afterwards kept only on roots, properties
    and array items, and dropped from arrays that do not rename their element.
    """

    def inherit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        if "items" not in xso and "$ref" not in xso and "xml" not in xso:
            for enclosing in reversed(walk.stack):
                xml = enclosing.get("xml")
                if isinstance(xml, dict):
                    xso["xml"] = {"namespace": xml.get("namespace"), "prefix": xml.get("prefix")}
                    return xso
        xml = xso.get("xml")
        if isinstance(xml, dict) and xml.get("namespace") is None:
            xml["namespace"] = ""
        return xso

    def prune(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        xml = xso.get("xml")
        if not pure or xml is None:
            return xso
        if walk.is_root or walk.parent_key == "properties" or walk.key == "items":
            if "items" in xso and not (isinstance(xml, dict) and xml.get("name")):
                del xso["xml"]
        else:
            del xso["xml"]
        return xso

    return walk_schema_objects(document, prune, inherit)


def remove_redundant_prefixes(document: SchemaObject) -> SchemaObject:
    """Drop the empty prefix of unqualified simple-typed objects."""

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        xml = xso.get("xml")
        if (
            isinstance(xml, dict)
            and xml.get("prefix") == ""
            and xml.get("namespace") == ""
            and "properties" not in xso
            and xso.get("type") not in (None, "object", "array")
        ):
            del xml["prefix"]
        return xso

    return walk_schema_objects(document, visit)
