"""Schema inference into the canonical ``SchemaType`` tree.

Two parallel entry points:

- ``from_declaration`` reads a declared JSON-Schema-like node (OpenAPI, Swagger).
- ``from_value`` reads a concrete example value (API Blueprint bodies).
"""

from typing import Any

from .base import SchemaType, bare_object

KNOWN_TYPES = {"string", "number", "boolean", "object", "array"}


def from_declaration(node: dict | None) -> SchemaType:
    """Convert a declared schema node into a ``SchemaType``."""
    if not node:
        return SchemaType(type="string")

    declared = _declared_type(node.get("type"))

    if declared == "object" or node.get("properties"):
        properties = {
            name: from_declaration(child)
            for name, child in (node.get("properties") or {}).items()
        }
        return SchemaType(
            type="object",
            properties=properties,
            required=list(node.get("required") or []),
        )

    if declared == "array":
        return SchemaType(type="array", items=from_declaration(node.get("items")))

    if node.get("enum"):
        return SchemaType(type=_leaf_type(declared), enum=list(node["enum"]))

    return SchemaType(type=_leaf_type(declared), format=node.get("format"))


def from_value(value: Any) -> SchemaType:
    """Infer a ``SchemaType`` from an example value.

    Every key of an example object is marked required; a single example
    cannot express optionality.
    """
    match value:
        case None:
            return bare_object()
        case bool():
            return SchemaType(type="boolean")
        case int() | float():
            return SchemaType(type="number")
        case str():
            return SchemaType(type="string")
        case list():
            items = from_value(value[0]) if value else bare_object()
            return SchemaType(type="array", items=items)
        case dict():
            return SchemaType(
                type="object",
                properties={key: from_value(child) for key, child in value.items()},
                required=list(value),
            )
        case _:
            return bare_object()


def from_element_type(element: str | None) -> SchemaType:
    """Map an API Elements value element name to a bare ``SchemaType``."""
    if element == "array":
        return SchemaType(type="array", items=bare_object())
    if element == "object":
        return bare_object()
    if element in ("number", "boolean"):
        return SchemaType(type=element)
    return SchemaType(type="string")


def _declared_type(declared: Any) -> str | None:
    # OpenAPI 3.1 allows a list such as ["string", "null"]
    if isinstance(declared, list):
        declared = next((t for t in declared if t != "null"), None)
    if declared == "integer":
        return "number"
    return declared


def _leaf_type(declared: str | None) -> str:
    if declared in KNOWN_TYPES - {"object", "array"}:
        return declared
    return "string"
