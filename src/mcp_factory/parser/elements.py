"""Typed view of an API Blueprint parse tree.

Blueprint parsers emit API Elements (Refract JSON): untyped nested dicts keyed
by ``element``. ``lift`` converts that tree into a closed set of node models
so the normalizer can match on node types instead of probing fields.
Elements outside this set (annotations, data structures) are dropped.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class Copy(Node):
    text: str = ""


class Asset(Node):
    content_type: str = "application/json"
    body: str | None = None


class HrefVariable(Node):
    name: str
    description: str = ""
    type_attributes: list[str] = []
    value_element: str | None = None


class HttpRequest(Node):
    title: str | None = None
    method: str | None = None
    href: str | None = None
    variables: list[HrefVariable] | None = None
    asset: Asset | None = None


class HttpResponse(Node):
    title: str | None = None
    status_code: int = 200
    asset: Asset | None = None


class HttpTransaction(Node):
    title: str | None = None
    request: HttpRequest | None = None
    responses: list[HttpResponse] = []


class Transition(Node):
    title: str | None = None
    copy_text: str | None = None
    href: str | None = None
    variables: list[HrefVariable] | None = None
    transactions: list[HttpTransaction] = []


class Resource(Node):
    title: str | None = None
    href: str = ""
    variables: list[HrefVariable] | None = None
    transitions: list[Transition] = []


class Category(Node):
    title: str | None = None
    classes: list[str] = []
    metadata: dict[str, str] = {}
    children: list["Category | Resource | Copy"] = []


def lift(parse_result: dict) -> list[Category | Resource | Copy]:
    """Lift the top-level content of a parse result into typed nodes."""
    return _lift_children(parse_result.get("content"))


def document_title(parse_result: dict) -> str | None:
    """Title of the first top-level content node, if any."""
    content = parse_result.get("content")
    if isinstance(content, list) and content and isinstance(content[0], dict):
        return _title(content[0])
    return None


def _lift_children(content: Any) -> list[Category | Resource | Copy]:
    nodes = []
    for raw in content if isinstance(content, list) else []:
        if not isinstance(raw, dict):
            continue
        element = raw.get("element")
        if element == "category":
            nodes.append(_category(raw))
        elif element == "resource":
            nodes.append(_resource(raw))
        elif element == "copy":
            nodes.append(Copy(text=_text(raw) or ""))
    return nodes


def _category(raw: dict) -> Category:
    metadata = {}
    for member in _array(_attributes(raw).get("metadata")):
        if isinstance(member, dict) and member.get("element") == "member":
            pair = member.get("content") or {}
            key = _text(pair.get("key"))
            if key is not None:
                metadata[key] = _text(pair.get("value")) or ""

    return Category(
        title=_title(raw),
        classes=_strings((raw.get("meta") or {}).get("classes")),
        metadata=metadata,
        children=_lift_children(raw.get("content")),
    )


def _resource(raw: dict) -> Resource:
    attributes = _attributes(raw)
    return Resource(
        title=_title(raw),
        href=_text(attributes.get("href")) or "",
        variables=_href_variables(attributes.get("hrefVariables")),
        transitions=[_transition(c) for c in _children(raw, "transition")],
    )


def _transition(raw: dict) -> Transition:
    attributes = _attributes(raw)
    copy = next(iter(_children(raw, "copy")), None)
    return Transition(
        title=_title(raw),
        copy_text=_text(copy) if copy else None,
        href=_text(attributes.get("href")),
        variables=_href_variables(attributes.get("hrefVariables")),
        transactions=[_transaction(c) for c in _children(raw, "httpTransaction")],
    )


def _transaction(raw: dict) -> HttpTransaction:
    request = next(iter(_children(raw, "httpRequest")), None)
    return HttpTransaction(
        title=_title(raw),
        request=_request(request) if request else None,
        responses=[_response(c) for c in _children(raw, "httpResponse")],
    )


def _request(raw: dict) -> HttpRequest:
    attributes = _attributes(raw)
    return HttpRequest(
        title=_title(raw),
        method=_text(attributes.get("method")),
        href=_text(attributes.get("href")),
        variables=_href_variables(attributes.get("hrefVariables")),
        asset=_first_asset(raw),
    )


def _response(raw: dict) -> HttpResponse:
    status = _text(_attributes(raw).get("statusCode"))
    return HttpResponse(
        title=_title(raw),
        status_code=int(status) if status and status.isdigit() else 200,
        asset=_first_asset(raw),
    )


def _first_asset(raw: dict) -> Asset | None:
    asset = next(iter(_children(raw, "asset")), None)
    if asset is None:
        return None
    return Asset(
        content_type=_text(_attributes(asset).get("contentType")) or "application/json",
        body=_text(asset),
    )


def _href_variables(raw: Any) -> list[HrefVariable] | None:
    if not raw:
        return None
    variables = []
    for member in _array(raw):
        if not isinstance(member, dict) or member.get("element") != "member":
            continue
        pair = member.get("content") or {}
        name = _text(pair.get("key"))
        if name is None:
            continue
        value = pair.get("value")
        variables.append(
            HrefVariable(
                name=name,
                description=_text((member.get("meta") or {}).get("description")) or "",
                type_attributes=_strings(_attributes(member).get("typeAttributes")),
                value_element=value.get("element") if isinstance(value, dict) else None,
            )
        )
    return variables


# Refract helpers


def _attributes(raw: dict) -> dict:
    return raw.get("attributes") or {}


def _children(raw: dict, element: str) -> list[dict]:
    content = raw.get("content")
    if not isinstance(content, list):
        return []
    return [c for c in content if isinstance(c, dict) and c.get("element") == element]


def _title(raw: dict) -> str | None:
    return _text((raw.get("meta") or {}).get("title"))


def _text(value: Any) -> str | None:
    """Unwrap a Refract string/number element (or a bare scalar) to text."""
    if isinstance(value, dict):
        value = value.get("content")
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _array(value: Any) -> list:
    if isinstance(value, dict):
        value = value.get("content")
    return value if isinstance(value, list) else []


def _strings(value: Any) -> list[str]:
    return [text for text in (_text(item) for item in _array(value)) if text is not None]
