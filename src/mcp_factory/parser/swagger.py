"""OpenAPI / Swagger document normalizer.

Converts OpenAPI 3.x and Swagger 2.0 documents into the canonical ApiSchema.
Only the first declared security scheme is considered, and ``$ref``
parameters are dropped rather than resolved.
"""

import logging
import re

from mcp_factory.errors import ParseError

from .base import (
    ApiSchema,
    AuthConfig,
    Endpoint,
    ErrorSchema,
    Parameter,
    RequestBody,
    ResponseSchema,
    bare_object,
)
from .inference import from_declaration

logger = logging.getLogger(__name__)

METHODS = ("get", "post", "put", "patch", "delete", "options", "head")
PARAM_LOCATIONS = ("path", "query", "header")
JSON_MEDIA_TYPE = "application/json"


def normalize_openapi(doc: dict) -> ApiSchema:
    """Normalize a parsed OpenAPI 3.x / Swagger 2.0 document."""
    if not isinstance(doc, dict) or not (_is_swagger2(doc) or _is_openapi3(doc)):
        raise ParseError("Unsupported spec version. Only OpenAPI 3.x and Swagger 2.0 are supported.")

    try:
        info = doc.get("info") or {}
        return ApiSchema(
            name=info.get("title") or "API",
            base_url=_base_url(doc),
            auth=_detect_auth(doc),
            endpoints=_parse_endpoints(doc),
        )
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"Failed to parse OpenAPI document: {e!r}") from e


def _is_swagger2(doc: dict) -> bool:
    return doc.get("swagger") is not None and str(doc["swagger"]) == "2.0"


def _is_openapi3(doc: dict) -> bool:
    return doc.get("openapi") is not None and str(doc["openapi"]).startswith("3.")


def _base_url(doc: dict) -> str:
    servers = doc.get("servers") or []
    if servers:
        return (servers[0] or {}).get("url") or ""

    if doc.get("host"):
        schemes = doc.get("schemes") or ["https"]
        return f"{schemes[0]}://{doc['host']}{doc.get('basePath', '')}"

    return ""


def _detect_auth(doc: dict) -> AuthConfig:
    schemes = (doc.get("components") or {}).get("securitySchemes") or doc.get("securityDefinitions") or {}
    if not schemes:
        return AuthConfig(type="none")

    scheme = next(iter(schemes.values())) or {}
    description = scheme.get("description")
    kind = scheme.get("type")

    if kind == "apiKey":
        return AuthConfig(
            type="api-key",
            location="header" if scheme.get("in") == "header" else "query",
            name=scheme.get("name"),
            description=description,
        )
    if kind == "http" and scheme.get("scheme") == "bearer":
        return AuthConfig(type="bearer", description=description)
    if kind == "http" and scheme.get("scheme") == "basic":
        return AuthConfig(type="basic", description=description)
    if kind == "oauth2":
        return AuthConfig(type="oauth", description=description)
    return AuthConfig(type="none")


def _parse_endpoints(doc: dict) -> list[Endpoint]:
    endpoints = []
    for path, path_item in (doc.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        for method in METHODS:
            operation = path_item.get(method)
            if operation:
                endpoints.append(_parse_operation(path, method, operation, path_item))
    return endpoints


def _parse_operation(path: str, method: str, operation: dict, path_item: dict) -> Endpoint:
    parameters = _parse_parameters(path_item.get("parameters") or [])
    parameters += _parse_parameters(operation.get("parameters") or [])

    responses = operation.get("responses") or {}

    return Endpoint(
        id=operation.get("operationId") or f"{method}_{path.replace('/', '_')}",
        method=method.upper(),
        path=path,
        description=operation.get("description") or operation.get("summary") or "",
        parameters=parameters,
        request_body=_parse_request_body(operation.get("requestBody")),
        response=_parse_response(responses),
        errors=_parse_errors(responses),
    )


def _parse_parameters(params: list[dict]) -> list[Parameter]:
    result = []
    for p in params:
        if "$ref" in p:
            logger.debug("Dropping $ref parameter %s", p["$ref"])
            continue
        if p.get("in") not in PARAM_LOCATIONS:
            continue

        # Swagger 2.0 declares non-body parameter types inline
        schema = p.get("schema") or {
            key: p[key] for key in ("type", "format", "items", "enum") if key in p
        }

        result.append(
            Parameter(
                name=p["name"],
                location=p["in"],
                required=bool(p.get("required")),
                description=p.get("description") or "",
                schema=from_declaration(schema),
            )
        )
    return result


def _parse_request_body(body: dict | None) -> RequestBody | None:
    if not body:
        return None
    schema = _json_schema(body)
    if schema is None:
        return None
    return RequestBody(
        description=body.get("description") or "",
        required=bool(body.get("required")),
        content_type=JSON_MEDIA_TYPE,
        schema=from_declaration(schema),
    )


def _parse_response(responses: dict) -> ResponseSchema:
    success_code = next((str(code) for code in responses if str(code).startswith("2")), "200")
    success = _lookup(responses, success_code) or {}
    schema = _json_schema(success)

    return ResponseSchema(
        status_code=_status_code(success_code),
        description=success.get("description") or "",
        content_type=JSON_MEDIA_TYPE,
        schema=from_declaration(schema) if schema else bare_object(),
    )


def _parse_errors(responses: dict) -> list[ErrorSchema]:
    errors = []
    for code, resp in responses.items():
        code = str(code)
        if code.startswith("2") or code == "default":
            continue
        resp = resp or {}
        schema = _json_schema(resp)
        errors.append(
            ErrorSchema(
                status_code=_status_code(code),
                description=resp.get("description") or f"Error {code}",
                schema=from_declaration(schema) if schema else None,
            )
        )
    return errors


def _json_schema(obj: dict) -> dict | None:
    """Return the JSON schema node of a request body or response object."""
    content = obj.get("content") or {}
    media = content.get(JSON_MEDIA_TYPE) or {}
    if media.get("schema"):
        return media["schema"]
    # Swagger 2.0 responses carry the schema directly
    return obj.get("schema") or None


def _lookup(responses: dict, code: str) -> dict | None:
    # YAML may load unquoted status codes as ints
    if code in responses:
        return responses[code]
    if code.isdigit():
        return responses.get(int(code))
    return None


def _status_code(code: str) -> int:
    """Parse a status code; range wildcards like ``4XX`` map to the range floor."""
    digits = re.sub(r"[xX]", "0", code)
    if digits.isdigit():
        return int(digits)
    match = re.match(r"\d+", code)
    return int(match.group()) if match else 0
