"""API Blueprint document normalizer.

Parses blueprint text into an API Elements tree (through ``drafter`` unless
another parser is supplied), walks every resource group at any depth, and
infers body schemas from the JSON examples attached to requests and responses.
"""

import json
import logging
from typing import Callable

from mcp_factory.errors import ParseError

from .base import (
    ApiSchema,
    AuthConfig,
    Endpoint,
    ErrorSchema,
    Parameter,
    RequestBody,
    ResponseSchema,
    SchemaType,
    bare_object,
)
from .drafter import DrafterParser
from .elements import (
    Asset,
    Category,
    Copy,
    HrefVariable,
    HttpRequest,
    HttpResponse,
    HttpTransaction,
    Resource,
    Transition,
    document_title,
    lift,
)
from .inference import from_element_type, from_value

logger = logging.getLogger(__name__)

BlueprintParser = Callable[[str], dict]

DEFAULT_TITLE = "Untitled API"
DEFAULT_BASE_URL = "https://api.example.com"


def normalize_blueprint(text: str, parser: BlueprintParser | None = None) -> ApiSchema:
    """Normalize API Blueprint text into an ApiSchema.

    ``parser`` turns blueprint text into an API Elements parse result; it
    defaults to running ``drafter``. Any parser failure is raised as ParseError.
    """
    parser = parser or DrafterParser()
    try:
        parse_result = parser(text)
        nodes = lift(parse_result)

        endpoints = []
        for resource in _collect_resources(nodes):
            for transition in resource.transitions:
                if not transition.transactions:
                    logger.debug("Skipping action %r without a request/response pair", transition.title)
                    continue
                endpoints.append(_build_endpoint(resource, transition, transition.transactions[0]))

        return ApiSchema(
            name=document_title(parse_result) or DEFAULT_TITLE,
            base_url=_base_url(nodes),
            auth=_detect_auth(parse_result),
            endpoints=endpoints,
        )
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"Failed to parse API Blueprint: {e}") from e


def _collect_resources(nodes: list[Category | Resource | Copy]) -> list[Resource]:
    """Depth-first collection of every resource, however deeply grouped."""
    resources = []
    for node in nodes:
        match node:
            case Category():
                resources.extend(_collect_resources(node.children))
            case Resource():
                resources.append(node)
            case Copy():
                pass
    return resources


def _base_url(nodes: list[Category | Resource | Copy]) -> str:
    for node in nodes:
        if isinstance(node, Category) and "api" in node.classes and "HOST" in node.metadata:
            return node.metadata["HOST"]
    return DEFAULT_BASE_URL


def _build_endpoint(resource: Resource, transition: Transition, transaction: HttpTransaction) -> Endpoint:
    request = transaction.request or HttpRequest()
    method = (request.method or "GET").upper()
    path = request.href or transition.href or resource.href

    # Only the first response of a pair describes success
    response = transaction.responses[0] if transaction.responses else HttpResponse()

    return Endpoint(
        id=f"{method.lower()}-{path.replace('/', '-').replace('{', '').replace('}', '')}",
        method=method,
        path=path,
        description=_description(transition, transaction, request),
        parameters=_parameters(_variables(request, transition, resource)),
        request_body=_request_body(request),
        response=_response(response),
        errors=_errors(transaction),
    )


def _description(transition: Transition, transaction: HttpTransaction, request: HttpRequest) -> str:
    return transition.copy_text or transition.title or transaction.title or request.title or ""


def _variables(request: HttpRequest, transition: Transition, resource: Resource) -> list[HrefVariable]:
    # Wider than request-only scoping on purpose: drafter attaches URI variables
    # to the action or resource, so inherit from those when the request has none
    for variables in (request.variables, transition.variables, resource.variables):
        if variables:
            return variables
    return []


def _parameters(variables: list[HrefVariable]) -> list[Parameter]:
    parameters = []
    for variable in variables:
        location = "path"
        if "query" in variable.type_attributes:
            location = "query"
        elif "header" in variable.type_attributes:
            location = "header"

        parameters.append(
            Parameter(
                name=variable.name,
                location=location,
                required="required" in variable.type_attributes,
                description=variable.description,
                schema=from_element_type(variable.value_element),
            )
        )
    return parameters


def _request_body(request: HttpRequest) -> RequestBody | None:
    if request.asset is None:
        return None
    return RequestBody(
        required=True,
        content_type=request.asset.content_type,
        schema=_body_schema(request.asset) or bare_object(),
    )


def _response(response: HttpResponse) -> ResponseSchema:
    return ResponseSchema(
        status_code=response.status_code,
        description=response.title or "",
        content_type=response.asset.content_type if response.asset else "application/json",
        schema=_body_schema(response.asset) or bare_object(),
    )


def _errors(transaction: HttpTransaction) -> list[ErrorSchema]:
    return [
        ErrorSchema(
            status_code=response.status_code,
            description=response.title or f"Error {response.status_code}",
            schema=_body_schema(response.asset),
        )
        for response in transaction.responses
        if response.status_code >= 400
    ]


def _body_schema(asset: Asset | None) -> SchemaType | None:
    """Infer a schema from an example body; None when there is no body text."""
    if asset is None or not asset.body:
        return None
    try:
        return from_value(json.loads(asset.body))
    except json.JSONDecodeError:
        return bare_object()


def _detect_auth(parse_result: dict) -> AuthConfig:
    """Guess the auth style by scanning the serialized parse tree for keywords."""
    text = json.dumps(parse_result)

    if "Authorization" in text or "bearer" in text:
        return AuthConfig(
            type="bearer",
            location="header",
            name="Authorization",
            description="Bearer token authentication",
        )
    if "api-key" in text or "apiKey" in text or "X-API-Key" in text:
        return AuthConfig(
            type="api-key",
            location="header",
            name="X-API-Key",
            description="API key authentication",
        )
    if "oauth" in text or "OAuth" in text:
        return AuthConfig(type="oauth", description="OAuth 2.0 authentication")
    if "Basic" in text:
        return AuthConfig(type="basic", description="Basic authentication")
    return AuthConfig(type="none")
