"""Canonical data models for normalized API documentation.

Every normalizer (OpenAPI/Swagger, API Blueprint, the AI fallback) converts
its input into an ``ApiSchema`` built from these models. Instances are frozen
once constructed and serialize with camelCase keys (``baseUrl``,
``statusCode``) for downstream consumers.
"""

from collections import Counter
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

SchemaKind = Literal["string", "number", "boolean", "object", "array"]
AuthKind = Literal["api-key", "bearer", "oauth", "basic", "none"]


class CanonicalModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SchemaType(CanonicalModel):
    """Recursive shape of a JSON-like value.

    Object nodes always carry ``properties`` and ``required``; other nodes
    leave both unset.
    """

    type: SchemaKind
    properties: dict[str, "SchemaType"] | None = None
    required: list[str] | None = None
    items: "SchemaType | None" = None
    enum: list | None = None
    format: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _check_shape(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        kind = data.get("type")
        if kind == "object":
            if data.get("properties") is None:
                data["properties"] = {}
            if data.get("required") is None:
                data["required"] = []
        elif data.get("properties") is not None or data.get("required") is not None:
            raise ValueError(f"{kind} schema cannot carry properties or required")
        if kind == "array" and data.get("items") is None:
            raise ValueError("array schema requires items")
        # enum leaves never carry a format
        if data.get("enum") is not None:
            data.pop("format", None)
        return data


def bare_object() -> SchemaType:
    return SchemaType(type="object", properties={}, required=[])


class AuthConfig(CanonicalModel):
    type: AuthKind = "none"
    location: Literal["header", "query"] | None = None
    name: str | None = None
    description: str | None = None


class Parameter(CanonicalModel):
    name: str
    location: str  # path / query / header
    required: bool = False
    description: str = ""
    schema_: SchemaType = Field(alias="schema")


class RequestBody(CanonicalModel):
    description: str = ""
    required: bool = False
    content_type: str = "application/json"
    schema_: SchemaType = Field(alias="schema")


class ResponseSchema(CanonicalModel):
    status_code: int = 200
    description: str = ""
    content_type: str = "application/json"
    schema_: SchemaType = Field(alias="schema")


class ErrorSchema(CanonicalModel):
    status_code: int
    description: str = ""
    schema_: SchemaType | None = Field(default=None, alias="schema")


class Endpoint(CanonicalModel):
    """A single API operation."""

    id: str
    method: str  # GET / POST / PUT / PATCH / DELETE (OPTIONS / HEAD from OpenAPI)
    path: str  # /users/{id}
    description: str = ""
    parameters: list[Parameter] = []
    request_body: RequestBody | None = None
    response: ResponseSchema
    errors: list[ErrorSchema] = []


class ApiSchema(CanonicalModel):
    """Root of the canonical tree, one per input document."""

    name: str
    base_url: str = ""
    auth: AuthConfig = AuthConfig()
    endpoints: list[Endpoint] = []


def duplicate_endpoint_ids(schema: ApiSchema) -> list[str]:
    """Return endpoint ids that occur more than once, in first-seen order."""
    counts = Counter(endpoint.id for endpoint in schema.endpoints)
    return [endpoint_id for endpoint_id, count in counts.items() if count > 1]
