"""AI-assisted fallback for documents no structured normalizer recognizes.

Uses an LLM to rewrite unstructured API documentation directly into the
canonical ApiSchema JSON.
"""

import json
import logging
import re

from pydantic import ValidationError

from mcp_factory.errors import ParseError
from mcp_factory.llm import LlmClient

from .base import ApiSchema

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an API documentation parser. Describe the API in the given document as one JSON object.

The object must have these fields:
- name: API title
- baseUrl: base URL of the API, or "" if unknown
- auth: {type (api-key/bearer/oauth/basic/none), location (header/query, optional), name (optional), description (optional)}
- endpoints: Array of endpoint objects, each with:
  - id: unique snake_case identifier
  - method: HTTP method (GET/POST/PUT/PATCH/DELETE)
  - path: URL path (e.g., /users/{id})
  - description: Brief description
  - parameters: Array of {name, location (path/query/header), required (bool), description, schema}
  - requestBody: {description, required (bool), contentType, schema} or null
  - response: {statusCode, description, contentType, schema}
  - errors: Array of {statusCode, description, schema (optional)}

Every schema is {type (string/number/boolean/object/array), properties, required, items, enum, format}.
Object schemas always include properties and required; other types omit them.

Output ONLY the JSON object, no other text."""


def parse_with_ai(text: str, model: str | None = None) -> ApiSchema:
    """Extract an ApiSchema from free-form documentation using an LLM."""
    client = LlmClient(model=model)
    logger.info("Asking %s to extract the API description", client.model)
    try:
        response = client.call(system=SYSTEM_PROMPT, user=text)
    except Exception as e:
        raise ParseError(f"AI parsing failed: {e}") from e

    try:
        data = json.loads(_extract_json(response))
        return ApiSchema.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ParseError(f"AI parser returned an invalid API description: {e}") from e


def _extract_json(text: str) -> str:
    """Extract JSON from a response that might contain Markdown code blocks."""
    match = re.search(r"```(?:json)?\s*\n(.*?)```", text, re.DOTALL)
    if match:
        return match.group(1).strip()
    return text.strip()
