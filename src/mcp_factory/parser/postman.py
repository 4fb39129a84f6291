"""Postman Collection normalizer.

Collections are detected but cannot be normalized yet.
"""

from mcp_factory.errors import ParseError

from .base import ApiSchema


def normalize_postman(collection: dict) -> ApiSchema:
    raise ParseError("Postman collection parsing not yet implemented")
