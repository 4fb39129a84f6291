"""Route a document to the normalizer matching its detected format."""

import logging
from pathlib import Path

from mcp_factory.errors import ParseError

from .base import ApiSchema
from .blueprint import BlueprintParser, normalize_blueprint
from .detect import detect_format
from .postman import normalize_postman
from .swagger import normalize_openapi

logger = logging.getLogger(__name__)

NORMALIZERS = {
    "openapi": normalize_openapi,
    "swagger": normalize_openapi,
    "postman": normalize_postman,
}


def load_schema(
    file_path: Path,
    ai_parse: bool = False,
    model: str | None = None,
    blueprint_parser: BlueprintParser | None = None,
) -> ApiSchema:
    """Detect the format of ``file_path`` and normalize it into an ApiSchema."""
    detection = detect_format(file_path)
    logger.info("Detected format %s for %s", detection.format, file_path)

    if detection.format == "apib":
        return normalize_blueprint(detection.content, parser=blueprint_parser)

    if detection.format in NORMALIZERS:
        return NORMALIZERS[detection.format](detection.content)

    if ai_parse:
        from .ai import parse_with_ai

        return parse_with_ai(Path(file_path).read_text(encoding="utf-8"), model=model)

    raise ParseError("Could not detect format. Use --ai-parse for unstructured docs.")
