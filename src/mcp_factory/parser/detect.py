"""Auto-detect API documentation format."""

import json
import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict

from mcp_factory.errors import ParseError

logger = logging.getLogger(__name__)

InputFormat = Literal["openapi", "swagger", "apib", "postman", "unknown"]

BLUEPRINT_EXTENSIONS = (".apib", ".apiblueprint")
BLUEPRINT_MARKER = "FORMAT: 1A"


class Detection(BaseModel):
    """Detected format plus the content the matching normalizer consumes.

    ``content`` is raw text for API Blueprint and the parsed document otherwise.
    """

    model_config = ConfigDict(frozen=True)

    format: InputFormat
    content: Any


def detect_format(file_path: Path) -> Detection:
    """Classify an API documentation file.

    Raises ParseError if the file cannot be read or is neither JSON nor YAML.
    """
    file_path = Path(file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Could not read file: {file_path}") from e

    if file_path.suffix.lower() in BLUEPRINT_EXTENSIONS:
        return _detected("apib", text)

    if text.strip().startswith(BLUEPRINT_MARKER):
        return _detected("apib", text)

    data = _load_structured(text)
    return _detected(classify(data), data)


def classify(data: Any) -> InputFormat:
    """Classify an already-parsed JSON/YAML document."""
    if not isinstance(data, dict):
        return "unknown"

    # YAML reads `openapi: 3.0` as a float, so compare the text form
    openapi = data.get("openapi")
    if openapi is not None and str(openapi).startswith("3."):
        return "openapi"

    swagger = data.get("swagger")
    if swagger is not None and str(swagger) == "2.0":
        return "swagger"

    info = data.get("info")
    if isinstance(info, dict) and "postman" in str(info.get("schema", "")):
        return "postman"

    return "unknown"


def _load_structured(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        pass

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError("Could not parse input as JSON or YAML") from e


def _detected(fmt: InputFormat, content: Any) -> Detection:
    logger.debug("Detected format: %s", fmt)
    return Detection(format=fmt, content=content)
