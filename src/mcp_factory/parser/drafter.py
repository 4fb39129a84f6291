"""API Blueprint parsing through the ``drafter`` command-line tool.

drafter reads a blueprint on stdin and writes an API Elements parse result.
"""

import json
import logging
import subprocess

from mcp_factory.errors import ParseError

logger = logging.getLogger(__name__)

DEFAULT_DRAFTER = "drafter"


class DrafterParser:
    """Callable blueprint parser backed by a ``drafter`` executable."""

    def __init__(self, executable: str | None = None):
        self.executable = executable or DEFAULT_DRAFTER

    def __call__(self, text: str) -> dict:
        logger.debug("Running %s on %d characters of blueprint", self.executable, len(text))
        try:
            result = subprocess.run(
                [self.executable, "--format", "json"],
                input=text,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise ParseError(f"Could not run {self.executable}: {e}") from e

        try:
            parse_result = json.loads(result.stdout) if result.stdout.strip() else None
        except json.JSONDecodeError as e:
            raise ParseError(f"API Blueprint parsing failed: invalid parser output ({e.msg})") from e

        error = _error_annotation(parse_result)
        if error is not None:
            raise ParseError(f"API Blueprint parsing failed: {error}")
        if result.returncode != 0 or not isinstance(parse_result, dict):
            message = result.stderr.strip() or f"{self.executable} exited with status {result.returncode}"
            raise ParseError(f"API Blueprint parsing failed: {message}")

        return parse_result


def _error_annotation(parse_result: dict | None) -> str | None:
    """Return the message of the first error annotation in a parse result."""
    if not isinstance(parse_result, dict):
        return None
    for item in parse_result.get("content") or []:
        if not isinstance(item, dict) or item.get("element") != "annotation":
            continue
        classes = (item.get("meta") or {}).get("classes") or {}
        names = classes.get("content", []) if isinstance(classes, dict) else classes
        if any((c.get("content") if isinstance(c, dict) else c) == "error" for c in names):
            return str(item.get("content") or "unknown error")
    return None
