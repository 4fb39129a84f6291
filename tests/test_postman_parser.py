import json
from pathlib import Path

import pytest

from mcp_factory.errors import ParseError
from mcp_factory.parser.postman import normalize_postman

FIXTURES = Path(__file__).parent / "fixtures"


class TestPostmanNormalizer:
    def test_not_implemented(self):
        collection = json.loads((FIXTURES / "sample.postman.json").read_text(encoding="utf-8"))
        with pytest.raises(ParseError, match="Postman collection parsing not yet implemented"):
            normalize_postman(collection)

    def test_error_code(self):
        with pytest.raises(ParseError) as exc_info:
            normalize_postman({})
        assert exc_info.value.code == "PARSE_ERROR"
