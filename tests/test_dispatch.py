import json
from pathlib import Path
from unittest.mock import patch

import pytest

from mcp_factory.errors import ParseError
from mcp_factory.parser.base import ApiSchema
from mcp_factory.parser.dispatch import load_schema

FIXTURES = Path(__file__).parent / "fixtures"


def _blueprint_tree(text: str) -> dict:
    return json.loads((FIXTURES / "sample.apib.json").read_text(encoding="utf-8"))


class TestLoadSchema:
    def test_openapi(self):
        schema = load_schema(FIXTURES / "petstore.yaml")
        assert schema.name == "Swagger Petstore"
        assert len(schema.endpoints) == 4

    def test_swagger(self):
        assert load_schema(FIXTURES / "swagger2.json").base_url == "https://api.x.com/v1"

    def test_blueprint_receives_raw_text(self):
        seen = []

        def parser(text):
            seen.append(text)
            return _blueprint_tree(text)

        schema = load_schema(FIXTURES / "sample.apib", blueprint_parser=parser)
        assert schema.name == "My API"
        assert seen[0].startswith("FORMAT: 1A")

    def test_postman_fails(self):
        with pytest.raises(ParseError, match="not yet implemented"):
            load_schema(FIXTURES / "sample.postman.json")

    def test_unknown_without_ai(self):
        with pytest.raises(ParseError, match="--ai-parse"):
            load_schema(FIXTURES / "sample-api.md")

    @patch("mcp_factory.parser.ai.parse_with_ai")
    def test_unknown_with_ai(self, mock_parse):
        mock_parse.return_value = ApiSchema(name="Notes API")

        schema = load_schema(FIXTURES / "sample-api.md", ai_parse=True, model="gpt-4o")
        assert schema.name == "Notes API"
        text = mock_parse.call_args[0][0]
        assert text.startswith("# Notes API")
        assert mock_parse.call_args[1]["model"] == "gpt-4o"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="Could not read file"):
            load_schema(tmp_path / "nope.json")
