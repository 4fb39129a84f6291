import json
from pathlib import Path
from unittest.mock import patch, MagicMock

import pytest

from mcp_factory.errors import ParseError
from mcp_factory.parser.ai import parse_with_ai
from mcp_factory.parser.base import ApiSchema

FIXTURES = Path(__file__).parent / "fixtures"

MOCK_LLM_RESPONSE = json.dumps({
    "name": "Notes API",
    "baseUrl": "https://notes.example.com",
    "auth": {"type": "none"},
    "endpoints": [
        {
            "id": "create_note",
            "method": "POST",
            "path": "/notes",
            "description": "Create a note",
            "parameters": [],
            "requestBody": {
                "required": True,
                "contentType": "application/json",
                "schema": {
                    "type": "object",
                    "properties": {"title": {"type": "string"}, "body": {"type": "string"}},
                    "required": ["title", "body"],
                },
            },
            "response": {"statusCode": 201, "contentType": "application/json", "schema": {"type": "object", "properties": {}, "required": []}},
            "errors": [],
        },
        {
            "id": "get_note",
            "method": "GET",
            "path": "/notes/{id}",
            "description": "Fetch a note",
            "parameters": [
                {"name": "id", "location": "path", "required": True, "schema": {"type": "string"}}
            ],
            "requestBody": None,
            "response": {"statusCode": 200, "contentType": "application/json", "schema": {"type": "object", "properties": {}, "required": []}},
            "errors": [{"statusCode": 404, "description": "Not found"}],
        },
    ],
})


def _mock_client(MockLlmClient, response: str) -> MagicMock:
    mock_client = MagicMock()
    mock_client.model = "test-model"
    mock_client.call.return_value = response
    MockLlmClient.return_value = mock_client
    return mock_client


class TestAiParser:
    @patch("mcp_factory.parser.ai.LlmClient")
    def test_object_schema_without_properties_is_filled(self, MockLlmClient):
        data = json.loads(MOCK_LLM_RESPONSE)
        data["endpoints"][0]["response"]["schema"] = {"type": "object"}
        _mock_client(MockLlmClient, json.dumps(data))

        schema = parse_with_ai("docs").endpoints[0].response.schema_
        assert (schema.properties, schema.required) == ({}, [])

    @patch("mcp_factory.parser.ai.LlmClient")
    def test_array_schema_without_items_is_rejected(self, MockLlmClient):
        data = json.loads(MOCK_LLM_RESPONSE)
        data["endpoints"][0]["response"]["schema"] = {"type": "array"}
        _mock_client(MockLlmClient, json.dumps(data))

        with pytest.raises(ParseError, match="invalid API description"):
            parse_with_ai("docs")

    @patch("mcp_factory.parser.ai.LlmClient")
    def test_parse_returns_schema(self, MockLlmClient):
        _mock_client(MockLlmClient, MOCK_LLM_RESPONSE)

        schema = parse_with_ai((FIXTURES / "sample-api.md").read_text(encoding="utf-8"))
        assert isinstance(schema, ApiSchema)
        assert schema.name == "Notes API"
        assert schema.base_url == "https://notes.example.com"
        assert len(schema.endpoints) == 2

    @patch("mcp_factory.parser.ai.LlmClient")
    def test_parse_extracts_correct_data(self, MockLlmClient):
        _mock_client(MockLlmClient, MOCK_LLM_RESPONSE)

        schema = parse_with_ai("docs")
        post_ep = [e for e in schema.endpoints if e.method == "POST"][0]
        assert post_ep.request_body.schema_.required == ["title", "body"]
        get_ep = [e for e in schema.endpoints if e.method == "GET"][0]
        assert get_ep.parameters[0].location == "path"
        assert get_ep.errors[0].status_code == 404

    @patch("mcp_factory.parser.ai.LlmClient")
    def test_parse_fenced_response(self, MockLlmClient):
        _mock_client(MockLlmClient, f"Here you go:\n```json\n{MOCK_LLM_RESPONSE}\n```\n")
        assert parse_with_ai("docs").name == "Notes API"

    @patch("mcp_factory.parser.ai.LlmClient")
    def test_passes_model_and_document(self, MockLlmClient):
        mock_client = _mock_client(MockLlmClient, MOCK_LLM_RESPONSE)

        parse_with_ai("the docs", model="gpt-4o")
        MockLlmClient.assert_called_once_with(model="gpt-4o")
        assert mock_client.call.call_args[1]["user"] == "the docs"

    @patch("mcp_factory.parser.ai.LlmClient")
    def test_invalid_json(self, MockLlmClient):
        _mock_client(MockLlmClient, "I could not find any endpoints.")
        with pytest.raises(ParseError, match="invalid API description"):
            parse_with_ai("docs")

    @patch("mcp_factory.parser.ai.LlmClient")
    def test_invalid_shape(self, MockLlmClient):
        _mock_client(MockLlmClient, json.dumps({"endpoints": "none"}))
        with pytest.raises(ParseError, match="invalid API description"):
            parse_with_ai("docs")

    @patch("mcp_factory.parser.ai.LlmClient")
    def test_client_failure(self, MockLlmClient):
        mock_client = _mock_client(MockLlmClient, "")
        mock_client.call.side_effect = RuntimeError("rate limited")
        with pytest.raises(ParseError, match="rate limited"):
            parse_with_ai("docs")
