from mcp_factory.errors import McpFactoryError, ParseError


class TestErrors:
    def test_parse_error_is_factory_error(self):
        err = ParseError("bad input")
        assert isinstance(err, McpFactoryError)
        assert err.code == "PARSE_ERROR"
        assert err.message == "bad input"
        assert str(err) == "bad input"

    def test_custom_code(self):
        err = McpFactoryError("nope", code="VALIDATION_ERROR")
        assert err.code == "VALIDATION_ERROR"
        assert McpFactoryError("default").code == "MCP_FACTORY_ERROR"
