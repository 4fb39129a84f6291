"""Error types raised while turning API documents into a canonical schema."""


class McpFactoryError(Exception):
    """Base error carrying a machine-readable code."""

    code = "MCP_FACTORY_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ParseError(McpFactoryError):
    """Input could not be read, classified, or normalized."""

    code = "PARSE_ERROR"
