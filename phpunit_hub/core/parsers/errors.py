"""Errors raised by the report parsers."""


class ParseError(ValueError):
    """
    Report input is empty or not a well-formed document of the expected kind.

    Attributes:
        diagnostics: Every underlying message, in the order they were reported
    """

    def __init__(self, message: str, diagnostics: list[str] | None = None):
        self.diagnostics = list(diagnostics or [])
        if self.diagnostics:
            message = f"{message}: {', '.join(self.diagnostics)}"
        super().__init__(message)
