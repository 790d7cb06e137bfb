"""tagtree exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class TagTreeError(Exception):
    """Base exception for all tagtree errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize TagTreeError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class TagSyntaxError(TagTreeError):
    """Markup syntax error.

    Raised by parse_strict() and ParseOutcome.into_result() with the first
    diagnostic of the parse. Recoverable parses never raise it.
    """


class HostSyntaxError(TagTreeError):
    """Host-language syntax error.

    Raised by the host tokenizer when source text cannot be turned into a
    token tree, and by host expression parsers when no token prefix forms
    an expression. The grammar engine converts it into a diagnostic.
    """
