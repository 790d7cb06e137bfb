"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, DiagnosticLabel, Span


class ErrorTemplate:
    """Centralized error message templates.

    All diagnostics are created here. NO f-strings in exception constructors!
    This keeps every recoverable error of the grammar engine:
        - Testable by code instead of by message text
        - Consistently worded
        - Documented in one place
    """

    # ========================================================================
    # TAG STRUCTURE
    # ========================================================================

    @staticmethod
    def unterminated_open_tag(name: str, span: Span | None) -> Diagnostic:
        """Element reached end of input without a close tag.

        Args:
            name: Verbatim name of the open tag
            span: Location of the open tag

        Returns:
            Diagnostic for UNTERMINATED_OPEN_TAG
        """
        msg = f"open tag '{name}' has no corresponding close tag and is not self-closing"
        return Diagnostic(
            code=DiagnosticCode.UNTERMINATED_OPEN_TAG,
            message=msg,
            span=span,
            hint=f"Add '</{name}>' or close the tag with '/>'",
        )

    @staticmethod
    def mismatched_close_tag(
        expected: str, found: str, span: Span | None, open_span: Span | None
    ) -> Diagnostic:
        """Close tag name differs from the open tag name.

        Args:
            expected: Name of the open tag
            found: Name of the close tag
            span: Location of the close tag name
            open_span: Location of the open tag name

        Returns:
            Diagnostic for MISMATCHED_CLOSE_TAG
        """
        msg = f"wrong close tag found: expected '{expected}', found '{found}'"
        return Diagnostic(
            code=DiagnosticCode.MISMATCHED_CLOSE_TAG,
            message=msg,
            span=span,
            labels=(DiagnosticLabel(open_span, "open tag is here"),),
        )

    @staticmethod
    def unexpected_close_tag(name: str, span: Span | None) -> Diagnostic:
        """Close tag without a matching open tag.

        Args:
            name: Verbatim close tag name (empty for a fragment close)
            span: Location of the close tag

        Returns:
            Diagnostic for UNEXPECTED_CLOSE_TAG
        """
        shown = f"</{name}>" if name else "</>"
        msg = f"close tag {shown} has no corresponding open tag"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_CLOSE_TAG,
            message=msg,
            span=span,
        )

    @staticmethod
    def unterminated_fragment(span: Span | None) -> Diagnostic:
        """Fragment reached end of input without '</>'.

        Args:
            span: Location of the fragment open marker

        Returns:
            Diagnostic for UNTERMINATED_FRAGMENT
        """
        return Diagnostic(
            code=DiagnosticCode.UNTERMINATED_FRAGMENT,
            message="fragment has no corresponding close tag '</>'",
            span=span,
            hint="Add '</>' after the last child of the fragment",
        )

    @staticmethod
    def fragment_closed_by_element(
        name: str, span: Span | None, open_span: Span | None
    ) -> Diagnostic:
        """Element close tag found where '</>' was expected.

        Args:
            name: Name used in the close tag
            span: Location of the name inside the close tag
            open_span: Location of the fragment open marker

        Returns:
            Diagnostic for FRAGMENT_CLOSED_BY_ELEMENT
        """
        msg = f"expected fragment closing, found element closing tag '</{name}>'"
        return Diagnostic(
            code=DiagnosticCode.FRAGMENT_CLOSED_BY_ELEMENT,
            message=msg,
            span=span,
            labels=(DiagnosticLabel(open_span, "fragment opened here"),),
            hint="Remove the name from the close tag",
        )

    @staticmethod
    def unexpected_token(expected: str, found: str, span: Span | None) -> Diagnostic:
        """Required punctuation, keyword or literal missing.

        Args:
            expected: Description of what the grammar requires
            found: Description of the token actually present
            span: Location of the offending token

        Returns:
            Diagnostic for UNEXPECTED_TOKEN
        """
        msg = f"expected {expected}, found {found}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_TOKEN,
            message=msg,
            span=span,
        )

    # ========================================================================
    # NAMES, ATTRIBUTES, BLOCKS
    # ========================================================================

    @staticmethod
    def invalid_node_name(found: str, span: Span | None) -> Diagnostic:
        """Token sequence is not a valid tag or attribute name.

        Args:
            found: Description of the token found
            span: Location of the offending token

        Returns:
            Diagnostic for INVALID_NODE_NAME
        """
        msg = f"invalid tag name or attribute key: found {found}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_NODE_NAME,
            message=msg,
            span=span,
            hint="Names are identifiers joined by '.', '-' or ':', or a block",
        )

    @staticmethod
    def missing_attribute_value(key: str, span: Span | None) -> Diagnostic:
        """Attribute has '=' but no value expression.

        Args:
            key: Attribute key
            span: Location of the '=' sign

        Returns:
            Diagnostic for MISSING_ATTRIBUTE_VALUE
        """
        msg = f"attribute '{key}' has '=' but no value"
        return Diagnostic(
            code=DiagnosticCode.MISSING_ATTRIBUTE_VALUE,
            message=msg,
            span=span,
            hint=f"Write '{key}=\"value\"' or drop the '='",
        )

    @staticmethod
    def invalid_embedded_expression(detail: str, span: Span | None) -> Diagnostic:
        """Host expression parser rejected a block or attribute value.

        Args:
            detail: Reason reported by the host parser
            span: Location of the block or value

        Returns:
            Diagnostic for INVALID_EMBEDDED_EXPRESSION
        """
        msg = f"invalid embedded expression: {detail}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_EMBEDDED_EXPRESSION,
            message=msg,
            span=span,
        )

    @staticmethod
    def host_syntax_error(detail: str, span: Span | None) -> Diagnostic:
        """Host tokenizer could not produce a token tree.

        Args:
            detail: Reason reported by the host tokenizer
            span: Location of the failure

        Returns:
            Diagnostic for HOST_SYNTAX_ERROR
        """
        msg = f"cannot tokenize source: {detail}"
        return Diagnostic(
            code=DiagnosticCode.HOST_SYNTAX_ERROR,
            message=msg,
            span=span,
            hint="Unquoted text must be valid host-language tokens; quote it instead",
        )

    # ========================================================================
    # TOP-LEVEL CONSTRAINTS
    # ========================================================================

    @staticmethod
    def top_level_count(expected: int, found: int, span: Span | None) -> Diagnostic:
        """Top-level node count differs from the configured count.

        Args:
            expected: Configured number of top-level nodes
            found: Number of top-level nodes parsed
            span: Location of the whole input

        Returns:
            Diagnostic for TOP_LEVEL_CARDINALITY_VIOLATION
        """
        msg = f"expected {expected} top-level node(s), found {found}"
        return Diagnostic(
            code=DiagnosticCode.TOP_LEVEL_CARDINALITY_VIOLATION,
            message=msg,
            span=span,
        )

    @staticmethod
    def top_level_kind(expected: str, found: str, span: Span | None) -> Diagnostic:
        """Top-level node has a kind other than the configured one.

        Args:
            expected: Required node kind
            found: Kind of the offending node
            span: Location of the offending node

        Returns:
            Diagnostic for TOP_LEVEL_KIND_VIOLATION
        """
        msg = f"top-level node must be of kind '{expected}', found '{found}'"
        return Diagnostic(
            code=DiagnosticCode.TOP_LEVEL_KIND_VIOLATION,
            message=msg,
            span=span,
        )

    # ========================================================================
    # RECOVERY AND LIMITS
    # ========================================================================

    @staticmethod
    def unexpected_end_of_input(context: str, span: Span | None) -> Diagnostic:
        """Parser could neither make progress nor skip the offending token.

        Args:
            context: Construct being parsed
            span: Location where progress stopped

        Returns:
            Diagnostic for UNEXPECTED_END_OF_INPUT
        """
        msg = f"unexpected end of input while parsing {context}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_END_OF_INPUT,
            message=msg,
            span=span,
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, span: Span | None = None) -> Diagnostic:
        """Markup nesting exceeds the configured depth.

        Args:
            max_depth: Effective nesting limit
            span: Location of the node that exceeded the limit

        Returns:
            Diagnostic for NESTING_DEPTH_EXCEEDED
        """
        msg = f"Maximum nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=msg,
            span=span,
            hint="Reduce nesting or raise ParserConfig.max_nesting_depth",
        )
