"""Host-language environment.

The grammar engine consumes token trees and delegates embedded expressions
to a host expression parser. This package provides the interfaces and the
Python implementation of both collaborators.

Exports:
    HostExpression: Handle to a parsed embedded expression
    HostExpressionParser: Protocol for embedded expression parsers
    PythonExpressionParser: HostExpressionParser backed by the ast module
    tokenize_source: Token tree builder backed by the tokenize module

Python 3.13+.
"""

from tagtree.syntax.expression import HostExpression, HostExpressionParser

from .python import PythonExpressionParser, tokenize_source

__all__ = [
    "HostExpression",
    "HostExpressionParser",
    "PythonExpressionParser",
    "tokenize_source",
]
