"""Diagnostic system for tagtree errors.

Provides structured error diagnostics with codes, spans, labels and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, DiagnosticLabel, Span
from .errors import HostSyntaxError, TagSyntaxError, TagTreeError
from .formatter import DiagnosticFormatter, OutputFormat, SourceLocator
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "DiagnosticLabel",
    "ErrorTemplate",
    "HostSyntaxError",
    "OutputFormat",
    "SourceLocator",
    "Span",
    "TagSyntaxError",
    "TagTreeError",
]
