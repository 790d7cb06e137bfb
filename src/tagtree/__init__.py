"""tagtree - recoverable markup parser over host-language token trees.

Parses HTML-like markup embedded in a host language (Python by default)
into a tree of Element, Fragment, Text, RawText, Comment, Doctype and
Block nodes. Parsing either stops at the first error or recovers and
reports every diagnostic alongside a best-effort tree.

Public API:
    parse_recoverable - Parse, collecting every diagnostic (ParseOutcome)
    parse_strict - Parse, raising TagSyntaxError on the first diagnostic
    MarkupParser - Parser bound to one ParserConfig
    ParserConfig - Immutable parse policy
    tokenize_source - Build a token tree from Python source text

Exceptions:
    TagTreeError - Base exception class
    TagSyntaxError - Markup errors from parse_strict
    HostSyntaxError - Host tokenizer and expression errors
    DepthLimitExceededError - Nesting depth exceeded

Submodules:
    tagtree.syntax.ast - Node types (Element, Fragment, RawText, etc.)
    tagtree.diagnostics - Diagnostic codes, templates and formatter
    tagtree.host - Host environment collaborators
"""

from .config import ParserConfig
from .core import DepthLimitExceededError
from .diagnostics import Diagnostic, DiagnosticCode, HostSyntaxError, TagSyntaxError, TagTreeError
from .enums import NodeKind, OutcomeStatus
from .syntax import MarkupParser, ParseOutcome, parse_recoverable, parse_strict
from .host import PythonExpressionParser, tokenize_source

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("tagtree")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "DepthLimitExceededError",
    "Diagnostic",
    "DiagnosticCode",
    "HostSyntaxError",
    "MarkupParser",
    "NodeKind",
    "OutcomeStatus",
    "ParseOutcome",
    "ParserConfig",
    "PythonExpressionParser",
    "TagSyntaxError",
    "TagTreeError",
    "__version__",
    "parse_recoverable",
    "parse_strict",
    "tokenize_source",
]
