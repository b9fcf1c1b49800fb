"""halgen - HAL interface code generator.

Renders a parsed interface definition into text for one output section by
filling named snippets with substitution values computed from the tree.

Example usage:
    >>> from halgen import Diagnostics, Unit, emit, load_snippets, parse_yaml
    >>>
    >>> table = load_snippets(Path("snippets.yml"))
    >>> unit = Unit.model_validate(parse_yaml(Path("nfc.yml")))
    >>>
    >>> with open("INfc.h", "w") as out:
    ...     emit(unit, table, "h", out, Diagnostics())
"""

from .annotation import CallFlowFact, CallFlowKind, parse_callflow, render_callflow
from .context import GenContext
from .core import emit, parse_yaml
from .diagnostics import Diagnostic, DiagnosticKind, Diagnostics, Severity
from .errors import HalgenError, MissingInterfaceError
from .generator import CodeGenerator
from .models import Annotation, AnnotationValue, Value, Version
from .nodes import Declaration, Field, Function, Interface, Type, Unit
from .snippets import (
    SnippetTable,
    Subs,
    fill,
    load_snippet_dir,
    load_snippet_file,
    load_snippets,
    resolve,
)

__all__ = [
    # Core
    "CodeGenerator",
    "emit",
    "resolve",
    "fill",
    "GenContext",
    # Syntax tree
    "Unit",
    "Interface",
    "Declaration",
    "Function",
    "Field",
    "Type",
    "Value",
    "Annotation",
    "AnnotationValue",
    "Version",
    # Snippets
    "SnippetTable",
    "Subs",
    "load_snippets",
    "load_snippet_file",
    "load_snippet_dir",
    # Call graph
    "CallFlowFact",
    "CallFlowKind",
    "parse_callflow",
    "render_callflow",
    # Diagnostics
    "Diagnostics",
    "Diagnostic",
    "DiagnosticKind",
    "Severity",
    "HalgenError",
    "MissingInterfaceError",
    # Utilities
    "parse_yaml",
]
