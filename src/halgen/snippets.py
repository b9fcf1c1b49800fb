"""Snippet tables and the substitution engine.

A snippet table maps an output section (``h``, ``cpp``, ``vts``, ...) to the
named snippets used when rendering that section. Snippets contain ``${key}``
placeholders which are filled from an ordered list of ``(key, value)`` pairs.

Filling is a single left-to-right scan:

- keys are matched as literal text, never as patterns
- inserted values are never scanned again, so a value may safely spell
  another key or even contain ``${other}``
- a placeholder without a matching pair becomes empty text
- ``$$`` produces a literal ``$``

When a key appears more than once in the pairs, the first pair wins.

Example:
    >>> table = SnippetTable(sections={"h": {"const": "enum { ${NAME} = ${VAL} };"}})
    >>> resolve(table, "h", "const", [("NAME", "MAX_LEN"), ("VAL", "32")])
    'enum { MAX_LEN = 32 };'
"""

import logging
from collections import defaultdict
from pathlib import Path
from string import Template
from typing import Optional

import yaml
from jinja2 import Environment, FileSystemLoader
from pydantic import BaseModel, ConfigDict

from .diagnostics import DiagnosticKind, Diagnostics

# Ordered (placeholder, replacement) pairs
Subs = list[tuple[str, str]]

SNIPPET_EXTENSION = "snip"


class SnippetTable(BaseModel):
    """Read-only two-level mapping: section -> snippet name -> text."""

    model_config = ConfigDict(frozen=True)

    sections: dict[str, dict[str, str]] = {}

    @property
    def section_names(self) -> list[str]:
        return list(self.sections.keys())

    def has_section(self, section: str) -> bool:
        return section in self.sections

    def get(self, section: str, name: str) -> Optional[str]:
        """Return the snippet text, or None if either level is missing."""
        snippets = self.sections.get(section)
        if snippets is None:
            return None
        return snippets.get(name)


class SnippetTemplate(Template):
    """Only braced ``${key}`` placeholders are recognised.

    A bare ``$name`` is left untouched, so snippets can carry shell or
    assembler text without escaping.
    """

    idpattern = r"(?!)"
    braceidpattern = r"[^{}\s]+"


def fill(text: str, subs: Subs) -> str:
    """Fill ``${key}`` placeholders in a single scan."""
    values: defaultdict[str, str] = defaultdict(str)
    for key, value in reversed(subs):
        values[key] = value
    return SnippetTemplate(text).safe_substitute(values)


def make_inline(text: str) -> str:
    """Collapse a multi-line snippet onto one line."""
    return text.replace("\n", " ")


def resolve(
    table: SnippetTable,
    section: str,
    name: str,
    subs: Optional[Subs] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> str:
    """Look up snippet ``name`` in ``section`` and fill it.

    A missing section is reported as a warning; a missing snippet is expected
    (not every declaration kind needs text for every hook) and is silent.
    Both resolve to empty text.
    """
    log = logging.getLogger("halgen")

    if not table.has_section(section):
        message = f"Section '{section}' not found in snippets"
        if diagnostics is not None:
            diagnostics.warning(DiagnosticKind.MISSING_SECTION, message)
        else:
            log.warning(message)
        return ""

    snippet = table.get(section, name)
    if snippet is None:
        log.debug(f"Snippet '{name}' not found in section '{section}'")
        return ""

    text = fill(snippet, subs or [])
    log.debug(f"Filled snippet '{name}': {text!r}")
    return text


def get_env(snippets_path: Path) -> Environment:
    """Create a Jinja2 environment whose loader reads a snippet directory."""
    return Environment(
        loader=FileSystemLoader(snippets_path),
        keep_trailing_newline=True,
    )


def parse_snippet_name(template_name: str) -> tuple[str | None, str | None]:
    """Split a loader path into (section, snippet name).

    Examples:
    - h/const.snip -> ("h", "const")
    - vts/vts_callflow.snip -> ("vts", "vts_callflow")
    - const.snip -> (None, None), snippets must live in a section directory
    - h/nested/const.snip -> (None, None)
    """
    suffix = f".{SNIPPET_EXTENSION}"
    if not template_name.endswith(suffix):
        return None, None

    parts = template_name[: -len(suffix)].split("/")
    if len(parts) != 2 or not all(parts):
        return None, None

    return parts[0], parts[1]


def load_snippet_dir(snippets_path: Path) -> SnippetTable:
    """Load a snippet table from a ``<section>/<name>.snip`` directory tree."""
    log = logging.getLogger("halgen")

    snippets_path = Path(snippets_path).resolve()
    if not snippets_path.is_dir():
        raise FileNotFoundError(f"Snippet directory {snippets_path} does not exist")

    env = get_env(snippets_path)
    loader = env.loader
    assert loader is not None

    sections: dict[str, dict[str, str]] = {}
    for template_name in env.list_templates(extensions=[SNIPPET_EXTENSION]):
        section, name = parse_snippet_name(template_name)
        if section is None or name is None:
            log.debug(f"Skipping '{template_name}': not a <section>/<name> snippet")
            continue
        source, _, _ = loader.get_source(env, template_name)
        sections.setdefault(section, {})[name] = source

    log.debug(f"Loaded {len(sections)} sections from {snippets_path.as_posix()}")
    return SnippetTable(sections=sections)


def load_snippet_file(snippets_path: Path) -> SnippetTable:
    """Load a snippet table from a YAML file mapping section -> name -> text."""
    log = logging.getLogger("halgen")

    snippets_path = Path(snippets_path).resolve()
    if not snippets_path.is_file():
        raise FileNotFoundError(f"Snippet file {snippets_path} does not exist")

    log.info(f"Loading snippets from {snippets_path.as_posix()}")
    try:
        with open(snippets_path, "r") as file:
            data = yaml.safe_load(file) or {}
    except Exception as e:
        raise RuntimeError("Failed to load snippet file") from e

    try:
        return SnippetTable.model_validate({"sections": data})
    except Exception as e:
        raise RuntimeError(f"Invalid snippet file {snippets_path}") from e


def load_snippets(snippets_path: Path) -> SnippetTable:
    """Load a snippet table from either a YAML file or a snippet directory."""
    snippets_path = Path(snippets_path)
    if snippets_path.is_dir():
        return load_snippet_dir(snippets_path)
    return load_snippet_file(snippets_path)
