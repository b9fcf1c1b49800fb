"""Per-pass generation context."""

from typing import Optional

from .diagnostics import Diagnostics
from .snippets import SnippetTable, Subs, resolve

# Sections whose specialised parameter snippets keep their line breaks
VERBATIM_SECTIONS = frozenset({"json"})


class GenContext:
    """Everything a node needs to render itself for one section.

    The snippet table is passed in rather than looked up globally, so a pass
    is a pure function of (unit, table, section) apart from diagnostics.
    """

    def __init__(
        self,
        table: SnippetTable,
        section: str,
        diagnostics: Optional[Diagnostics] = None,
        package_name: str = "",
    ):
        self.table = table
        self.section = section
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.package_name = package_name

    @property
    def keeps_line_breaks(self) -> bool:
        return self.section in VERBATIM_SECTIONS

    def snip(self, name: str, subs: Optional[Subs] = None) -> str:
        return resolve(self.table, self.section, name, subs, self.diagnostics)
