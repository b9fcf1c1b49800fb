"""Code generation orchestration."""

import io
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from .core import emit, ensure_output_dir, parse_yaml
from .diagnostics import Diagnostics
from .nodes import Unit
from .snippets import SnippetTable


class CodeGenerator:
    """Orchestrates generation from a YAML syntax tree to output files.

    This class encapsulates the entire generation workflow:
    1. Parse and validate the YAML syntax tree
    2. Render each requested section against the snippet table
    3. Write one ``<output_filename>.<section>`` file per section

    Example:
        >>> from halgen import CodeGenerator, load_snippets
        >>>
        >>> table = load_snippets(Path("snippets.yml"))
        >>> code_gen = CodeGenerator(table, Path("output"))
        >>> filenames = code_gen.generate_from_file(Path("nfc.yml"), ["h", "vts"])
    """

    def __init__(
        self,
        table: SnippetTable,
        output_path: Path,
        diagnostics: Optional[Diagnostics] = None,
    ):
        """Initialize the code generator.

        Args:
            table: Snippet table shared by every section.
            output_path: Path to the output directory.
            diagnostics: Collector for reported problems; a fresh one by default.
        """
        self.table = table
        self.output_path = Path(output_path).resolve()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._log = logging.getLogger("halgen")

    def validate(self, data: dict[str, Any]) -> Unit:
        """Validate parsed YAML into a syntax tree.

        Raises:
            RuntimeError: If validation fails.
        """
        self._log.debug("Validating syntax tree")

        try:
            return Unit.model_validate(data)
        except Exception as e:
            self._log.error(f"Failed to validate syntax tree: {e}")
            raise RuntimeError("Failed to validate syntax tree") from e

    def render(self, unit: Unit, section: str) -> str:
        """Render one section to a string."""
        buffer = io.StringIO()
        emit(unit, self.table, section, buffer, self.diagnostics)
        return buffer.getvalue()

    def render_to_file(self, unit: Unit, section: str) -> str:
        """Render one section and write it to the output directory.

        The file is only opened once rendering succeeded, so a failed pass
        leaves nothing behind.

        Returns:
            The generated filename.
        """
        content = self.render(unit, section)

        filename = f"{unit.output_filename}.{section}"
        output_file = self.output_path / filename

        self._log.debug(f"Writing {section} output to '{filename}'")
        with open(output_file, "w") as f:
            f.write(content)

        return filename

    def generate(self, unit: Unit, sections: Sequence[str] | None = None) -> list[str]:
        """Generate output files for the given sections (default: all in the table).

        Returns:
            List of generated filenames.
        """
        if sections is None:
            sections = self.table.section_names

        ensure_output_dir(self.output_path)

        self._log.info(f"Writing outputs to {self.output_path.as_posix()}")
        filenames = [self.render_to_file(unit, section) for section in sections]

        self._log.info(f"Wrote {len(filenames)} files: {', '.join(filenames)}")
        return filenames

    def generate_from_file(
        self, input_path: Path, sections: Sequence[str] | None = None
    ) -> list[str]:
        """Parse a YAML syntax tree and generate output files.

        This is the main entry point for file-based generation.
        """
        data = parse_yaml(input_path)
        unit = self.validate(data)
        return self.generate(unit, sections)
