"""Top-level emission: one unit, one section, one text blob."""

import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence

import yaml
from pydantic import BaseModel

from .annotation import component_type
from .context import GenContext
from .diagnostics import DiagnosticKind, Diagnostics
from .errors import MissingInterfaceError
from .fields import gen_semi_list, text_by_suffix
from .interface import dispatch_token
from .nodes import Declaration, Interface, Unit
from .snippets import SnippetTable, Subs


class Writer(Protocol):
    """Output sink; any text stream will do."""

    def write(self, text: str, /) -> Any: ...


class NamespaceText(BaseModel):
    open: str = ""
    close: str = ""
    slashes: str = ""
    dots: str = ""
    underscores: str = ""


class TreeLoader(yaml.SafeLoader):
    """Safe loader that keeps numeric scalars as written.

    Literals such as ``0x1F`` or ``010`` reach ``Value`` with their source
    spelling instead of being folded into ints.
    """


TreeLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag not in ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_yaml(input_path: Path) -> dict:
    """Load a syntax tree file. Numeric literals are kept as text."""
    log = logging.getLogger("halgen")

    input_path = Path(input_path).resolve()
    if not input_path.is_file():
        raise FileNotFoundError(f"Syntax tree {input_path} not found")
    if input_path.suffix not in (".yml", ".yaml"):
        raise FileNotFoundError(f"Syntax tree {input_path} must be a .yml/.yaml file")

    log.info(f"Reading syntax tree {input_path.name}")
    try:
        with open(input_path, "r") as file:
            data = yaml.load(file, Loader=TreeLoader)
    except yaml.YAMLError as e:
        raise RuntimeError(f"Malformed syntax tree {input_path.name}") from e

    return data


def ensure_output_dir(output_path: Path) -> Path:
    """Create the output directory; its parent must already exist."""
    log = logging.getLogger("halgen")

    output_path = Path(output_path).resolve()
    if not output_path.parent.is_dir():
        raise FileNotFoundError(
            f"Cannot create output directory, {output_path.parent} is missing"
        )
    if not output_path.exists():
        log.debug(f"Creating output directory {output_path}")
        output_path.mkdir()

    return output_path


def text_by_kind(
    declarations: Sequence[Declaration], ctx: GenContext, prefix: str
) -> str:
    """One ``<prefix><kind>`` snippet per declaration, in declaration order."""
    return "".join(
        ctx.snip(prefix + decl.type_name, decl.get_subs(ctx)) for decl in declarations
    )


def call_enum_list(unit: Unit, ctx: GenContext) -> str:
    """Dispatch enum entries; the first function gets the leading-entry snippet."""
    out = ""
    for i, function in enumerate(unit.functions):
        token = dispatch_token(function.name)
        if i == 0:
            out += ctx.snip("first_call_enum", [("call_enum_name", token)])
            out += "\n"
        else:
            out += "  " + token + ", "
    return out


def callback_decl_list(unit: Unit, ctx: GenContext) -> str:
    return "".join(
        ctx.snip("callback_decl_line", function.get_subs(ctx))
        for function in unit.functions
    )


def namespace_text(namespace: Sequence[str], ctx: GenContext) -> NamespaceText:
    """Opening/closing lines plus slash, dot and underscore renderings."""
    text = NamespaceText()
    for name in namespace:
        subs = [("namespace_name", name)]
        text.open += ctx.snip("namespace_open_line", subs)
        text.close = ctx.snip("namespace_close_line", subs) + text.close
    text.slashes = "/".join(namespace)
    text.dots = ".".join(namespace)
    text.underscores = "_".join(namespace)
    return text


def imports_section(unit: Unit, ctx: GenContext) -> str:
    return "".join(
        ctx.snip("import_line", [("import_name", decl.name)]) for decl in unit.imports
    )


def file_subs(unit: Unit, interface: Interface, ctx: GenContext) -> Subs:
    """Every file-level fact the ``file`` snippet may refer to."""
    namespace = namespace_text(unit.package, ctx)
    return [
        ("header_guard", interface.name),
        ("version_string", str(unit.version)),
        ("version_major_string", str(unit.version.major)),
        ("version_minor_string", str(unit.version.minor)),
        ("imports_section", imports_section(unit, ctx)),
        ("component_type_enum", component_type(interface, ctx)),
        ("package_name", interface.name),
        ("declarations", text_by_kind(unit.declarations, ctx, "declare_")),
        ("code_snips", text_by_kind(unit.declarations, ctx, "code_for_")),
        ("call_enum_list", call_enum_list(unit, ctx)),
        ("callback_decls", callback_decl_list(unit, ctx)),
        ("namespace_open_section", namespace.open),
        ("namespace_close_section", namespace.close),
        ("namespace_slashes", namespace.slashes),
        ("namespace_dots", namespace.dots),
        ("namespace_underscores", namespace.underscores),
        ("vars_writer", text_by_suffix(unit.variables, ctx, "param_write_")),
        ("vars_reader", text_by_suffix(unit.variables, ctx, "param_read_")),
        ("vars_decl", gen_semi_list(unit.variables, ctx)),
    ]


def emit(
    unit: Unit,
    table: SnippetTable,
    section: str,
    writer: Writer,
    diagnostics: Optional[Diagnostics] = None,
) -> str:
    """Render ``unit`` for ``section`` and hand the text to ``writer``.

    Raises:
        MissingInterfaceError: If the unit declares no interface. The error
            is reported to ``diagnostics`` and nothing is written.
    """
    log = logging.getLogger("halgen")

    if diagnostics is None:
        diagnostics = Diagnostics()

    interface = unit.interface
    if interface is None:
        diagnostics.error(
            DiagnosticKind.MISSING_INTERFACE,
            "Cannot write output; don't have interface.",
        )
        raise MissingInterfaceError("Unit declares no interface")

    ctx = GenContext(table, section, diagnostics, package_name=interface.name)

    log.debug(f"Emitting section '{section}' for {interface.name}")
    text = ctx.snip("file", file_subs(unit, interface, ctx))
    writer.write(text)
    return text
