"""Order-preserving list builders over a sequence of fields.

Each builder first tries snippets specialised for the field's type (by suffix
chain, by kind) and falls back to a uniform spelling, so snippet tables only
need to override the kinds that need special handling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .diagnostics import DiagnosticKind
from .snippets import make_inline

if TYPE_CHECKING:
    from .context import GenContext
    from .nodes import Field


def _specialised(field: Field, ctx: GenContext, names: list[str]) -> str:
    # Leaf kinds spell the same name twice; each snippet is used at most once
    subs = field.get_subs(ctx)
    return "".join(ctx.snip(name, subs) for name in dict.fromkeys(names))


def gen_comma_list(
    fields: Sequence[Field],
    ctx: GenContext,
    prev: str = "",
    with_names: bool = True,
) -> str:
    """Parameter-style list: ``int32_t a, hidl_vec<uint8_t> data = {}``.

    Set ``with_names=False`` for pure type lists.
    """
    output = prev
    for field in fields:
        if output != "":
            output += ", "

        special = ""
        if field.type is not None:
            special = _specialised(
                field,
                ctx,
                [
                    "param_decl_" + field.type.type_suffix(True),
                    "param_decl_" + field.type.type_suffix(False),
                    "param_decl_" + field.type.type_name,
                ],
            )

        if special != "":
            output += special if ctx.keeps_line_breaks else make_inline(special)
            continue

        if field.type is not None:
            output += field.type.generate(ctx)
            if with_names:
                output += " " + field.name
        elif with_names:
            # Enumerators have no type
            output += field.name
        if field.value is not None:
            output += " = " + field.value.text
    return output


def gen_comma_name_list(
    fields: Sequence[Field],
    ctx: GenContext,
    prev: str = "",
    snippet: str = "",
) -> str:
    """Comma list of names, each optionally wrapped by ``snippet``."""
    output = prev
    for field in fields:
        if output != "":
            output += ", "
        if snippet == "":
            output += field.name
        else:
            output += make_inline(ctx.snip(snippet, [("param_name", field.name)]))
    return output


def gen_semi_list(fields: Sequence[Field], ctx: GenContext) -> str:
    """Declaration block, one ``;``-terminated line per field."""
    output = ""
    for field in fields:
        special = ""
        if field.type is not None:
            special = _specialised(
                field,
                ctx,
                [
                    "field_decl_" + field.type.type_suffix(True),
                    "field_decl_" + field.type.type_suffix(False),
                ],
            )

        if special != "":
            output += make_inline(special)
        elif field.type is not None:
            output += field.type.generate(ctx) + " " + field.name + field.init_text
        else:
            output += field.name + field.init_text
        output += ";\n"
    return output


def text_by_type(fields: Sequence[Field], ctx: GenContext, prefix: str) -> str:
    """One ``<prefix><kind>`` snippet per typed field."""
    output = ""
    for field in fields:
        if field.type is None:
            continue
        output += ctx.snip(prefix + field.type.type_name, field.get_subs(ctx))
    return output


def text_by_suffix(fields: Sequence[Field], ctx: GenContext, prefix: str) -> str:
    """Like text_by_type, keyed by the full and the outermost suffix.

    Used for marshalling code, where e.g. a vector of structs needs different
    text from a plain struct.
    """
    output = ""
    for field in fields:
        if field.type is None:
            continue
        subs = field.get_subs(ctx)
        output += ctx.snip(prefix + field.type.type_suffix(True), subs)
        output += ctx.snip(prefix + field.type.type_suffix(False), subs)
    return output


def gen_vts_values(field: Field, ctx: GenContext) -> str:
    """Test values from the field's ``normal`` annotation entry."""
    annotation = field.annotation
    if annotation is None or not annotation.has_key("normal") or field.type is None:
        return ""

    output = ""
    for value in annotation.get_values("normal"):
        if value.value is None:
            ctx.diagnostics.report(
                annotation.line,
                "'normal' annotation needs values!",
                DiagnosticKind.MALFORMED_ANNOTATION,
            )
            continue
        subs = [("type_name", field.type.vts_type), ("the_value", value.value.text)]
        output += ctx.snip("vts_values", subs)
    return output


def gen_vts_list(fields: Sequence[Field], ctx: GenContext, label: str) -> str:
    """Test-harness argument descriptors, one per field."""
    output = ""
    for field in fields:
        if field.type is None:
            continue
        subs = [
            ("arg_or_ret_type", label),
            ("type_name", field.type.generate(ctx)),
            (
                "vts_type_type",
                "primitive_type" if field.type.is_primitive else "aggregate_type",
            ),
            ("vts_values", gen_vts_values(field, ctx)),
        ]
        output += ctx.snip("vts_args", subs)
    return output
