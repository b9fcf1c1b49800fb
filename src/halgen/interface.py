"""Substitution facts for interface functions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .annotation import parse_callflow, render_callflow
from .fields import (
    gen_comma_list,
    gen_comma_name_list,
    gen_semi_list,
    gen_vts_list,
    text_by_suffix,
)
from .snippets import Subs, make_inline

if TYPE_CHECKING:
    from .context import GenContext
    from .nodes import Function


def dispatch_token(name: str) -> str:
    """Upper-cased function name used in dispatch enums: doThing -> DOTHING."""
    return name.upper()


def join_params(params: str, callback: str) -> str:
    """Append the callback parameter, adding a separator only between two parts."""
    if params == "" or callback == "":
        return params + callback
    return f"{params}, {callback}"


def callback_param(function: Function, ctx: GenContext) -> str:
    """Trailing result-delivery parameter; only for functions that generate values."""
    if not function.generates:
        return ""
    subs = [("function_name", function.name), ("package_name", ctx.package_name)]
    return make_inline(ctx.snip("callback_param", subs))


def callback_invocation(function: Function, ctx: GenContext) -> str:
    if not function.generates:
        return ""
    return_param_names = gen_comma_name_list(function.generates, ctx)
    return ctx.snip("callback_invocation", [("return_param_names", return_param_names)])


def callflow_text(function: Function, ctx: GenContext) -> str:
    facts = parse_callflow(function.annotations, ctx.diagnostics)
    return render_callflow(facts, ctx)


def function_subs(function: Function, ctx: GenContext) -> Subs:
    """All facts the function-shaped snippets may refer to."""
    params = function.params
    generates = function.generates

    call_param_list = gen_comma_list(params, ctx)
    params_and_callback = join_params(call_param_list, callback_param(function, ctx))

    return [
        ("function_name", function.name),
        ("package_name", ctx.package_name),
        ("params_and_callback", params_and_callback),
        ("call_param_list", call_param_list),
        ("return_param_list", gen_comma_list(generates, ctx)),
        ("function_params_stubs", gen_comma_name_list(params, ctx)),
        (
            "return_params_stubs",
            gen_comma_name_list(generates, ctx, snippet="return_param_decl"),
        ),
        ("param_write_ret_snips", text_by_suffix(generates, ctx, "param_write_")),
        ("param_read_ret_snips", text_by_suffix(generates, ctx, "param_read_")),
        ("param_write_snips", text_by_suffix(params, ctx, "param_write_")),
        ("param_read_snips", text_by_suffix(params, ctx, "param_read_")),
        ("func_name_as_enum", dispatch_token(function.name)),
        ("param_decls", gen_semi_list(params, ctx)),
        ("callback_invocation", callback_invocation(function, ctx)),
        ("generates_variables", gen_semi_list(generates, ctx)),
        (
            "vts_args",
            gen_vts_list(generates, ctx, "return_type_hidl")
            + gen_vts_list(params, ctx, "arg"),
        ),
        ("vts_callflow", callflow_text(function, ctx)),
    ]
