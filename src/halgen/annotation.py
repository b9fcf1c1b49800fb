"""Annotation processing.

Call-graph annotations are turned into a small list of facts first
(``parse_callflow``) and only then rendered into text (``render_callflow``),
so the call-graph rules can be tested without a snippet table.

Recognised function annotations:

- ``@entry`` / ``@exit``: the function starts or ends a call sequence
- ``@next_calls("a", "b")`` / ``@prev_calls("c")``: call-graph edges, at
  least one unnamed value each

Recognised interface annotation:

- ``@hal_type("nfc")``: component type, exactly one string value
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from .diagnostics import DiagnosticKind, Diagnostics
from .models import Annotation

if TYPE_CHECKING:
    from .context import GenContext
    from .nodes import Interface


class CallFlowKind(StrEnum):
    ENTRY = "entry"
    EXIT = "exit"
    NEXT = "next"
    PREV = "prev"


EDGE_ANNOTATIONS = {
    CallFlowKind.NEXT: "next_calls",
    CallFlowKind.PREV: "prev_calls",
}


class CallFlowFact(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: CallFlowKind
    target: Optional[str] = None


def get_annotation(
    annotations: Sequence[Annotation], key: str
) -> Optional[Annotation]:
    """First annotation named ``key``."""
    for annotation in annotations:
        if annotation.name == key:
            return annotation
    return None


def has_annotation(annotations: Sequence[Annotation], key: str) -> bool:
    return get_annotation(annotations, key) is not None


def _edges(
    annotations: Sequence[Annotation],
    kind: CallFlowKind,
    diagnostics: Diagnostics,
) -> list[CallFlowFact]:
    name = EDGE_ANNOTATIONS[kind]
    annotation = get_annotation(annotations, name)
    if annotation is None:
        return []

    if not annotation.values:
        diagnostics.report(
            annotation.line,
            f"Call-graph annotation '{name}' needs 1 or more unnamed string values",
        )
        return []

    facts = []
    for value in annotation.values:
        if value.value is None:
            diagnostics.report(
                annotation.line, f"Call-graph annotation '{name}' has an empty value"
            )
            continue
        facts.append(CallFlowFact(kind=kind, target=value.value.text))
    return facts


def parse_callflow(
    annotations: Sequence[Annotation], diagnostics: Diagnostics
) -> list[CallFlowFact]:
    """Extract call-graph facts: next edges, prev edges, entry, exit."""
    facts = _edges(annotations, CallFlowKind.NEXT, diagnostics)
    facts += _edges(annotations, CallFlowKind.PREV, diagnostics)
    if has_annotation(annotations, "entry"):
        facts.append(CallFlowFact(kind=CallFlowKind.ENTRY))
    if has_annotation(annotations, "exit"):
        facts.append(CallFlowFact(kind=CallFlowKind.EXIT))
    return facts


def render_callflow(facts: Sequence[CallFlowFact], ctx: GenContext) -> str:
    """Render call-graph facts; empty when the function has none."""
    kinds = {fact.kind for fact in facts}
    entry_text = ctx.snip("anno_entry") if CallFlowKind.ENTRY in kinds else ""
    exit_text = ctx.snip("anno_exit") if CallFlowKind.EXIT in kinds else ""

    calls_text = {CallFlowKind.NEXT: "", CallFlowKind.PREV: ""}
    for fact in facts:
        if fact.kind in calls_text:
            subs = [
                ("callflow_label", fact.kind.value),
                ("callflow_func_name", fact.target or ""),
            ]
            calls_text[fact.kind] += ctx.snip("anno_calls", subs)
    anno_calls = calls_text[CallFlowKind.NEXT] + calls_text[CallFlowKind.PREV]

    if entry_text + exit_text + anno_calls == "":
        return ""

    subs = [
        ("anno_entry", entry_text),
        ("anno_exit", exit_text),
        ("anno_calls", anno_calls),
    ]
    return ctx.snip("vts_callflow", subs)


def component_type(interface: Interface, ctx: GenContext) -> str:
    """Component-type tag from the interface's ``hal_type`` annotation."""
    annotation = get_annotation(interface.annotations, "hal_type")
    if annotation is None:
        return ""

    values = annotation.values
    if len(values) != 1 or values[0].value is None or not values[0].value.is_string:
        ctx.diagnostics.report(
            annotation.line, "hal_type annotation needs one string value"
        )
        return ""

    return ctx.snip("component_type_enum", [("vts_ct_enum", values[0].value.unquoted)])
