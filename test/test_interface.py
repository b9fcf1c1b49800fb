"""Tests for the function generator."""

import pytest

from halgen.context import GenContext
from halgen.interface import (
    callback_invocation,
    callback_param,
    dispatch_token,
    function_subs,
    join_params,
)
from halgen.models import Annotation
from halgen.nodes import Field, Function, NamedType, ScalarType, StructType, VecType
from halgen.snippets import SnippetTable

INT32 = ScalarType(name="int32_t")
UINT8 = ScalarType(name="uint8_t")

SNIPPETS = {
    "callback_param": "${package_name}::${function_name}_cb\n_hidl_cb",
    "callback_invocation": "_hidl_cb(${return_param_names});",
    "return_param_decl": "&${param_name}",
    "param_write_scalar_all": "w(${param_name});",
    "param_read_scalar_all": "r(${param_name});",
    "param_write_vec_all": "wv(${param_name});",
    "vts_args": "${arg_or_ret_type}:${type_name};",
    "vts_callflow": "callflow{${anno_entry}${anno_exit}${anno_calls}}",
    "anno_entry": "entry;",
    "anno_exit": "exit;",
    "anno_calls": "${callflow_label}=${callflow_func_name};",
}


@pytest.fixture
def ctx() -> GenContext:
    return GenContext(SnippetTable(sections={"h": SNIPPETS}), "h", package_name="INfc")


def write_function(**kwargs) -> Function:
    return Function(
        name="write",
        params=[
            Field(name="data", type=VecType(base=UINT8)),
            Field(name="flags", type=INT32),
        ],
        generates=[
            Field(name="status", type=INT32),
            Field(name="written", type=ScalarType(name="uint32_t")),
        ],
        **kwargs,
    )


class TestJoinParams:
    """Test joining parameters with the synthesized callback."""

    def test_params_only(self):
        assert join_params("a: int32", "") == "a: int32"

    def test_both(self):
        assert join_params("a: int32", "cb: Callback") == "a: int32, cb: Callback"

    def test_callback_only(self):
        assert join_params("", "cb: Callback") == "cb: Callback"

    def test_neither(self):
        assert join_params("", "") == ""


class TestDispatchToken:
    def test_upcased_without_separators(self):
        assert dispatch_token("doThing") == "DOTHING"

    def test_existing_underscores_kept(self):
        assert dispatch_token("get_config") == "GET_CONFIG"


class TestCallback:
    def test_no_generates_no_callback(self, ctx):
        function = Function(name="close")
        assert callback_param(function, ctx) == ""
        assert callback_invocation(function, ctx) == ""

    def test_callback_param_is_inline(self, ctx):
        assert callback_param(write_function(), ctx) == "INfc::write_cb _hidl_cb"

    def test_invocation_lists_return_names(self, ctx):
        assert callback_invocation(write_function(), ctx) == "_hidl_cb(status, written);"


class TestFunctionSubs:
    """Test the complete fact list for a function."""

    def test_lists(self, ctx):
        subs = dict(function_subs(write_function(), ctx))
        assert subs["function_name"] == "write"
        assert subs["package_name"] == "INfc"
        assert subs["call_param_list"] == "hidl_vec<uint8_t> data, int32_t flags"
        assert subs["params_and_callback"] == (
            "hidl_vec<uint8_t> data, int32_t flags, INfc::write_cb _hidl_cb"
        )
        assert subs["return_param_list"] == "int32_t status, uint32_t written"
        assert subs["function_params_stubs"] == "data, flags"
        assert subs["return_params_stubs"] == "&status, &written"
        assert subs["func_name_as_enum"] == "WRITE"
        assert subs["param_decls"] == "hidl_vec<uint8_t> data;\nint32_t flags;\n"
        assert subs["generates_variables"] == "int32_t status;\nuint32_t written;\n"
        assert subs["callback_invocation"] == "_hidl_cb(status, written);"

    def test_marshalling(self, ctx):
        subs = dict(function_subs(write_function(), ctx))
        assert subs["param_write_snips"] == "wv(data);w(flags);"
        assert subs["param_read_snips"] == "r(flags);"
        assert subs["param_write_ret_snips"] == "w(status);w(written);"
        assert subs["param_read_ret_snips"] == "r(status);r(written);"

    def test_vts_args_returns_first(self, ctx):
        subs = dict(function_subs(write_function(), ctx))
        assert subs["vts_args"] == (
            "return_type_hidl:int32_t;return_type_hidl:uint32_t;"
            "arg:hidl_vec<uint8_t>;arg:int32_t;"
        )

    def test_no_generates(self, ctx):
        function = Function(
            name="setData",
            params=[Field(name="d", type=NamedType(name="NfcData", base=StructType()))],
        )
        subs = dict(function_subs(function, ctx))
        assert subs["params_and_callback"] == "NfcData d"
        assert subs["callback_invocation"] == ""
        assert subs["return_param_list"] == ""
        assert subs["func_name_as_enum"] == "SETDATA"

    def test_no_params(self, ctx):
        function = Function(name="close", generates=[Field(name="status", type=INT32)])
        subs = dict(function_subs(function, ctx))
        assert subs["params_and_callback"] == "INfc::close_cb _hidl_cb"

    def test_callflow_empty_without_annotations(self, ctx):
        assert dict(function_subs(write_function(), ctx))["vts_callflow"] == ""

    def test_callflow_entry_only(self, ctx):
        function = write_function(annotations=[Annotation(name="entry")])
        assert dict(function_subs(function, ctx))["vts_callflow"] == "callflow{entry;}"

    def test_callflow_edges(self, ctx):
        function = write_function(
            annotations=[
                Annotation.model_validate({"name": "next_calls", "values": ['"close"']}),
                Annotation(name="exit"),
            ]
        )
        subs = dict(function_subs(function, ctx))
        assert subs["vts_callflow"] == 'callflow{exit;next="close";}'

    def test_subs_keep_declared_order(self, ctx):
        keys = [key for key, _ in function_subs(write_function(), ctx)]
        assert keys[:3] == ["function_name", "package_name", "params_and_callback"]
        assert keys[-1] == "vts_callflow"
