"""Syntax tree nodes for a parsed interface definition.

Types and declarations are closed sets, modelled as pydantic discriminated
unions on ``kind``; an unknown kind is rejected when the tree is validated.

Every node offers two generation operations:

- ``generate(ctx)`` - the inline spelling of the node
- ``get_subs(ctx)`` - the substitution facts used by declaration snippets

Types additionally provide ``type_suffix(subtype)``, the key used to pick
specialised snippets. Leaf kinds give ``"<kind>_all"`` or
``"<kind><specializer>"``; derived kinds and enums chain their base, so a
vector of ``int32_t`` gives ``"vec_all"`` or ``"vec_scalar_int32_t"``.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator

from .context import GenContext
from .fields import gen_comma_list, gen_comma_name_list, gen_semi_list, text_by_type
from .interface import function_subs
from .models import Annotation, Value, Version
from .snippets import Subs

# Element-name placeholders recorded for containers
VEC_NAME_PLACEHOLDER = "myVecName"
ARRAY_NAME_PLACEHOLDER = "myArrayName"

# Scalar names that differ in the test-harness type vocabulary
SCALAR_VTS_TYPES = {
    "bool": "bool_t",
    "float": "float_t",
    "double": "double_t",
}


class Field(BaseModel):
    """A struct member, parameter, return value or enumerator.

    Only enumerators have no type. ``value`` is the default value of a
    parameter, the initializer of a member or the value of an enumerator.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: Optional["Type"] = None
    value: Optional[Value] = None
    annotation: Optional[Annotation] = None

    @property
    def init_text(self) -> str:
        return f" = {self.value.text}" if self.value is not None else ""

    def get_subs(self, ctx: GenContext) -> Subs:
        subs = [
            ("param_name", self.name),
            ("package_name", ctx.package_name),
            ("init_value", self.value.text if self.value is not None else ""),
        ]
        if self.type is not None:
            subs += self.type.get_subs(ctx)
        return subs


# Types


class TypeNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str

    @property
    def type_name(self) -> str:
        return self.kind

    @property
    def specializer(self) -> str:
        return ""

    @property
    def is_primitive(self) -> bool:
        return False

    @property
    def vts_type(self) -> str:
        return self.kind

    def type_suffix(self, subtype: bool) -> str:
        if subtype:
            return self.type_name + self.specializer
        return f"{self.type_name}_all"

    def generate(self, ctx: GenContext) -> str:
        raise NotImplementedError

    def get_subs(self, ctx: GenContext) -> Subs:
        return []


class DerivedType(TypeNode):
    """A type built around exactly one base type."""

    base: "Type"

    def type_suffix(self, subtype: bool) -> str:
        if subtype:
            return f"{self.type_name}_{self.base.type_suffix(True)}"
        return f"{self.type_name}_all"


class ScalarType(TypeNode):
    kind: Literal["scalar"] = "scalar"
    name: str

    @property
    def specializer(self) -> str:
        return "_" + self.name

    @property
    def is_primitive(self) -> bool:
        return True

    @property
    def vts_type(self) -> str:
        return SCALAR_VTS_TYPES.get(self.name, self.name)

    def generate(self, ctx: GenContext) -> str:
        return self.name

    def get_subs(self, ctx: GenContext) -> Subs:
        return [("field_type_vts", self.vts_type), ("base_type_name", self.name)]


class VecType(DerivedType):
    kind: Literal["vec"] = "vec"

    def generate(self, ctx: GenContext) -> str:
        return f"hidl_vec<{self.base.generate(ctx)}>"

    def get_subs(self, ctx: GenContext) -> Subs:
        return [
            ("vec_name", VEC_NAME_PLACEHOLDER),
            ("base_type_name", self.base.generate(ctx)),
        ]


class ArrayType(DerivedType):
    kind: Literal["array"] = "array"
    dimension: Value

    def generate(self, ctx: GenContext) -> str:
        return f"{self.base.generate(ctx)}[{self.dimension.text}]"

    def get_subs(self, ctx: GenContext) -> Subs:
        return [
            ("array_name", ARRAY_NAME_PLACEHOLDER),
            ("array_size", self.dimension.text),
            ("base_type_name", self.base.generate(ctx)),
        ]


class NamedType(DerivedType):
    """A reference to a declared type by name; ``base`` is what it names."""

    kind: Literal["named"] = "named"
    name: str

    @property
    def is_primitive(self) -> bool:
        return self.base.is_primitive

    @property
    def vts_type(self) -> str:
        return self.base.vts_type

    def generate(self, ctx: GenContext) -> str:
        return self.name

    def get_subs(self, ctx: GenContext) -> Subs:
        return [("named_type_name", self.name)] + self.base.get_subs(ctx)


class RefType(DerivedType):
    kind: Literal["ref"] = "ref"

    def generate(self, ctx: GenContext) -> str:
        return f"hidl_ref<{self.base.generate(ctx)}>"

    def get_subs(self, ctx: GenContext) -> Subs:
        return [("base_type_name", self.base.generate(ctx))]


class EnumType(TypeNode):
    """Enumerators stored in ``base``; the suffix chains through the storage type."""

    kind: Literal["enum"] = "enum"
    base: "Type"
    fields: list[Field] = []

    @property
    def is_primitive(self) -> bool:
        return True

    def type_suffix(self, subtype: bool) -> str:
        if subtype:
            return f"{self.type_name}_{self.base.type_suffix(True)}"
        return f"{self.type_name}_all"

    def type_of_enum(self, ctx: GenContext) -> str:
        return self.base.generate(ctx)

    def generate(self, ctx: GenContext) -> str:
        return "enum {" + gen_comma_list(self.fields, ctx) + "}"

    def get_subs(self, ctx: GenContext) -> Subs:
        return [("enum_base_type", self.type_of_enum(ctx))]


class StructType(TypeNode):
    kind: Literal["struct"] = "struct"
    fields: list[Field] = []

    def generate(self, ctx: GenContext) -> str:
        return "struct {\n" + gen_semi_list(self.fields, ctx) + "}"


class UnionType(TypeNode):
    kind: Literal["union"] = "union"
    fields: list[Field] = []

    def generate(self, ctx: GenContext) -> str:
        return "union {\n" + gen_semi_list(self.fields, ctx) + "}"


class OpaqueType(TypeNode):
    kind: Literal["opaque"] = "opaque"

    def generate(self, ctx: GenContext) -> str:
        return "opaque"


class StringType(TypeNode):
    kind: Literal["string"] = "string"

    def generate(self, ctx: GenContext) -> str:
        return "HidlString"


class HandleType(TypeNode):
    kind: Literal["handle"] = "handle"

    def generate(self, ctx: GenContext) -> str:
        return "native_handle"


Type = Annotated[
    Union[
        ScalarType,
        VecType,
        ArrayType,
        EnumType,
        UnionType,
        StructType,
        NamedType,
        RefType,
        OpaqueType,
        StringType,
        HandleType,
    ],
    Discriminator("kind"),
]


# Declarations


class DeclNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    name: str
    line: int = 0

    @property
    def type_name(self) -> str:
        return self.kind

    def generate(self, ctx: GenContext) -> str:
        raise NotImplementedError

    def get_subs(self, ctx: GenContext) -> Subs:
        return []


class ConstDecl(DeclNode):
    kind: Literal["const"] = "const"
    value: Value

    def generate(self, ctx: GenContext) -> str:
        return ctx.snip("const", [("NAME", self.name), ("VAL", self.value.text)])

    def get_subs(self, ctx: GenContext) -> Subs:
        return [
            ("const_name", self.name),
            ("const_value", self.value.text),
            ("const_vts_type", "bytes" if self.value.is_string else "int32_t"),
        ]


class TypedefDecl(DeclNode):
    kind: Literal["typedef"] = "typedef"
    base: Type

    def generate(self, ctx: GenContext) -> str:
        return f"typedef {self.base.generate(ctx)} {self.name};\n"

    def get_subs(self, ctx: GenContext) -> Subs:
        return [("typedef_name", self.name)] + self.base.get_subs(ctx)


class StructDecl(DeclNode):
    kind: Literal["struct"] = "struct"
    fields: list[Field] = []

    def generate(self, ctx: GenContext) -> str:
        return f"struct {self.name} {{\n{gen_semi_list(self.fields, ctx)}}};\n"

    def get_subs(self, ctx: GenContext) -> Subs:
        return [
            ("struct_fields", gen_semi_list(self.fields, ctx)),
            ("struct_name", self.name),
            ("struct_gen_fields", text_by_type(self.fields, ctx, "struct_field_")),
        ]


class UnionDecl(DeclNode):
    kind: Literal["union"] = "union"
    fields: list[Field] = []

    def generate(self, ctx: GenContext) -> str:
        return f"union {self.name} {{\n{gen_semi_list(self.fields, ctx)}}};\n"

    def get_subs(self, ctx: GenContext) -> Subs:
        return [
            ("union_fields", gen_semi_list(self.fields, ctx)),
            ("union_name", self.name),
            ("union_gen_fields", text_by_type(self.fields, ctx, "union_field_")),
        ]


class EnumDecl(DeclNode):
    kind: Literal["enum"] = "enum"
    base: Type
    fields: list[Field] = []

    @property
    def enum_type(self) -> EnumType:
        return EnumType(base=self.base, fields=self.fields)

    def generate(self, ctx: GenContext) -> str:
        enum_fields = gen_comma_list(self.fields, ctx)
        return f"enum {self.name} : {self.base.generate(ctx)} {{{enum_fields}}};\n"

    def get_subs(self, ctx: GenContext) -> Subs:
        return [
            ("enum_fields", gen_comma_list(self.fields, ctx)),
            ("enum_name", self.name),
            ("enum_base_type", self.enum_type.type_of_enum(ctx)),
            (
                "quoted_fields_of_enum",
                gen_comma_name_list(self.fields, ctx, snippet="enum_quoted_name"),
            ),
        ]


class ImportDecl(DeclNode):
    kind: Literal["import"] = "import"

    def generate(self, ctx: GenContext) -> str:
        return f"import {self.name};\n"

    def get_subs(self, ctx: GenContext) -> Subs:
        return [("import_name", self.name)]


class Function(DeclNode):
    """An interface method; ``generates`` are its asynchronous results."""

    kind: Literal["function"] = "function"
    params: list[Field] = []
    generates: list[Field] = []
    annotations: list[Annotation] = []

    def generate(self, ctx: GenContext) -> str:
        out = f"{self.name}({gen_comma_list(self.params, ctx)})"
        if self.generates:
            out += f" generates ({gen_comma_list(self.generates, ctx)})"
        return out + ";\n"

    def get_subs(self, ctx: GenContext) -> Subs:
        return function_subs(self, ctx)


Declaration = Annotated[
    Union[
        ConstDecl,
        TypedefDecl,
        StructDecl,
        UnionDecl,
        EnumDecl,
        ImportDecl,
        Function,
    ],
    Discriminator("kind"),
]


class Interface(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    line: int = 0
    annotations: list[Annotation] = []


class Unit(BaseModel):
    """One parsed interface file."""

    model_config = ConfigDict(frozen=True)

    package: list[str] = []
    version: Version = Version()
    interface: Optional[Interface] = None
    declarations: list[Declaration] = []
    variables: list[Field] = []
    file: Optional[str] = None

    @property
    def package_name(self) -> str:
        return self.interface.name if self.interface is not None else ""

    @property
    def output_filename(self) -> str:
        if self.file:
            return self.file
        if self.interface is not None:
            return self.interface.name
        return "_".join(self.package) or "unit"

    @property
    def functions(self) -> list[Function]:
        return [d for d in self.declarations if isinstance(d, Function)]

    @property
    def imports(self) -> list[ImportDecl]:
        return [d for d in self.declarations if isinstance(d, ImportDecl)]


for _model in (
    Field,
    DerivedType,
    VecType,
    ArrayType,
    NamedType,
    RefType,
    EnumType,
    StructType,
    UnionType,
    StructDecl,
    UnionDecl,
    EnumDecl,
    TypedefDecl,
    Function,
    Unit,
):
    _model.model_rebuild()
