import pytest

from sctypes.compound import (
    FuncTy,
    IntrinsicKind,
    StructTy,
    VariadicTy,
    set_str_ref_type,
    str_ref_type,
)
from sctypes.types import MAX_FLT_ID, TypeContext
from sctypes.values import ContainsData, FuncVal, IntVal, StructVal, TypeVal, VecVal


@pytest.fixture
def ctx():
    return TypeContext()


def test_struct_to_str_lists_fields(ctx):
    s = StructTy(ctx, None, ["a", "b"], [ctx.int_type(32, True), ctx.flt_type(64)])
    assert s.to_str() == f"struct<{s.type_id()}>{{i32, f64}}"


def test_struct_ids_are_unique_and_above_float_ids(ctx):
    a = StructTy(ctx, None, [], [])
    b = StructTy(ctx, None, [], [])
    assert a.type_id() > MAX_FLT_ID
    assert a.type_id() != b.type_id()


def test_struct_field_lookup(ctx):
    t = ctx.type_type()
    i32 = ctx.int_type(32, True)
    s = StructTy(ctx, None, ["x", "y"], [i32, t], ["T"], [t])
    assert s.field("x") is i32
    assert s.field(1) is t
    assert s.field("T") is t
    assert s.field("missing") is None
    assert s.field(5) is None
    assert s.is_template_field("T")
    assert not s.is_template_field("x")


def test_insert_field(ctx):
    s = StructTy(ctx, None, [], [])
    u8 = ctx.int_type(8, False)
    s.insert_field("z", u8)
    assert s.field("z") is u8
    assert s.field_names == ["z"]


def test_str_ref_type_is_shared_and_recognised(ctx):
    ref = str_ref_type(ctx)
    assert ref is str_ref_type(ctx)
    assert ref.is_str_ref()


def test_set_str_ref_type_keeps_id(ctx):
    old = str_ref_type(ctx)
    new = StructTy(ctx, None, ["data", "length"], [ctx.str_ptr(), ctx.int_type(64, False)])
    set_str_ref_type(ctx, new)
    assert str_ref_type(ctx) is new
    assert new.type_id() == old.type_id()


def test_apply_templates_binds_and_restores(ctx):
    t = ctx.type_type()
    s = StructTy(ctx, None, ["v"], [t], ["T"], [t])
    i32 = ctx.int_type(32, True)
    res = s.apply_templates(ctx, None, [i32])
    assert res.fields[0] is i32
    assert res.type_id() == s.type_id()
    assert not res.is_template()
    assert not res.has_template
    assert t.contained_type() is None
    assert s.is_template()
    assert s.has_unbound_template()


def test_apply_templates_count_mismatch(ctx):
    t = ctx.type_type()
    s = StructTy(ctx, None, ["v"], [t], ["T"], [t])
    with pytest.raises(TypeError):
        s.apply_templates(ctx, None, [])


def test_instantiate_rejects_template_struct(ctx):
    t = ctx.type_type()
    s = StructTy(ctx, None, ["v"], [t], ["T"], [t])
    with pytest.raises(TypeError):
        s.instantiate(ctx, None, [ctx.int_type(32, True)])


def test_instantiate_matches_compatible_args(ctx):
    s = StructTy(ctx, None, ["a", "b"], [ctx.int_type(32, True), ctx.flt_type(64)])
    assert s.instantiate(ctx, None, [ctx.int_type(64, True), ctx.flt_type(32)]) is s
    assert s.instantiate(ctx, None, [ctx.int_type(32, True)]) is None


def test_instantiate_incompatible_reports(ctx):
    i32 = ctx.int_type(32, True)
    s = StructTy(ctx, None, ["a"], [i32])
    assert s.instantiate(ctx, None, [ctx.ptr(i32)]) is None
    assert any("different type ids" in d.message for d in ctx.diagnostics.errors)


def test_struct_compatible_field_count_mismatch(ctx):
    i32 = ctx.int_type(32, True)
    a = StructTy(ctx, None, ["a"], [i32])
    b = StructTy(ctx, None, ["a", "b"], [i32, i32], type_id=a.type_id())
    assert a.is_compatible(ctx, a)
    assert not a.is_compatible(ctx, b)
    assert any("struct type mismatch" in d.message for d in ctx.diagnostics.errors)


def test_struct_default_value(ctx):
    t = ctx.type_type()
    s = StructTy(
        ctx, None, ["n", "buf"], [ctx.int_type(32, True), ctx.str_ptr(3)], ["T"], [t]
    )
    val = s.default_value(ctx, None, ContainsData.PRESENT)
    assert isinstance(val, StructVal)
    n = val.field("n")
    assert isinstance(n, IntVal) and n.value == 0
    buf = val.field("buf")
    assert isinstance(buf, VecVal) and len(buf.items) == 3
    templ = val.field("T")
    assert isinstance(templ, TypeVal) and templ.ty is t


def test_struct_uniq_id_differs_from_type_id(ctx):
    s = StructTy(ctx, None, ["a"], [ctx.int_type(32, True)])
    empty = StructTy(ctx, None, [], [])
    assert s.uniq_id() != s.type_id()
    assert empty.uniq_id() == empty.type_id()


def test_func_to_str(ctx):
    f = FuncTy(ctx, None, [ctx.int_type(32, True), ctx.flt_type(64)], ctx.void())
    assert f.to_str() == f"function<{f.type_id()}>(i32, f64): void"


def test_func_to_str_flags(ctx):
    f = FuncTy(
        ctx, None, [], ctx.void(), intrinsic=lambda *a: True,
        intrinsic_kind=IntrinsicKind.PARSE, externed=True,
    )
    assert f.to_str() == f"function<{f.type_id()}, intrinsic, extern>(): void"
    assert f.is_parse_intrinsic
    assert f.uniq == 0


def test_func_signature_id_ignores_identity(ctx):
    i32 = ctx.int_type(32, True)
    f = FuncTy(ctx, None, [i32], i32)
    g = FuncTy(ctx, None, [i32], i32)
    h = FuncTy(ctx, None, [i32], ctx.void())
    assert f.signature_id() == g.signature_id()
    assert f.type_id() != g.type_id()
    assert f.is_compatible(ctx, g)
    assert not f.is_compatible(ctx, h)


def test_func_extern_mismatch_is_reported_but_compatible(ctx):
    i32 = ctx.int_type(32, True)
    f = FuncTy(ctx, None, [i32], i32)
    g = FuncTy(ctx, None, [i32], i32, externed=True)
    assert f.is_compatible(ctx, g)
    assert any("func type mismatch" in d.message for d in ctx.diagnostics.errors)


def test_create_call_arity(ctx):
    i32 = ctx.int_type(32, True)
    f = FuncTy(ctx, None, [i32, i32], ctx.void())
    assert f.create_call(ctx, None, [i32]) is None
    assert f.create_call(ctx, None, [i32, i32, i32]) is None
    res = f.create_call(ctx, None, [i32, i32])
    assert res.type_id() == f.type_id()
    assert res.uniq == f.uniq


def test_create_call_binds_templates(ctx):
    t = ctx.type_type()
    f = FuncTy(ctx, None, [t], t)
    i32 = ctx.int_type(32, True)
    res = f.create_call(ctx, None, [i32])
    assert res.args[0] is i32
    assert res.ret is i32
    assert res.uniq != f.uniq
    assert t.contained_type() is None
    assert f.is_template()


def test_create_call_replaces_any(ctx):
    f = FuncTy(ctx, None, [ctx.any()], ctx.void())
    i64 = ctx.int_type(64, True)
    res = f.create_call(ctx, None, [i64])
    assert res.args[0] is i64


def test_create_call_variadic(ctx):
    i32 = ctx.int_type(32, True)
    f = FuncTy(ctx, None, [i32, ctx.any()], ctx.void(), variadic=True)
    res = f.create_call(ctx, None, [i32, ctx.flt_type(64), ctx.int_type(8, True)])
    pack = res.args[-1]
    assert isinstance(pack, VariadicTy)
    assert pack.to_str() == "variadic<f64, i8>"
    empty = f.create_call(ctx, None, [i32])
    assert isinstance(empty.args[-1], VariadicTy)
    assert empty.args[-1].args == []
    assert f.create_call(ctx, None, []) is None


def test_update_uniq_id(ctx):
    f = FuncTy(ctx, None, [], ctx.void())
    before = f.uniq_id()
    f.update_uniq_id(ctx)
    assert f.uniq_id() != before


def test_call_intrinsic(ctx):
    f = FuncTy(ctx, None, [], ctx.void(), intrinsic=lambda *a: list(a))
    assert f.call_intrinsic(1, 2) == [1, 2]
    g = FuncTy(ctx, None, [], ctx.void())
    with pytest.raises(TypeError):
        g.call_intrinsic()


def test_func_default_value(ctx):
    f = FuncTy(ctx, None, [], ctx.void())
    val = f.default_value(ctx, None, ContainsData.PRESENT)
    assert isinstance(val, FuncVal) and val.ty is f


def test_func_arg_accessors(ctx):
    i32 = ctx.int_type(32, True)
    f = FuncTy(ctx, None, [i32], ctx.void(), arg_comptime=[True])
    assert f.arg(0) is i32
    assert f.arg(1) is None
    assert f.is_arg_comptime(0)
    assert not f.is_arg_comptime(3)


def test_variadic_basics(ctx):
    i32 = ctx.int_type(32, True)
    v = VariadicTy([i32])
    v.add_arg(ctx.flt_type(64))
    assert v.to_str() == "variadic<i32, f64>"
    assert v.arg(1) is ctx.flt_type(64)
    assert v.arg(2) is None
    assert v.is_compatible(ctx, VariadicTy([i32, ctx.flt_type(32)]))
    assert not v.is_compatible(ctx, VariadicTy([i32]))


def test_variadic_default_value(ctx):
    v = VariadicTy([ctx.int_type(32, True), ctx.flt_type(64)])
    val = v.default_value(ctx, None, ContainsData.PRESENT)
    assert isinstance(val, VecVal)
    assert [str(item) for item in val.items] == ["0", "0.000000"]
    with pytest.raises(TypeError):
        VariadicTy([ctx.void()]).default_value(ctx, None, ContainsData.PRESENT)