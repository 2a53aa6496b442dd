"""Compound types: structures, functions and variadic argument packs."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any

from .errors import SourceLocation
from .types import Type, TypeContext, TypeKind, TypeTy
from .values import ContainsData, FuncVal, StructVal, TypeVal, Value, VecVal

_U32 = 0xFFFFFFFF


def _digit_scale(value: int) -> int:
    """10 raised to the number of decimal digits of ``value`` (1 for zero)."""
    scale = 1
    while value:
        scale *= 10
        value //= 10
    return scale


def _unwrap(rhs: Type | None) -> Type | None:
    while isinstance(rhs, TypeTy):
        inner = rhs.contained_type()
        if inner is None:
            break
        rhs = inner
    return rhs


class IntrinsicKind(Enum):
    """When an intrinsic function is evaluated."""

    NONE = "none"
    PARSE = "parse"
    VALUE = "value"


class StructTy(Type):
    """A structure type with named fields and optional template parameters."""

    def __init__(
        self,
        ctx: TypeContext,
        decl: Any,
        field_names: Sequence[str],
        fields: Sequence[Type],
        template_names: Sequence[str] = (),
        templates: Sequence[Type] = (),
        externed: bool = False,
        *,
        type_id: int | None = None,
        has_template: bool | None = None,
    ) -> None:
        super().__init__(TypeKind.STRUCT)
        self.id = ctx.next_type_id() if type_id is None else type_id
        self.decl = decl
        self.field_names = list(field_names)
        self.fields = list(fields)
        self.field_pos = {name: pos for pos, name in enumerate(self.field_names)}
        self.template_names = list(template_names)
        self.templates = list(templates)
        self.template_pos = {name: pos for pos, name in enumerate(self.template_names)}
        self.has_template = bool(self.templates) if has_template is None else has_template
        self.externed = externed

    def insert_field(self, name: str, ty: Type) -> None:
        self.field_pos[name] = len(self.fields)
        self.field_names.append(name)
        self.fields.append(ty)

    def is_template_field(self, name: str) -> bool:
        return name in self.template_pos

    def field(self, key: str | int) -> Type | None:
        """Look up a template parameter or field by name, or a field by position."""
        if isinstance(key, int):
            return self.fields[key] if 0 <= key < len(self.fields) else None
        if key in self.template_pos:
            return self.templates[self.template_pos[key]]
        pos = self.field_pos.get(key)
        return None if pos is None else self.fields[pos]

    def has_unbound_template(self) -> bool:
        if not self.has_template:
            return False
        return any(
            isinstance(t, TypeTy) and t.contained_type() is None for t in self.templates
        )

    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        if not self.templates:
            return self
        return StructTy(
            ctx,
            self.decl,
            self.field_names,
            [f.specialize(ctx, weak_depth) for f in self.fields],
            self.template_names,
            [t.specialize(ctx, weak_depth) for t in self.templates],
            self.externed,
            type_id=self.id,
            has_template=self.has_template,
        )

    def uniq_id(self) -> int:
        total = sum(f.uniq_id() for f in self.fields) & _U32
        return (self.type_id() * _digit_scale(total) + total) & _U32

    def type_id(self) -> int:
        return self.id

    def is_template(self, weak_depth: int = 0) -> bool:
        return any(f.is_template(weak_depth) for f in self.fields)

    def to_str(self, weak_depth: int = 0) -> str:
        inner = ", ".join(f.to_str(weak_depth) for f in self.fields)
        return f"struct<{self.type_id()}>{{{inner}}}"

    def merge_templates_from(self, ty: Type, weak_depth: int = 0) -> bool:
        if not isinstance(ty, StructTy) or len(self.fields) != len(ty.fields):
            return False
        merged = False
        for mine, theirs in zip(self.fields, ty.fields):
            merged |= mine.merge_templates_from(theirs, weak_depth)
        return merged

    def unmerge_templates(self, weak_depth: int = 0) -> None:
        for f in self.fields:
            f.unmerge_templates(weak_depth)

    def is_compatible(
        self, ctx: TypeContext, rhs: Type | None, loc: SourceLocation | None = None
    ) -> bool:
        if not self.is_base_compatible(ctx, rhs, loc):
            return False
        other = _unwrap(rhs)
        if not isinstance(other, StructTy):
            return True
        if len(self.fields) != len(other.fields):
            ctx.diagnostics.error(
                loc,
                "struct type mismatch (LHS fields: ", len(self.fields),
                ", RHS fields: ", len(other.fields), ")",
            )
            return False
        for idx, (mine, theirs) in enumerate(zip(self.fields, other.fields)):
            if mine.is_compatible(ctx, theirs, loc):
                continue
            ctx.diagnostics.error(
                loc,
                "LHS struct field ", mine.to_str(), " with index ", idx,
                ", incompatible with RHS field ", theirs.to_str(),
            )
            return False
        return True

    def apply_templates(
        self, ctx: TypeContext, loc: SourceLocation | None, actuals: Sequence[Type]
    ) -> StructTy:
        """Return a copy of this struct with its template parameters bound to ``actuals``."""
        if len(self.templates) != len(actuals):
            raise TypeError(
                f"expected templates for struct: {len(self.templates)}, found: {len(actuals)}"
            )
        for template, actual in zip(self.templates, actuals):
            template.set_contained_type(actual)  # type: ignore[attr-defined]
        try:
            res = self.specialize(ctx)
        finally:
            for template in self.templates:
                template.clear_contained_type()  # type: ignore[attr-defined]
        assert isinstance(res, StructTy)
        res.has_template = False
        return res

    def instantiate(
        self, ctx: TypeContext, loc: SourceLocation | None, arg_types: Sequence[Type]
    ) -> StructTy | None:
        """Match constructor argument types; ``None`` when they do not fit."""
        if len(self.fields) != len(arg_types):
            return None
        if self.is_template():
            raise TypeError("a struct with templates cannot be instantiated")
        for field_ty, arg_ty in zip(self.fields, arg_types):
            if not field_ty.is_compatible(ctx, arg_ty, loc):
                return None
        res = self.specialize(ctx)
        assert isinstance(res, StructTy)
        return res

    def default_value(
        self,
        ctx: TypeContext,
        loc: SourceLocation | None,
        cd: ContainsData,
        weak_depth: int = 0,
    ) -> Value:
        values: dict[str, Value] = {}
        for name, pos in self.field_pos.items():
            try:
                values[name] = self.fields[pos].default_value(ctx, loc, cd, weak_depth)
            except TypeError as exc:
                raise TypeError("failed to get default value from struct field type") from exc
        for name, pos in self.template_pos.items():
            values[name] = TypeVal(self.templates[pos])
        return StructVal(cd, values)


def str_ref_type(ctx: TypeContext) -> StructTy:
    """The string reference struct (``data: *i8, length: u64``) of ``ctx``."""
    if ctx.str_ref_ty is None:
        ctx.str_ref_ty = StructTy(
            ctx, None, ["data", "length"], [ctx.str_ptr(), ctx.int_type(64, False)]
        )
    return ctx.str_ref_ty


def set_str_ref_type(ctx: TypeContext, ty: StructTy) -> None:
    """Replace the string reference struct, keeping the id of the previous one."""
    if ctx.str_ref_ty is not None:
        ty.id = ctx.str_ref_ty.id
    ctx.str_ref_ty = ty


class FuncTy(Type):
    """A function type; may be an intrinsic, an extern or variadic."""

    def __init__(
        self,
        ctx: TypeContext,
        var: Any,
        args: Sequence[Type],
        ret: Type,
        arg_comptime: Sequence[bool] | None = None,
        intrinsic: Callable[..., Any] | None = None,
        intrinsic_kind: IntrinsicKind = IntrinsicKind.NONE,
        externed: bool = False,
        variadic: bool = False,
        *,
        sig: Any = None,
        type_id: int | None = None,
        uniq: int | None = None,
    ) -> None:
        super().__init__(TypeKind.FUNC)
        self.id = ctx.next_type_id() if type_id is None else type_id
        self.var = var
        self.sig = sig
        self.args = list(args)
        self.ret = ret
        comptime = list(arg_comptime) if arg_comptime else []
        if not comptime and self.args:
            comptime = [False] * len(self.args)
        self.arg_comptime = comptime
        self.intrinsic = intrinsic
        self.intrinsic_kind = intrinsic_kind
        if uniq is None:
            uniq = 0 if externed else ctx.next_func_uniq_id()
        self.uniq = uniq
        self.externed = externed
        self.variadic = variadic

    @property
    def is_intrinsic(self) -> bool:
        return self.intrinsic is not None

    @property
    def is_parse_intrinsic(self) -> bool:
        return self.intrinsic_kind is IntrinsicKind.PARSE

    def arg(self, idx: int) -> Type | None:
        return self.args[idx] if 0 <= idx < len(self.args) else None

    def is_arg_comptime(self, idx: int) -> bool:
        return self.arg_comptime[idx] if 0 <= idx < len(self.args) else False

    def _prefixed_id(self) -> int:
        return self.uniq * _digit_scale(self.id) + self.id

    def signature_id(self) -> int:
        """Id built only from the parameter and return types."""
        total = int(TypeKind.FUNC) + sum(a.uniq_id() for a in self.args) + self.ret.uniq_id()
        return (total * 7) & _U32

    def uniq_id(self) -> int:
        total = self._prefixed_id() + sum(a.uniq_id() for a in self.args) + self.ret.uniq_id()
        return (total * 7) & _U32

    def type_id(self) -> int:
        total = self._prefixed_id() + sum(a.type_id() for a in self.args) + self.ret.type_id()
        return total & _U32

    def is_template(self, weak_depth: int = 0) -> bool:
        if any(a.is_template(weak_depth) for a in self.args):
            return True
        return self.ret.is_template(weak_depth)

    def to_str(self, weak_depth: int = 0) -> str:
        flags = []
        if self.intrinsic is not None:
            flags.append("intrinsic")
        if self.externed:
            flags.append("extern")
        head = f"function<{self.type_id()}" + "".join(", " + f for f in flags) + ">"
        params = ", ".join(a.to_str(weak_depth) for a in self.args)
        return f"{head}({params}): {self.ret.to_str(weak_depth)}"

    def merge_templates_from(self, ty: Type, weak_depth: int = 0) -> bool:
        if not isinstance(ty, FuncTy) or len(self.args) != len(ty.args):
            return False
        merged = False
        for mine, theirs in zip(self.args, ty.args):
            merged |= mine.merge_templates_from(theirs, weak_depth)
        merged |= self.ret.merge_templates_from(ty.ret, weak_depth)
        return merged

    def unmerge_templates(self, weak_depth: int = 0) -> None:
        for a in self.args:
            a.unmerge_templates(weak_depth)
        self.ret.unmerge_templates(weak_depth)

    def is_compatible(
        self, ctx: TypeContext, rhs: Type | None, loc: SourceLocation | None = None
    ) -> bool:
        if not self.is_base_compatible(ctx, rhs, loc):
            return False
        other = _unwrap(rhs)
        if not isinstance(other, FuncTy):
            return True
        if self.externed != other.externed:
            ctx.diagnostics.error(
                loc,
                "func type mismatch (LHS externed: ", "yes" if self.externed else "no",
                ", RHS externed: ", "yes" if other.externed else "no", ")",
            )
        if len(self.args) != len(other.args):
            ctx.diagnostics.error(
                loc,
                "type mismatch (LHS args: ", len(self.args), ", RHS args: ", len(other.args),
            )
            return False
        for idx, (mine, theirs) in enumerate(zip(self.args, other.args)):
            if mine.is_compatible(ctx, theirs, loc):
                continue
            ctx.diagnostics.error(
                loc,
                "LHS function arg ", mine.to_str(), " with index ", idx,
                ", incompatible with RHS arg ", theirs.to_str(),
            )
            return False
        if not self.ret.is_compatible(ctx, other.ret, loc):
            ctx.diagnostics.error(
                loc,
                "incompatible return types (LHS: ", self.ret.to_str(),
                ", RHS: ", other.ret.to_str(), ")",
            )
            return False
        return True

    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        return FuncTy(
            ctx,
            self.var,
            [a.specialize(ctx, weak_depth) for a in self.args],
            self.ret.specialize(ctx, weak_depth),
            self.arg_comptime,
            self.intrinsic,
            self.intrinsic_kind,
            self.externed,
            self.variadic,
            sig=self.sig,
            type_id=self.id,
            uniq=self.uniq,
        )

    def create_call(
        self, ctx: TypeContext, loc: SourceLocation | None, arg_types: Sequence[Type]
    ) -> FuncTy | None:
        """Specialize this function for a call with ``arg_types``; ``None`` if they do not fit."""
        nargs, ncall = len(self.args), len(arg_types)
        if self.variadic and nargs == 0:
            return None
        if nargs - int(self.variadic) > ncall:
            return None
        if nargs != ncall and not self.variadic:
            return None

        has_templ = False
        for param, actual in zip(self.args, arg_types):
            has_templ |= param.merge_templates_from(actual)

        last = nargs - 1
        variadics: list[Type] = []
        compatible = True
        for j, actual in enumerate(arg_types):
            i = min(j, last) if self.variadic else j
            if not self.args[i].is_compatible(ctx, actual, loc):
                compatible = False
                break
            if self.variadic and i == last:
                variadics.append(actual)
        if not compatible:
            if has_templ:
                self.unmerge_templates()
            return None

        res: FuncTy = self
        if self.variadic:
            res = self.specialize(ctx)  # type: ignore[assignment]
            res.args.pop()
            res.args.append(VariadicTy([v.specialize(ctx) for v in variadics]))
            has_templ = True
        res = res.specialize(ctx)  # type: ignore[assignment]
        if has_templ:
            self.unmerge_templates()
            res.update_uniq_id(ctx)
        for idx, param in enumerate(res.args):
            if param.is_any and idx < ncall:
                res.args[idx] = arg_types[idx].specialize(ctx)
        return res

    def update_uniq_id(self, ctx: TypeContext) -> None:
        self.uniq = ctx.next_func_uniq_id()

    def call_intrinsic(self, *args: Any) -> Any:
        """Run the intrinsic implementation with ``args``."""
        if self.intrinsic is None:
            raise TypeError(f"{self.to_str()} is not an intrinsic")
        return self.intrinsic(*args)

    def default_value(
        self,
        ctx: TypeContext,
        loc: SourceLocation | None,
        cd: ContainsData,
        weak_depth: int = 0,
    ) -> Value:
        return FuncVal(self)


class VariadicTy(Type):
    """The pack of types passed to a variadic parameter."""

    def __init__(self, args: Sequence[Type] = ()) -> None:
        super().__init__(TypeKind.VARIADIC)
        self.args = list(args)

    def add_arg(self, ty: Type) -> None:
        self.args.append(ty)

    def arg(self, idx: int) -> Type | None:
        return self.args[idx] if 0 <= idx < len(self.args) else None

    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        return VariadicTy([a.specialize(ctx, weak_depth) for a in self.args])

    def is_template(self, weak_depth: int = 0) -> bool:
        return any(a.is_template(weak_depth) for a in self.args)

    def to_str(self, weak_depth: int = 0) -> str:
        return "variadic<" + ", ".join(a.to_str(weak_depth) for a in self.args) + ">"

    def merge_templates_from(self, ty: Type, weak_depth: int = 0) -> bool:
        if not isinstance(ty, VariadicTy) or len(self.args) != len(ty.args):
            return False
        merged = False
        for mine, theirs in zip(self.args, ty.args):
            merged |= mine.merge_templates_from(theirs, weak_depth)
        return merged

    def unmerge_templates(self, weak_depth: int = 0) -> None:
        for a in self.args:
            a.unmerge_templates(weak_depth)

    def is_compatible(
        self, ctx: TypeContext, rhs: Type | None, loc: SourceLocation | None = None
    ) -> bool:
        if not self.is_base_compatible(ctx, rhs, loc):
            return False
        other = _unwrap(rhs)
        if not isinstance(other, VariadicTy):
            return True
        if len(self.args) != len(other.args):
            return False
        return all(
            mine.is_compatible(ctx, theirs, loc) for mine, theirs in zip(self.args, other.args)
        )

    def default_value(
        self,
        ctx: TypeContext,
        loc: SourceLocation | None,
        cd: ContainsData,
        weak_depth: int = 0,
    ) -> Value:
        items: list[Value] = []
        for a in self.args:
            try:
                items.append(a.default_value(ctx, loc, cd, weak_depth))
            except TypeError as exc:
                raise TypeError(
                    f"failed to generate default value for type: {a.to_str()}"
                ) from exc
        return VecVal(cd, items)