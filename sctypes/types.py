"""Basic types of the language: void, any, integers, floats, type-types and pointers."""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any

from .errors import Diagnostics, SourceLocation
from .values import ContainsData, IntVal, FltVal, TypeVal, Value, VecVal

MAX_WEAKPTR_DEPTH = 7
_U32 = 0xFFFFFFFF


class TypeKind(IntEnum):
    """Base category of a type; the numeric value takes part in type ids."""

    VOID = 0
    TYPE = 1
    ANY = 2
    INT = 3
    FLT = 4
    PTR = 5
    FUNC = 6
    STRUCT = 7
    VARIADIC = 8


MAX_FLT_ID = TypeKind.FLT + 128 * 3

# Indexed by the numeric value of TypeKind.
_BASE_NAMES = (
    "void",
    "<any>",
    "int",
    "flt",
    "<template>",
    "<ptr>",
    "<array>",
    "<function>",
    "<struct>",
    "<enum>",
    "<variadic>",
    "<import>",
    "<funcmap>",
)


class TypeContext:
    """Owns id counters, interned primitive types and template bindings."""

    def __init__(self, diagnostics: Diagnostics | None = None) -> None:
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.contained_types: dict[int, Type | None] = {}
        self.str_ref_ty: Any = None
        self._type_ids = itertools.count(MAX_FLT_ID + 1)
        self._func_ids = itertools.count(1)  # 0 is reserved for externs
        self._contained_ids = itertools.count(0)
        self._ints: dict[tuple[int, bool], IntTy] = {}
        self._flts: dict[int, FltTy] = {}
        self._void: VoidTy | None = None
        self._any: AnyTy | None = None
        self._str: PtrTy | None = None

    def next_type_id(self) -> int:
        return next(self._type_ids)

    def next_func_uniq_id(self) -> int:
        return next(self._func_ids)

    def _next_contained_id(self) -> int:
        return next(self._contained_ids)

    def void(self) -> VoidTy:
        if self._void is None:
            self._void = VoidTy()
        return self._void

    def any(self) -> AnyTy:
        if self._any is None:
            self._any = AnyTy()
        return self._any

    def int_type(self, bits: int, signed: bool) -> IntTy:
        key = (bits, bool(signed))
        found = self._ints.get(key)
        if found is None:
            found = self._ints[key] = IntTy(bits, bool(signed))
        return found

    def flt_type(self, bits: int) -> FltTy:
        found = self._flts.get(bits)
        if found is None:
            found = self._flts[bits] = FltTy(bits)
        return found

    def type_type(self) -> TypeTy:
        return TypeTy(self)

    def ptr(self, to: Type, count: int = 0, weak: bool = False) -> PtrTy:
        return PtrTy(to, count, weak)

    def str_ptr(self, count: int | None = None) -> PtrTy:
        """Pointer to ``i8``; shared when ``count`` is not given."""
        if count is None:
            if self._str is None:
                self._str = self.ptr(self.int_type(8, True))
            return self._str
        return self.ptr(self.int_type(8, True), count)


class Type(ABC):
    """Base of every type."""

    def __init__(self, kind: TypeKind) -> None:
        self.kind = kind

    @property
    def is_void(self) -> bool:
        return self.kind is TypeKind.VOID

    @property
    def is_type_ty(self) -> bool:
        return self.kind is TypeKind.TYPE

    @property
    def is_any(self) -> bool:
        return self.kind is TypeKind.ANY

    @property
    def is_int(self) -> bool:
        return self.kind is TypeKind.INT

    @property
    def is_flt(self) -> bool:
        return self.kind is TypeKind.FLT

    @property
    def is_ptr(self) -> bool:
        return self.kind is TypeKind.PTR

    @property
    def is_func(self) -> bool:
        return self.kind is TypeKind.FUNC

    @property
    def is_struct(self) -> bool:
        return self.kind is TypeKind.STRUCT

    @property
    def is_variadic(self) -> bool:
        return self.kind is TypeKind.VARIADIC

    @property
    def is_primitive(self) -> bool:
        return self.is_int or self.is_flt

    @property
    def is_primitive_or_ptr(self) -> bool:
        return self.is_primitive or self.is_ptr

    @property
    def base_id(self) -> int:
        return int(self.kind)

    def is_base_compatible(
        self, ctx: TypeContext, rhs: Type | None, loc: SourceLocation | None = None
    ) -> bool:
        """Check compatibility shared by all types, reporting mismatches."""
        if rhs is None:
            return False
        if self.is_any:
            return True
        if self.is_func and rhs.is_func:
            return self.signature_id() == rhs.signature_id()  # type: ignore[attr-defined]
        if isinstance(self, PtrTy) and isinstance(rhs, PtrTy):
            if self.weak or rhs.weak:
                lto: Type = self.to
                while isinstance(lto, TypeTy):
                    inner = lto.contained_type()
                    if inner is None:
                        break
                    lto = inner
                return lto.type_id() == rhs.to.type_id()
            return self.to.is_compatible(ctx, rhs.to, loc)
        if isinstance(self, TypeTy) and isinstance(rhs, TypeTy):
            if self.contained_type() is None and rhs.contained_type() is None:
                ctx.diagnostics.error(loc, "both typetys contain no type - currently unsupported")
                return False
        if isinstance(rhs, TypeTy):
            return self.is_compatible(ctx, rhs.contained_type(), loc)
        if isinstance(self, TypeTy):
            contained = self.contained_type()
            if contained is None:
                return True
            return contained.is_compatible(ctx, rhs, loc)

        is_rhs_prim = rhs.is_primitive
        lhs_ptr = pointer_count(self)
        rhs_ptr = pointer_count(rhs)
        num_to_num = not lhs_ptr and not rhs_ptr and self.is_primitive and is_rhs_prim
        if not num_to_num and not (lhs_ptr and is_rhs_prim) and self.type_id() != rhs.type_id():
            ctx.diagnostics.error(
                loc,
                "different type ids (LHS: ", self.to_str(), ", RHS: ", rhs.to_str(),
                ") not compatible",
            )
            return False
        if not lhs_ptr and rhs_ptr:
            ctx.diagnostics.error(
                loc,
                "cannot use a pointer type (LHS: ", rhs.to_str(),
                ") against non pointer (RHS: ", self.to_str(), ")",
            )
            return False
        if not rhs_ptr and lhs_ptr and not is_rhs_prim:
            ctx.diagnostics.error(
                loc,
                "non pointer type (RHS: ", rhs.to_str(),
                ") cannot be assigned to pointer type (LHS: ", self.to_str(), ")",
            )
            return False
        if rhs_ptr != lhs_ptr and not is_rhs_prim:
            ctx.diagnostics.error(
                loc,
                "inequal pointer assignment here (LHS: ", self.to_str(),
                ", RHS: ", rhs.to_str(), ")",
            )
            return False
        return True

    def base_str(self) -> str:
        return _BASE_NAMES[self.kind]

    def requires_cast(self, other: Type) -> bool:
        """True if converting between the two primitive or pointer types needs a cast."""
        if not self.is_primitive_or_ptr or not other.is_primitive_or_ptr:
            return False
        if isinstance(self, PtrTy) and isinstance(other, PtrTy):
            return self.to.requires_cast(other.to)
        if not self.is_primitive or not other.is_primitive:
            return self.type_id() != other.type_id()
        if self.type_id() != other.type_id():
            return True
        if isinstance(self, IntTy) and isinstance(other, IntTy):
            if not self.bits:
                return False
            return self.bits != other.bits or self.signed != other.signed
        if isinstance(self, FltTy) and isinstance(other, FltTy):
            if not self.bits:
                return False
            return self.bits != other.bits
        return False

    def uniq_id(self) -> int:
        return self.type_id()

    def type_id(self) -> int:
        return self.base_id

    def is_template(self, weak_depth: int = 0) -> bool:
        return False

    def to_str(self, weak_depth: int = 0) -> str:
        return self.base_str()

    def merge_templates_from(self, ty: Type, weak_depth: int = 0) -> bool:
        return False

    def unmerge_templates(self, weak_depth: int = 0) -> None:
        return None

    def is_compatible(
        self, ctx: TypeContext, rhs: Type | None, loc: SourceLocation | None = None
    ) -> bool:
        return self.is_base_compatible(ctx, rhs, loc)

    @abstractmethod
    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        """Return the type with bound templates substituted."""

    def is_str_literal(self) -> bool:
        """True for a pointer to ``i8``."""
        if not isinstance(self, PtrTy):
            return False
        to = self.to
        return isinstance(to, IntTy) and to.signed and to.bits == 8

    def is_str_ref(self) -> bool:
        """True for a struct of ``data: *i8`` and ``length: u64``."""
        if not self.is_struct:
            return False
        names = self.field_names  # type: ignore[attr-defined]
        fields = self.fields  # type: ignore[attr-defined]
        if len(fields) != 2 or list(names[:2]) != ["data", "length"]:
            return False
        data, length = fields
        if not data.is_str_literal() or not isinstance(length, IntTy):
            return False
        return length.bits == 64 and not length.signed

    def default_value(
        self,
        ctx: TypeContext,
        loc: SourceLocation | None,
        cd: ContainsData,
        weak_depth: int = 0,
    ) -> Value:
        raise TypeError(f"invalid type for toDefaultValue(): {self.to_str()}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.to_str()}>"


class VoidTy(Type):
    def __init__(self) -> None:
        super().__init__(TypeKind.VOID)

    def to_str(self, weak_depth: int = 0) -> str:
        return "void"

    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        return self

    def default_value(self, ctx, loc, cd, weak_depth=0) -> Value:
        raise TypeError("void type has no value")


class AnyTy(Type):
    def __init__(self) -> None:
        super().__init__(TypeKind.ANY)

    def to_str(self, weak_depth: int = 0) -> str:
        return "any"

    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        return self

    def default_value(self, ctx, loc, cd, weak_depth=0) -> Value:
        return TypeVal(self)


class IntTy(Type):
    def __init__(self, bits: int, signed: bool) -> None:
        super().__init__(TypeKind.INT)
        self.bits = bits
        self.signed = signed

    def type_id(self) -> int:
        return self.base_id + self.bits + (2 if self.signed else 0)

    def to_str(self, weak_depth: int = 0) -> str:
        return ("i" if self.signed else "u") + str(self.bits)

    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        return self

    def default_value(self, ctx, loc, cd, weak_depth=0) -> Value:
        return IntVal(cd, 0)


class FltTy(Type):
    def __init__(self, bits: int) -> None:
        super().__init__(TypeKind.FLT)
        self.bits = bits

    def type_id(self) -> int:
        # scaled by 3 to keep float ids apart from integer ids
        return self.base_id + self.bits * 3

    def to_str(self, weak_depth: int = 0) -> str:
        return "f" + str(self.bits)

    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        return self

    def default_value(self, ctx, loc, cd, weak_depth=0) -> Value:
        return FltVal(cd, 0.0)


class TypeTy(Type):
    """A template slot that may be bound to a concrete type."""

    def __init__(self, ctx: TypeContext, contained_id: int | None = None) -> None:
        super().__init__(TypeKind.TYPE)
        self._slots = ctx.contained_types
        self.contained_id = ctx._next_contained_id() if contained_id is None else contained_id

    def contained_type(self) -> Type | None:
        return self._slots.get(self.contained_id)

    def set_contained_type(self, ty: Type) -> None:
        """Bind the slot unless it is already bound."""
        if self.contained_type() is not None:
            return
        if isinstance(ty, TypeTy) and ty.contained_type() is not None:
            self._slots[self.contained_id] = ty.contained_type()
            return
        self._slots[self.contained_id] = ty

    def clear_contained_type(self) -> None:
        self._slots[self.contained_id] = None

    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        contained = self.contained_type()
        if contained is not None:
            return contained.specialize(ctx, weak_depth)
        return self

    def uniq_id(self) -> int:
        contained = self.contained_type()
        if contained is not None:
            return contained.uniq_id()
        return self.type_id()

    def is_template(self, weak_depth: int = 0) -> bool:
        return self.contained_type() is None

    def to_str(self, weak_depth: int = 0) -> str:
        contained = self.contained_type()
        inner = contained.to_str(weak_depth) if contained else f"(none:{self.contained_id})"
        return f"typety<{inner}>"

    def merge_templates_from(self, ty: Type, weak_depth: int = 0) -> bool:
        if self.contained_type() is not None:
            return True
        if not isinstance(ty, TypeTy):
            self.set_contained_type(ty)
            return True
        inner = ty.contained_type()
        if inner is not None:
            self.set_contained_type(inner)
        return True

    def unmerge_templates(self, weak_depth: int = 0) -> None:
        self.clear_contained_type()

    def default_value(self, ctx, loc, cd, weak_depth=0) -> Value:
        contained = self.contained_type()
        if contained is None:
            return TypeVal(self)
        return contained.default_value(ctx, loc, cd, weak_depth)


class PtrTy(Type):
    """Pointer; a non-zero ``count`` makes it a fixed-size array."""

    def __init__(self, to: Type, count: int = 0, weak: bool = False) -> None:
        super().__init__(TypeKind.PTR)
        self.to = to
        self.count = count
        self.weak = weak

    @property
    def is_array(self) -> bool:
        return self.count > 0

    def specialize(self, ctx: TypeContext, weak_depth: int = 0) -> Type:
        if weak_depth < MAX_WEAKPTR_DEPTH:
            res = self.to.specialize(ctx, weak_depth + self.weak)
        else:
            res = self.to
        if res is self.to:
            return self
        return ctx.ptr(res, self.count, self.weak)

    def uniq_id(self) -> int:
        if self.to is not None and not self.weak:
            return (self.to.uniq_id() + self.type_id()) & _U32
        return self.type_id()

    def type_id(self) -> int:
        return (self.base_id + self.count * 17) & _U32

    def is_template(self, weak_depth: int = 0) -> bool:
        if weak_depth >= MAX_WEAKPTR_DEPTH:
            return False
        return self.to.is_template(weak_depth + self.weak)

    def to_str(self, weak_depth: int = 0) -> str:
        res = "*" + (f"[{self.count}] " if self.count else "")
        if weak_depth:
            return res + f" weak<{self.to.type_id()}>"
        return res + self.to.to_str(weak_depth + self.weak)

    def merge_templates_from(self, ty: Type, weak_depth: int = 0) -> bool:
        if weak_depth >= MAX_WEAKPTR_DEPTH or not isinstance(ty, PtrTy):
            return False
        return self.to.merge_templates_from(ty.to, weak_depth + self.weak)

    def unmerge_templates(self, weak_depth: int = 0) -> None:
        if weak_depth >= MAX_WEAKPTR_DEPTH:
            return
        self.to.unmerge_templates(weak_depth + self.weak)

    def default_value(self, ctx, loc, cd, weak_depth=0) -> Value:
        if not self.count:
            return IntVal(cd, 0)
        if weak_depth >= MAX_WEAKPTR_DEPTH:
            first: Value = IntVal(cd, 0)
        else:
            try:
                first = self.to.default_value(ctx, loc, cd, weak_depth + self.weak)
            except TypeError as exc:
                raise TypeError("failed to get default value from array's type") from exc
        items = [first] + [first.clone() for _ in range(self.count - 1)]
        return VecVal(cd, items)


def pointer_count(ty: Type) -> int:
    """Number of pointer levels wrapping ``ty``."""
    count = 0
    while isinstance(ty, PtrTy):
        count += 1
        ty = ty.to
    return count


def apply_pointer_count(ctx: TypeContext, ty: Type, count: int) -> Type:
    """Wrap ``ty`` in ``count`` plain pointer levels."""
    for _ in range(count):
        ty = ctx.ptr(ty, 0, False)
    return ty