"""Compile-time values attached to statements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, IntEnum
from typing import Any, ClassVar


class ValueKind(Enum):
    INT = "int"
    FLT = "flt"
    VEC = "vec"
    STRUCT = "struct"
    FUNC = "func"
    TYPE = "type"
    NAMESPACE = "namespace"
    REF = "ref"


class ContainsData(IntEnum):
    """Whether a value holds data, and whether that data is permanent."""

    ABSENT = 0
    PRESENT = 1
    PERMANENT = 2


class Value(ABC):
    """Base of every compile-time value."""

    kind: ClassVar[ValueKind]

    def __init__(self, contains: ContainsData) -> None:
        self.contains = ContainsData(contains)

    def set_has_data(self, cd: ContainsData) -> None:
        if self.contains is not ContainsData.PERMANENT:
            self.contains = ContainsData(cd)

    def set_contains_data(self) -> None:
        self.set_has_data(ContainsData.PRESENT)

    def set_contains_perma_data(self) -> None:
        self.contains = ContainsData.PERMANENT

    def unset_contains_perma_data(self) -> None:
        if self.contains is ContainsData.PERMANENT:
            self.contains = ContainsData.PRESENT

    def has_data(self) -> bool:
        return self.contains in (ContainsData.PRESENT, ContainsData.PERMANENT)

    def has_perma_data(self) -> bool:
        return self.contains is ContainsData.PERMANENT

    def clear_has_data(self) -> None:
        if self.contains is not ContainsData.PERMANENT:
            self.contains = ContainsData.ABSENT

    @abstractmethod
    def clone(self) -> Value:
        """Return an independent copy."""

    @abstractmethod
    def update_value(self, other: Value) -> None:
        """Take over the data of ``other``; raises on a mismatch."""

    @abstractmethod
    def __str__(self) -> str: ...

    def _clone_presence(self) -> ContainsData:
        if self.contains is ContainsData.PERMANENT:
            return ContainsData.PRESENT
        return self.contains

    def _require_kind(self, other: Value) -> None:
        if other.kind is not self.kind:
            raise TypeError(f"cannot update {self.kind.value} value from {other.kind.value} value")

    def _take_presence(self, other: Value) -> None:
        self.contains = ContainsData.PRESENT if other.has_data() else ContainsData.ABSENT


class IntVal(Value):
    kind = ValueKind.INT

    def __init__(self, contains: ContainsData, value: int) -> None:
        super().__init__(contains)
        self.value = value

    def __str__(self) -> str:
        return str(self.value)

    def clone(self) -> IntVal:
        return IntVal(self._clone_presence(), self.value)

    def update_value(self, other: Value) -> None:
        self._require_kind(other)
        self.value = other.value  # type: ignore[attr-defined]
        self._take_presence(other)


class FltVal(Value):
    kind = ValueKind.FLT

    def __init__(self, contains: ContainsData, value: float) -> None:
        super().__init__(contains)
        self.value = value

    def __str__(self) -> str:
        return f"{self.value:f}"

    def clone(self) -> FltVal:
        # permanence is kept on float clones
        return FltVal(self.contains, self.value)

    def update_value(self, other: Value) -> None:
        self._require_kind(other)
        self.value = other.value  # type: ignore[attr-defined]
        self._take_presence(other)


class VecVal(Value):
    kind = ValueKind.VEC

    def __init__(self, contains: ContainsData, items: list[Value]) -> None:
        super().__init__(contains)
        self.items = list(items)

    @classmethod
    def from_string(cls, has_data: ContainsData, text: str) -> VecVal:
        """Build a vector of signed character values from ``text``."""
        raw = text.encode("utf-8", errors="surrogateescape")
        return cls(has_data, [IntVal(has_data, b - 256 if b > 127 else b) for b in raw])

    def as_string(self) -> str:
        """Read the vector back as a string of characters."""
        raw = bytes(item.value & 0xFF for item in self.items)  # type: ignore[attr-defined]
        return raw.decode("utf-8", errors="surrogateescape")

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self.items) + "]"

    def clone(self) -> VecVal:
        return VecVal(self._clone_presence(), [item.clone() for item in self.items])

    def update_value(self, other: Value) -> None:
        self._require_kind(other)
        assert isinstance(other, VecVal)
        if len(self.items) != len(other.items):
            raise ValueError(
                f"vector length mismatch ({len(self.items)} vs {len(other.items)})"
            )
        for mine, theirs in zip(self.items, other.items):
            mine.update_value(theirs)
        self._take_presence(other)


class StructVal(Value):
    kind = ValueKind.STRUCT

    def __init__(self, contains: ContainsData, fields: dict[str, Value]) -> None:
        super().__init__(contains)
        self.fields = dict(fields)

    @classmethod
    def from_str_ref(cls, has_data: ContainsData, text: str) -> StructVal:
        """Build a string reference value with ``data`` and ``length`` fields."""
        data = VecVal.from_string(has_data, text)
        length = IntVal(has_data, len(data.items))
        return cls(has_data, {"data": data, "length": length})

    def field(self, key: str) -> Value | None:
        return self.fields.get(key)

    def str_from_ref(self) -> str:
        data = self.field("data")
        if not isinstance(data, VecVal):
            raise TypeError("struct value is not a string reference")
        return data.as_string()

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.fields.items()) + "}"

    def clone(self) -> StructVal:
        return StructVal(self._clone_presence(), {k: v.clone() for k, v in self.fields.items()})

    def update_value(self, other: Value) -> None:
        self._require_kind(other)
        assert isinstance(other, StructVal)
        if len(self.fields) != len(other.fields):
            raise ValueError(
                f"struct field count mismatch ({len(self.fields)} vs {len(other.fields)})"
            )
        for name, mine in self.fields.items():
            theirs = other.field(name)
            if theirs is None:
                raise KeyError(name)
            mine.update_value(theirs)
        self._take_presence(other)


class FuncVal(Value):
    kind = ValueKind.FUNC

    def __init__(self, ty: Any) -> None:
        super().__init__(ContainsData.PERMANENT)
        self.ty = ty

    def __str__(self) -> str:
        return f"func<{self.ty.to_str()}>"

    def clone(self) -> FuncVal:
        return FuncVal(self.ty)

    def update_value(self, other: Value) -> None:
        """Function values are fixed; updating them changes nothing."""


class TypeVal(Value):
    kind = ValueKind.TYPE

    def __init__(self, ty: Any) -> None:
        super().__init__(ContainsData.PERMANENT)
        self.ty = ty

    def __str__(self) -> str:
        return f"typeval<{self.ty.to_str()}>"

    def clone(self) -> TypeVal:
        return TypeVal(self.ty)

    def update_value(self, other: Value) -> None:
        """Type values are fixed; updating them changes nothing."""


class NamespaceVal(Value):
    kind = ValueKind.NAMESPACE

    def __init__(self, name: str) -> None:
        super().__init__(ContainsData.PERMANENT)
        self.name = name

    def __str__(self) -> str:
        return self.name

    def clone(self) -> NamespaceVal:
        return NamespaceVal(self.name)

    def update_value(self, other: Value) -> None:
        self._require_kind(other)
        self.name = other.name  # type: ignore[attr-defined]
        self._take_presence(other)