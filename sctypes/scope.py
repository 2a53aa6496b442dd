"""Scoped lookup of variables and of functions attached to types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .types import Type
from .values import Value


@dataclass
class VarDecl:
    """What is known about a declared name: its type, value and declaring statement."""

    ty: Type | None
    val: Value | None
    decl: Any = None


@dataclass
class Layer:
    """One block's worth of declarations."""

    items: dict[str, VarDecl] = field(default_factory=dict)

    def add(self, name: str, ty: Type | None, val: Value | None, decl: Any) -> bool:
        """Declare ``name``; False if it is already declared in this layer."""
        if name in self.items:
            return False
        self.items[name] = VarDecl(ty, val, decl)
        return True

    def get(self, name: str) -> VarDecl | None:
        return self.items.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.items

    def __len__(self) -> int:
        return len(self.items)


class FunctionScope:
    """The stack of block layers of one function being processed."""

    def __init__(self, fn: Any) -> None:
        self.fn = fn
        self.layers: list[Layer] = []

    def push_layer(self) -> None:
        self.layers.append(Layer())

    def pop_layer(self) -> None:
        self.layers.pop()

    def __len__(self) -> int:
        return len(self.layers)

    def add(self, name: str, ty: Type | None, val: Value | None, decl: Any) -> bool:
        """Declare ``name`` in the innermost layer; False if already declared there."""
        if not self.layers:
            raise IndexError("function scope has no layer")
        return self.layers[-1].add(name, ty, val, decl)

    def _search(self, top_only: bool) -> list[Layer]:
        if top_only:
            return self.layers[-1:]
        return list(reversed(self.layers))

    def exists(self, name: str, top_only: bool = False) -> bool:
        return self.get(name, top_only) is not None

    def get(self, name: str, top_only: bool = False) -> VarDecl | None:
        """Find ``name`` from the innermost layer outwards, or only in the innermost."""
        for layer in self._search(top_only):
            found = layer.get(name)
            if found is not None:
                return found
        return None


class ValueManager:
    """Tracks global declarations, function scopes and per-type functions."""

    def __init__(self) -> None:
        self.type_funcs: dict[int, dict[str, Any]] = {}
        self.funcs: list[FunctionScope] = []
        self.globals = Layer()

    def push_layer(self) -> None:
        """Open a block in the current function; nothing happens at global level."""
        if self.funcs:
            self.funcs[-1].push_layer()

    def pop_layer(self) -> None:
        if self.funcs:
            self.funcs[-1].pop_layer()

    def push_func(self, fn: Any) -> None:
        scope = FunctionScope(fn)
        scope.push_layer()
        self.funcs.append(scope)

    def pop_func(self) -> None:
        self.funcs.pop()

    @property
    def top_func(self) -> FunctionScope:
        if not self.funcs:
            raise IndexError("no function scope is open")
        return self.funcs[-1]

    def has_func(self) -> bool:
        return bool(self.funcs)

    def add_var(
        self,
        name: str,
        ty: Type | None,
        val: Value | None,
        decl: Any,
        is_global: bool = False,
    ) -> bool:
        """Declare ``name`` in the innermost open scope; False if it already exists there.

        ``is_global`` is accepted but does not change where the name is declared.
        """
        if self.funcs:
            return self.funcs[-1].add(name, ty, val, decl)
        return self.globals.add(name, ty, val, decl)

    @staticmethod
    def _type_key(ty_or_id: Type | int) -> int:
        return ty_or_id if isinstance(ty_or_id, int) else ty_or_id.type_id()

    def add_type_fn(self, ty_or_id: Type | int, name: str, fn: Any) -> bool:
        """Attach ``fn`` as ``name`` to a type; False if that name is taken."""
        funcs = self.type_funcs.setdefault(self._type_key(ty_or_id), {})
        if name in funcs:
            return False
        funcs[name] = fn
        return True

    def exists_type_fn(self, ty: Type | int, name: str) -> bool:
        return name in self.type_funcs.get(self._type_key(ty), {})

    def get_type_fn(self, ty: Type | int, name: str) -> Any:
        return self.type_funcs.get(self._type_key(ty), {}).get(name)

    def get_all(self, name: str, top_only: bool = False) -> VarDecl | None:
        """Look ``name`` up in the current function, then among globals.

        With ``top_only`` inside a function, only the innermost layer is searched.
        """
        if self.funcs:
            found = self.funcs[-1].get(name, top_only)
            if found is not None or top_only:
                return found
        return self.globals.get(name)

    def exists(self, name: str, top_only: bool = False) -> bool:
        return self.get_all(name, top_only) is not None

    def get_type(self, name: str, top_only: bool = False) -> Type | None:
        found = self.get_all(name, top_only)
        return found.ty if found else None

    def get_value(self, name: str, top_only: bool = False) -> Value | None:
        found = self.get_all(name, top_only)
        return found.val if found else None

    def get_decl(self, name: str, top_only: bool = False) -> Any:
        found = self.get_all(name, top_only)
        return found.decl if found else None