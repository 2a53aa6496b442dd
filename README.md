# sctypes

This package is the semantic core of a compiler front end for a small, statically typed systems language. It has no dependencies beyond the standard library.

## Modules

- **`sctypes.text`**: string helpers.
  - `split_trimmed(text, delim)` splits a string and strips spaces from both ends of each part.
  - `to_raw_string` and `from_raw_string` escape and unescape special characters such as `\n`, `\t`, `\0` and `\e`.
  - `list_to_str` renders items as `[a, b, c]`.
- **`sctypes.tokens`**: the `TokType` enumeration of lexical tokens. Its classification methods are `is_data`, `is_literal`, `is_oper`, `is_unary_pre`, `is_unary_post`, `is_comparison`, `is_assign` and `is_valid`.
- **`sctypes.errors`**: source positions and diagnostics.
  - `SourceLocation` is a position, written as `module:line:col`.
  - `Diagnostic` is a single recorded message.
  - `Diagnostics` collects messages. `error(loc, *args)` and `warn(loc, *args)` concatenate their arguments into one message, and `clear()` discards everything recorded.
  - When `max_errors` is set, `error` raises `TooManyErrors` once the number of errors reaches that limit.
  - `stderr_diagnostics()` builds a `Diagnostics` that also prints each message to standard error.
- **`sctypes.values`**: compile-time values.
  - The value classes are `IntVal`, `FltVal`, `VecVal`, `StructVal`, `FuncVal`, `TypeVal` and `NamespaceVal`.
  - Each value records whether it holds data, using `ContainsData`: `ABSENT`, `PRESENT` or `PERMANENT`.
  - Each value supports `clone()` and `update_value(other)`. `update_value` raises `TypeError` or `ValueError` when the two values do not match.
  - `VecVal.from_string` and `StructVal.from_str_ref` build string data, and `as_string` and `str_from_ref` read it back.
- **`sctypes.types`**: primitive types, created through a `TypeContext`.
  - The classes are `VoidTy`, `AnyTy`, `IntTy`, `FltTy`, the template placeholder `TypeTy`, and `PtrTy`. `PtrTy` also covers array pointers and weak pointers.
  - The types provide compatibility checks (`is_compatible`), cast detection (`requires_cast`), `specialize` and `default_value`.
  - Type mismatches are reported to the context's `diagnostics`.
  - `pointer_count` and `apply_pointer_count` count pointer levels and add them.
- **`sctypes.compound`**: compound types.
  - `StructTy` may take template parameters. It provides `apply_templates` and `instantiate`.
  - `FuncTy` covers variadic functions, extern functions and intrinsics. `create_call` specializes a function for a list of argument types.
  - `VariadicTy` is the pack of types passed to a variadic parameter.
  - `str_ref_type` and `set_str_ref_type` manage the context's string-reference struct, which has the fields `data: *i8` and `length: u64`.
- **`sctypes.scope`**: lexical scoping.
  - `ValueManager` holds global declarations and a stack of `FunctionScope`s, each made of `Layer`s of `VarDecl`s.
  - It also keeps functions attached to types, through `add_type_fn`, `exists_type_fn` and `get_type_fn`.

## Installation

```
pip install .
```

## Example

```python
from sctypes.types import TypeContext
from sctypes.values import ContainsData

ctx = TypeContext()
i32 = ctx.int_type(32, True)
u8 = ctx.int_type(8, False)

print(i32.to_str())              # i32
print(i32.requires_cast(u8))     # True

arr = ctx.ptr(i32, 3, False)     # *[3] i32
value = arr.default_value(ctx, None, ContainsData.PRESENT)
print(value)                     # [0, 0, 0]
```

A template placeholder is bound and released like this:

```python
t = ctx.type_type()
t.set_contained_type(i32)
print(t.to_str())                # typety<i32>
t.clear_contained_type()
```

## What this package does not do

This package is a library only. It includes:

- no lexer: `TokType` classifies token kinds but does not turn text into tokens;
- no parser and no syntax tree;
- no compiler passes and no code generation;
- no command-line program.

Statements and declarations appear only as opaque objects, such as `decl` and `var`, that the caller supplies.

## Running the tests

```
pip install .[test]
pytest
```