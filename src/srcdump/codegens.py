"""
``srcdump.codegens``: Code generation for the builtin types
===========================================================

Supported types
---------------

Out of the box, the types that are supported are:

+ :class:`int`, :class:`float`, :class:`complex`, :class:`bool`, \
    :const:`None` and the fixed width numbers from :mod:`srcdump.runtime`: \
    these are always inlined.
+ :class:`str`, :class:`bytes`: literals, shared between all their occurrences
+ :class:`bytearray`: built from a shared :class:`bytes` literal
+ :class:`list`, :class:`tuple`, :class:`set`, :class:`frozenset`: where all \
    the elements are supported
+ :class:`dict`: where all the keys and values are supported
+ :class:`srcdump.Shared`
+ :mod:`pathlib` paths: the generated code fails when it is run.
"""
from __future__ import annotations

import ast
import pathlib
import types
import warnings
from typing import Any, Iterable, TypeVar

from . import ast_utils, base, runtime
from .code import Code
from .emitter import Emitter, Sharing

T = TypeVar("T")


def _inline(
    value: int | float | bool | None, emitter: Emitter, unique: bool
) -> Code:
    return Code.of(ast_utils.constant(value))


for _ty in (int, float, bool, types.NoneType):
    base.register(_inline, type=_ty)


@base.register
def _gen_complex(value: complex, emitter: Emitter, unique: bool) -> Code:
    return Code.of(
        ast_utils.call(
            "complex",
            ast_utils.constant(value.real),
            ast_utils.constant(value.imag),
        )
    )


def _gen_fixed_width(
    value: int | float, emitter: Emitter, unique: bool
) -> Code:
    ty = type(value)
    raw = int(value) if isinstance(value, int) else float(value)
    return Code.of(
        ast_utils.call(
            emitter.require(f"srcdump.{ty.__name__}"),
            ast_utils.constant(raw),
        )
    )


for _ty in (
    runtime.I8,
    runtime.I16,
    runtime.I32,
    runtime.I64,
    runtime.U8,
    runtime.U16,
    runtime.U32,
    runtime.U64,
    runtime.F32,
    runtime.F64,
):
    base.register(_gen_fixed_width, type=_ty)


@base.register
def _gen_str(value: str, emitter: Emitter, unique: bool) -> Code:
    return emitter.add_code(
        Code.of(ast_utils.constant(value), annotation="str"), unique=unique
    )


@base.register
def _gen_bytes(value: bytes, emitter: Emitter, unique: bool) -> Code:
    return emitter.add_code(
        Code.of(ast_utils.constant(value), annotation="bytes"), unique=unique
    )


@base.register
def _gen_bytearray(value: bytearray, emitter: Emitter, unique: bool) -> Code:
    literal = emitter.add_value(bytes(value), unique)
    return emitter.add_code(
        Code.of(
            ast_utils.call("bytearray", literal.node),
            annotation="bytearray",
            frozen=False,
        ),
        unique=unique,
    )


def _add_values(
    emitter: Emitter, values: Iterable[Any], unique: bool
) -> list[Code]:
    return [emitter.add_value(v, unique) for v in values]


@base.register
def _gen_list(value: list[T], emitter: Emitter, unique: bool) -> Code:
    if not value:
        return Code.of(ast_utils.list_([]), frozen=False)
    elts = _add_values(emitter, value, unique)
    return emitter.add_code(
        Code.of(
            ast_utils.list_([e.node for e in elts]),
            annotation="list",
            frozen=False,
        ),
        unique=unique,
    )


@base.register
def _gen_tuple(value: tuple[T, ...], emitter: Emitter, unique: bool) -> Code:
    if not value:
        return Code.of(ast_utils.tuple_([]))
    elts = _add_values(emitter, value, unique)
    return emitter.add_code(
        Code.of(
            ast_utils.tuple_([e.node for e in elts]),
            frozen=all(e.frozen for e in elts),
        ),
        unique=unique,
    )


@base.register
def _gen_dict(value: dict[Any, Any], emitter: Emitter, unique: bool) -> Code:
    if not value:
        return Code.of(ast_utils.dict_([]), frozen=False)
    items: list[tuple[ast.expr, ast.expr]] = []
    for k, v in value.items():
        # Note that the order is important here for the bindings...
        ek = emitter.add_value(k, unique)
        ev = emitter.add_value(v, unique)
        items.append((ek.node, ev.node))
    return emitter.add_code(
        Code.of(ast_utils.dict_(items), annotation="dict", frozen=False),
        unique=unique,
    )


def _sort_key(value: Any) -> str:
    # The inlined code of a value doesn't depend on the hash seed (the elements
    # of nested sets are sorted too).
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        return Emitter().add_value(value, True).text


def _sorted(value: set[T] | frozenset[T]) -> list[T]:
    # Iteration order of sets depends on the hash of their elements (which is
    # randomized for strings) and sets are only partially ordered by `<`.
    return sorted(value, key=_sort_key)


@base.register
def _gen_set(value: set[T], emitter: Emitter, unique: bool) -> Code:
    if not value:
        return Code.of(ast_utils.set_([]), frozen=False)
    elts = _add_values(emitter, _sorted(value), unique)
    return emitter.add_code(
        Code.of(
            ast_utils.set_([e.node for e in elts]),
            annotation="set",
            frozen=False,
        ),
        unique=unique,
    )


@base.register
def _gen_frozenset(
    value: frozenset[T], emitter: Emitter, unique: bool
) -> Code:
    if not value:
        return Code.of(ast_utils.call("frozenset"))
    elts = _add_values(emitter, _sorted(value), unique)
    return emitter.add_code(
        Code.of(
            ast_utils.call(
                "frozenset", ast_utils.set_([e.node for e in elts])
            ),
            annotation="frozenset",
            frozen=all(e.frozen for e in elts),
        ),
        unique=unique,
    )


@base.register
def _gen_shared(
    value: runtime.Shared[T], emitter: Emitter, unique: bool
) -> Code:
    # The pointee is always inlined: only the wrapper gets bound.
    pointee = emitter.add_value(value.value, True)
    code = Code.of(
        ast_utils.call(emitter.require("srcdump.Shared"), pointee.node),
        annotation="srcdump.Shared",
    )
    if emitter.sharing == Sharing.IDENTITY:
        # Bound even inside of the pointee of another shared value: that's the
        # only way to refer to the same instance twice.
        emitter.keep_alive(value)
        return emitter.add_code(code, unique=False, key=("shared", id(value)))
    return emitter.add_code(code, unique=unique)


def _gen_path(
    value: pathlib.PurePath, emitter: Emitter, unique: bool
) -> Code:
    message = (
        f"{type(value).__name__} values are not supported: {str(value)!r}"
    )
    warnings.warn(f"{message}, the generated code will fail when it is run.")
    return Code.of(
        ast_utils.call(
            emitter.require("srcdump.unsupported"),
            ast_utils.constant(message),
        )
    )


for _ty in (
    pathlib.PurePath,
    pathlib.PurePosixPath,
    pathlib.PureWindowsPath,
    pathlib.Path,
    pathlib.PosixPath,
    pathlib.WindowsPath,
):
    base.register(_gen_path, type=_ty)

del _ty
