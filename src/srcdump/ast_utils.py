"""
``srcdump.ast_utils``: Smart constructors for generated code
============================================================

All the code we generate is built as python :mod:`ast` nodes and printed with
:func:`ast.unparse`. Going through the ast means the output is always
syntactically valid and that the text we use to deduplicate expressions is
canonical.
"""
from __future__ import annotations

import ast
import math
from typing import Final, Iterable, Sequence

# Above this size python refuses to convert integers to and from decimal
# strings.
_MAX_DECIMAL_BITS: Final = 14_000


def _const(value: int | float | None | bool | str | bytes) -> ast.expr:
    return ast.Constant(value=value, kind=None)


def neg(value: ast.expr) -> ast.expr:
    return ast.UnaryOp(op=ast.USub(), operand=value)


def constant(
    value: int | float | None | bool | str | bytes,
) -> ast.expr:
    """Smart constructor for ast.Constant

    Negative numbers are generated as the ``-`` operator applied to a positive
    constant (that's what the parser would produce) and non finite floats are
    generated as calls to :class:`float`::

        >>> ast.unparse(constant(-5))
        '-5'
        >>> ast.unparse(constant(-math.inf))
        "-float('inf')"

    Integers too large to be printed in base 10 (see
    :func:`sys.set_int_max_str_digits`) are parsed from base 16::

        >>> ast.unparse(constant(-(2**20_000)))[:11]
        "-int('10000"
    """
    if isinstance(value, bool | str | bytes | None):
        return _const(value)
    assert isinstance(value, int | float), value
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return call("float", _const("nan"))
        res = call("float", _const("inf"))
        return res if value > 0 else neg(res)
    if isinstance(value, int):
        if value < 0:
            return neg(constant(-value))
        if value.bit_length() > _MAX_DECIMAL_BITS:
            return call("int", _const(f"{value:x}"), _const(16))
        return _const(value)
    # Handle -0. and 0. properly
    if math.copysign(1, value) == 1:
        return _const(value)
    return neg(_const(-value))


def name(
    id: str, ctx: ast.Load | ast.Store | ast.Del = ast.Load()
) -> ast.Name:
    "smart constructor for ast.Name"
    assert id.isidentifier(), id
    return ast.Name(id=id, ctx=ctx)


def dotted_path(
    path: str, ctx: ast.Load | ast.Store | ast.Del = ast.Load()
) -> ast.Name | ast.Attribute:
    """Takes a dotted path and compile it to a python expression"""
    root, *rest = path.split(".")
    res: ast.Name | ast.Attribute = name(root, ctx=ast.Load())
    for x in rest:
        assert x.isidentifier(), path
        res = ast.Attribute(value=res, attr=x, ctx=ast.Load())
    res.ctx = ctx
    return res


def call(
    func: str | ast.expr,
    *args: ast.expr,
    keywords: Iterable[tuple[str, ast.expr]] = (),
) -> ast.expr:
    """Smart constructor for ast.Call"""
    return ast.Call(
        func=dotted_path(func) if isinstance(func, str) else func,
        args=list(args),
        keywords=[ast.keyword(arg=k, value=v) for k, v in keywords],
    )


def list_(elts: Sequence[ast.expr]) -> ast.expr:
    return ast.List(elts=list(elts), ctx=ast.Load())


def tuple_(elts: Sequence[ast.expr]) -> ast.expr:
    return ast.Tuple(elts=list(elts), ctx=ast.Load())


def set_(elts: Sequence[ast.expr]) -> ast.expr:
    # ``{}`` is a dict: empty sets have to go through the constructor
    if not elts:
        return call("set")
    return ast.Set(elts=list(elts))


def dict_(items: Sequence[tuple[ast.expr, ast.expr]]) -> ast.expr:
    return ast.Dict(keys=[k for k, _ in items], values=[v for _, v in items])


def assign(
    target: str, value: ast.expr, annotation: ast.expr | None = None
) -> ast.stmt:
    """Bind *value* to the variable *target*.

    Generates an annotated assignment if an *annotation* is given.
    """
    if annotation is None:
        return ast.Assign(
            targets=[name(target, ctx=ast.Store())],
            value=value,
            type_comment=None,
        )
    return ast.AnnAssign(
        target=name(target, ctx=ast.Store()),
        annotation=annotation,
        value=value,
        simple=1,
    )


def import_(module: str) -> ast.stmt:
    return ast.Import(names=[ast.alias(name=module, asname=None)])


def function(fname: str, body: list[ast.stmt]) -> ast.stmt:
    """A function that takes no arguments"""
    assert fname.isidentifier(), fname
    return ast.FunctionDef(
        name=fname,
        args=ast.arguments(
            posonlyargs=[],
            args=[],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=body,
        decorator_list=[],
        returns=None,
        type_comment=None,
        type_params=[],
    )


def module(body: list[ast.stmt]) -> ast.Module:
    return ast.fix_missing_locations(ast.Module(body=body, type_ignores=[]))
