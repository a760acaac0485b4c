from __future__ import annotations

import ast
from typing import Any

import srcdump


def run(source: str, name: str = "build") -> Any:
    """Execute code generated with the ``FUNCTION`` layout."""
    env: dict[str, Any] = {}
    exec(compile(source, filename="<srcdump>", mode="exec"), env)
    return env[name]()


def unedit(source: str) -> Any:
    """Execute code generated with the ``EXECUTABLE`` layout."""
    *prelude, last = ast.parse(source).body
    assert isinstance(last, ast.Expr)
    env: dict[str, Any] = {}
    before = compile(
        ast.Module(prelude, type_ignores=[]), filename="<srcdump>", mode="exec"
    )
    main = compile(
        ast.Expression(last.value), filename="<srcdump>", mode="eval"
    )
    exec(before, env)
    return eval(main, env)


def roundtrip(v: Any, **kwargs: Any) -> Any:
    """Dump *v* in both layouts and check we get equal values back."""
    res = run(srcdump.dump(v, **kwargs))
    assert res == v
    assert type(res) is type(v)
    assert unedit(srcdump.dump(v, layout=srcdump.EXECUTABLE, **kwargs)) == v
    return res


def body(source: str) -> list[ast.stmt]:
    """The statements of the generated function."""
    [fn] = ast.parse(source).body
    assert isinstance(fn, ast.FunctionDef)
    return fn.body


def binding_names(source: str) -> list[str]:
    res = []
    for stmt in body(source):
        match stmt:
            case ast.Assign(targets=[ast.Name(name)]) | ast.AnnAssign(
                target=ast.Name(name)
            ):
                res.append(name)
    return res


def check_ordering(source: str) -> None:
    """Every variable has to be defined before it's used."""
    defined: set[str] = set()
    for stmt in body(source):
        used = {
            node.id
            for node in ast.walk(stmt)
            if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Load)
        }
        used = {u for u in used if u.startswith("_")}
        assert used <= defined, ast.unparse(stmt)
        match stmt:
            case ast.Assign(targets=[ast.Name(name)]) | ast.AnnAssign(
                target=ast.Name(name)
            ):
                assert name not in defined
                defined.add(name)


Primitives = bool | bytes | str | int | float | complex | None


def _check_ast_eq(left, right, path):
    assert type(left) == type(right), f"At {path}"
    if isinstance(left, Primitives):
        assert left == right, f"At {path}"
    elif isinstance(left, list):
        assert len(left) == len(right), f"At {path}"
        for idx, (le, re) in enumerate(zip(left, right)):
            _check_ast_eq(le, re, [*path, idx])
    elif isinstance(left, ast.AST):
        for fld in left._fields:
            _check_ast_eq(
                getattr(left, fld, "<MISSING>"),
                getattr(right, fld, "<MISSING>"),
                [*path, fld],
            )
    else:
        raise TypeError(f"At: {path}, {type(left)}")


def assert_eq_ast(left, right):
    _check_ast_eq(left, right, [])
