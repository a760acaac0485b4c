"""
``srcdump.utils``: Naming objects from the generated code
=========================================================

The generated code refers to classes and functions via their dotted paths
(e.g.: ``tests.models.Point``). Paths go both ways: :func:`get_locate_name`
finds the path of an object and :func:`get_import` finds which module has to
be imported for a path to resolve.
"""
from __future__ import annotations

import inspect
import pydoc
import typing
from typing import Any

locate = pydoc.locate
cram = pydoc.cram


def _resolve(path: str) -> Any:
    obj = locate(path)
    if obj is None:
        raise ImportError(f"Failed to find object: {path!r}")
    return obj


def _path_of(v: Any) -> str:
    if inspect.ismodule(v):
        return typing.cast(str, v.__name__)
    qualname = getattr(v, "__qualname__", None)
    module = getattr(v, "__module__", None)
    if not isinstance(qualname, str) or not isinstance(module, str):
        raise TypeError(f"Type {type(v).__name__!r} not supported")
    if getattr(v, "__name__", None) == "<lambda>":
        raise TypeError("lambdas are not supported")
    if ".<locals>." in qualname:
        raise ValueError(
            "values defined inside of functions are not supported."
        )
    if module == "builtins":
        return qualname
    if module.startswith("srcdump."):
        # srcdump's runtime values are re-exported at the top level
        short = f"srcdump.{qualname}"
        if locate(short) is v:
            return short
    return f"{module}.{qualname}"


def get_locate_name(v: Any) -> str:
    """Get the dotted path the generated code can use to refer to *v*::

        >>> get_locate_name(dict)
        'dict'
        >>> get_locate_name(get_import)
        'srcdump.utils.get_import'

    Raises:
      TypeError: if *v* has no name (e.g. it's a lambda or an instance).
      ValueError: if *v* cannot be found again from its name.
    """
    path = _path_of(v)
    try:
        obj = _resolve(path)
    except ImportError:
        raise ValueError(
            f"{v!r} cannot be reloaded via its name: {path!r}"
        ) from None
    if obj is not v:
        raise ValueError(f"Can't use {v!r}: it's overridden by {obj!r}")
    return path


def get_import(path: str) -> str | None:
    """Find the module to import to be able to use the dotted *path*.

    Returns ``None`` for builtins::

        >>> get_import("srcdump.runtime.Shared")
        'srcdump.runtime'
        >>> get_import("srcdump.Shared")
        'srcdump'
        >>> get_import("float") is None
        True
    """
    prefix = path
    while True:
        obj = _resolve(prefix)
        if inspect.ismodule(obj):
            return prefix
        if "." not in prefix:
            return None
        module = getattr(obj, "__module__", None)
        if isinstance(module, str) and prefix.startswith(module + "."):
            return module
        prefix, _ = prefix.rsplit(".", 1)
