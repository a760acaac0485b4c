"""
``srcdump.base``: Capability registry
=====================================

Each type we know how to dump has a *capability*: a function that takes a value
of that type, the :class:`~srcdump.emitter.Emitter` of the current call and the
sharing mode, and returns the :class:`~srcdump.code.Code` that rebuilds that
value.

Out of the box only a small set of types are supported (see
:mod:`srcdump.codegens`); we don't rely on inheritance or the runtime structure
of values to handle anything else. Support for new types can be added via
:func:`register` or :func:`srcdump.derive`.
"""
from __future__ import annotations

import inspect
import typing
import weakref
from typing import TYPE_CHECKING, Any, Callable, Type, TypeAlias, TypeVar

if TYPE_CHECKING:  # pragma: no cover
    from .code import Code
    from .emitter import Emitter

T = TypeVar("T")

Capability: TypeAlias = Callable[[T, "Emitter", bool], "Code"]

DISPATCH_TABLE = weakref.WeakKeyDictionary[Type[Any], Capability[Any]]()


def _infer_capability_type(f: Capability[T]) -> Type[T]:
    values = list(inspect.signature(f, eval_str=True).parameters.values())
    if len(values) != 3:
        raise ValueError(
            "The registered function should take three arguments: "
            "(value, emitter, unique)"
        )
    arg = values[0]
    ty: Type[T] | None = arg.annotation
    if ty is inspect.Parameter.empty:
        raise ValueError(
            f"Cannot infer the type to register {f.__qualname__} for: the "
            "first argument has no annotation"
        )
    origin = typing.get_origin(ty)
    if origin is not None:
        ty = origin
    assert ty is not None
    return ty


@typing.overload
def register(function: Capability[T], /) -> Capability[T]:  # pragma: no cover
    ...


@typing.overload
def register(
    *, type: Type[T] | None = None
) -> Callable[[Capability[T]], Capability[T]]:  # pragma: no cover
    ...


def register(
    function: Capability[T] | None = None,
    /,
    *,
    type: Type[T] | None = None,
) -> Capability[T] | Callable[[Capability[T]], Capability[T]]:
    """Register the function used to generate code for a given type.

    *function* is called with the value to dump, the current
    :class:`~srcdump.emitter.Emitter` and the sharing mode (*unique*). It is
    expected to return the :class:`~srcdump.code.Code` rebuilding the value,
    usually via one of the builders in :mod:`srcdump.builder`.

    If *type* is not specified, :func:`register` uses the type annotation on
    the first argument to deduce which type register *function* for.

    If :func:`register` is used as a simple decorator (with no arguments) it
    acts as though the default values for all of it parameters.

    Here are two equivalent ways to add support for a class ``Point``::

        @register
        def _gen_point(p: Point, emitter: Emitter, unique: bool) -> Code:
            return (
                PositionalBuilder(emitter, Point, unique=unique)
                .field(p.x)
                .field(p.y)
                .build()
            )

        @register(type=Point)
        def _gen_point(p, emitter, unique):
            ...

    Args:

      function: The capability we are registering

      type: The type we are registering the function for
    """

    def wrapper(function: Capability[T]) -> Capability[T]:
        cls = _infer_capability_type(function) if type is None else type
        DISPATCH_TABLE[cls] = function
        return function

    if function is None:
        return wrapper
    return wrapper(function)


def get_capability(ty: Type[T]) -> Capability[T]:
    """Get the capability for a given type."""
    capability = DISPATCH_TABLE.get(ty)
    if capability is None:
        raise TypeError(
            f"Object of type {ty.__name__} cannot be dumped by srcdump"
        )
    return capability
