"""
``srcdump.derive``: Capabilities for declared classes
=====================================================

:func:`derive` looks at the declared shape of a class once (when the class is
decorated) and registers a capability that rebuilds its instances with the
builders from :mod:`srcdump.builder`.

Sum types are written as classes nested in an "owner" class; the nested class
is used as the variant of the owner::

    class Shape:
        @srcdump.derive
        @dataclasses.dataclass(frozen=True)
        class Circle:
            radius: float

        @srcdump.derive
        @dataclasses.dataclass(frozen=True)
        class Square:
            side: float
"""
from __future__ import annotations

import dataclasses
import enum
import functools
from typing import Any, Callable, Type, TypeVar

from . import base, utils
from .builder import NamedBuilder, PositionalBuilder, UnitBuilder
from .code import Code
from .emitter import Emitter

__all__ = ("derive",)

T = TypeVar("T")


def _path_resolver(cls: Type[Any]) -> Callable[[], tuple[str, str | None]]:
    if ".<locals>." in cls.__qualname__:
        raise ValueError(
            f"Cannot derive {cls.__qualname__!r}: classes defined inside of "
            "functions are not supported."
        )

    # The class is usually not bound to its name yet when it's decorated so we
    # wait until we need it to look it up.
    @functools.cache
    def resolve() -> tuple[str, str | None]:
        path = utils.get_locate_name(cls)
        if "." not in cls.__qualname__:
            return path, None
        owner, variant = path.rsplit(".", 1)
        return owner, variant

    return resolve


def _derive_dataclass(cls: Type[T]) -> base.Capability[T]:
    resolve = _path_resolver(cls)
    fields = tuple(f.name for f in dataclasses.fields(cls) if f.init)
    attributes = tuple(f.name for f in dataclasses.fields(cls) if not f.init)
    frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]

    def gen_code(value: T, emitter: Emitter, unique: bool) -> Code:
        owner, variant = resolve()
        builder = NamedBuilder(
            emitter,
            owner,
            variant,
            unique=unique,
            frozen=frozen,
            fields=fields,
        )
        for name in fields:
            builder.field(name, getattr(value, name))
        for name in attributes:
            if hasattr(value, name):
                builder.attribute(name, getattr(value, name))
        return builder.build()

    return gen_code


def _derive_namedtuple(cls: Type[T]) -> base.Capability[T]:
    resolve = _path_resolver(cls)
    arity = len(cls._fields)  # type: ignore[attr-defined]

    def gen_code(value: T, emitter: Emitter, unique: bool) -> Code:
        owner, variant = resolve()
        builder = PositionalBuilder(
            emitter, owner, variant, unique=unique, frozen=True, arity=arity
        )
        for elt in value:  # type: ignore[attr-defined]
            builder.field(elt)
        return builder.build()

    return gen_code


def _derive_enum(cls: Type[enum.Enum]) -> base.Capability[enum.Enum]:
    if ".<locals>." in cls.__qualname__:
        raise ValueError(
            f"Cannot derive {cls.__qualname__!r}: classes defined inside of "
            "functions are not supported."
        )

    def gen_code(value: enum.Enum, emitter: Emitter, unique: bool) -> Code:
        return UnitBuilder(emitter, cls, value.name, unique=unique).build()

    return gen_code


def derive(cls: Type[T]) -> Type[T]:
    """Register a capability for a dataclass, a NamedTuple or an Enum.

    + dataclasses are rebuilt by calling their constructor with all the fields
      that are passed to ``__init__`` as keyword arguments. Fields declared
      with ``init=False`` are set afterwards via :func:`srcdump.set_fields`.
    + NamedTuples are rebuilt by calling their constructor with positional
      arguments.
    + Enum members are referred to by name.

    Classes nested inside another class are treated as variants of that class.

    :func:`derive` has to be applied after :func:`dataclasses.dataclass`::

        @srcdump.derive
        @dataclasses.dataclass
        class Point:
            x: int
            y: int

    Raises:

      TypeError: if *cls* isn't one of the supported kinds of class.

      ValueError: if *cls* was defined inside of a function (generated code
        cannot refer to it).
    """
    capability: base.Capability[Any]
    if isinstance(cls, type) and issubclass(cls, enum.Enum):
        capability = _derive_enum(cls)
    elif dataclasses.is_dataclass(cls) and isinstance(cls, type):
        capability = _derive_dataclass(cls)
    elif (
        isinstance(cls, type)
        and issubclass(cls, tuple)
        and hasattr(cls, "_fields")
    ):
        capability = _derive_namedtuple(cls)
    else:
        raise TypeError(
            f"Cannot derive {getattr(cls, '__name__', cls)!r}: only "
            "dataclasses, NamedTuples and Enums are supported"
        )
    base.register(capability, type=cls)
    return cls
