"""
``srcdump.runtime``: Support values for the generated code
==========================================================

The code generated by :func:`srcdump.dump` only depends on python's builtins,
:mod:`copy` and the values defined in this module.
"""
from __future__ import annotations

import struct
import typing
from typing import Any, ClassVar, Generic, TypeVar

T = TypeVar("T")

__all__ = (
    "Shared",
    "I8",
    "I16",
    "I32",
    "I64",
    "U8",
    "U16",
    "U32",
    "U64",
    "F32",
    "F64",
    "set_fields",
    "unsupported",
)


class Shared(Generic[T]):
    """A value that is meant to be shared between several owners.

    Deep copies of a :class:`Shared` return the wrapper itself: copying a
    container that holds a :class:`Shared` copies the container but all the
    copies point to the same :class:`Shared`::

        >>> import copy
        >>> s = Shared([1, 2])
        >>> v = [s, s]
        >>> v2 = copy.deepcopy(v)
        >>> v2[0] is v2[1] is s
        True

    Two :class:`Shared` are equal if the values they wrap are equal.

    Args:
      value: The wrapped value
    """

    __slots__ = ("value",)

    value: T

    def __init__(self, value: T) -> None:
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shared):
            return NotImplemented
        return bool(self.value == other.value)

    def __hash__(self) -> int:
        return hash(self.value)

    def __copy__(self) -> Shared[T]:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Shared[T]:
        return self

    def __repr__(self) -> str:
        return f"Shared({self.value!r})"


class _FixedInt(int):
    """An integer that has to fit in a given number of bits."""

    bits: ClassVar[int]
    signed: ClassVar[bool]

    def __new__(cls, value: int = 0) -> _FixedInt:
        if cls.signed:
            low, high = -(1 << (cls.bits - 1)), (1 << (cls.bits - 1)) - 1
        else:
            low, high = 0, (1 << cls.bits) - 1
        value = int(value)
        if not low <= value <= high:
            raise OverflowError(
                f"{value} does not fit in a {cls.__name__} "
                f"(range: [{low}, {high}])"
            )
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"


class I8(_FixedInt):
    bits = 8
    signed = True


class I16(_FixedInt):
    bits = 16
    signed = True


class I32(_FixedInt):
    """32 bits signed integer

    >>> I32(42)
    I32(42)
    >>> I32(2**31)
    Traceback (most recent call last):
      ...
    OverflowError: 2147483648 does not fit in a I32 (range: [-2147483648, \
2147483647])
    """

    bits = 32
    signed = True


class I64(_FixedInt):
    bits = 64
    signed = True


class U8(_FixedInt):
    bits = 8
    signed = False


class U16(_FixedInt):
    bits = 16
    signed = False


class U32(_FixedInt):
    bits = 32
    signed = False


class U64(_FixedInt):
    bits = 64
    signed = False


class F32(float):
    """Single precision float.

    The value is rounded to the closest single precision float on creation:

    >>> F32(0.1)
    F32(0.10000000149011612)
    """

    def __new__(cls, value: float = 0.0) -> F32:
        [rounded] = struct.unpack("f", struct.pack("f", float(value)))
        return super().__new__(cls, rounded)

    def __repr__(self) -> str:
        return f"F32({float(self)!r})"


class F64(float):
    def __repr__(self) -> str:
        return f"F64({float(self)!r})"


def unsupported(message: str) -> typing.NoReturn:
    """Called by generated code in place of a value that couldn't be dumped.

    >>> unsupported("paths are not supported")
    Traceback (most recent call last):
      ...
    NotImplementedError: paths are not supported
    """
    raise NotImplementedError(message)


def set_fields(obj: T, /, **fields: Any) -> T:
    """Set attributes that cannot be passed to the constructor of *obj*.

    This also works on frozen dataclasses:

    >>> import dataclasses
    >>> @dataclasses.dataclass(frozen=True)
    ... class C:
    ...     x: int = dataclasses.field(default=0, init=False)
    >>> set_fields(C(), x=5)
    C(x=5)
    """
    for name, value in fields.items():
        object.__setattr__(obj, name, value)
    return obj
