"""
``srcdump.builder``: Constructor calls for composite values
===========================================================

Builders assemble the call to the constructor of a class field by field. They
are meant to be used from the capabilities registered via
:func:`srcdump.register` (:func:`srcdump.derive` uses them under the hood)::

    @srcdump.register
    def _gen_point(p: Point, emitter: Emitter, unique: bool) -> Code:
        return (
            NamedBuilder(emitter, Point, unique=unique, fields=("x", "y"))
            .field("x", p.x)
            .field("y", p.y)
            .build()
        )

Fields have to be added in the order in which they are declared: this keeps
the generated code deterministic.
"""
from __future__ import annotations

import ast
from typing import Any, Sequence

from . import ast_utils, utils
from .code import Code
from .emitter import Emitter

__all__ = ("StructBuilder", "NamedBuilder", "PositionalBuilder", "UnitBuilder")


class StructBuilder:
    """Common base of all the builders.

    Args:
      emitter: The emitter of the current call.
      type: The class to build (or its dotted path).
      variant: The name of the variant. The constructor used is
        ``type.variant``.
      unique: The sharing mode of the value being built, it is passed down
        unchanged to all the fields.
      frozen: Whether instances of *type* are immutable.
    """

    emitter: Emitter
    path: str
    variant: str | None
    unique: bool
    frozen: bool

    _built: bool

    def __init__(
        self,
        emitter: Emitter,
        type: Any,
        variant: str | None = None,
        *,
        unique: bool,
        frozen: bool = False,
    ) -> None:
        self.emitter = emitter
        if not isinstance(type, str):
            type = utils.get_locate_name(type)
        self.path = type
        self.variant = variant
        self.unique = unique
        self.frozen = frozen
        self._built = False

    @property
    def constructor(self) -> str:
        if self.variant is None:
            return self.path
        return f"{self.path}.{self.variant}"

    def _constructor_expr(self) -> ast.expr:
        res = self.emitter.require(self.path)
        if self.variant is not None:
            res = ast.Attribute(value=res, attr=self.variant, ctx=ast.Load())
        return res

    def _start_build(self) -> None:
        if self._built:
            raise ValueError(f"{self.constructor}: value was already built")
        self._built = True


class NamedBuilder(StructBuilder):
    """Build a call with keyword arguments: ``Type(x=..., y=...)``

    Args:
      fields: The names of the fields in declaration order. If given,
        :meth:`field` checks it is called with exactly those names in that
        order.
    """

    fields: Sequence[str] | None
    _values: list[tuple[str, Code]]
    _attributes: list[tuple[str, Code]]

    def __init__(
        self,
        emitter: Emitter,
        type: Any,
        variant: str | None = None,
        *,
        unique: bool,
        frozen: bool = False,
        fields: Sequence[str] | None = None,
    ) -> None:
        super().__init__(emitter, type, variant, unique=unique, frozen=frozen)
        self.fields = fields
        self._values = []
        self._attributes = []

    def field(self, name: str, value: Any) -> NamedBuilder:
        if self.fields is not None:
            idx = len(self._values)
            if idx >= len(self.fields):
                raise ValueError(
                    f"{self.constructor}: unexpected field {name!r}"
                )
            if self.fields[idx] != name:
                raise ValueError(
                    f"{self.constructor}: expected field "
                    f"{self.fields[idx]!r}, got {name!r}"
                )
        self._values.append((name, self.emitter.add_value(value, self.unique)))
        return self

    def attribute(self, name: str, value: Any) -> NamedBuilder:
        """Set an attribute that isn't an argument of the constructor.

        The value is built as ``srcdump.set_fields(Type(...), name=value)``.
        """
        self._attributes.append(
            (name, self.emitter.add_value(value, self.unique))
        )
        return self

    def build(self) -> Code:
        self._start_build()
        if self.fields is not None and len(self._values) < len(self.fields):
            missing = ", ".join(map(repr, self.fields[len(self._values) :]))
            raise ValueError(f"{self.constructor}: missing fields: {missing}")
        node = ast_utils.call(
            self._constructor_expr(),
            keywords=[(k, v.node) for k, v in self._values],
        )
        if self._attributes:
            node = ast_utils.call(
                self.emitter.require("srcdump.set_fields"),
                node,
                keywords=[(k, v.node) for k, v in self._attributes],
            )
        return self.emitter.add_code(
            Code.of(
                node,
                annotation=self.constructor,
                frozen=self.frozen
                and all(v.frozen for _, v in self._values + self._attributes),
            ),
            unique=self.unique,
        )


class PositionalBuilder(StructBuilder):
    """Build a call with positional arguments: ``Type(..., ...)``

    Args:
      arity: The number of fields. If given, :meth:`build` checks that exactly
        this many fields were added.
    """

    arity: int | None
    _values: list[Code]

    def __init__(
        self,
        emitter: Emitter,
        type: Any,
        variant: str | None = None,
        *,
        unique: bool,
        frozen: bool = False,
        arity: int | None = None,
    ) -> None:
        super().__init__(emitter, type, variant, unique=unique, frozen=frozen)
        self.arity = arity
        self._values = []

    def field(self, value: Any) -> PositionalBuilder:
        if self.arity is not None and len(self._values) >= self.arity:
            raise ValueError(
                f"{self.constructor}: takes {self.arity} fields, got more"
            )
        self._values.append(self.emitter.add_value(value, self.unique))
        return self

    def build(self) -> Code:
        self._start_build()
        if self.arity is not None and len(self._values) != self.arity:
            raise ValueError(
                f"{self.constructor}: takes {self.arity} fields, got "
                f"{len(self._values)}"
            )
        return self.emitter.add_code(
            Code.of(
                ast_utils.call(
                    self._constructor_expr(), *(v.node for v in self._values)
                ),
                annotation=self.constructor,
                frozen=self.frozen and all(v.frozen for v in self._values),
            ),
            unique=self.unique,
        )


class UnitBuilder(StructBuilder):
    """Refer to a named singleton (e.g.: an enum member).

    The generated expression is the bare dotted path ``type[.variant]``. Like
    the other builders it goes through the cache under the inherited flag::

        UnitBuilder(emitter, Color, "RED", unique=unique).build()

    Classes with no fields should use a :class:`NamedBuilder` with no fields
    instead: they need to be called to create an instance.
    """

    def __init__(
        self,
        emitter: Emitter,
        type: Any,
        variant: str | None = None,
        *,
        unique: bool = False,
    ) -> None:
        super().__init__(emitter, type, variant, unique=unique, frozen=True)

    def build(self) -> Code:
        self._start_build()
        return self.emitter.add_code(
            Code.of(self._constructor_expr(), annotation=self.path),
            unique=self.unique,
        )
