"""
``srcdump.code``: Generated expressions
=======================================
"""
from __future__ import annotations

import ast
import dataclasses

__all__ = ("Code",)


@dataclasses.dataclass(slots=True, frozen=True, repr=False, eq=False)
class Code:
    """One generated python expression.

    Two :class:`Code` with the same :attr:`text` are considered to build the
    same value, this is what the :class:`~srcdump.emitter.Emitter` relies on to
    deduplicate expressions.

    Parameters:

      node(ast.expr): The expression

      text(str): The expression printed via :func:`ast.unparse`

      annotation(str | None): Dotted path to the type of the value, used to
        annotate the variable if this expression gets bound.

      frozen(bool): Whether the value built by this expression is deeply
        immutable (and can therefore be referenced from several places without
        being copied).
    """

    node: ast.expr
    text: str
    annotation: str | None = None
    frozen: bool = True

    @classmethod
    def of(
        cls,
        node: ast.expr,
        annotation: str | None = None,
        frozen: bool = True,
    ) -> Code:
        """
        >>> from srcdump import ast_utils
        >>> Code.of(ast_utils.constant(-1))
        Code(text='-1', annotation=None, frozen=True)
        """
        return cls(
            node=node,
            text=ast.unparse(node),
            annotation=annotation,
            frozen=frozen,
        )

    def __repr__(self) -> str:
        return (
            f"Code(text={self.text!r}, annotation={self.annotation!r}, "
            f"frozen={self.frozen!r})"
        )
