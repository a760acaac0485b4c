"""
``srcdump.emitter``: The binding cache
======================================

The :class:`Emitter` holds all the state of one call to
:func:`~srcdump.dump`. It performs common sub-expression elimination over the
generated code: every expression offered to :meth:`Emitter.add_code` is
bound to a variable the first time we see its text and every later occurrence
of the same text is replaced by a reference to that variable.
"""
from __future__ import annotations

import ast
import dataclasses
import enum
import logging
from typing import Any, Final, Hashable

from . import ast_utils, base, utils
from .code import Code

__all__ = (
    "Binding",
    "Emitter",
    "Layout",
    "Sharing",
    "FUNCTION",
    "EXECUTABLE",
    "CONTENT",
    "IDENTITY",
)

logger = logging.getLogger(__name__)


class Layout(enum.Enum):
    """How :meth:`Emitter.finalize` lays out the generated code"""

    #: A function that takes no argument and returns the value.
    FUNCTION = enum.auto()

    #: Python code where the last statement is the value.
    EXECUTABLE = enum.auto()


class Sharing(enum.Enum):
    """How :class:`~srcdump.Shared` values are deduplicated"""

    #: Shared values that print to the same code are merged in one value.
    CONTENT = enum.auto()

    #: Every :class:`~srcdump.Shared` instance is rebuilt exactly once,
    #: distinct instances stay distinct. This also holds for shared values
    #: nested in the pointee of another shared value.
    IDENTITY = enum.auto()


FUNCTION: Final = Layout.FUNCTION
EXECUTABLE: Final = Layout.EXECUTABLE
CONTENT: Final = Sharing.CONTENT
IDENTITY: Final = Sharing.IDENTITY

# Types that cannot contain other values (and therefore cannot be recursive)
_LEAVES: Final = frozenset(
    {int, float, complex, bool, str, bytes, bytearray, type(None)}
)


@dataclasses.dataclass(slots=True, frozen=True)
class Binding:
    """A variable holding the value of one generated expression.

    Parameters:
      id(int): Bindings are numbered in the order in which they are created.
      code(Code): The expression bound to the variable.
    """

    id: int
    code: Code

    @property
    def name(self) -> str:
        return f"_{self.id}"

    def statement(self, emitter: Emitter) -> ast.stmt:
        annotation = (
            None
            if self.code.annotation is None
            else emitter.require(self.code.annotation)
        )
        return ast_utils.assign(self.name, self.code.node, annotation)


class Emitter:
    """The state of a serialisation.

    An emitter is created for every top level call and should not be reused
    across calls.

    Args:
      sharing: How to deduplicate :class:`~srcdump.Shared` values.
    """

    bindings: list[Binding]
    codes: dict[Hashable, Binding]
    imports: set[str]
    sharing: Sharing

    _handles: dict[int, Code]
    # ids of the containers we are currently visiting
    _visiting: set[int]
    # Values that are keyed by their id need to be kept alive to make sure
    # their address doesn't get reused.
    _transient: list[Any]

    def __init__(self, sharing: Sharing = Sharing.CONTENT) -> None:
        self.bindings = []
        self.codes = {}
        self.imports = set()
        self.sharing = sharing
        self._handles = {}
        self._visiting = set()
        self._transient = []

    def require(self, path: str) -> ast.expr:
        """Get an expression referring to the object at the dotted *path*.

        The module that needs to be imported to access the object is added to
        the imports of the generated code.
        """
        module = utils.get_import(path)
        if module is not None:
            self.imports.add(module)
        return ast_utils.dotted_path(path)

    def handle(self, binding: Binding) -> Code:
        """The expression used to read the value of *binding*.

        Values that are not frozen are deep copied on every read so that they
        do not end up being aliased in the rebuilt value.
        """
        res = self._handles.get(binding.id)
        if res is None:
            node: ast.expr = ast_utils.name(binding.name)
            if not binding.code.frozen:
                node = ast_utils.call(self.require("copy.deepcopy"), node)
            res = self._handles[binding.id] = Code.of(
                node,
                annotation=binding.code.annotation,
                frozen=binding.code.frozen,
            )
        return res

    def add_code(
        self, code: Code, *, unique: bool, key: Hashable | None = None
    ) -> Code:
        """Bind *code* to a variable unless it has to stay *unique*.

        Args:
          code: The expression
          unique: If set, *code* is returned as is and isn't recorded.
          key: The key used to detect duplicates. Defaults to the text of
            *code*.

        Returns:
          The expression to use in place of *code*.
        """
        if unique:
            return code
        if key is None:
            key = code.text
        binding = self.codes.get(key)
        if binding is None:
            binding = Binding(id=len(self.bindings), code=code)
            self.bindings.append(binding)
            self.codes[key] = binding
            logger.debug(
                "new binding %s: %s", binding.name, utils.cram(code.text, 60)
            )
        else:
            logger.debug(
                "reusing %s for %s", binding.name, utils.cram(code.text, 60)
            )
        return self.handle(binding)

    def add_value(self, value: Any, unique: bool) -> Code:
        """Generate the code for *value*"""
        ty = type(value)
        capability = base.get_capability(ty)
        if ty in _LEAVES:
            return capability(value, self, unique)
        addr = id(value)
        if addr in self._visiting:
            raise ValueError("Recursive value found")
        self._visiting.add(addr)
        try:
            return capability(value, self, unique)
        finally:
            self._visiting.remove(addr)

    def keep_alive(self, value: Any) -> None:
        self._transient.append(value)

    def _prelude(self) -> list[ast.stmt]:
        # The bindings have to be rendered first: they might require more
        # imports.
        decls = [binding.statement(self) for binding in self.bindings]
        imports = [ast_utils.import_(mod) for mod in sorted(self.imports)]
        return imports + decls

    def finalize(
        self,
        root: Code,
        *,
        name: str = "build",
        layout: Layout = Layout.FUNCTION,
    ) -> str:
        """Print all the bindings followed by *root*.

        Args:
          root: The expression for the value being dumped.
          name: The name of the generated function (for
            :data:`~srcdump.FUNCTION`)
          layout: One of :data:`~srcdump.FUNCTION` or
            :data:`~srcdump.EXECUTABLE`
        """
        body = self._prelude()
        if layout == Layout.FUNCTION:
            body.append(ast.Return(value=root.node))
            module = ast_utils.module([ast_utils.function(name, body)])
        else:
            assert layout == Layout.EXECUTABLE, layout
            body.append(ast.Expr(value=root.node))
            module = ast_utils.module(body)
        return ast.unparse(module) + "\n"
