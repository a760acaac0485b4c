"""
``srcdump.dump``: Entry point
=============================
"""
from __future__ import annotations

import logging
from typing import Any

from .emitter import Emitter, Layout, Sharing

__all__ = ("dump",)

logger = logging.getLogger(__name__)


def dump(
    value: Any,
    *,
    name: str = "build",
    layout: Layout = Layout.FUNCTION,
    sharing: Sharing = Sharing.CONTENT,
) -> str:
    """Generate the python code that rebuilds *value*.

    Sub-values that print to the same code are only built once::

      >>> print(dump(("ab", ("ab",))))
      def build():
          _0: str = 'ab'
          _1 = (_0,)
          _2 = (_0, _1)
          return _2
      <BLANKLINE>

    The code can also be laid out as a script where the last statement is the
    value (:data:`~srcdump.EXECUTABLE`)::

      >>> from srcdump import EXECUTABLE, Shared
      >>> print(dump(Shared(1.5), layout=EXECUTABLE))
      import srcdump
      _0: srcdump.Shared = srcdump.Shared(1.5)
      _0
      <BLANKLINE>

    Args:
      value: The value to dump
      name: The name of the generated function (for :data:`~srcdump.FUNCTION`)
      layout: One of :data:`~srcdump.FUNCTION` or :data:`~srcdump.EXECUTABLE`
      sharing: One of :data:`~srcdump.CONTENT` or :data:`~srcdump.IDENTITY`

    Raises:
      TypeError: if *value* contains a value of a type that isn't supported.
      ValueError: if *value* is recursive.
    """
    emitter = Emitter(sharing=sharing)
    root = emitter.add_value(value, False)
    logger.debug("dumped %s with %d bindings", name, len(emitter.bindings))
    return emitter.finalize(root, name=name, layout=layout)
