from __future__ import annotations

import logging

import pytest

from srcdump import ast_utils
from srcdump.code import Code
from srcdump.emitter import EXECUTABLE, Emitter

from . import models


def _str(s):
    return Code.of(ast_utils.constant(s), annotation="str")


def test_add_code():
    emitter = Emitter()
    first = emitter.add_code(_str("ab"), unique=False)
    second = emitter.add_code(_str("ab"), unique=False)
    assert first.text == second.text == "_0"
    assert [b.name for b in emitter.bindings] == ["_0"]
    assert list(emitter.codes) == ["'ab'"]
    other = emitter.add_code(_str("cd"), unique=False)
    assert other.text == "_1"
    assert [b.id for b in emitter.bindings] == [0, 1]


def test_add_code_unique():
    emitter = Emitter()
    code = _str("ab")
    assert emitter.add_code(code, unique=True) is code
    assert emitter.bindings == []
    assert emitter.codes == {}
    # Not visible to later lookups either
    assert emitter.add_code(_str("ab"), unique=False).text == "_0"


def test_mutable_handles():
    emitter = Emitter()
    code = Code.of(
        ast_utils.list_([ast_utils.constant(1)]),
        annotation="list",
        frozen=False,
    )
    handle = emitter.add_code(code, unique=False)
    assert handle.text == "copy.deepcopy(_0)"
    assert not handle.frozen
    assert emitter.imports == {"copy"}


def test_custom_key():
    emitter = Emitter()
    assert emitter.add_code(_str("ab"), unique=False, key=1).text == "_0"
    assert emitter.add_code(_str("ab"), unique=False, key=2).text == "_1"
    assert emitter.add_code(_str("ab"), unique=False, key=1).text == "_0"


def test_unique_bypass():
    emitter = Emitter()
    code = emitter.add_value({"k": ["v", ("t",)]}, True)
    assert code.text == "{'k': ['v', ('t',)]}"
    assert emitter.bindings == []
    assert emitter.codes == {}


def test_finalize():
    emitter = Emitter()
    root = emitter.add_value(["a", "a"], False)
    assert emitter.finalize(root, name="make") == (
        "def make():\n"
        "    import copy\n"
        "    _0: str = 'a'\n"
        "    _1: list = [_0, _0]\n"
        "    return copy.deepcopy(_1)\n"
    )
    assert emitter.finalize(root, layout=EXECUTABLE) == (
        "import copy\n"
        "_0: str = 'a'\n"
        "_1: list = [_0, _0]\n"
        "copy.deepcopy(_1)\n"
    )


def test_finalize_no_bindings():
    emitter = Emitter()
    root = emitter.add_value(42, False)
    assert emitter.finalize(root) == "def build():\n    return 42\n"
    assert emitter.finalize(root, layout=EXECUTABLE) == "42\n"


def test_annotations_are_imported():
    emitter = Emitter()
    root = emitter.add_value(models.FrozenPoint(1, 2), False)
    assert emitter.finalize(root) == (
        "def build():\n"
        "    import tests.models\n"
        "    _0: tests.models.FrozenPoint = "
        "tests.models.FrozenPoint(x=1, y=2)\n"
        "    return _0\n"
    )


def test_unsupported_type():
    with pytest.raises(TypeError, match="Unregistered cannot be dumped"):
        Emitter().add_value(models.Unregistered(), False)


def test_recursive_values():
    v: list = []
    v.append(v)
    with pytest.raises(ValueError, match="Recursive value found"):
        Emitter().add_value(v, False)

    d: dict = {}
    d["self"] = [d]
    with pytest.raises(ValueError, match="Recursive value found"):
        Emitter().add_value(d, False)


def test_repeated_values_are_not_recursive():
    x = [1]
    emitter = Emitter()
    emitter.add_value([x, x, (x,)], False)
    assert [b.code.text for b in emitter.bindings] == [
        "[1]",
        "(copy.deepcopy(_0),)",
        "[copy.deepcopy(_0), copy.deepcopy(_0), copy.deepcopy(_1)]",
    ]


def test_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="srcdump.emitter")
    Emitter().add_value(("ab", "ab"), False)
    assert caplog.messages == [
        "new binding _0: 'ab'",
        "reusing _0 for 'ab'",
        "new binding _1: (_0, _0)",
    ]
