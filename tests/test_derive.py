from __future__ import annotations

import ast
import dataclasses

import pytest

import srcdump

from . import models, utils


@pytest.mark.parametrize(
    "value",
    (
        models.Point(1, "a"),
        models.Point([1, 2], {"k": models.Point(None, ())}),
        models.FrozenPoint("a", "a"),
        models.Counter("c"),
        models.Marker(),
        models.Pair(models.Color.RED, [models.Color.GREEN]),
        models.Shape.Circle(1.5),
        models.Shape.Rect(1.0, 2.0),
        models.Shape.Empty(),
        [models.Shape.Circle(1.0), models.Shape.Rect(1.0, 1.0)],
    ),
    ids=repr,
)
def test_roundtrip(value):
    utils.roundtrip(value)


def test_dataclass():
    assert srcdump.dump(models.FrozenPoint(1, "a")) == (
        "def build():\n"
        "    import tests.models\n"
        "    _0: str = 'a'\n"
        "    _1: tests.models.FrozenPoint = "
        "tests.models.FrozenPoint(x=1, y=_0)\n"
        "    return _1\n"
    )


def test_mutable_dataclass():
    v = models.Point([], [])
    res = utils.roundtrip([v, v])
    # Mutable values are copied
    assert res[0] is not res[1]


def test_init_false_fields():
    c = models.Counter("c")
    c.count = 5
    assert srcdump.dump(c) == (
        "def build():\n"
        "    import copy\n"
        "    import srcdump\n"
        "    import tests.models\n"
        "    _0: str = 'c'\n"
        "    _1: tests.models.Counter = srcdump.set_fields("
        "tests.models.Counter(name=_0), count=5)\n"
        "    return copy.deepcopy(_1)\n"
    )
    res = utils.roundtrip(c)
    assert res.count == 5

    # Also works on frozen dataclasses
    f = models.FrozenCounter("f")
    object.__setattr__(f, "count", [1])
    assert utils.roundtrip(f).count == [1]


def test_no_fields():
    assert srcdump.dump(models.Marker()) == (
        "def build():\n"
        "    import tests.models\n"
        "    _0: tests.models.Marker = tests.models.Marker()\n"
        "    return _0\n"
    )


def test_enum():
    assert srcdump.dump(models.Color.GREEN) == (
        "def build():\n"
        "    import tests.models\n"
        "    _0: tests.models.Color = tests.models.Color.GREEN\n"
        "    return _0\n"
    )
    assert utils.roundtrip(models.Color.RED) is models.Color.RED


def test_variants():
    assert srcdump.dump(models.Shape.Circle(2.0)) == (
        "def build():\n"
        "    import tests.models\n"
        "    _0: tests.models.Shape.Circle = "
        "tests.models.Shape.Circle(radius=2.0)\n"
        "    return _0\n"
    )
    [stmt, _] = utils.body(srcdump.dump(models.Shape.Rect(1.0, 2.0)))[1:]
    assert stmt.value is not None
    assert ast.unparse(stmt.value) == "tests.models.Shape.Rect(1.0, 2.0)"


def test_unsupported_class():
    with pytest.raises(TypeError, match="only dataclasses"):
        srcdump.derive(models.Unregistered)


def test_local_class():
    with pytest.raises(ValueError, match="defined inside of functions"):

        @srcdump.derive
        @dataclasses.dataclass
        class Local:
            x: int
