"""Compile python values to the python code that rebuilds them"""
from __future__ import annotations

from importlib import metadata

from . import codegens  # noqa: F401  (registers the builtin capabilities)
from .base import register
from .builder import NamedBuilder, PositionalBuilder, UnitBuilder
from .code import Code
from .derive import derive
from .dump import dump
from .emitter import (
    CONTENT,
    EXECUTABLE,
    FUNCTION,
    IDENTITY,
    Emitter,
    Layout,
    Sharing,
)
from .runtime import (
    F32,
    F64,
    I8,
    I16,
    I32,
    I64,
    U8,
    U16,
    U32,
    U64,
    Shared,
    set_fields,
    unsupported,
)

# https://packaging.python.org/en/latest/guides/single-sourcing-package-version/
__version__ = metadata.version(__name__)

__all__ = (
    "Code",
    "Emitter",
    "Layout",
    "Sharing",
    "NamedBuilder",
    "PositionalBuilder",
    "UnitBuilder",
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
    "derive",
    "dump",
    "register",
    "set_fields",
    "unsupported",
    "FUNCTION",
    "EXECUTABLE",
    "CONTENT",
    "IDENTITY",
)
