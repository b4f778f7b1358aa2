# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Weaving core types — callback references, annotation records, definitions."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MethodKind(str, Enum):
    """How a definition is bound when it lives in a class namespace."""

    FUNCTION = "function"
    STATIC = "staticmethod"
    CLASS = "classmethod"


@dataclass(frozen=True)
class Local:
    """Callback defined in the same unit (module global or class attribute)."""

    name: str

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class External:
    """Callback ``name`` defined in the module importable as ``module``."""

    module: str
    name: str

    def describe(self) -> str:
        return f"{self.module}.{self.name}"


CallbackRef = Local | External


@dataclass(frozen=True)
class AnnotationRecord:
    """A ``@then`` annotation attached to one ``(name, arity)`` pair.

    Attributes:
        name: Name the function is defined under.
        arity: Declared parameter count (receiver excluded for methods).
        callback: The validated callback reference.
        file: Source file of the annotated definition, when known.
        line: First line of the annotated definition, when known.
    """

    name: str
    arity: int
    callback: CallbackRef
    file: str | None = None
    line: int | None = None

    @property
    def key(self) -> tuple[str, int]:
        return (self.name, self.arity)


@dataclass(frozen=True)
class Definition:
    """A function as declared in a unit, unwrapped from its descriptor."""

    kind: MethodKind
    function: Callable[..., Any]

    def rewrap(self, function: Callable[..., Any]) -> Any:
        """Return *function* bound the same way as this definition."""
        if self.kind is MethodKind.STATIC:
            return staticmethod(function)
        if self.kind is MethodKind.CLASS:
            return classmethod(function)
        return function


def unwrap_descriptor(value: Any) -> tuple[MethodKind, Any]:
    """Split a class-body value into its method kind and underlying callable."""
    if isinstance(value, staticmethod):
        return MethodKind.STATIC, value.__func__
    if isinstance(value, classmethod):
        return MethodKind.CLASS, value.__func__
    return MethodKind.FUNCTION, value


def defined_in_class(fn: Callable[..., Any]) -> bool:
    """Whether *fn* was written directly inside a class body."""
    parts = getattr(fn, "__qualname__", "").split(".")
    return len(parts) > 1 and parts[-2] != "<locals>"


def declared_arity(fn: Callable[..., Any], kind: MethodKind = MethodKind.FUNCTION) -> int:
    """Count the non-variadic parameters of *fn*.

    Functions defined in a class body do not count their receiver, except
    static methods, which have none.
    """
    params = [
        p
        for p in inspect.signature(fn).parameters.values()
        if p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    arity = len(params)
    if kind is MethodKind.STATIC:
        return arity
    if kind is MethodKind.CLASS or defined_in_class(fn):
        return max(arity - 1, 0)
    return arity


def source_location(fn: Callable[..., Any]) -> tuple[str | None, int | None]:
    """Return ``(file, first_line)`` of *fn*'s code, following ``__wrapped__``."""
    code = getattr(inspect.unwrap(fn), "__code__", None)
    if code is None:
        return None, None
    return code.co_filename, code.co_firstlineno
