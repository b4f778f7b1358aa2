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
"""Unified exception hierarchy for then.

All library exceptions inherit from ThenException, so callers can catch one
base type or target a specific failure.

Categories:
- CallbackDefinitionError: the annotated class or module cannot be built
  (malformed annotation, duplicate annotation, misuse of the API)

Callbacks that cannot be resolved are not part of this hierarchy: they fail
with Python's own NameError, AttributeError or ModuleNotFoundError at the
point the generated call is reached.
"""

from __future__ import annotations

from typing import Any

ACCEPTED_CALLBACK_FORMS = "'function_name' or (module, 'function_name')"


def _located(message: str, file: str | None, line: int | None) -> str:
    if file is None:
        return message
    if line is None:
        return f"{file}: {message}"
    return f"{file}:{line}: {message}"


# =============================================================================
# Base Exception
# =============================================================================


class ThenException(Exception):
    """Base exception for all then errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "THEN_DUPLICATE_CALLBACK").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Definition-time Exceptions
# =============================================================================


class CallbackDefinitionError(ThenException):
    """An annotated unit (class or module) could not be built."""


class InvalidCallbackFormatError(CallbackDefinitionError):
    """The ``@then`` value is neither a local name nor a (module, name) pair."""

    def __init__(self, value: Any, *, file: str | None = None, line: int | None = None) -> None:
        message = f"Invalid @then format. Expected {ACCEPTED_CALLBACK_FORMS}, got: {value!r}"
        super().__init__(
            _located(message, file, line),
            code="THEN_INVALID_FORMAT",
            context={"value": value, "file": file, "line": line},
        )
        self.value = value


class DuplicateCallbackError(CallbackDefinitionError):
    """A second ``@then`` was attached to a function/arity that already has one."""

    def __init__(
        self,
        function_name: str,
        arity: int,
        *,
        file: str | None = None,
        line: int | None = None,
    ) -> None:
        message = (
            f"Multiple @then attributes for function {function_name}/{arity}. "
            "Only one @then per function is allowed."
        )
        super().__init__(
            _located(message, file, line),
            code="THEN_DUPLICATE_CALLBACK",
            context={"function": function_name, "arity": arity, "file": file, "line": line},
        )
        self.function_name = function_name
        self.arity = arity


class ThenUsageError(CallbackDefinitionError):
    """The annotation API was used somewhere it cannot take effect."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="THEN_USAGE", context=context)
