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
"""Validation of ``@then`` values into callback references."""

from __future__ import annotations

import keyword
import types
from typing import Any

from then.kernel.exceptions import InvalidCallbackFormatError
from then.weaving.types import CallbackRef, External, Local


def is_identifier(value: Any) -> bool:
    """Whether *value* is a string usable as a Python name."""
    return isinstance(value, str) and value.isidentifier() and not keyword.iskeyword(value)


def _module_name(value: Any) -> str | None:
    if isinstance(value, types.ModuleType):
        return value.__name__
    if isinstance(value, str) and all(is_identifier(part) for part in value.split(".")):
        return value
    return None


def validate_callback(value: Any, *, file: str | None = None, line: int | None = None) -> CallbackRef:
    """Turn a raw ``@then`` value into a :data:`CallbackRef`.

    Accepted shapes:

    * ``"name"`` — a function in the same unit, giving :class:`Local`.
    * ``(module, "name")`` — *module* is a module object or a dotted import
      path, giving :class:`External`.

    Whether the named function exists is not checked here.

    Raises:
        InvalidCallbackFormatError: for any other value.
    """
    if is_identifier(value):
        return Local(value)

    if isinstance(value, tuple) and len(value) == 2:
        module, name = value
        module_name = _module_name(module)
        if module_name is not None and is_identifier(name):
            return External(module_name, name)

    raise InvalidCallbackFormatError(value, file=file, line=line)
