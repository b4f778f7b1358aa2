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
"""The ``@then`` annotation."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from then.kernel.exceptions import DuplicateCallbackError, ThenUsageError
from then.weaving.module import active_weaver
from then.weaving.types import (
    CallbackRef,
    MethodKind,
    declared_arity,
    defined_in_class,
    source_location,
    unwrap_descriptor,
)
from then.weaving.validation import validate_callback

F = TypeVar("F")


class PendingCallback:
    """A class-body definition carrying a ``@then`` not yet collected.

    The namespace of a :class:`~then.weaving.namespace.Then` class consumes
    it before the class object exists; in any other class ``__set_name__``
    fires and the class statement fails. Under ``staticmethod``,
    ``classmethod`` or ``property`` ``__set_name__`` is not forwarded, so the
    error is raised by the first call instead.
    """

    __slots__ = ("target", "callback")

    def __init__(self, target: Any, callback: CallbackRef) -> None:
        self.target = target
        self.callback = callback

    def __set_name__(self, owner: type, name: str) -> None:
        raise ThenUsageError(
            f"@then on {owner.__qualname__}.{name} has no effect: "
            f"{owner.__qualname__} must derive from then.Then",
            context={"class": owner.__qualname__, "function": name},
        )

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        # reached when staticmethod, classmethod or property hid __set_name__
        _, fn = unwrap_descriptor(self.target)
        raise ThenUsageError(
            f"@then on {fn.__qualname__} has no effect: its class must derive from then.Then",
            context={"function": fn.__qualname__},
        )


def _pending_of(target: Any) -> PendingCallback | None:
    if isinstance(target, PendingCallback):
        return target
    _, inner = unwrap_descriptor(target)
    return inner if isinstance(inner, PendingCallback) else None


def then(callback: Any) -> Callable[[F], F]:
    """Call *callback* with the function's result after every successful call.

    *callback* is either the name of a function in the same class or module,
    or a ``(module, "name")`` pair for a function elsewhere::

        class Orders(Then):
            @then("audit")
            def place(self, order): ...

            def audit(self, placed): ...

    The value is validated as soon as the decorator meets its function.
    A module-level function is wrapped right away; a method is wrapped when
    the enclosing class statement completes.

    Raises:
        InvalidCallbackFormatError: *callback* has neither accepted shape.
        DuplicateCallbackError: the definition already carries a ``@then``.
        ThenUsageError: the target is not a function, or a module-level
            function is annotated without an active ``use(__name__)``.
    """

    def decorator(target: F) -> F:
        pending = _pending_of(target)
        kind, fn = unwrap_descriptor(pending.target if pending is not None else target)
        if not inspect.isfunction(fn):
            raise ThenUsageError(f"@then can only annotate functions, got {target!r}")

        file, line = source_location(fn)
        ref = validate_callback(callback, file=file, line=line)

        if pending is not None:
            raise DuplicateCallbackError(fn.__name__, declared_arity(fn, kind), file=file, line=line)

        if defined_in_class(fn):
            return PendingCallback(target, ref)  # type: ignore[return-value]

        if "<locals>" in fn.__qualname__ or kind is not MethodKind.FUNCTION:
            raise ThenUsageError(
                f"@then on {fn.__qualname__}: only module-level functions and methods can be annotated",
                context={"function": fn.__qualname__},
            )

        weaver = active_weaver(fn.__module__)
        if weaver is None:
            raise ThenUsageError(
                f"@then on {fn.__module__}.{fn.__name__} requires use(__name__) earlier in the module",
                context={"module": fn.__module__, "function": fn.__name__},
            )
        return weaver.collect(fn, ref, file=file, line=line)

    return decorator
