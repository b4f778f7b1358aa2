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
"""Module-level weaving — ``use(__name__)`` opens a module, ``weave()`` closes it."""

from __future__ import annotations

import inspect
import sys
from collections.abc import Callable
from typing import Any

from then.kernel.exceptions import CallbackDefinitionError, ThenUsageError
from then.logging.structlog_adapter import get_logger
from then.weaving.registry import AnnotationRegistry
from then.weaving.types import CallbackRef, Definition, MethodKind, declared_arity, source_location
from then.weaving.weaver import ModuleScope, weave_definitions, weave_name

logger = get_logger("then.weaving")

_active: dict[str, ModuleWeaver] = {}


def active_weaver(module_name: str) -> ModuleWeaver | None:
    """Return the weaver collecting annotations for *module_name*, if any."""
    return _active.get(module_name)


def use(module_name: str) -> ModuleWeaver:
    """Start collecting ``@then`` annotations for a module.

    Call at the top of the module and call :meth:`ModuleWeaver.weave` after
    the last definition::

        from then import then, use

        hooks = use(__name__)

        @then("log_result")
        def add(a, b):
            return a + b

        def log_result(result):
            ...

        hooks.weave()

    Re-executing a module (``importlib.reload``) starts a fresh weaver.
    """
    weaver = ModuleWeaver(module_name)
    _active[module_name] = weaver
    return weaver


class ModuleWeaver:
    """Collects a module's annotated functions and installs their wrappers.

    Each ``@then`` installs its wrapper as the function is defined. Other
    definitions under an annotated name are tracked too: one bound before
    the annotated ``def`` is taken from the module globals right then, one
    bound after it is picked up by :meth:`weave`.
    """

    def __init__(self, module_name: str) -> None:
        self.module_name = module_name
        self.registry = AnnotationRegistry(module_name)
        self.woven = False
        self._definitions: dict[str, dict[int, Callable[..., Any]]] = {}
        self._installed: dict[str, Any] = {}
        self._latest: dict[str, int] = {}

    def collect(
        self,
        fn: Callable[..., Any],
        callback: CallbackRef,
        *,
        file: str | None = None,
        line: int | None = None,
    ) -> Any:
        """Record the annotation of module-level function *fn*.

        Returns:
            The value to bind to the function's name: its wrapper, or an
            arity dispatcher when the name already has other arities.
        """
        if self.woven:
            raise ThenUsageError(
                f"@then on {self.module_name}.{fn.__name__} after the module was woven",
                context={"module": self.module_name, "function": fn.__name__},
            )
        name = fn.__name__
        if fn is self._installed.get(name):
            # a second @then stacked on this name's installed wrapper or dispatcher
            fn = self._definitions[name][self._latest[name]]
            file, line = source_location(fn)
        else:
            self._track(name, vars(sys.modules[self.module_name]).get(name))
        arity = declared_arity(fn)
        try:
            self.registry.record(name, arity, callback, file=file, line=line)
        except CallbackDefinitionError as exc:
            logger.warning("definition_rejected", unit=self.module_name, code=exc.code, error=str(exc))
            raise

        by_arity = self._definitions.setdefault(name, {})
        by_arity[arity] = fn
        self._latest[name] = arity
        installed = weave_name(name, self._as_definitions(by_arity), self.registry, ModuleScope(self.module_name))
        self._installed[name] = installed
        return installed

    def _track(self, name: str, value: Any) -> None:
        if not inspect.isfunction(value) or value is self._installed.get(name):
            return
        if hasattr(value, "__then_record__") or hasattr(value, "__then_arities__"):
            # left over from an earlier execution of the module
            return
        by_arity = self._definitions.setdefault(name, {})
        if all(value is not fn for fn in by_arity.values()):
            by_arity[declared_arity(value)] = value

    @staticmethod
    def _as_definitions(by_arity: dict[int, Callable[..., Any]]) -> dict[int, Definition]:
        return {arity: Definition(MethodKind.FUNCTION, fn) for arity, fn in by_arity.items()}

    def weave(self) -> dict[str, Any]:
        """Rebuild the annotated names from their final module bindings.

        Needed only when an annotated name is redefined without ``@then``
        after its annotated definition: with a new arity the definition
        joins the arity dispatch, with the same arity it replaces the
        implementation and keeps the annotation.

        Returns:
            The values installed into the module, by name.
        """
        if self.woven:
            raise ThenUsageError(f"module {self.module_name} was already woven", context={"module": self.module_name})

        namespace = vars(sys.modules[self.module_name])
        for name in self._definitions:
            self._track(name, namespace.get(name))
        definitions = {name: self._as_definitions(by_arity) for name, by_arity in self._definitions.items()}

        try:
            woven = weave_definitions(definitions, self.registry, ModuleScope(self.module_name))
        except CallbackDefinitionError as exc:
            logger.warning("definition_rejected", unit=self.module_name, code=exc.code, error=str(exc))
            raise

        namespace.update(woven)
        self.woven = True
        if _active.get(self.module_name) is self:
            del _active[self.module_name]
        return woven
