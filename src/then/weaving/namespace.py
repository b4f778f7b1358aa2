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
"""Class-level weaving — ``Then`` classes collect and wrap their own methods."""

from __future__ import annotations

import inspect
from typing import Any

from then.kernel.exceptions import CallbackDefinitionError
from then.logging.structlog_adapter import get_logger
from then.weaving.decorators import PendingCallback
from then.weaving.registry import AnnotationRegistry
from then.weaving.types import Definition, MethodKind, declared_arity, source_location, unwrap_descriptor
from then.weaving.weaver import ClassScope, weave_definitions

logger = get_logger("then.weaving")


class DefinitionNamespace(dict):
    """Class-body namespace that observes every definition as it is declared.

    Functions are tracked per name and arity so that one name may carry
    several arities. A ``@then`` pending on a definition becomes a record in
    :attr:`registry`.
    """

    def __init__(self, unit: str) -> None:
        super().__init__()
        self.unit = unit
        self.registry = AnnotationRegistry(unit)
        self.definitions: dict[str, dict[int, Definition]] = {}

    def __setitem__(self, key: str, value: Any) -> None:
        kind, target = unwrap_descriptor(value)
        callback = None
        if isinstance(target, PendingCallback):
            callback = target.callback
            inner_kind, target = unwrap_descriptor(target.target)
            if inner_kind is not MethodKind.FUNCTION:
                kind = inner_kind

        if not inspect.isfunction(target):
            self.definitions.pop(key, None)
            super().__setitem__(key, value)
            return

        arity = declared_arity(target, kind)
        if callback is not None:
            file, line = source_location(target)
            try:
                self.registry.record(key, arity, callback, file=file, line=line)
            except CallbackDefinitionError as exc:
                logger.warning("definition_rejected", unit=self.unit, code=exc.code, error=str(exc))
                raise

        definition = Definition(kind, target)
        self.definitions.setdefault(key, {})[arity] = definition
        super().__setitem__(key, definition.rewrap(target))

    def __delitem__(self, key: str) -> None:
        self.definitions.pop(key, None)
        super().__delitem__(key)


class ThenMeta(type):
    """Metaclass weaving ``@then`` annotations when the class statement completes."""

    @classmethod
    def __prepare__(mcs, name: str, bases: tuple[type, ...], /, **kwargs: Any) -> DefinitionNamespace:  # type: ignore[override]
        return DefinitionNamespace(name)

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any], /, **kwargs: Any) -> ThenMeta:
        attrs = dict(namespace)
        scope = ClassScope(attrs.get("__qualname__", name))
        records: tuple = ()

        if isinstance(namespace, DefinitionNamespace):
            try:
                attrs.update(weave_definitions(namespace.definitions, namespace.registry, scope))
            except CallbackDefinitionError as exc:
                logger.warning("definition_rejected", unit=scope.name, code=exc.code, error=str(exc))
                raise
            records = tuple(namespace.registry)

        cls = super().__new__(mcs, name, bases, attrs, **kwargs)
        scope.owner = cls
        cls.__then_records__ = records  # type: ignore[attr-defined]
        return cls


class Then(metaclass=ThenMeta):
    """Base class enabling ``@then`` on the methods of its subclasses.

    Local callbacks are looked up as attributes: on the instance for regular
    methods, on the class for class and static methods::

        class Orders(Then):
            @then("log_total")
            def total(self, items):
                return sum(items)

            def log_total(self, total):
                log.info("total", value=total)

    Each class is its own unit: an override in a subclass is not wrapped
    unless it carries its own ``@then``.
    """
