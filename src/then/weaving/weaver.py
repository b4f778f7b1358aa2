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
"""Weaver — replaces annotated definitions with callback-firing wrappers."""

from __future__ import annotations

import functools
import importlib
import inspect
import sys
from collections.abc import Callable
from typing import Any

from then.kernel.exceptions import ThenUsageError
from then.logging.structlog_adapter import get_logger
from then.weaving.properties import get_properties
from then.weaving.registry import AnnotationRegistry
from then.weaving.types import AnnotationRecord, Definition, External, MethodKind

logger = get_logger("then.weaving")

Resolver = Callable[[tuple[Any, ...]], Callable[[Any], Any]]


# ---------------------------------------------------------------------------
# Scopes — where local callbacks are looked up
# ---------------------------------------------------------------------------


class ModuleScope:
    """Local callbacks are globals of the module, looked up per call."""

    def __init__(self, module_name: str) -> None:
        self.name = module_name

    def local_resolver(self, callback_name: str, kind: MethodKind) -> Resolver:
        module_name = self.name

        def resolve(_args: tuple[Any, ...]) -> Callable[[Any], Any]:
            namespace = vars(sys.modules[module_name])
            try:
                return namespace[callback_name]
            except KeyError:
                raise NameError(f"name {callback_name!r} is not defined in module {module_name!r}") from None

        return resolve


class ClassScope:
    """Local callbacks are attributes of the receiver, or of the class for static methods.

    ``owner`` is filled in once the class object exists.
    """

    def __init__(self, class_name: str) -> None:
        self.name = class_name
        self.owner: type | None = None

    def local_resolver(self, callback_name: str, kind: MethodKind) -> Resolver:
        if kind is MethodKind.STATIC:
            return lambda _args: getattr(self.owner, callback_name)
        return lambda args: getattr(args[0], callback_name)


Scope = ModuleScope | ClassScope


def resolver_for(record: AnnotationRecord, kind: MethodKind, scope: Scope) -> Resolver:
    """Build the callback lookup for *record*.

    External modules are imported now; the function itself is looked up
    when the wrapper fires.
    """
    ref = record.callback
    if isinstance(ref, External):
        module = importlib.import_module(ref.module)
        return lambda _args: getattr(module, ref.name)
    return scope.local_resolver(ref.name, kind)


# ---------------------------------------------------------------------------
# Wrappers
# ---------------------------------------------------------------------------


def build_wrapper(inner: Callable[..., Any], record: AnnotationRecord, resolve: Resolver) -> Callable[..., Any]:
    """Wrap *inner* so the callback of *record* fires with its result.

    The callback runs only after *inner* returns; its own return value is
    discarded and the wrapper returns *inner*'s result object.
    """
    if inspect.iscoroutinefunction(inner):
        wrapper = _build_async_wrapper(inner, record, resolve)
    else:
        wrapper = _build_sync_wrapper(inner, record, resolve)
    wrapper.__then_record__ = record  # type: ignore[attr-defined]
    return wrapper


def _trace(record: AnnotationRecord) -> None:
    if get_properties().trace_callbacks:
        logger.debug(
            "callback_invoked",
            function=f"{record.name}/{record.arity}",
            callback=record.callback.describe(),
        )


def _build_sync_wrapper(inner: Callable[..., Any], record: AnnotationRecord, resolve: Resolver) -> Any:
    @functools.wraps(inner)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        result = inner(*args, **kwargs)
        callback = resolve(args)
        _trace(record)
        callback(result)
        return result

    return wrapper


def _build_async_wrapper(inner: Callable[..., Any], record: AnnotationRecord, resolve: Resolver) -> Any:
    @functools.wraps(inner)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        result = await inner(*args, **kwargs)
        callback = resolve(args)
        _trace(record)
        outcome = callback(result)
        if inspect.isawaitable(outcome):
            await outcome
        return result

    return wrapper


def build_arity_dispatcher(name: str, implementations: dict[int, Callable[..., Any]]) -> Callable[..., Any]:
    """Expose several arities of *name* as one callable.

    Each call goes to the first implementation, in ascending arity, whose
    signature accepts the arguments.
    """
    candidates = [(impl, inspect.signature(impl)) for _, impl in sorted(implementations.items())]
    arities = tuple(sorted(implementations))
    first = candidates[0][0]

    def dispatcher(*args: Any, **kwargs: Any) -> Any:
        for impl, signature in candidates:
            try:
                signature.bind(*args, **kwargs)
            except TypeError:
                continue
            return impl(*args, **kwargs)
        arity_list = ", ".join(f"{name}/{a}" for a in arities)
        raise TypeError(f"{name}() has no definition accepting the given arguments (defined: {arity_list})")

    dispatcher.__name__ = name
    dispatcher.__qualname__ = getattr(first, "__qualname__", name)
    dispatcher.__module__ = getattr(first, "__module__", None)  # type: ignore[assignment]
    dispatcher.__doc__ = getattr(first, "__doc__", None)
    dispatcher.__then_arities__ = arities  # type: ignore[attr-defined]
    return dispatcher


# ---------------------------------------------------------------------------
# Unit weaving
# ---------------------------------------------------------------------------


def weave_name(
    name: str,
    by_arity: dict[int, Definition],
    registry: AnnotationRegistry,
    scope: Scope,
) -> Any:
    """Build the value bound to *name*: a wrapper, a dispatcher, or the plain definition."""
    kinds = {definition.kind for definition in by_arity.values()}
    if len(kinds) > 1:
        raise ThenUsageError(
            f"{scope.name}.{name} is defined as {', '.join(sorted(k.value for k in kinds))}; "
            "all arities of one name must be bound the same way",
            context={"unit": scope.name, "function": name},
        )
    kind = kinds.pop()

    implementations: dict[int, Callable[..., Any]] = {}
    for arity in sorted(by_arity):
        function = by_arity[arity].function
        record = registry.get(name, arity)
        if record is not None:
            function = build_wrapper(function, record, resolver_for(record, kind, scope))
        implementations[arity] = function

    if len(implementations) == 1:
        (function,) = implementations.values()
    else:
        function = build_arity_dispatcher(name, implementations)
    return Definition(kind, function).rewrap(function)


def weave_definitions(
    definitions: dict[str, dict[int, Definition]],
    registry: AnnotationRegistry,
    scope: Scope,
) -> dict[str, Any]:
    """Generate the replacement value for every name that needs one.

    Names with a single unannotated definition are left out of the result.
    Names defined with several arities get an arity dispatcher, with the
    annotated arities wrapped individually.

    Raises:
        ThenUsageError: if one name mixes plain, static and class methods, or
            an annotated name was later rebound to something that is not a
            function.
    """
    for record in registry:
        if record.arity not in definitions.get(record.name, {}):
            raise ThenUsageError(
                f"{scope.name}.{record.name}/{record.arity} carries @then but was rebound to a non-function",
                context={"unit": scope.name, "function": record.name, "arity": record.arity},
            )

    woven: dict[str, Any] = {}
    for name, by_arity in definitions.items():
        annotated = any((name, arity) in registry for arity in by_arity)
        if annotated or len(by_arity) > 1:
            woven[name] = weave_name(name, by_arity, registry, scope)

    logger.debug(
        "unit_woven",
        unit=scope.name,
        functions=[f"{record.name}/{record.arity}" for record in registry],
    )
    return woven
