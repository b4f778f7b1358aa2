"""Shared fixtures for weaving tests."""

from __future__ import annotations

import itertools
import sys
import textwrap
import types
from collections.abc import Callable, Iterator

import pytest

from then.weaving.properties import WeavingProperties, get_properties, set_properties

_counter = itertools.count()


@pytest.fixture
def load_module() -> Iterator[Callable[[str], types.ModuleType]]:
    """Execute source text as a fresh module registered in ``sys.modules``."""
    created: list[str] = []

    def _load(source: str, name: str | None = None) -> types.ModuleType:
        module_name = name or f"then_test_module_{next(_counter)}"
        module = types.ModuleType(module_name)
        sys.modules[module_name] = module
        created.append(module_name)
        code = compile(textwrap.dedent(source), f"<{module_name}>", "exec")
        exec(code, module.__dict__)
        return module

    yield _load

    for module_name in created:
        sys.modules.pop(module_name, None)


@pytest.fixture
def weaving_properties() -> Iterator[WeavingProperties]:
    """Install fresh weaving properties and restore the previous ones afterwards."""
    previous = get_properties()
    properties = WeavingProperties()
    set_properties(properties)
    yield properties
    set_properties(previous)
