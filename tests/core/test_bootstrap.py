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
"""Tests for configure() — logging setup and weaving properties."""

from __future__ import annotations

from typing import Any

import pytest

from then import Config, Then, configure, then
from then.weaving import weaver as weaver_module
from then.weaving.properties import WeavingProperties, get_properties, set_properties


class RecordingLogger:
    def __init__(self, name: str, events: list) -> None:
        self.name = name
        self.events = events

    def debug(self, event: str, **kwargs: Any) -> None:
        self.events.append((self.name, event, kwargs))


class FakeLogging:
    def __init__(self) -> None:
        self.configured_with: Config | None = None
        self.events: list[tuple[str, str, dict]] = []

    def configure(self, config: Config) -> None:
        self.configured_with = config

    def get_logger(self, name: str) -> Any:
        return RecordingLogger(name, self.events)

    def set_level(self, name: str, level: str) -> None:
        pass


@pytest.fixture(autouse=True)
def _restore_properties():
    previous = get_properties()
    yield
    set_properties(previous)


class TestConfigure:
    def test_defaults(self) -> None:
        adapter = FakeLogging()
        properties = configure(logging_adapter=adapter)

        assert properties == WeavingProperties()
        assert get_properties() is properties
        assert adapter.configured_with is not None

    def test_binds_weaving_section(self) -> None:
        config = Config({"then": {"weaving": {"trace-callbacks": True}}})

        properties = configure(config, logging_adapter=FakeLogging())

        assert properties.trace_callbacks is True

    def test_reports_through_adapter_logger(self) -> None:
        adapter = FakeLogging()

        configure(Config({"then": {"weaving": {"trace_callbacks": True}}}), logging_adapter=adapter)

        assert adapter.events == [("then.core", "configured", {"sources": [], "trace_callbacks": True})]

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("THEN_WEAVING_TRACE_CALLBACKS", "true")

        properties = configure(Config({}), logging_adapter=FakeLogging())

        assert properties.trace_callbacks is True

    def test_configured_tracing_reaches_wrappers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        events: list[tuple[str, dict]] = []

        class Recorder:
            def debug(self, event: str, **kwargs: Any) -> None:
                events.append((event, kwargs))

        monkeypatch.setattr(weaver_module, "logger", Recorder())
        configure(Config({"then": {"weaving": {"trace_callbacks": True}}}), logging_adapter=FakeLogging())

        class Audited(Then):
            @then("audit")
            def place(self, order):
                return order

            def audit(self, result):
                pass

        Audited().place("o-1")

        assert ("callback_invoked", {"function": "place/1", "callback": "audit"}) in events
