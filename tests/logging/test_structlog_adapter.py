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
"""Tests for LoggingPort protocol and the StructlogAdapter."""

import logging
import os
import subprocess
import sys
import textwrap
from pathlib import Path
from typing import Any

from then.core.config import Config
from then.logging.port import LoggingPort
from then.logging.structlog_adapter import StructlogAdapter, get_logger

SRC = Path(__file__).resolve().parents[2] / "src"


class TestLoggingPortProtocol:
    def test_conforming_class_is_instance(self):
        class FakeLogging:
            def configure(self, config: Any) -> None:
                pass

            def get_logger(self, name: str) -> Any:
                pass

            def set_level(self, name: str, level: str) -> None:
                pass

        assert isinstance(FakeLogging(), LoggingPort)

    def test_non_conforming_class_is_not_instance(self):
        class Incomplete:
            def get_logger(self, name: str) -> Any:
                pass

        assert not isinstance(Incomplete(), LoggingPort)

    def test_adapter_implements_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"then": {"logging": {"level": {"root": "debug"}}}}))
        assert adapter._root_level == "DEBUG"

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"then": {"logging": {"format": "JSON"}}}))
        assert adapter._format == "json"

    def test_configure_applies_per_module_levels(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"then": {"logging": {"level": {"root": "INFO", "then.test.weaving": "DEBUG"}}}}))
        assert adapter._module_levels == {"then.test.weaving": "DEBUG"}
        assert logging.getLogger("then.test.weaving").level == logging.DEBUG


class TestStructlogAdapterLoggers:
    def test_get_logger_returns_usable_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("then.test")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("then.test.levels", "warning")
        assert logging.getLogger("then.test.levels").level == logging.WARNING

    def test_adapter_hands_out_stdlib_backed_loggers(self):
        logger = StructlogAdapter().get_logger("then.test.backed")
        assert logger.bind()._logger is logging.getLogger("then.test.backed")


class TestUnconfiguredLogging:
    def test_library_logger_follows_stdlib_levels(self, caplog):
        caplog.set_level(logging.WARNING, logger="then.test.quiet")
        logger = get_logger("then.test.quiet")

        logger.debug("hidden_event")
        logger.warning("shown_event")

        messages = [record.getMessage() for record in caplog.records if record.name == "then.test.quiet"]
        assert len(messages) == 1
        assert "shown_event" in messages[0]

    def test_weaving_writes_nothing_before_configure(self):
        code = textwrap.dedent(
            """
            from then import Then, then

            class Orders(Then):
                @then("audit")
                def place(self, order):
                    return order

                def audit(self, result):
                    pass

            Orders().place("o-1")
            """
        )
        env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [str(SRC), os.environ.get("PYTHONPATH")]))}

        completed = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, env=env, check=True)

        assert completed.stdout == ""
