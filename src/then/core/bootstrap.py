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
"""Bootstrap — apply a configuration to logging and weaving."""

from __future__ import annotations

from then.core.config import Config
from then.logging.port import LoggingPort
from then.logging.structlog_adapter import StructlogAdapter
from then.weaving.properties import WeavingProperties, set_properties


def configure(config: Config | None = None, logging_adapter: LoggingPort | None = None) -> WeavingProperties:
    """Configure logging and activate the ``then.weaving`` settings.

    Startup sequence:
    1. Configure logging from ``then.logging`` (structlog by default); the
       adapter also supplies the logger this function reports through
    2. Bind ``then.weaving`` to :class:`WeavingProperties` (env overrides apply)
    3. Make the bound properties visible to every generated wrapper
    """
    config = config or Config({})
    adapter = logging_adapter or StructlogAdapter()
    adapter.configure(config)

    properties = config.bind(WeavingProperties)
    set_properties(properties)

    adapter.get_logger("then.core").debug(
        "configured",
        sources=config.loaded_sources,
        trace_callbacks=properties.trace_callbacks,
    )
    return properties
