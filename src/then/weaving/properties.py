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
"""WeavingProperties — runtime settings read by generated wrappers."""

from __future__ import annotations

from dataclasses import dataclass

from then.core.config import config_properties


@config_properties(prefix="then.weaving")
@dataclass
class WeavingProperties:
    """Settings under ``then.weaving``.

    Attributes:
        trace_callbacks: Log a ``callback_invoked`` debug event every time a
            wrapper fires its callback.
    """

    trace_callbacks: bool = False


_active = WeavingProperties()


def get_properties() -> WeavingProperties:
    return _active


def set_properties(properties: WeavingProperties) -> None:
    global _active
    _active = properties
