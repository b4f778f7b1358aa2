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
"""Definition-time weaving of ``@then`` callbacks."""

from then.weaving.decorators import then
from then.weaving.module import ModuleWeaver, use
from then.weaving.namespace import Then, ThenMeta
from then.weaving.properties import WeavingProperties
from then.weaving.registry import AnnotationRegistry
from then.weaving.types import AnnotationRecord, External, Local, MethodKind
from then.weaving.validation import validate_callback

__all__ = [
    "AnnotationRecord",
    "AnnotationRegistry",
    "External",
    "Local",
    "MethodKind",
    "ModuleWeaver",
    "Then",
    "ThenMeta",
    "WeavingProperties",
    "then",
    "use",
    "validate_callback",
]
