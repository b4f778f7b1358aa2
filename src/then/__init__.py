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
"""then — call a side-effect callback with a function's result after every successful call.

Put ``@then("callback")`` or ``@then((module, "callback"))`` above a function
and the callback runs after each call that returns. The function's result
is unchanged; the callback is called for its side effects only.
"""

from then.core.bootstrap import configure
from then.core.config import Config
from then.kernel.exceptions import (
    CallbackDefinitionError,
    DuplicateCallbackError,
    InvalidCallbackFormatError,
    ThenException,
    ThenUsageError,
)
from then.weaving import ModuleWeaver, Then, ThenMeta, then, use

__version__ = "1.1.0"

__all__ = [
    "CallbackDefinitionError",
    "Config",
    "DuplicateCallbackError",
    "InvalidCallbackFormatError",
    "ModuleWeaver",
    "Then",
    "ThenException",
    "ThenMeta",
    "ThenUsageError",
    "configure",
    "then",
    "use",
]
