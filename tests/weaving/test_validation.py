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
"""Tests for callback validation."""

from __future__ import annotations

import types

import pytest

from then.kernel.exceptions import InvalidCallbackFormatError
from then.weaving.types import External, Local
from then.weaving.validation import is_identifier, validate_callback


class TestAcceptedShapes:
    def test_local_name(self) -> None:
        assert validate_callback("log_result") == Local("log_result")

    def test_private_local_name(self) -> None:
        assert validate_callback("_audit") == Local("_audit")

    def test_external_by_dotted_path(self) -> None:
        assert validate_callback(("myapp.audit", "record")) == External("myapp.audit", "record")

    def test_external_by_module_object(self) -> None:
        assert validate_callback((types, "new_class")) == External("types", "new_class")


class TestRejectedShapes:
    @pytest.mark.parametrize(
        "value",
        [
            "log result",
            "",
            "class",
            "1st",
            42,
            None,
            ("myapp.audit",),
            ("myapp.audit", "record", "extra"),
            ("myapp.audit", 5),
            ("myapp..audit", "record"),
            (5, "record"),
            ["myapp.audit", "record"],
            print,
        ],
    )
    def test_invalid_values_raise(self, value) -> None:
        with pytest.raises(InvalidCallbackFormatError):
            validate_callback(value)

    def test_error_names_value_and_accepted_forms(self) -> None:
        with pytest.raises(InvalidCallbackFormatError) as exc_info:
            validate_callback(("only",), file="orders.py", line=12)

        message = str(exc_info.value)
        assert message.startswith("orders.py:12: ")
        assert "('only',)" in message
        assert "'function_name' or (module, 'function_name')" in message
        assert exc_info.value.code == "THEN_INVALID_FORMAT"
        assert exc_info.value.context == {"value": ("only",), "file": "orders.py", "line": 12}


class TestIsIdentifier:
    def test_keywords_are_not_identifiers(self) -> None:
        assert is_identifier("return") is False

    def test_non_strings_are_not_identifiers(self) -> None:
        assert is_identifier(b"name") is False

    def test_plain_names(self) -> None:
        assert is_identifier("name") is True
