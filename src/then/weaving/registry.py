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
"""AnnotationRegistry — per-unit store of ``@then`` records keyed by name and arity."""

from __future__ import annotations

from collections.abc import Iterator

from then.kernel.exceptions import DuplicateCallbackError
from then.weaving.types import AnnotationRecord, CallbackRef


class AnnotationRegistry:
    """Collects the annotation records of one class or module.

    Usage::

        registry = AnnotationRegistry("myapp.orders")
        registry.record("add", 2, Local("log_result"))
        registry.get("add", 2)        # AnnotationRecord(...)
        registry.record("add", 2, Local("audit"))   # DuplicateCallbackError

    A registry is discarded once its unit has been woven.
    """

    def __init__(self, unit: str) -> None:
        self.unit = unit
        self._records: dict[tuple[str, int], AnnotationRecord] = {}

    def record(
        self,
        name: str,
        arity: int,
        callback: CallbackRef,
        *,
        file: str | None = None,
        line: int | None = None,
    ) -> AnnotationRecord:
        """Store a record for ``name/arity``.

        Raises:
            DuplicateCallbackError: if ``name/arity`` already carries one.
        """
        key = (name, arity)
        if key in self._records:
            raise DuplicateCallbackError(name, arity, file=file, line=line)
        record = AnnotationRecord(name=name, arity=arity, callback=callback, file=file, line=line)
        self._records[key] = record
        return record

    def get(self, name: str, arity: int) -> AnnotationRecord | None:
        return self._records.get((name, arity))

    def records(self) -> list[AnnotationRecord]:
        """Return all records in declaration order."""
        return list(self._records.values())

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[AnnotationRecord]:
        return iter(self.records())

    def __len__(self) -> int:
        return len(self._records)
