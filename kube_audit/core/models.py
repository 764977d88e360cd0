# Copyright 2026 Cisco Systems, Inc.
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
#
# SPDX-License-Identifier: Apache-2.0

"""
Data models for check definitions, results and result summaries.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Severity assigned to a check by the active configuration."""

    IGNORE = "ignore"
    WARNING = "warning"
    DANGER = "danger"

    @property
    def is_actionable(self) -> bool:
        """Ignored checks are never evaluated."""
        return self is not Severity.IGNORE


class TargetKind(str, Enum):
    """Structural scope a check applies to, and the shape its predicate expects."""

    CONTAINER = "Container"
    POD = "Pod"
    CONTROLLER = "Controller"
    OTHER = "Other"


@dataclass(frozen=True)
class ResultMessage:
    """The outcome of a single check against a single manifest scope."""

    id: str
    message: str
    success: bool
    severity: Severity
    category: str

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "id": self.id,
            "message": self.message,
            "success": self.success,
            "severity": self.severity.value,
            "category": self.category,
        }


@dataclass
class CountSummary:
    """Pass/fail counts over one or more result sets."""

    successes: int = 0
    warnings: int = 0
    dangers: int = 0

    def add(self, other: CountSummary) -> None:
        self.successes += other.successes
        self.warnings += other.warnings
        self.dangers += other.dangers

    def score(self) -> int:
        """Percentage score where dangers weigh twice as much as warnings."""
        total = self.successes * 2 + self.warnings + self.dangers * 2
        if total == 0:
            return 100
        return int(self.successes * 2 / total * 100)


class ResultSet(MutableMapping):
    """Results of one manifest-scope pass, keyed by check ID.

    Iteration is always in lexicographic check-ID order, independent of the
    order results were inserted, so that two runs over the same input
    serialise identically.
    """

    def __init__(self, results: dict[str, ResultMessage] | None = None) -> None:
        self._results: dict[str, ResultMessage] = dict(results or {})

    def __getitem__(self, check_id: str) -> ResultMessage:
        return self._results[check_id]

    def __setitem__(self, check_id: str, result: ResultMessage) -> None:
        self._results[check_id] = result

    def __delitem__(self, check_id: str) -> None:
        del self._results[check_id]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._results))

    def __len__(self) -> int:
        return len(self._results)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResultSet):
            return self._results == other._results
        return NotImplemented

    def __repr__(self) -> str:
        return f"ResultSet({list(self.values())!r})"

    def failures(self) -> list[ResultMessage]:
        """Return the failed results, in check-ID order."""
        return [result for result in self.values() if not result.success]

    def summary(self) -> CountSummary:
        """Count successes, warnings and dangers in this set."""
        summary = CountSummary()
        for result in self.values():
            if result.success:
                summary.successes += 1
            elif result.severity is Severity.WARNING:
                summary.warnings += 1
            elif result.severity is Severity.DANGER:
                summary.dangers += 1
        return summary

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Convert to an ordered dictionary of plain result dictionaries."""
        return {check_id: result.to_dict() for check_id, result in self.items()}


@dataclass
class ContainerResult:
    """Results for a single container (or init container) of a workload."""

    name: str
    results: ResultSet = field(default_factory=ResultSet)
    is_init: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "isInit": self.is_init, "results": self.results.to_dict()}


@dataclass
class PodResult:
    """Pod-scope results plus per-container results."""

    results: ResultSet = field(default_factory=ResultSet)
    container_results: list[ContainerResult] = field(default_factory=list)

    def summary(self) -> CountSummary:
        summary = self.results.summary()
        for container_result in self.container_results:
            summary.add(container_result.results.summary())
        return summary

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": self.results.to_dict(),
            "containerResults": [c.to_dict() for c in self.container_results],
        }


@dataclass
class WorkloadResult:
    """Everything produced by validating one manifest."""

    kind: str
    name: str
    namespace: str
    results: ResultSet = field(default_factory=ResultSet)
    pod_result: PodResult | None = None

    def summary(self) -> CountSummary:
        summary = self.results.summary()
        if self.pod_result is not None:
            summary.add(self.pod_result.summary())
        return summary

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "namespace": self.namespace,
            "results": self.results.to_dict(),
            "podResult": self.pod_result.to_dict() if self.pod_result is not None else None,
        }
