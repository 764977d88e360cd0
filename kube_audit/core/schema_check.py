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
Check definitions.

A check is declared in YAML:

.. code-block:: yaml

    successMessage: Memory limits are set
    failureMessage: Memory limits should be set
    category: Efficiency
    target: Container
    containers:
      exclude:
      - initContainer
    schema:
      type: object
      required: [resources]

``target`` is the scope the check applies to.  ``schemaTarget`` is the shape
of the fragment the predicate expects and defaults to ``target``; the only
permitted difference is a ``Container`` check with a ``Pod`` schema, which is
evaluated against a synthetic single-container pod.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

import yaml
from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from referencing import Registry

from ..config.constants import KubeAuditConstants
from .exceptions import MalformedCheckError
from .models import TargetKind

_CONTAINER_CLASSES = frozenset({KubeAuditConstants.CONTAINER_REGULAR, KubeAuditConstants.CONTAINER_INIT})


@dataclass(frozen=True)
class IncludeExcludeList:
    """An allow/deny list; an empty ``include`` admits everything."""

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    def admits(self, value: str) -> bool:
        if self.include and value not in self.include:
            return False
        return value not in self.exclude

    @classmethod
    def from_dict(cls, raw: Any) -> IncludeExcludeList:
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError(f"expected a mapping with include/exclude, got {type(raw).__name__}")
        return cls(
            include=tuple(str(v) for v in raw.get("include") or []),
            exclude=tuple(str(v) for v in raw.get("exclude") or []),
        )

    def to_dict(self) -> dict[str, list[str]]:
        data: dict[str, list[str]] = {}
        if self.include:
            data["include"] = list(self.include)
        if self.exclude:
            data["exclude"] = list(self.exclude)
        return data


@dataclass(frozen=True)
class SchemaCheck:
    """A single check: identity, messages, applicability and its predicate."""

    id: str
    category: str
    success_message: str
    failure_message: str
    target: TargetKind
    schema_target: TargetKind
    schema: dict[str, Any] = field(default_factory=dict)
    controllers: IncludeExcludeList = field(default_factory=IncludeExcludeList)
    containers: IncludeExcludeList = field(default_factory=IncludeExcludeList)

    @cached_property
    def validator(self) -> Validator:
        """The compiled predicate.

        References resolve only within the schema itself; nothing is fetched.
        """
        cls = validator_for(self.schema, default=Draft7Validator)
        return cls(self.schema, registry=Registry())

    def is_actionable(self, target: TargetKind, kind: str, is_init_container: bool = False) -> bool:
        """Whether this check applies to *target* for an object of *kind*."""
        if self.target is not target:
            return False
        if not self.controllers.admits(kind):
            return False
        if target is TargetKind.CONTAINER:
            container_class = (
                KubeAuditConstants.CONTAINER_INIT if is_init_container else KubeAuditConstants.CONTAINER_REGULAR
            )
            if not self.containers.admits(container_class):
                return False
        return True

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "successMessage": self.success_message,
            "failureMessage": self.failure_message,
            "category": self.category,
            "target": self.target.value,
        }
        if self.schema_target is not self.target:
            data["schemaTarget"] = self.schema_target.value
        if self.controllers.to_dict():
            data["controllers"] = self.controllers.to_dict()
        if self.containers.to_dict():
            data["containers"] = self.containers.to_dict()
        data["schema"] = self.schema
        return data


def _target_kind(value: Any, check_id: str, key: str) -> TargetKind:
    try:
        return TargetKind(value)
    except ValueError:
        allowed = ", ".join(t.value for t in TargetKind)
        raise MalformedCheckError(check_id, f"{key} must be one of {allowed}, got {value!r}") from None


def parse_check(raw: Any, check_id: str) -> SchemaCheck:
    """Decode a check definition mapping.

    The definition's own ``id`` field, if any, is ignored in favour of
    *check_id* (the file name or configuration key).

    Raises:
        MalformedCheckError: On any structural problem, including an
            invalid JSON Schema.
    """
    if not isinstance(raw, dict):
        raise MalformedCheckError(check_id, f"definition must be a mapping, got {type(raw).__name__}")

    target = _target_kind(raw.get("target"), check_id, "target")
    schema_target = _target_kind(raw.get("schemaTarget") or target.value, check_id, "schemaTarget")
    if schema_target is not target and not (target is TargetKind.CONTAINER and schema_target is TargetKind.POD):
        raise MalformedCheckError(
            check_id, f"schemaTarget {schema_target.value} is not compatible with target {target.value}"
        )

    schema = raw.get("schema")
    json_schema = raw.get("jsonSchema")
    if json_schema:
        if schema:
            raise MalformedCheckError(check_id, "only one of schema and jsonSchema may be set")
        try:
            schema = json.loads(json_schema)
        except (TypeError, json.JSONDecodeError) as exc:
            raise MalformedCheckError(check_id, f"jsonSchema is not valid JSON: {exc}") from exc
    if not isinstance(schema, dict):
        raise MalformedCheckError(check_id, "schema must be a mapping")
    try:
        validator_for(schema, default=Draft7Validator).check_schema(schema)
    except SchemaError as exc:
        raise MalformedCheckError(check_id, f"invalid schema: {exc.message}") from exc

    try:
        controllers = IncludeExcludeList.from_dict(raw.get("controllers"))
        containers = IncludeExcludeList.from_dict(raw.get("containers"))
    except ValueError as exc:
        raise MalformedCheckError(check_id, str(exc)) from exc
    unknown = set(containers.include + containers.exclude) - _CONTAINER_CLASSES
    if unknown:
        raise MalformedCheckError(check_id, f"unknown container classes: {', '.join(sorted(unknown))}")

    return SchemaCheck(
        id=check_id,
        category=str(raw.get("category", "")),
        success_message=str(raw.get("successMessage", "")),
        failure_message=str(raw.get("failureMessage", "")),
        target=target,
        schema_target=schema_target,
        schema=schema,
        controllers=controllers,
        containers=containers,
    )


def parse_check_yaml(text: str | bytes, check_id: str) -> SchemaCheck:
    """Decode a check definition from YAML (or JSON) text."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MalformedCheckError(check_id, f"decoding check failed: {exc}") from exc
    return parse_check(raw, check_id)
