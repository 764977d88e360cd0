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
Scope resolution: which check definition, if any, applies in a given context.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .audit_config import AuditConfiguration
from .check_catalog import CheckCatalog
from .exceptions import CheckNotFoundError, MalformedCheckError
from .models import TargetKind
from .schema_check import SchemaCheck
from .workload import ObjectMeta, describe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationContext:
    """Where a check is being considered: one object, one scope, maybe one container."""

    kind: str
    object_meta: ObjectMeta
    target: TargetKind
    container_name: str = ""
    is_init_container: bool = False

    def describe(self) -> str:
        identity = describe(self.kind, self.object_meta)
        if self.container_name:
            return f"{identity} container {self.container_name}"
        return identity


def resolve_check(
    catalog: CheckCatalog,
    conf: AuditConfiguration,
    check_id: str,
    context: EvaluationContext,
) -> SchemaCheck | None:
    """Return the check to run for *check_id* in *context*, or ``None`` to skip.

    Custom checks in *conf* take priority over built-in checks.  A check is
    skipped when the configuration does not make it actionable for this
    namespace, name and container, or when its declared target, kinds and
    container classes do not fit *context*.

    Raises:
        CheckNotFoundError: If *check_id* is neither a custom nor a built-in
            check.
        MalformedCheckError: If *check_id* names a custom check that failed
            to decode.
    """
    try:
        check = catalog.resolve(check_id, conf)
    except MalformedCheckError as exc:
        raise MalformedCheckError(exc.check_id, exc.reason, context.describe()) from exc
    if check is None:
        raise CheckNotFoundError(check_id, context.describe())

    meta = context.object_meta
    if not conf.is_actionable(check.id, meta.namespace, meta.name, context.container_name):
        logger.debug("Skipping %s for %s: not actionable", check.id, context.describe())
        return None
    if not check.is_actionable(context.target, context.kind, context.is_init_container):
        return None
    return check
