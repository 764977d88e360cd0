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
Per-scope check application.

Each entry point runs the same pipeline over the configured check IDs, in
lexicographic order:

1. skip the check if the manifest's annotations exempt it
2. resolve it, skipping it if it does not apply to this scope
3. evaluate its predicate against the scope's fragment
4. record the result

Any error aborts the pass; a partially filled ``ResultSet`` is never
returned.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .audit_config import AuditConfiguration
from .check_catalog import CheckCatalog
from .evaluator import check_container_in_pod, check_controller, check_object, check_pod
from .exceptions import MalformedCheckError, ManifestError
from .exemptions import is_exempt
from .models import ResultMessage, ResultSet, Severity, TargetKind
from .resolver import EvaluationContext, resolve_check
from .schema_check import SchemaCheck
from .workload import GenericWorkload, ObjectMeta

logger = logging.getLogger(__name__)


def make_result(conf: AuditConfiguration, check: SchemaCheck, passes: bool) -> ResultMessage:
    """Build the result for *check*; severity comes from *conf*, not the check."""
    return ResultMessage(
        id=check.id,
        message=check.success_message if passes else check.failure_message,
        success=passes,
        severity=conf.checks.get(check.id, Severity.IGNORE),
        category=check.category,
    )


def _apply_checks(
    catalog: CheckCatalog,
    conf: AuditConfiguration,
    context: EvaluationContext,
    run_check: Callable[[SchemaCheck], bool],
) -> ResultSet:
    results = ResultSet()
    annotations = context.object_meta.annotations
    for check_id in conf.sorted_check_ids():
        if is_exempt(annotations, check_id, conf.disallow_exemptions):
            logger.debug("Skipping %s for %s: exempted by annotation", check_id, context.describe())
            continue
        check = resolve_check(catalog, conf, check_id, context)
        if check is None:
            continue
        try:
            passes = run_check(check)
        except MalformedCheckError as exc:
            raise MalformedCheckError(exc.check_id, exc.reason, context.describe()) from exc
        results[check.id] = make_result(conf, check, passes)
    return results


def apply_pod_schema_checks(
    catalog: CheckCatalog, conf: AuditConfiguration, workload: GenericWorkload
) -> ResultSet:
    """Run pod-scope checks against the workload's pod specification."""
    context = EvaluationContext(kind=workload.kind, object_meta=workload.object_meta, target=TargetKind.POD)
    return _apply_checks(catalog, conf, context, lambda check: check_pod(check, workload.pod_spec))


def apply_controller_schema_checks(
    catalog: CheckCatalog, conf: AuditConfiguration, workload: GenericWorkload
) -> ResultSet:
    """Run controller-scope checks against the original controller object."""
    context = EvaluationContext(kind=workload.kind, object_meta=workload.object_meta, target=TargetKind.CONTROLLER)
    return _apply_checks(catalog, conf, context, lambda check: check_controller(check, workload.original_object))


def apply_container_schema_checks(
    catalog: CheckCatalog,
    conf: AuditConfiguration,
    workload: GenericWorkload,
    container: dict[str, Any],
    is_init: bool = False,
) -> ResultSet:
    """Run container-scope checks against one container of *workload*.

    Checks with a pod-shaped predicate see a pod holding only *container*.
    """
    if not isinstance(container, dict):
        raise ManifestError(f"container in {workload.describe()} must be a mapping, got {type(container).__name__}")
    context = EvaluationContext(
        kind=workload.kind,
        object_meta=workload.object_meta,
        target=TargetKind.CONTAINER,
        container_name=str(container.get("name") or ""),
        is_init_container=is_init,
    )
    return _apply_checks(
        catalog, conf, context, lambda check: check_container_in_pod(check, workload.pod_spec, container)
    )


def apply_other_schema_checks(catalog: CheckCatalog, conf: AuditConfiguration, obj: dict[str, Any]) -> ResultSet:
    """Run checks targeting arbitrary objects (Ingress, PodDisruptionBudget, ...).

    Raises:
        ManifestError: If the object's metadata cannot be read.
    """
    if not isinstance(obj, dict):
        raise ManifestError(f"manifest must be a mapping, got {type(obj).__name__}")
    context = EvaluationContext(
        kind=str(obj.get("kind") or ""),
        object_meta=ObjectMeta.from_object(obj),
        target=TargetKind.OTHER,
    )
    return _apply_checks(catalog, conf, context, lambda check: check_object(check, obj))
