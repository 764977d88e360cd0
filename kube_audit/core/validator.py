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
Whole-manifest validation.

Combines the per-scope passes into one result per manifest: controller and
pod checks for the workload, then container checks for every init container
and container.
"""

from __future__ import annotations

import logging
from typing import Any

from .audit_config import AuditConfiguration
from .check_catalog import CheckCatalog
from .exceptions import ManifestError
from .models import ContainerResult, PodResult, ResultSet, WorkloadResult
from .schema_checks import (
    apply_container_schema_checks,
    apply_controller_schema_checks,
    apply_other_schema_checks,
    apply_pod_schema_checks,
)
from .workload import GenericWorkload, ObjectMeta, is_workload

logger = logging.getLogger(__name__)


def validate_pod(catalog: CheckCatalog, conf: AuditConfiguration, workload: GenericWorkload) -> PodResult:
    """Run pod-scope checks and container checks for every container."""
    pod_result = PodResult(results=apply_pod_schema_checks(catalog, conf, workload))
    for container in workload.init_containers:
        pod_result.container_results.append(
            ContainerResult(
                name=str(container.get("name") or ""),
                results=apply_container_schema_checks(catalog, conf, workload, container, is_init=True),
                is_init=True,
            )
        )
    for container in workload.containers:
        pod_result.container_results.append(
            ContainerResult(
                name=str(container.get("name") or ""),
                results=apply_container_schema_checks(catalog, conf, workload, container, is_init=False),
            )
        )
    return pod_result


def validate_workload(catalog: CheckCatalog, conf: AuditConfiguration, workload: GenericWorkload) -> WorkloadResult:
    """Validate a pod-bearing object at every scope."""
    logger.debug("Validating %s", workload.describe())
    return WorkloadResult(
        kind=workload.kind,
        name=workload.name,
        namespace=workload.namespace,
        results=apply_controller_schema_checks(catalog, conf, workload),
        pod_result=validate_pod(catalog, conf, workload),
    )


def validate_object(catalog: CheckCatalog, conf: AuditConfiguration, obj: dict[str, Any]) -> WorkloadResult:
    """Validate a raw manifest of any kind.

    Pod-bearing objects are validated as workloads; everything else only
    runs checks that target arbitrary objects.
    """
    if not isinstance(obj, dict):
        raise ManifestError(f"manifest must be a mapping, got {type(obj).__name__}")
    if is_workload(obj):
        return validate_workload(catalog, conf, GenericWorkload.from_object(obj))

    results: ResultSet = apply_other_schema_checks(catalog, conf, obj)
    meta = ObjectMeta.from_object(obj)
    return WorkloadResult(
        kind=str(obj.get("kind") or ""),
        name=meta.name,
        namespace=meta.namespace,
        results=results,
    )


def validate_objects(
    catalog: CheckCatalog, conf: AuditConfiguration, objects: list[dict[str, Any]]
) -> list[WorkloadResult]:
    """Validate several manifests; the first error aborts."""
    return [validate_object(catalog, conf, obj) for obj in objects]
