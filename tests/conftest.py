# Copyright 2026 Cisco Systems, Inc. and its affiliates
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
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from kube_audit.core.audit_config import AuditConfiguration
from kube_audit.core.check_catalog import CheckCatalog, default_catalog

# ---------------------------------------------------------------------------
# Shared objects
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def catalog() -> CheckCatalog:
    """The built-in catalog, loaded once for the whole session."""
    return default_catalog()


@pytest.fixture(scope="session")
def default_conf() -> AuditConfiguration:
    """The configuration that ships with the package."""
    return AuditConfiguration.default()


# ---------------------------------------------------------------------------
# Manifest factories
# ---------------------------------------------------------------------------


def _container(name: str = "app", **fields: Any) -> dict[str, Any]:
    container: dict[str, Any] = {"name": name, "image": "nginx:1.25"}
    container.update(fields)
    return container


def compliant_container(name: str = "app") -> dict[str, Any]:
    """A container that passes every built-in container check."""
    return _container(
        name,
        imagePullPolicy="Always",
        resources={
            "requests": {"cpu": "100m", "memory": "128Mi"},
            "limits": {"cpu": "500m", "memory": "256Mi"},
        },
        readinessProbe={"httpGet": {"path": "/ready", "port": 8080}},
        livenessProbe={"httpGet": {"path": "/healthz", "port": 8080}},
        securityContext={
            "runAsNonRoot": True,
            "readOnlyRootFilesystem": True,
            "allowPrivilegeEscalation": False,
            "privileged": False,
            "capabilities": {"drop": ["ALL"]},
        },
    )


def deployment(
    containers: list[dict[str, Any]] | None = None,
    *,
    name: str = "web-frontend",
    namespace: str = "default",
    annotations: dict[str, str] | None = None,
    init_containers: list[dict[str, Any]] | None = None,
    replicas: int = 1,
    **pod_fields: Any,
) -> dict[str, Any]:
    """Build a Deployment manifest."""
    pod_spec: dict[str, Any] = {"containers": containers if containers is not None else [_container()]}
    if init_containers is not None:
        pod_spec["initContainers"] = init_containers
    pod_spec.update(pod_fields)
    metadata: dict[str, Any] = {"name": name, "namespace": namespace}
    if annotations is not None:
        metadata["annotations"] = annotations
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": metadata,
        "spec": {
            "replicas": replicas,
            "selector": {"matchLabels": {"app": name}},
            "template": {
                "metadata": {"labels": {"app": name}},
                "spec": pod_spec,
            },
        },
    }


@pytest.fixture
def make_container():
    """Factory: ``make_container(name, **fields)``."""
    return _container


@pytest.fixture
def make_compliant_container():
    return compliant_container


@pytest.fixture
def make_deployment():
    """Factory: ``make_deployment(containers, name=..., annotations=..., ...)``.

    Each call returns a fresh, independent manifest.
    """

    def _factory(*args: Any, **kwargs: Any) -> dict[str, Any]:
        return copy.deepcopy(deployment(*args, **kwargs))

    return _factory
