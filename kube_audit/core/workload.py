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
Minimal manifest object model.

Manifests arrive as plain mappings (parsed YAML or JSON).  This module only
knows enough about their shape to find object metadata and, for workload
controllers, the embedded pod specification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .exceptions import ManifestError

# Kinds whose pod template lives at ``spec.template.spec``
_TEMPLATED_KINDS = frozenset(
    {
        "Deployment",
        "StatefulSet",
        "DaemonSet",
        "ReplicaSet",
        "ReplicationController",
        "Job",
    }
)


@dataclass(frozen=True)
class ObjectMeta:
    """The parts of ``metadata`` the engine reads."""

    name: str = ""
    namespace: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> ObjectMeta:
        """Read metadata from a raw manifest.

        Raises:
            ManifestError: If ``metadata``, ``annotations`` or ``labels`` is
                present but not a mapping.
        """
        kind = str(obj.get("kind") or "")
        metadata = obj.get("metadata")
        if metadata is None:
            return cls()
        if not isinstance(metadata, dict):
            raise ManifestError(f"metadata of {kind} must be a mapping, got {type(metadata).__name__}")
        name = str(metadata.get("name") or "")
        namespace = str(metadata.get("namespace") or "")
        string_maps: dict[str, dict[str, str]] = {}
        for key in ("annotations", "labels"):
            value = metadata.get(key) or {}
            if not isinstance(value, dict):
                identity = describe(kind, cls(name=name, namespace=namespace))
                raise ManifestError(f"metadata.{key} of {identity} must be a mapping, got {type(value).__name__}")
            string_maps[key] = {str(k): str(v) for k, v in value.items()}
        return cls(name=name, namespace=namespace, **string_maps)


def describe(kind: str, meta: ObjectMeta) -> str:
    """Human-readable manifest identity used in error messages."""
    if meta.namespace:
        return f"{kind} {meta.namespace}/{meta.name}"
    return f"{kind} {meta.name}"


@dataclass(frozen=True)
class GenericWorkload:
    """A pod-bearing object: a bare Pod or any controller with a pod template."""

    kind: str
    object_meta: ObjectMeta
    pod_spec: dict[str, Any]
    original_object: dict[str, Any]

    @property
    def name(self) -> str:
        return self.object_meta.name

    @property
    def namespace(self) -> str:
        return self.object_meta.namespace

    @property
    def containers(self) -> list[dict[str, Any]]:
        return list(self.pod_spec.get("containers") or [])

    @property
    def init_containers(self) -> list[dict[str, Any]]:
        return list(self.pod_spec.get("initContainers") or [])

    def describe(self) -> str:
        return describe(self.kind, self.object_meta)

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> GenericWorkload:
        """Build a workload from a raw manifest.

        Raises:
            ManifestError: If no pod specification can be found for the kind,
                or a container entry is not a mapping.
        """
        if not isinstance(obj, dict):
            raise ManifestError(f"manifest must be a mapping, got {type(obj).__name__}")
        kind = str(obj.get("kind") or "")
        meta = ObjectMeta.from_object(obj)
        pod_spec = extract_pod_spec(obj)
        if pod_spec is None:
            raise ManifestError(f"no pod specification found in {describe(kind, meta)}")
        for key in ("initContainers", "containers"):
            entries = pod_spec.get(key) or []
            if not isinstance(entries, list):
                raise ManifestError(f"{key} of {describe(kind, meta)} must be a list, got {type(entries).__name__}")
            for index, entry in enumerate(entries):
                if not isinstance(entry, dict):
                    raise ManifestError(
                        f"{key}[{index}] of {describe(kind, meta)} must be a mapping, got {type(entry).__name__}"
                    )
        return cls(kind=kind, object_meta=meta, pod_spec=pod_spec, original_object=obj)


def extract_pod_spec(obj: dict[str, Any]) -> dict[str, Any] | None:
    """Locate the pod specification inside a manifest, or ``None``."""
    kind = obj.get("kind")
    spec = obj.get("spec")
    if not isinstance(spec, dict):
        return None
    if kind == "Pod":
        path: tuple[str, ...] = ()
    elif kind == "CronJob":
        path = ("jobTemplate", "spec", "template", "spec")
    elif kind in _TEMPLATED_KINDS or "template" in spec:
        path = ("template", "spec")
    else:
        return None

    node: Any = spec
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, dict) else None


def is_workload(obj: dict[str, Any]) -> bool:
    """Whether *obj* carries a pod specification."""
    return extract_pod_spec(obj) is not None
