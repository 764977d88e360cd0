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
kube-audit - Policy checks for Kubernetes workload manifests.
"""

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Importing the package alone does not load the built-in catalog or pull in
    jsonschema.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "KubeAuditConstants": (".config.constants", "KubeAuditConstants"),
        "AuditConfiguration": (".core.audit_config", "AuditConfiguration"),
        "ExemptionRule": (".core.audit_config", "ExemptionRule"),
        "CheckCatalog": (".core.check_catalog", "CheckCatalog"),
        "CheckLoader": (".core.check_catalog", "CheckLoader"),
        "default_catalog": (".core.check_catalog", "default_catalog"),
        "ResultMessage": (".core.models", "ResultMessage"),
        "ResultSet": (".core.models", "ResultSet"),
        "Severity": (".core.models", "Severity"),
        "TargetKind": (".core.models", "TargetKind"),
        "WorkloadResult": (".core.models", "WorkloadResult"),
        "SchemaCheck": (".core.schema_check", "SchemaCheck"),
        "GenericWorkload": (".core.workload", "GenericWorkload"),
        "apply_pod_schema_checks": (".core.schema_checks", "apply_pod_schema_checks"),
        "apply_controller_schema_checks": (".core.schema_checks", "apply_controller_schema_checks"),
        "apply_container_schema_checks": (".core.schema_checks", "apply_container_schema_checks"),
        "apply_other_schema_checks": (".core.schema_checks", "apply_other_schema_checks"),
        "validate_object": (".core.validator", "validate_object"),
        "validate_workload": (".core.validator", "validate_workload"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        # Cache on the module so __getattr__ is only called once per symbol
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AuditConfiguration",
    "ExemptionRule",
    "CheckCatalog",
    "CheckLoader",
    "default_catalog",
    "SchemaCheck",
    "GenericWorkload",
    "ResultMessage",
    "ResultSet",
    "Severity",
    "TargetKind",
    "WorkloadResult",
    "apply_pod_schema_checks",
    "apply_controller_schema_checks",
    "apply_container_schema_checks",
    "apply_other_schema_checks",
    "validate_object",
    "validate_workload",
    "Config",
    "KubeAuditConstants",
]
