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
Audit configuration: per-check severities, custom checks and exemptions.

An ``AuditConfiguration`` decides which checks run (any check with a severity
other than ``ignore``), how failures are graded, which objects are exempt from
which checks, and whether manifest authors may opt out via annotations.

Usage
-----
    from kube_audit.core.audit_config import AuditConfiguration

    # Load built-in defaults
    conf = AuditConfiguration.default()

    # Load an org configuration (merges on top of defaults)
    conf = AuditConfiguration.from_yaml("audit.yaml")

    # Dump the current (including default) configuration for editing
    conf.to_yaml("generated_audit.yaml")

The configuration is immutable.  Pass a different instance per call rather
than changing a shared one.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from ..config.constants import KubeAuditConstants
from .exceptions import ConfigurationError, MalformedCheckError
from .models import Severity
from .schema_check import SchemaCheck, parse_check

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = KubeAuditConstants.DEFAULT_CONFIG_PATH


@dataclass(frozen=True)
class ExemptionRule:
    """Skips checks for matching objects, independent of manifest annotations.

    Every populated field must match.  ``controller_names`` match by prefix so
    that generated pod names are covered by their controller's name.
    """

    rules: tuple[str, ...] = ()
    namespace: str = ""
    controller_names: tuple[str, ...] = ()
    container_names: tuple[str, ...] = ()

    def matches(self, check_id: str, namespace: str, name: str, container_name: str = "") -> bool:
        if self.rules and check_id not in self.rules:
            return False
        if self.namespace and self.namespace != namespace:
            return False
        if self.controller_names and not any(name.startswith(prefix) for prefix in self.controller_names):
            return False
        if self.container_names and container_name not in self.container_names:
            return False
        return True

    @classmethod
    def from_dict(cls, raw: Any) -> ExemptionRule:
        if not isinstance(raw, dict):
            raise ConfigurationError(f"exemption must be a mapping, got {type(raw).__name__}")
        rule = cls(
            rules=tuple(str(r) for r in raw.get("rules") or []),
            namespace=str(raw.get("namespace") or ""),
            controller_names=tuple(str(n) for n in raw.get("controllerNames") or []),
            container_names=tuple(str(n) for n in raw.get("containerNames") or []),
        )
        if rule == cls():
            raise ConfigurationError(
                "exemption must set at least one of rules, namespace, controllerNames, containerNames"
            )
        return rule

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.namespace:
            data["namespace"] = self.namespace
        if self.controller_names:
            data["controllerNames"] = list(self.controller_names)
        if self.container_names:
            data["containerNames"] = list(self.container_names)
        if self.rules:
            data["rules"] = list(self.rules)
        return data


@dataclass(frozen=True)
class AuditConfiguration:
    """Everything an evaluation pass needs to know beyond the catalog."""

    checks: Mapping[str, Severity] = field(default_factory=dict)
    custom_checks: Mapping[str, SchemaCheck] = field(default_factory=dict)
    # Custom check ID → reason it failed to decode
    invalid_custom_checks: Mapping[str, str] = field(default_factory=dict)
    exemptions: tuple[ExemptionRule, ...] = ()
    # Ignore exemption annotations on manifests
    disallow_exemptions: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "checks", MappingProxyType(dict(self.checks)))
        object.__setattr__(self, "custom_checks", MappingProxyType(dict(self.custom_checks)))
        object.__setattr__(self, "invalid_custom_checks", MappingProxyType(dict(self.invalid_custom_checks)))
        object.__setattr__(self, "exemptions", tuple(self.exemptions))

    # -----------------------------------------------------------------------
    # Convenience helpers
    # -----------------------------------------------------------------------

    def severity(self, check_id: str) -> Severity | None:
        """Return the configured severity for *check_id*, or ``None``."""
        return self.checks.get(check_id)

    def sorted_check_ids(self) -> list[str]:
        """Configured check IDs in lexicographic order."""
        return sorted(self.checks)

    def is_actionable(self, check_id: str, namespace: str, name: str, container_name: str = "") -> bool:
        """Whether *check_id* should run for this object (and container).

        A check runs only if it has a non-``ignore`` severity and no
        exemption rule in this configuration matches.
        """
        severity = self.checks.get(check_id)
        if severity is None or not severity.is_actionable:
            return False
        return not any(rule.matches(check_id, namespace, name, container_name) for rule in self.exemptions)

    def with_changes(self, **changes: Any) -> AuditConfiguration:
        """Return a copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    @classmethod
    def default(cls) -> AuditConfiguration:
        """Load the built-in default configuration that ships with the package."""
        return cls.from_yaml(_DEFAULT_CONFIG_PATH)

    @classmethod
    def from_yaml(cls, path: str | Path) -> AuditConfiguration:
        """
        Load a configuration from a YAML file.

        The YAML is first merged on top of the built-in defaults so that
        users only need to specify the sections they want to override.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, encoding="utf-8") as fh:
            try:
                raw = yaml.safe_load(fh) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Configuration in {path} must be a mapping")

        if path.resolve() == _DEFAULT_CONFIG_PATH.resolve():
            return cls.from_dict(raw)
        return cls.from_dict(cls._deep_merge(cls._load_default_raw(), raw))

    def to_yaml(self, path: str | Path) -> None:
        """Dump the full configuration to a YAML file for editing."""
        with open(path, "w", encoding="utf-8") as fh:
            fh.write("# kube-audit – Audit Configuration\n")
            fh.write("# Only include sections you want to override; omitted sections\n")
            fh.write("# will use the built-in defaults.\n\n")
            yaml.dump(self.to_dict(), fh, default_flow_style=False, sort_keys=False, width=120)

    # -----------------------------------------------------------------------
    # Internal parsing
    # -----------------------------------------------------------------------

    @classmethod
    def _load_default_raw(cls) -> dict[str, Any]:
        if _DEFAULT_CONFIG_PATH.exists():
            with open(_DEFAULT_CONFIG_PATH, encoding="utf-8") as fh:
                return yaml.safe_load(fh) or {}
        return {}

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Recursively merge *override* into *base*.

        Lists in *override* replace those in *base*, so an org can narrow the
        default exemptions without repeating every entry.
        """
        result = dict(base)
        for key, val in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(val, dict):
                result[key] = AuditConfiguration._deep_merge(result[key], val)
            else:
                result[key] = val
        return result

    @staticmethod
    def _parse_severity(check_id: str, value: Any) -> Severity:
        try:
            return Severity(str(value).lower())
        except ValueError:
            allowed = ", ".join(s.value for s in Severity)
            raise ConfigurationError(
                f"Invalid severity {value!r} for check '{check_id}' (expected one of {allowed})"
            ) from None

    @staticmethod
    def _parse_flag(key: str, value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        raise ConfigurationError(f"{key} must be true or false, got {value!r}")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AuditConfiguration:
        checks = {str(k): cls._parse_severity(str(k), v) for k, v in (d.get("checks") or {}).items()}

        custom_checks: dict[str, SchemaCheck] = {}
        invalid_custom_checks: dict[str, str] = {}
        for check_id, raw_check in (d.get("customChecks") or {}).items():
            check_id = str(check_id)
            try:
                custom_checks[check_id] = parse_check(raw_check, check_id)
            except MalformedCheckError as exc:
                logger.warning("Invalid custom check '%s': %s", check_id, exc.reason)
                invalid_custom_checks[check_id] = exc.reason

        raw_exemptions = d.get("exemptions") or []
        if not isinstance(raw_exemptions, list):
            raise ConfigurationError("exemptions must be a list")

        return cls(
            checks=checks,
            custom_checks=custom_checks,
            invalid_custom_checks=invalid_custom_checks,
            exemptions=tuple(ExemptionRule.from_dict(e) for e in raw_exemptions),
            disallow_exemptions=cls._parse_flag("disallowExemptions", d.get("disallowExemptions", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "checks": {check_id: severity.value for check_id, severity in self.checks.items()},
            "customChecks": {check_id: check.to_dict() for check_id, check in self.custom_checks.items()},
            "exemptions": [rule.to_dict() for rule in self.exemptions],
            "disallowExemptions": self.disallow_exemptions,
        }
