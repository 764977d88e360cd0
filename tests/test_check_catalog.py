# Copyright 2026 Cisco Systems, Inc. and its affiliates
# SPDX-License-Identifier: Apache-2.0

"""Tests for the check catalog and the built-in check loader."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from kube_audit.config.constants import KubeAuditConstants
from kube_audit.core.audit_config import AuditConfiguration
from kube_audit.core.check_catalog import CheckCatalog, CheckLoader, default_catalog
from kube_audit.core.exceptions import CatalogLoadError, MalformedCheckError
from kube_audit.core.models import TargetKind
from kube_audit.core.schema_check import parse_check

_VALID_CHECK = textwrap.dedent(
    """\
    successMessage: ok
    failureMessage: not ok
    category: Testing
    target: Pod
    schema:
      type: object
    """
)


def _write_check(directory: Path, check_id: str, body: str = _VALID_CHECK) -> None:
    (directory / f"{check_id}.yaml").write_text(body)


class TestBuiltInCatalog:
    def test_loads_every_declared_check(self, catalog):
        assert len(catalog) == len(KubeAuditConstants.CHECK_ORDER)

    def test_preserves_declared_order(self, catalog):
        assert catalog.check_ids() == list(KubeAuditConstants.CHECK_ORDER)

    def test_declared_order_is_not_alphabetical(self, catalog):
        assert catalog.check_ids() != sorted(catalog.check_ids())

    def test_default_catalog_is_cached(self):
        assert default_catalog() is default_catalog()

    def test_check_ids_match_file_names(self, catalog):
        for check in catalog:
            assert (KubeAuditConstants.CHECKS_DIR / f"{check.id}.yaml").exists()

    def test_every_check_has_messages_and_category(self, catalog):
        for check in catalog:
            assert check.success_message, check.id
            assert check.failure_message, check.id
            assert check.category, check.id

    @pytest.mark.parametrize(
        "check_id, target",
        [
            ("multipleReplicasForDeployment", TargetKind.CONTROLLER),
            ("hostIPCSet", TargetKind.POD),
            ("memoryLimitsMissing", TargetKind.CONTAINER),
            ("tlsSettingsMissing", TargetKind.OTHER),
        ],
    )
    def test_targets(self, catalog, check_id, target):
        assert catalog.get(check_id).target is target

    def test_run_as_root_uses_pod_shaped_predicate(self, catalog):
        check = catalog.get("runAsRootAllowed")
        assert check.target is TargetKind.CONTAINER
        assert check.schema_target is TargetKind.POD

    def test_every_default_config_check_is_built_in(self, catalog, default_conf):
        assert set(default_conf.checks) <= set(catalog.check_ids())


class TestCatalogAccessors:
    def test_all_checks_returns_copy(self, catalog):
        checks = catalog.all_checks()
        checks.pop("hostIPCSet")
        assert "hostIPCSet" in catalog

    def test_contains(self, catalog):
        assert "memoryLimitsMissing" in catalog
        assert "myOrgCheck" not in catalog

    def test_get_unknown_returns_none(self, catalog):
        assert catalog.get("myOrgCheck") is None

    def test_duplicate_ids_rejected(self):
        check = parse_check({"target": "Pod", "schema": {}}, "dup")
        with pytest.raises(CatalogLoadError, match="dup"):
            CheckCatalog([check, check])


class TestResolve:
    def test_built_in_without_configuration(self, catalog):
        assert catalog.resolve("hostPIDSet").id == "hostPIDSet"

    def test_custom_check_shadows_built_in(self, catalog):
        conf = AuditConfiguration.from_dict(
            {
                "checks": {"memoryLimitsMissing": "danger"},
                "customChecks": {
                    "memoryLimitsMissing": {
                        "successMessage": "custom ok",
                        "failureMessage": "custom not ok",
                        "category": "Custom",
                        "target": "Container",
                        "schema": {"type": "object"},
                    }
                },
            }
        )
        resolved = catalog.resolve("memoryLimitsMissing", conf)
        assert resolved.category == "Custom"
        assert resolved == conf.custom_checks["memoryLimitsMissing"]
        # the shared catalog is untouched
        assert catalog.get("memoryLimitsMissing").category == "Efficiency"

    def test_custom_only_check(self, catalog):
        conf = AuditConfiguration.from_dict(
            {"customChecks": {"myOrgCheck": {"target": "Controller", "schema": {"type": "object"}}}}
        )
        assert catalog.resolve("myOrgCheck", conf).target is TargetKind.CONTROLLER

    def test_unknown_check_returns_none(self, catalog, default_conf):
        assert catalog.resolve("myOrgCheck", default_conf) is None

    def test_invalid_custom_check_raises(self, catalog):
        conf = AuditConfiguration.from_dict({"customChecks": {"myOrgCheck": {"target": "Nowhere", "schema": {}}}})
        with pytest.raises(MalformedCheckError) as exc_info:
            catalog.resolve("myOrgCheck", conf)
        assert exc_info.value.check_id == "myOrgCheck"


class TestCheckLoader:
    def test_build_catalog_from_directory(self, tmp_path):
        _write_check(tmp_path, "second")
        _write_check(tmp_path, "first")
        catalog = CheckLoader().build_catalog(checks_dir=tmp_path, check_order=["second", "first"])
        assert catalog.check_ids() == ["second", "first"]

    def test_missing_built_in_is_fatal(self, tmp_path):
        with pytest.raises(CatalogLoadError, match="absent"):
            CheckLoader().build_catalog(checks_dir=tmp_path, check_order=["absent"])

    def test_malformed_built_in_is_fatal(self, tmp_path):
        _write_check(tmp_path, "good")
        _write_check(tmp_path, "broken", "target: Sideways\nschema: {}\n")
        with pytest.raises(CatalogLoadError, match="broken"):
            CheckLoader().build_catalog(checks_dir=tmp_path, check_order=["good", "broken"])

    def test_invalid_yaml_is_fatal(self, tmp_path):
        _write_check(tmp_path, "broken", "target: [Pod\n")
        with pytest.raises(CatalogLoadError):
            CheckLoader().build_catalog(checks_dir=tmp_path, check_order=["broken"])

    def test_unreadable_definition_is_fatal(self, tmp_path):
        (tmp_path / "binary.yaml").write_bytes(b"\xff\xfe\x00target: Pod\n")
        with pytest.raises(CatalogLoadError, match="binary"):
            CheckLoader().build_catalog(checks_dir=tmp_path, check_order=["binary"])

    def test_directory_in_place_of_definition_is_fatal(self, tmp_path):
        (tmp_path / "nested.yaml").mkdir()
        with pytest.raises(CatalogLoadError, match="nested"):
            CheckLoader().build_catalog(checks_dir=tmp_path, check_order=["nested"])

    def test_file_stem_becomes_id(self, tmp_path):
        _write_check(tmp_path, "stemmed", "id: ignored\n" + _VALID_CHECK)
        check = CheckLoader().load_check(tmp_path / "stemmed.yaml")
        assert check.id == "stemmed"
