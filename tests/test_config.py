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
Tests for runtime settings and constants.
"""

import os
import textwrap
from pathlib import Path
from unittest.mock import patch

from kube_audit.config.config import Config
from kube_audit.config.constants import KubeAuditConstants
from kube_audit.core.models import Severity


def _clean_env():
    return {k: v for k, v in os.environ.items() if not k.startswith("KUBE_AUDIT_")}


class TestConfigInitialization:
    """Test Config class initialization."""

    def test_config_with_defaults(self):
        with patch.dict("os.environ", _clean_env(), clear=True):
            config = Config()

            assert config.audit_config_path is None
            assert config.disallow_exemptions is False
            assert config.log_level == "WARNING"

    def test_config_from_env_variables(self):
        with patch.dict(
            "os.environ",
            {
                "KUBE_AUDIT_CONFIG": "/etc/kube-audit/audit.yaml",
                "KUBE_AUDIT_DISALLOW_EXEMPTIONS": "true",
                "KUBE_AUDIT_LOG_LEVEL": "debug",
            },
        ):
            config = Config.from_env()

            assert config.audit_config_path == Path("/etc/kube-audit/audit.yaml")
            assert config.disallow_exemptions is True
            assert config.log_level == "DEBUG"

    def test_explicit_values_win(self):
        with patch.dict("os.environ", {"KUBE_AUDIT_CONFIG": "/from/env.yaml"}):
            config = Config(audit_config_path=Path("/explicit.yaml"))

            assert config.audit_config_path == Path("/explicit.yaml")

    def test_from_dotenv_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("KUBE_AUDIT_DISALLOW_EXEMPTIONS=1\n# comment\nKUBE_AUDIT_LOG_LEVEL=info\n")
        with patch.dict("os.environ", _clean_env(), clear=True):
            config = Config.from_file(env_file)

            assert config.disallow_exemptions is True
            assert config.log_level == "INFO"

    def test_missing_dotenv_file(self, tmp_path):
        with patch.dict("os.environ", _clean_env(), clear=True):
            config = Config.from_file(tmp_path / "absent.env")

            assert config.disallow_exemptions is False


class TestLoadAuditConfiguration:
    def test_defaults(self):
        with patch.dict("os.environ", _clean_env(), clear=True):
            conf = Config().load_audit_configuration()

            assert conf.severity("memoryLimitsMissing") is Severity.WARNING
            assert conf.disallow_exemptions is False

    def test_file_and_disallow_override(self, tmp_path):
        path = tmp_path / "audit.yaml"
        path.write_text(
            textwrap.dedent(
                """\
                checks:
                  memoryLimitsMissing: danger
                """
            )
        )
        with patch.dict("os.environ", _clean_env(), clear=True):
            conf = Config(audit_config_path=path, disallow_exemptions=True).load_audit_configuration()

            assert conf.severity("memoryLimitsMissing") is Severity.DANGER
            assert conf.disallow_exemptions is True

    def test_configure_logging(self):
        import logging

        with patch.dict("os.environ", _clean_env(), clear=True):
            Config(log_level="DEBUG").configure_logging()

        assert logging.getLogger("kube_audit").level == logging.DEBUG
        logging.getLogger("kube_audit").setLevel(logging.NOTSET)


class TestConstants:
    def test_paths_exist(self):
        assert KubeAuditConstants.get_checks_path().is_dir()
        assert KubeAuditConstants.DEFAULT_CONFIG_PATH.exists()

    def test_check_order_has_no_duplicates(self):
        assert len(set(KubeAuditConstants.CHECK_ORDER)) == len(KubeAuditConstants.CHECK_ORDER)
