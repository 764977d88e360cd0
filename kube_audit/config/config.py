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
Runtime settings for kube-audit.

Settings come from the environment, optionally seeded from a ``.env`` file,
and select which audit configuration file to load.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from ..core.audit_config import AuditConfiguration


@dataclass
class Config:
    """
    Runtime settings for kube-audit.
    """

    # Audit configuration file; None means the built-in defaults
    audit_config_path: Path | None = None

    # Force DisallowExemptions on, whatever the configuration file says
    disallow_exemptions: bool = False

    # Logging
    log_level: str = "WARNING"

    def __post_init__(self):
        """Load settings from environment variables if not provided."""

        if self.audit_config_path is None:
            if env_path := os.getenv("KUBE_AUDIT_CONFIG"):
                self.audit_config_path = Path(env_path)

        if os.getenv("KUBE_AUDIT_DISALLOW_EXEMPTIONS", "").lower() in ("true", "1"):
            self.disallow_exemptions = True

        if self.log_level == "WARNING":
            if env_level := os.getenv("KUBE_AUDIT_LOG_LEVEL"):
                self.log_level = env_level.upper()

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create settings from environment variables.

        Returns:
            Config instance with values from environment
        """
        return cls()

    @classmethod
    def from_file(cls, config_file: Path) -> "Config":
        """
        Load settings from a .env file.

        Variables already set in the environment take precedence.

        Args:
            config_file: Path to .env file

        Returns:
            Config instance
        """
        if config_file.exists():
            load_dotenv(config_file, override=False)

        return cls.from_env()

    def configure_logging(self) -> None:
        """Apply ``log_level`` to the package logger."""
        logging.getLogger("kube_audit").setLevel(self.log_level)

    def load_audit_configuration(self) -> AuditConfiguration:
        """Load the audit configuration these settings point at."""
        if self.audit_config_path is not None:
            conf = AuditConfiguration.from_yaml(self.audit_config_path)
        else:
            conf = AuditConfiguration.default()
        if self.disallow_exemptions:
            conf = conf.with_changes(disallow_exemptions=True)
        return conf
