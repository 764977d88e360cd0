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
Constants for kube-audit.
"""

from pathlib import Path

try:
    from .._version import __version__ as PACKAGE_VERSION
except Exception:  # pragma: no cover
    PACKAGE_VERSION = "0.0.0-dev"


class KubeAuditConstants:
    """Constants used throughout the engine."""

    VERSION = PACKAGE_VERSION

    # Package paths
    PACKAGE_ROOT = Path(__file__).parent.parent

    # Resource paths
    DATA_DIR = PACKAGE_ROOT / "data"
    CHECKS_DIR = DATA_DIR / "checks"
    DEFAULT_CONFIG_PATH = DATA_DIR / "default_config.yaml"

    # Manifest annotations
    EXEMPTION_ANNOTATION_KEY = "polaris.fairwinds.com/exempt"
    EXEMPTION_ANNOTATION_PATTERN = "polaris.fairwinds.com/{check_id}-exempt"

    # Container classifications used by ``containers`` include/exclude lists
    CONTAINER_REGULAR = "container"
    CONTAINER_INIT = "initContainer"

    # Built-in checks, loaded in this order.  The order is explicit so that
    # fixtures depending on catalog order stay stable as checks are added.
    CHECK_ORDER = (
        # Controller checks
        "multipleReplicasForDeployment",
        # Pod checks
        "hostIPCSet",
        "hostPIDSet",
        "hostNetworkSet",
        # Container checks
        "memoryLimitsMissing",
        "memoryRequestsMissing",
        "cpuLimitsMissing",
        "cpuRequestsMissing",
        "readinessProbeMissing",
        "livenessProbeMissing",
        "pullPolicyNotAlways",
        "tagNotSpecified",
        "hostPortSet",
        "runAsRootAllowed",
        "runAsPrivileged",
        "notReadOnlyRootFilesystem",
        "privilegeEscalationAllowed",
        "dangerousCapabilities",
        "insecureCapabilities",
        "priorityClassNotSet",
        # Other checks
        "tlsSettingsMissing",
        "pdbDisruptionsAllowedGreaterThanZero",
    )

    @classmethod
    def get_checks_path(cls) -> Path:
        """Get path to the built-in check definitions."""
        return cls.CHECKS_DIR

    @classmethod
    def get_exemption_annotation(cls, check_id: str) -> str:
        """Get the per-check exemption annotation key for *check_id*."""
        return cls.EXEMPTION_ANNOTATION_PATTERN.format(check_id=check_id)
