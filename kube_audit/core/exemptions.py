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
Annotation-based exemptions.

Manifest authors can opt an object out of checks with annotations:

* ``polaris.fairwinds.com/exempt: "true"`` skips every check
* ``polaris.fairwinds.com/<check-id>-exempt: "true"`` skips one check

Values are compared to ``"true"`` case-insensitively; anything else, including
a missing annotation, does not exempt.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..config.constants import KubeAuditConstants


def _is_true(value: str | None) -> bool:
    return value is not None and str(value).lower() == "true"


def has_exemption_annotation(annotations: Mapping[str, str], check_id: str) -> bool:
    """Whether *annotations* exempt the object from *check_id*."""
    if _is_true(annotations.get(KubeAuditConstants.EXEMPTION_ANNOTATION_KEY)):
        return True
    return _is_true(annotations.get(KubeAuditConstants.get_exemption_annotation(check_id)))


def is_exempt(annotations: Mapping[str, str], check_id: str, disallow_exemptions: bool) -> bool:
    """Like :func:`has_exemption_annotation`, but never exempts when the
    configuration disallows exemptions."""
    if disallow_exemptions:
        return False
    return has_exemption_annotation(annotations, check_id)
