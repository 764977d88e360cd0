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

"""kube-audit exceptions.

This module defines custom exceptions for check resolution and evaluation.
All exceptions inherit from KubeAuditError for easy catching.

Example:
    >>> from kube_audit.core.exceptions import CheckNotFoundError, MalformedCheckError
    >>>
    >>> try:
    ...     results = apply_pod_schema_checks(catalog, conf, workload)
    ... except CheckNotFoundError as e:
    ...     print(f"Configuration references an unknown check: {e.check_id}")
    ... except MalformedCheckError as e:
    ...     print(f"Check {e.check_id} could not be evaluated: {e}")
"""


class KubeAuditError(Exception):
    """Base exception for all kube-audit errors."""

    pass


class CatalogLoadError(KubeAuditError):
    """Raised when a built-in check definition cannot be loaded.

    This is a startup error: the process must not continue with a
    broken catalog.
    """

    pass


class ConfigurationError(KubeAuditError):
    """Raised when an audit configuration is invalid.

    This can indicate:
    - Unknown severity values
    - Malformed exemption rules
    - A configuration file that is not a mapping
    """

    pass


class ManifestError(KubeAuditError):
    """Raised when a manifest cannot be interpreted.

    This typically indicates missing or malformed ``metadata``, or a
    workload kind whose pod specification cannot be located.
    """

    pass


class CheckNotFoundError(KubeAuditError):
    """Raised when a configured check ID exists in neither the custom nor
    the built-in checks."""

    def __init__(self, check_id: str, context: str = ""):
        self.check_id = check_id
        self.context = context
        message = f"Check {check_id} not found"
        if context:
            message = f"{message} (while validating {context})"
        super().__init__(message)


class MalformedCheckError(KubeAuditError):
    """Raised when a check definition cannot be decoded or its predicate
    cannot be evaluated against a manifest fragment."""

    def __init__(self, check_id: str, reason: str, context: str = ""):
        self.check_id = check_id
        self.reason = reason
        self.context = context
        message = f"Check {check_id} is malformed: {reason}"
        if context:
            message = f"{message} (while validating {context})"
        super().__init__(message)
