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
Check evaluation.

A check's predicate is bound to exactly one fragment shape, named by its
``schema_target``:

* ``Pod`` – a pod specification
* ``Controller`` – the original controller object
* ``Container`` – a single container specification
* ``Other`` – any object without a dedicated shape

Evaluation is a pure function of the check and the fragment.  A predicate that
cannot be evaluated raises :class:`MalformedCheckError` rather than being
recorded as a pass or a fail.
"""

from __future__ import annotations

import re
from typing import Any

from jsonschema.exceptions import SchemaError, ValidationError
from referencing.exceptions import Unresolvable

from .exceptions import MalformedCheckError
from .models import TargetKind
from .schema_check import SchemaCheck


def evaluate(check: SchemaCheck, fragment: Any) -> bool:
    """Return whether *fragment* satisfies *check*'s predicate."""
    try:
        validator = check.validator
        return bool(validator.is_valid(fragment))
    except (SchemaError, ValidationError) as exc:
        raise MalformedCheckError(check.id, exc.message) from exc
    except Unresolvable as exc:
        raise MalformedCheckError(check.id, f"unresolvable reference: {exc}") from exc
    except (re.error, TypeError, ValueError, LookupError) as exc:
        # bad patterns only surface when applied to data
        raise MalformedCheckError(check.id, str(exc)) from exc


def _require_form(check: SchemaCheck, form: TargetKind) -> None:
    if check.schema_target is not form:
        raise MalformedCheckError(
            check.id, f"predicate expects a {check.schema_target.value} fragment, not a {form.value} fragment"
        )


def check_pod(check: SchemaCheck, pod_spec: dict[str, Any]) -> bool:
    _require_form(check, TargetKind.POD)
    return evaluate(check, pod_spec)


def check_controller(check: SchemaCheck, controller: dict[str, Any]) -> bool:
    _require_form(check, TargetKind.CONTROLLER)
    return evaluate(check, controller)


def check_container(check: SchemaCheck, container: dict[str, Any]) -> bool:
    _require_form(check, TargetKind.CONTAINER)
    return evaluate(check, container)


def check_object(check: SchemaCheck, obj: dict[str, Any]) -> bool:
    _require_form(check, TargetKind.OTHER)
    return evaluate(check, obj)


def container_as_pod(pod_spec: dict[str, Any], container: dict[str, Any]) -> dict[str, Any]:
    """Build a pod specification holding only *container*.

    Init containers are dropped so a pod-shaped predicate sees exactly one
    container.  *pod_spec* is not modified.
    """
    pod_copy = dict(pod_spec)
    pod_copy["initContainers"] = []
    pod_copy["containers"] = [container]
    return pod_copy


def check_container_in_pod(check: SchemaCheck, pod_spec: dict[str, Any], container: dict[str, Any]) -> bool:
    """Evaluate a container-scope check, whatever form its predicate takes."""
    if check.schema_target is TargetKind.POD:
        return check_pod(check, container_as_pod(pod_spec, container))
    return check_container(check, container)
