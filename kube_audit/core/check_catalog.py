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
Check catalog – the built-in check definitions and custom-check lookup.

Architecture
~~~~~~~~~~~~

Checks come from two sources:

* **Built-in checks** – one ``<check-id>.yaml`` file per check under
  ``kube_audit/data/checks/``, loaded in the fixed ``CHECK_ORDER``
* **Custom checks** – declared under ``customChecks`` in the audit
  configuration

The :class:`CheckLoader` builds a :class:`CheckCatalog` once at startup.  The
catalog is read-only after construction, so a single instance can serve any
number of concurrent evaluation passes.  Custom checks are never added to the
catalog; they travel with the per-call configuration and shadow built-in
checks that share their ID.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..config.constants import KubeAuditConstants
from .exceptions import CatalogLoadError, MalformedCheckError
from .schema_check import SchemaCheck, parse_check_yaml

if TYPE_CHECKING:
    from .audit_config import AuditConfiguration

logger = logging.getLogger(__name__)


class CheckCatalog:
    """Immutable, ordered set of built-in check definitions."""

    def __init__(self, checks: Iterable[SchemaCheck] = ()) -> None:
        ordered: dict[str, SchemaCheck] = {}
        for check in checks:
            if check.id in ordered:
                raise CatalogLoadError(f"Check ID collision: '{check.id}' is defined twice")
            ordered[check.id] = check
        self._checks = MappingProxyType(ordered)

    # -- Read-only accessors ------------------------------------------------

    def get(self, check_id: str) -> SchemaCheck | None:
        """Look up a built-in check by ID."""
        return self._checks.get(check_id)

    def resolve(self, check_id: str, conf: AuditConfiguration | None = None) -> SchemaCheck | None:
        """Look up *check_id*, preferring a custom check from *conf*.

        Raises:
            MalformedCheckError: If *conf* declares a custom check with this
                ID that failed to decode.
        """
        if conf is not None:
            custom = conf.custom_checks.get(check_id)
            if custom is not None:
                return custom
            reason = conf.invalid_custom_checks.get(check_id)
            if reason is not None:
                raise MalformedCheckError(check_id, reason)
        return self._checks.get(check_id)

    def check_ids(self) -> list[str]:
        """Return built-in check IDs in declaration order."""
        return list(self._checks)

    def all_checks(self) -> dict[str, SchemaCheck]:
        """Return a shallow copy of the built-in checks."""
        return dict(self._checks)

    def __iter__(self) -> Iterator[SchemaCheck]:
        return iter(self._checks.values())

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, check_id: object) -> bool:
        return check_id in self._checks


class CheckLoader:
    """Loads built-in check definitions from a directory of YAML files."""

    _BUILT_IN_CHECKS_DIR: Path = KubeAuditConstants.CHECKS_DIR

    def load_check(self, path: Path, check_id: str | None = None) -> SchemaCheck:
        """Load a single check definition from *path*.

        The check ID defaults to the file stem.

        Raises:
            FileNotFoundError: If *path* does not exist.
            OSError: If *path* cannot be read.
            UnicodeDecodeError: If *path* is not UTF-8 text.
            MalformedCheckError: On malformed definition data.
        """
        path = Path(path)
        check_id = check_id or path.stem
        with open(path, encoding="utf-8") as fh:
            contents = fh.read()
        return parse_check_yaml(contents, check_id)

    def build_catalog(
        self,
        checks_dir: Path | None = None,
        check_order: Iterable[str] | None = None,
    ) -> CheckCatalog:
        """Load every check in *check_order* from *checks_dir*.

        Any missing or malformed definition is fatal: a process must not
        start with a partial catalog.

        Raises:
            CatalogLoadError: If any built-in check fails to load.
        """
        search_dir = Path(checks_dir or self._BUILT_IN_CHECKS_DIR)
        order = tuple(check_order if check_order is not None else KubeAuditConstants.CHECK_ORDER)

        checks: list[SchemaCheck] = []
        for check_id in order:
            path = search_dir / f"{check_id}.yaml"
            try:
                checks.append(self.load_check(path, check_id))
            except FileNotFoundError as exc:
                raise CatalogLoadError(f"Built-in check '{check_id}' not found at {path}") from exc
            except MalformedCheckError as exc:
                raise CatalogLoadError(f"Built-in check '{check_id}' is malformed: {exc.reason}") from exc
            except (OSError, UnicodeDecodeError) as exc:
                raise CatalogLoadError(f"Built-in check '{check_id}' could not be read from {path}: {exc}") from exc

        catalog = CheckCatalog(checks)
        logger.info("Loaded %d built-in checks from %s", len(catalog), search_dir)
        return catalog


@lru_cache(maxsize=1)
def default_catalog() -> CheckCatalog:
    """The built-in catalog, loaded once per process."""
    return CheckLoader().build_catalog()
