"""Namespace scope policy for tenant kinds.

Which kinds are cluster-scoped comes from a static table loaded from
settings at startup, not from a live schema query. ``find_drift`` compares
the table with the live type catalog so disagreements can be reported.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from tenant_mcp_tool.descriptors import GenericObject, TypeDescriptor
from tenant_mcp_tool.errors import ScopeDriftError

logger = logging.getLogger("mcp-server")


@dataclass(frozen=True)
class ScopeDrift:
    kind: str
    table: str
    declared: str

    def to_dict(self):
        return {"kind": self.kind, "table": self.table, "declared": self.declared}


def _scope_label(namespaced: bool) -> str:
    return "Namespaced" if namespaced else "Cluster"


class ScopePolicy:
    def __init__(self, cluster_scoped_kinds: Iterable[str], default_namespace: str,
                 table_version: str = "builtin"):
        self.cluster_scoped_kinds = frozenset(cluster_scoped_kinds)
        self.default_namespace = default_namespace
        self.table_version = table_version

    @classmethod
    def from_settings(cls, settings) -> "ScopePolicy":
        return cls(
            settings.cluster_scoped_kinds,
            settings.default_namespace,
            table_version=settings.scope_table_version,
        )

    def is_cluster_scoped(self, kind: str) -> bool:
        return kind in self.cluster_scoped_kinds

    def resolve_namespace(self, kind: str, namespace: Optional[str]) -> str:
        """Namespace to use for an instance of ``kind``; empty for cluster-scoped kinds."""
        if self.is_cluster_scoped(kind):
            return ""
        return namespace or self.default_namespace

    def apply_scope(self, obj: GenericObject, descriptor: TypeDescriptor) -> None:
        """Fix up the object's namespace in place."""
        kind = descriptor.kind
        current = obj.namespace
        if self.is_cluster_scoped(kind):
            if current:
                logger.warning(
                    f"Removing namespace '{current}' from cluster-scoped "
                    f"{kind} '{obj.name}'"
                )
            obj.namespace = ""
            return

        if not current:
            obj.namespace = self.default_namespace
            logger.info(
                f"Applied default namespace '{self.default_namespace}' "
                f"to {kind} '{obj.name}'"
            )

    def find_drift(self, type_summaries) -> List[ScopeDrift]:
        """Kinds whose table classification disagrees with their declared scope."""
        drift: List[ScopeDrift] = []
        for summary in type_summaries:
            table_namespaced = not self.is_cluster_scoped(summary.kind)
            if table_namespaced != summary.namespaced:
                drift.append(ScopeDrift(
                    kind=summary.kind,
                    table=_scope_label(table_namespaced),
                    declared=_scope_label(summary.namespaced),
                ))
        return drift


def verify_scopes(policy: ScopePolicy, catalog, strict: bool = False) -> List[ScopeDrift]:
    """Compare the scope table with the live catalog.

    Each disagreement is logged; with ``strict`` any drift raises ScopeDriftError.
    """
    drift = policy.find_drift(catalog.list_types())
    for entry in drift:
        logger.warning(
            f"Scope table '{policy.table_version}' classifies {entry.kind} "
            f"as {entry.table} but the cluster declares it {entry.declared}"
        )
    if drift and strict:
        kinds = ", ".join(entry.kind for entry in drift)
        raise ScopeDriftError(f"scope table disagrees with the cluster for: {kinds}")
    return drift
