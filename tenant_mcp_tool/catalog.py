"""Read the cluster's CRD registry for the tenant group.

Every call is a live read of the apiextensions API; nothing is cached, so the
listing always reflects the types currently installed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tenant_mcp_tool.errors import ForbiddenError, NotFoundError
from tenant_mcp_tool.schema import flatten_schema
from tenant_mcp_tool.store import error_detail, status_error_class

logger = logging.getLogger("mcp-server")

NAMESPACED_SCOPE = "Namespaced"
DESCRIPTION_ANNOTATION = "description"


@dataclass(frozen=True)
class TypeSummary:
    kind: str
    group: str
    version: str
    namespaced: bool
    plural: str
    singular: str

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "kind": self.kind,
            "group": self.group,
            "version": self.version,
            "namespaced": self.namespaced,
            "plural": self.plural,
        }
        if self.singular:
            result["singular"] = self.singular
        return result


@dataclass(frozen=True)
class TypeDetail(TypeSummary):
    name: str = ""
    short_names: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    schema: Optional[Dict[str, Any]] = None
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result = {"name": self.name}
        result.update(super().to_dict())
        if self.short_names:
            result["shortNames"] = list(self.short_names)
        if self.categories:
            result["categories"] = list(self.categories)
        if self.schema:
            result["schema"] = self.schema
        if self.description:
            result["description"] = self.description
        return result


def storage_version(crd):
    """The version flagged as storage, else the first declared one.

    The fallback can pick a version whose schema differs from what is
    actually persisted when the CRD's metadata is incomplete.
    """
    versions = crd.spec.versions or []
    for version in versions:
        if version.storage:
            return version
    if versions:
        logger.warning(
            f"CRD '{crd.metadata.name}' has no storage version, "
            f"falling back to '{versions[0].name}'"
        )
        return versions[0]
    return None


def _summary_fields(crd) -> Dict[str, Any]:
    names = crd.spec.names
    version = storage_version(crd)
    return {
        "kind": names.kind,
        "group": crd.spec.group,
        "version": version.name if version is not None else "",
        "namespaced": crd.spec.scope == NAMESPACED_SCOPE,
        "plural": names.plural,
        "singular": names.singular or "",
    }


class CatalogReader:
    def __init__(self, apiextensions_api, tenant_group: str):
        self.api = apiextensions_api
        self.tenant_group = tenant_group

    def list_types(self) -> List[TypeSummary]:
        logger.debug("Listing CustomResourceDefinitions")
        try:
            crd_list = self.api.list_custom_resource_definition()
        except Exception as e:
            logger.error(f"Failed to list CRDs: {e}")
            raise status_error_class(e)(f"failed to list CRDs: {error_detail(e)}") from e

        logger.info(f"Found {len(crd_list.items)} CRDs in cluster")
        types = [
            TypeSummary(**_summary_fields(crd))
            for crd in crd_list.items
            if crd.spec.group == self.tenant_group
        ]
        types.sort(key=lambda t: t.kind)
        return types

    def get_type_detail(self, name: str) -> TypeDetail:
        logger.debug(f"Getting CustomResourceDefinition '{name}'")
        try:
            crd = self.api.read_custom_resource_definition(name)
        except Exception as e:
            logger.error(f"Failed to get CRD '{name}': {e}")
            error_cls = status_error_class(e)
            if error_cls is NotFoundError:
                raise NotFoundError(f"CRD '{name}' not found", name=name) from e
            raise error_cls(f"failed to get CRD '{name}': {error_detail(e)}", name=name) from e

        group = crd.spec.group
        if group != self.tenant_group:
            logger.warning(f"Attempted to access CRD '{name}' outside the tenant group ({group})")
            raise ForbiddenError(
                f"CRD '{name}' does not belong to the '{self.tenant_group}' group",
                name=name,
                group=group,
            )

        version = storage_version(crd)
        schema = None
        if version is not None and version.schema and version.schema.open_apiv3_schema:
            schema = flatten_schema(version.schema.open_apiv3_schema)

        annotations = crd.metadata.annotations or {}
        names = crd.spec.names
        return TypeDetail(
            name=crd.metadata.name,
            short_names=list(names.short_names or []),
            categories=list(names.categories or []),
            schema=schema,
            description=annotations.get(DESCRIPTION_ANNOTATION, ""),
            **_summary_fields(crd),
        )
