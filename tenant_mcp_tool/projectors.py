"""Shape raw instance documents into list, get and delete results."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_timestamp(value: Any) -> Optional[str]:
    """ISO-8601 UTC timestamp, or None when unset."""
    if not value:
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return str(value)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


def _mapping(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) and value else None


@dataclass
class ResourceSummary:
    name: str
    namespace: str = ""
    created_at: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)
    status: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name}
        if self.namespace:
            result["namespace"] = self.namespace
        if self.created_at:
            result["createdAt"] = self.created_at
        if self.labels:
            result["labels"] = self.labels
        if self.status:
            result["status"] = self.status
        return result


@dataclass
class ListResourcesResult:
    api_version: str
    kind: str
    items: List[ResourceSummary]

    @property
    def total_count(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "items": [item.to_dict() for item in self.items],
            "totalCount": self.total_count,
        }


@dataclass
class GetResourceResult:
    api_version: str
    kind: str
    name: str
    namespace: str = ""
    spec: Optional[Dict[str, Any]] = None
    status: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
        }
        if self.namespace:
            result["namespace"] = self.namespace
        if self.spec is not None:
            result["spec"] = self.spec
        if self.status is not None:
            result["status"] = self.status
        return result


@dataclass
class DeleteResourceResult:
    api_version: str
    kind: str
    name: str
    namespace: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "message": self.message,
        }
        if self.namespace:
            result["namespace"] = self.namespace
        return result


def summarize(item: Dict[str, Any]) -> ResourceSummary:
    metadata = item.get("metadata") or {}
    return ResourceSummary(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace") or "",
        created_at=format_timestamp(metadata.get("creationTimestamp")),
        labels=metadata.get("labels") or {},
        status=_mapping(item.get("status")),
    )


def project_list(api_version: str, kind: str, items: List[Dict[str, Any]]) -> ListResourcesResult:
    return ListResourcesResult(
        api_version=api_version,
        kind=kind,
        items=[summarize(item) for item in items],
    )


def project_detail(obj: Dict[str, Any]) -> GetResourceResult:
    metadata = obj.get("metadata") or {}
    return GetResourceResult(
        api_version=obj.get("apiVersion", ""),
        kind=obj.get("kind", ""),
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace") or "",
        spec=_mapping(obj.get("spec")),
        status=_mapping(obj.get("status")),
    )


def project_deletion(api_version: str, kind: str, name: str, namespace: str) -> DeleteResourceResult:
    return DeleteResourceResult(
        api_version=api_version,
        kind=kind,
        name=name,
        namespace=namespace,
        message=f"Resource {kind}/{name} deleted successfully",
    )
