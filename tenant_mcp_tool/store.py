"""Cluster resource store backed by the Kubernetes dynamic client.

The store addresses instances by (TypeDescriptor, namespace, name) and hides
discovery of the served resource behind each call. Every failure is
translated into the resource error taxonomy with the coordinates attached.
"""

from typing import Any, Callable, Dict, List, Optional, Type

from kubernetes.client.exceptions import ApiException
from kubernetes.dynamic.exceptions import ResourceNotFoundError

from tenant_mcp_tool.descriptors import TypeDescriptor
from tenant_mcp_tool.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    ResourceError,
    StoreUnavailableError,
)

_STATUS_ERRORS = {
    400: InvalidInputError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: InvalidInputError,
}


def status_error_class(exc: Exception) -> Type[ResourceError]:
    """Error class for a client exception; anything without a mapped status is StoreUnavailable."""
    if isinstance(exc, ApiException):
        return _STATUS_ERRORS.get(exc.status, StoreUnavailableError)
    return StoreUnavailableError


def error_detail(exc: Exception) -> str:
    if isinstance(exc, ApiException) and exc.reason:
        return exc.reason
    return str(exc)


def translate_error(
    exc: Exception,
    action: str,
    descriptor: TypeDescriptor,
    name: Optional[str] = None,
    namespace: Optional[str] = None,
) -> ResourceError:
    """Wrap a client exception in the matching ResourceError subclass."""
    context = {
        "kind": descriptor.kind,
        "name": name,
        "namespace": namespace,
        "group": descriptor.group,
    }
    if isinstance(exc, ResourceError):
        return exc
    if isinstance(exc, ResourceNotFoundError):
        return NotFoundError(
            f"resource type {descriptor} is not served by the cluster", **context
        )
    target = f"{descriptor.kind} '{name}'" if name else descriptor.kind
    return status_error_class(exc)(
        f"failed to {action} {target}: {error_detail(exc)}", **context
    )


class ClusterResourceStore:
    """get/list/create/apply/delete by coordinates over a DynamicClient.

    ``connect`` builds the DynamicClient. It runs discovery against the API
    server, so it is called on first use inside each operation's error
    translation.
    """

    def __init__(self, connect: Callable[[], Any]):
        self._connect = connect
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = self._connect()
        return self._client

    def _resource(self, descriptor: TypeDescriptor):
        return self.client.resources.get(
            api_version=descriptor.api_version, kind=descriptor.kind
        )

    def get(self, descriptor: TypeDescriptor, name: str, namespace: str = "") -> Dict[str, Any]:
        try:
            resource = self._resource(descriptor)
            obj = self.client.get(resource, name=name, namespace=namespace or None)
            return obj.to_dict()
        except Exception as e:
            raise translate_error(e, "get", descriptor, name, namespace) from e

    def list(self, descriptor: TypeDescriptor, namespace: str = "") -> List[Dict[str, Any]]:
        try:
            resource = self._resource(descriptor)
            result = self.client.get(resource, namespace=namespace or None)
            return result.to_dict().get("items") or []
        except Exception as e:
            raise translate_error(e, "list", descriptor, namespace=namespace) from e

    def create(self, descriptor: TypeDescriptor, body: Dict[str, Any],
               namespace: str = "") -> Dict[str, Any]:
        name = body.get("metadata", {}).get("name")
        try:
            resource = self._resource(descriptor)
            obj = self.client.create(resource, body=body, namespace=namespace or None)
            return obj.to_dict()
        except Exception as e:
            raise translate_error(e, "create", descriptor, name, namespace) from e

    def apply(self, descriptor: TypeDescriptor, body: Dict[str, Any], name: str,
              namespace: str, field_manager: str) -> Dict[str, Any]:
        """Server-side apply with forced field ownership."""
        try:
            resource = self._resource(descriptor)
            obj = self.client.server_side_apply(
                resource,
                body=body,
                name=name,
                namespace=namespace or None,
                field_manager=field_manager,
                force_conflicts=True,
            )
            return obj.to_dict()
        except Exception as e:
            raise translate_error(e, "apply", descriptor, name, namespace) from e

    def delete(self, descriptor: TypeDescriptor, name: str, namespace: str = "") -> None:
        try:
            resource = self._resource(descriptor)
            self.client.delete(resource, name=name, namespace=namespace or None)
        except Exception as e:
            raise translate_error(e, "delete", descriptor, name, namespace) from e
