"""Error taxonomy for the dynamic resource layer.

Every error carries the coordinates of the operation that failed so that a
caller (usually an LLM driving the MCP tools) can diagnose the problem
without retrying blindly.
"""

from typing import Any, Dict, Optional


class ResourceError(Exception):
    """Base class for all resource layer failures."""

    reason = "ResourceError"

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        name: Optional[str] = None,
        namespace: Optional[str] = None,
        group: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.name = name
        self.namespace = namespace
        self.group = group

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"error": self.message, "reason": self.reason}
        for key in ("kind", "name", "namespace", "group"):
            value = getattr(self, key)
            if value:
                result[key] = value
        return result


class InvalidInputError(ResourceError):
    reason = "InvalidInput"


class ForbiddenError(ResourceError):
    reason = "Forbidden"


class NotFoundError(ResourceError):
    reason = "NotFound"


class ConflictError(ResourceError):
    reason = "Conflict"


class StoreUnavailableError(ResourceError):
    reason = "StoreUnavailable"


class ScopeDriftError(InvalidInputError):
    """The static scope table disagrees with the live type catalog."""

    reason = "ScopeDrift"
