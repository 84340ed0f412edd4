import copy

import pytest

from tenant_mcp_tool.config import Settings
from tenant_mcp_tool.errors import ConflictError, NotFoundError


class FakeStore:
    """In-memory cluster resource store keyed by (kind, namespace, name)."""

    def __init__(self):
        self.objects = {}
        self.calls = []

    def _key(self, descriptor, name, namespace):
        return (descriptor.kind, namespace or "", name)

    def get(self, descriptor, name, namespace=""):
        self.calls.append(("get", descriptor.kind, name, namespace))
        key = self._key(descriptor, name, namespace)
        if key not in self.objects:
            raise NotFoundError(f"{descriptor.kind} '{name}' not found",
                                kind=descriptor.kind, name=name, namespace=namespace)
        return copy.deepcopy(self.objects[key])

    def list(self, descriptor, namespace=""):
        self.calls.append(("list", descriptor.kind, namespace))
        return [
            copy.deepcopy(obj) for (kind, ns, _), obj in sorted(self.objects.items())
            if kind == descriptor.kind and (not namespace or ns == namespace)
        ]

    def create(self, descriptor, body, namespace=""):
        name = body["metadata"]["name"]
        self.calls.append(("create", descriptor.kind, name, namespace))
        key = self._key(descriptor, name, namespace)
        if key in self.objects:
            raise ConflictError(f"{descriptor.kind} '{name}' already exists")
        self.objects[key] = copy.deepcopy(body)
        return copy.deepcopy(body)

    def apply(self, descriptor, body, name, namespace, field_manager):
        self.calls.append(("apply", descriptor.kind, name, namespace, field_manager))
        key = self._key(descriptor, name, namespace)
        if key not in self.objects:
            raise NotFoundError(f"{descriptor.kind} '{name}' not found")
        merged = copy.deepcopy(self.objects[key])
        merged.update(copy.deepcopy(body))
        self.objects[key] = merged
        return copy.deepcopy(merged)

    def delete(self, descriptor, name, namespace=""):
        self.calls.append(("delete", descriptor.kind, name, namespace))
        key = self._key(descriptor, name, namespace)
        if key not in self.objects:
            raise NotFoundError(f"{descriptor.kind} '{name}' not found")
        del self.objects[key]


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def settings(monkeypatch):
    from tenant_mcp_tool import config

    s = Settings()
    monkeypatch.setattr(config, "settings", s)
    return s
