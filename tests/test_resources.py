"""Unit tests for the upsert engine and ResourceService over an in-memory store."""

import json

import pytest

from tenant_mcp_tool.descriptors import GenericObject, TypeDescriptor
from tenant_mcp_tool.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
)
from tenant_mcp_tool.resources import ResourceService
from tenant_mcp_tool.upsert import ApplyResult, UpsertEngine

WIDGET = {"apiVersion": "tenant.dev/v1alpha1", "kind": "Widget", "metadata": {"name": "w1"}}


class TestUpsertEngine:

    @pytest.mark.unit
    def test_create_when_absent(self, fake_store):
        engine = UpsertEngine(fake_store, "tenant-mcp")
        obj = GenericObject({**WIDGET, "metadata": {"name": "w1", "namespace": "default"}})
        result = engine.apply(obj, TypeDescriptor("tenant.dev", "v1alpha1", "Widget"))
        assert result.operation == "created"
        assert [c[0] for c in fake_store.calls] == ["get", "create"]

    @pytest.mark.unit
    def test_patch_when_present(self, fake_store):
        engine = UpsertEngine(fake_store, "tenant-mcp")
        descriptor = TypeDescriptor("tenant.dev", "v1alpha1", "Widget")
        doc = {**WIDGET, "metadata": {"name": "w1", "namespace": "default"}}
        engine.apply(GenericObject(dict(doc)), descriptor)
        result = engine.apply(GenericObject(dict(doc)), descriptor)
        assert result.operation == "updated"
        assert fake_store.calls[-1] == ("apply", "Widget", "w1", "default", "tenant-mcp")
        assert len(fake_store.objects) == 1

    @pytest.mark.unit
    def test_lookup_failure_propagates(self, fake_store):
        def broken_get(*args, **kwargs):
            raise StoreUnavailableError("connection refused")

        fake_store.get = broken_get
        engine = UpsertEngine(fake_store, "tenant-mcp")
        with pytest.raises(StoreUnavailableError):
            engine.apply(
                GenericObject({**WIDGET, "metadata": {"name": "w1", "namespace": "default"}}),
                TypeDescriptor("tenant.dev", "v1alpha1", "Widget"),
            )
        assert fake_store.objects == {}


class TestApplyResource:

    @pytest.mark.unit
    def test_create_then_update(self, fake_store, settings):
        service = ResourceService(fake_store, settings)

        first = service.apply_resource(json.dumps(WIDGET))
        assert first == ApplyResult(
            api_version="tenant.dev/v1alpha1", kind="Widget", name="w1",
            namespace="default", operation="created",
        )

        second = service.apply_resource(json.dumps(WIDGET))
        assert second.operation == "updated"
        assert (second.kind, second.name, second.namespace) == ("Widget", "w1", "default")

    @pytest.mark.unit
    def test_cluster_scoped_namespace_stripped(self, fake_store, settings):
        service = ResourceService(fake_store, settings)
        doc = {
            "apiVersion": "tenant.dev/v1alpha1",
            "kind": "Organization",
            "metadata": {"name": "acme", "namespace": "ignored"},
        }
        result = service.apply_resource(json.dumps(doc))
        assert result.namespace == ""
        assert "namespace" not in result.to_dict()
        stored = fake_store.objects[("Organization", "", "acme")]
        assert "namespace" not in stored["metadata"]

    @pytest.mark.unit
    def test_forbidden_group(self, fake_store, settings):
        service = ResourceService(fake_store, settings)
        doc = {"apiVersion": "other.example/v1", "kind": "Widget", "metadata": {"name": "w"}}
        with pytest.raises(ForbiddenError):
            service.apply_resource(json.dumps(doc))
        assert fake_store.calls == []

    @pytest.mark.unit
    def test_invalid_json(self, fake_store, settings):
        service = ResourceService(fake_store, settings)
        with pytest.raises(InvalidInputError):
            service.apply_resource("{")

    @pytest.mark.unit
    def test_apply_result_to_dict(self):
        result = ApplyResult("tenant.dev/v1alpha1", "Widget", "w1", "default", "created")
        assert result.to_dict() == {
            "apiVersion": "tenant.dev/v1alpha1",
            "kind": "Widget",
            "name": "w1",
            "namespace": "default",
            "operation": "created",
        }


class TestGetDeleteList:

    def _seed(self, store, kind, name, namespace, **extra):
        store.objects[(kind, namespace, name)] = {
            "apiVersion": "tenant.dev/v1alpha1",
            "kind": kind,
            "metadata": {"name": name, "namespace": namespace} if namespace else {"name": name},
            **extra,
        }

    @pytest.mark.unit
    def test_get_defaults_namespace(self, fake_store, settings):
        self._seed(fake_store, "Widget", "w1", "default", spec={"size": 2})
        result = ResourceService(fake_store, settings).get_resource("Widget", "w1")
        assert result.namespace == "default"
        assert result.spec == {"size": 2}
        assert result.status is None
        assert "status" not in result.to_dict()

    @pytest.mark.unit
    def test_get_cluster_scoped_ignores_namespace(self, fake_store, settings):
        self._seed(fake_store, "Organization", "acme", "")
        result = ResourceService(fake_store, settings).get_resource("Organization", "acme", "team-a")
        assert result.name == "acme"
        assert fake_store.calls == [("get", "Organization", "acme", "")]

    @pytest.mark.unit
    def test_get_not_found(self, fake_store, settings):
        with pytest.raises(NotFoundError):
            ResourceService(fake_store, settings).get_resource("Widget", "missing")

    @pytest.mark.unit
    @pytest.mark.parametrize("kind, name", [("", "w1"), ("Widget", "")])
    def test_get_requires_kind_and_name(self, fake_store, settings, kind, name):
        with pytest.raises(InvalidInputError):
            ResourceService(fake_store, settings).get_resource(kind, name)

    @pytest.mark.unit
    def test_delete(self, fake_store, settings):
        self._seed(fake_store, "Widget", "w1", "team-a")
        result = ResourceService(fake_store, settings).delete_resource("Widget", "w1", "team-a")
        assert result.message == "Resource Widget/w1 deleted successfully"
        assert result.api_version == "tenant.dev/v1alpha1"
        assert fake_store.objects == {}

    @pytest.mark.unit
    def test_delete_not_found(self, fake_store, settings):
        with pytest.raises(NotFoundError):
            ResourceService(fake_store, settings).delete_resource("Widget", "missing")

    @pytest.mark.unit
    @pytest.mark.parametrize("count", [0, 1, 3])
    def test_list_total_count(self, fake_store, settings, count):
        for i in range(count):
            self._seed(fake_store, "Widget", f"w{i}", "default", status={"phase": "Ready"})
        result = ResourceService(fake_store, settings).list_resources("Widget")
        data = result.to_dict()
        assert data["totalCount"] == len(data["items"]) == count
        assert data["apiVersion"] == "tenant.dev/v1alpha1"
        assert data["kind"] == "Widget"

    @pytest.mark.unit
    def test_list_all_namespaces(self, fake_store, settings):
        self._seed(fake_store, "Widget", "a", "team-a")
        self._seed(fake_store, "Widget", "b", "team-b")
        service = ResourceService(fake_store, settings)
        assert service.list_resources("Widget").total_count == 2
        assert service.list_resources("Widget", "team-a").total_count == 1

    @pytest.mark.unit
    def test_list_requires_kind(self, fake_store, settings):
        with pytest.raises(InvalidInputError):
            ResourceService(fake_store, settings).list_resources("")
