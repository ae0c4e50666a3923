"""
Workflow CRUD tool tests, driven through the registry.
"""

import pytest

from conftest import StubWorkflowClient, workflow_payload
from core.catalog import build_registry
from core.errors import RemoteUnavailable

NODES = [
    {
        "id": "1",
        "name": "Start",
        "type": "n8n-nodes-base.manualTrigger",
        "typeVersion": 1,
        "position": [240, 300],
        "parameters": {},
    }
]


# =============================================================================
# list_workflows
# =============================================================================


class TestListWorkflows:

    @pytest.mark.asyncio
    async def test_first_page(self, registry, stub_client):
        envelope = await registry.dispatch("list_workflows", {"limit": 2})

        assert envelope.ok is True
        assert [w["id"] for w in envelope.data["workflows"]] == ["w1", "w2"]
        assert envelope.data["count"] == 2
        assert envelope.data["next_cursor"] == "2"
        assert envelope.data["has_more"] is True
        assert envelope.message == "Found 2 workflow(s) (more available)"
        assert len(stub_client.calls) == 1

    @pytest.mark.asyncio
    async def test_follow_next_cursor(self, registry, stub_client):
        first = await registry.dispatch("list_workflows", {"limit": 2})
        second = await registry.dispatch(
            "list_workflows", {"limit": 2, "cursor": first.data["next_cursor"]}
        )

        assert second.ok is True
        assert [w["id"] for w in second.data["workflows"]] == ["w3", "w4"]
        assert second.data["has_more"] is True
        assert second.data["next_cursor"] == "4"
        assert stub_client.calls_to("get_workflows")[1]["cursor"] == "2"

    @pytest.mark.asyncio
    async def test_float_limit_rejected(self, registry, stub_client):
        envelope = await registry.dispatch("list_workflows", {"limit": 2.0})

        assert envelope.ok is False
        assert envelope.error.kind == "InvalidArguments"
        assert stub_client.calls == []

    @pytest.mark.asyncio
    async def test_last_page(self, registry):
        envelope = await registry.dispatch("list_workflows", {"limit": 2, "cursor": "4"})

        assert [w["id"] for w in envelope.data["workflows"]] == ["w5"]
        assert envelope.data["next_cursor"] is None
        assert envelope.data["has_more"] is False
        assert envelope.message == "Found 1 workflow(s)"

    @pytest.mark.asyncio
    async def test_read_is_idempotent(self, registry):
        first = await registry.dispatch("list_workflows", {"limit": 2})
        second = await registry.dispatch("list_workflows", {"limit": 2})
        assert first == second

    @pytest.mark.asyncio
    async def test_default_limit_and_filters(self, registry, stub_client):
        await registry.dispatch("list_workflows", {"active": True, "project_id": "p1"})

        call = stub_client.calls_to("get_workflows")[0]
        assert call["limit"] == 10
        assert call["active"] is True
        assert call["project_id"] == "p1"

    @pytest.mark.asyncio
    async def test_summary_projection(self, registry):
        envelope = await registry.dispatch("list_workflows", {"limit": 1})
        assert set(envelope.data["workflows"][0]) == {
            "id", "name", "active", "updated_at", "tags", "project_id",
        }

    @pytest.mark.asyncio
    async def test_limit_out_of_range(self, registry, stub_client):
        envelope = await registry.dispatch("list_workflows", {"limit": 500})

        assert envelope.error.kind == "InvalidArguments"
        assert stub_client.calls == []


# =============================================================================
# get / create
# =============================================================================


class TestGetWorkflow:

    @pytest.mark.asyncio
    async def test_found(self, registry):
        envelope = await registry.dispatch("get_workflow", {"workflow_id": "w3"})

        assert envelope.ok is True
        assert envelope.data["id"] == "w3"
        assert envelope.data["settings"] == {"executionOrder": "v1"}
        assert envelope.message == 'Retrieved workflow "Workflow w3" (ID: w3)'

    @pytest.mark.asyncio
    async def test_not_found(self, registry):
        envelope = await registry.dispatch("get_workflow", {"workflow_id": "nope"})

        assert envelope.ok is False
        assert envelope.error.kind == "RemoteRejected"
        assert envelope.error.message.startswith("Failed to get_workflow:")

    @pytest.mark.asyncio
    async def test_missing_id_makes_no_call(self, registry, stub_client):
        envelope = await registry.dispatch("get_workflow", {})

        assert envelope.error.kind == "InvalidArguments"
        assert stub_client.calls == []


class TestCreateWorkflow:

    @pytest.mark.asyncio
    async def test_create(self, registry, stub_client):
        envelope = await registry.dispatch(
            "create_workflow", {"name": "New", "nodes": NODES, "connections": {}}
        )

        assert envelope.ok is True
        assert envelope.data["name"] == "New"
        assert envelope.data["active"] is False
        assert envelope.data["ignored"] == []
        spec = stub_client.calls_to("create_workflow")[0]["spec"]
        assert spec == {"name": "New", "nodes": NODES, "connections": {}, "settings": {}}

    @pytest.mark.asyncio
    async def test_tags_are_not_sent(self, registry, stub_client):
        envelope = await registry.dispatch(
            "create_workflow",
            {"name": "New", "nodes": NODES, "connections": {}, "tags": ["API"]},
        )

        assert envelope.data["ignored"] == ["tags"]
        assert "Ignored tags (read-only property)" in envelope.message
        assert "tags" not in stub_client.calls_to("create_workflow")[0]["spec"]

    @pytest.mark.asyncio
    async def test_missing_nodes(self, registry, stub_client):
        envelope = await registry.dispatch("create_workflow", {"name": "New", "connections": {}})

        assert envelope.error.kind == "InvalidArguments"
        assert "nodes" in envelope.error.message
        assert stub_client.calls == []


# =============================================================================
# update_workflow
# =============================================================================


class TestUpdateWorkflow:

    @pytest.mark.asyncio
    async def test_read_only_fields_ignored(self, registry, stub_client):
        envelope = await registry.dispatch(
            "update_workflow",
            {"workflow_id": "w1", "name": "Renamed", "tags": ["x"]},
        )

        assert envelope.ok is True
        assert envelope.data["name"] == "Renamed"
        assert envelope.data["ignored"] == ["tags"]
        assert envelope.message == (
            'Workflow updated successfully. Changes: name: "Workflow w1" → "Renamed". '
            "Note: Ignored tags (read-only property)."
        )

        assert len(stub_client.calls_to("get_workflow")) == 1
        puts = stub_client.calls_to("update_workflow")
        assert len(puts) == 1
        spec = puts[0]["spec"]
        assert spec["name"] == "Renamed"
        assert "tags" not in spec
        assert "active" not in spec
        assert stub_client.workflows["w1"]["tags"] == []

    @pytest.mark.asyncio
    async def test_active_ignored(self, registry, stub_client):
        envelope = await registry.dispatch("update_workflow", {"workflow_id": "w1", "active": True})

        assert envelope.data["ignored"] == ["active"]
        assert envelope.data["active"] is False
        assert "No changes were made" in envelope.message
        assert "use activate/deactivate workflow tools" in envelope.message

    @pytest.mark.asyncio
    async def test_unchanged_fields_are_resent(self, stub_client, registry):
        stub_client.workflows["w2"]["staticData"] = {"lastId": 7}

        await registry.dispatch("update_workflow", {"workflow_id": "w2", "nodes": NODES})

        spec = stub_client.calls_to("update_workflow")[0]["spec"]
        assert spec["name"] == "Workflow w2"
        assert spec["nodes"] == NODES
        assert spec["connections"] == {}
        assert spec["settings"] == {"executionOrder": "v1"}
        assert spec["staticData"] == {"lastId": 7}

    @pytest.mark.asyncio
    async def test_missing_workflow(self, registry, stub_client):
        envelope = await registry.dispatch("update_workflow", {"workflow_id": "gone", "name": "x"})

        assert envelope.error.kind == "RemoteRejected"
        assert stub_client.calls_to("update_workflow") == []


# =============================================================================
# delete / activate / deactivate
# =============================================================================


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_delete(self, registry, stub_client):
        envelope = await registry.dispatch("delete_workflow", {"workflow_id": "w1"})

        assert envelope.ok is True
        assert envelope.data == {"id": "w1", "deleted": True}
        assert "w1" not in stub_client.workflows

    @pytest.mark.asyncio
    async def test_delete_transport_failure_is_not_retried(self, registry, stub_client):
        stub_client.fail("delete_workflow", RemoteUnavailable("Could not reach n8n"))

        envelope = await registry.dispatch("delete_workflow", {"workflow_id": "w1"})

        assert envelope.ok is False
        assert envelope.error.kind == "RemoteUnavailable"
        assert envelope.error.message == "Failed to delete_workflow: Could not reach n8n"
        assert len(stub_client.calls_to("delete_workflow")) == 1

    @pytest.mark.asyncio
    async def test_activate_then_deactivate(self):
        client = StubWorkflowClient(workflows=[workflow_payload("w1", "Orders")])
        registry = build_registry(client)

        activated = await registry.dispatch("activate_workflow", {"workflow_id": "w1"})
        assert activated.data == {"id": "w1", "name": "Orders", "active": True}
        assert activated.message == 'Workflow "Orders" (ID: w1) activated successfully'

        deactivated = await registry.dispatch("deactivate_workflow", {"workflow_id": "w1"})
        assert deactivated.data["active"] is False
