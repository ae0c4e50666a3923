"""
MCP boundary tests: argument forwarding and envelope serialization.
"""

import json
from types import SimpleNamespace

import pytest

from conftest import StubWorkflowClient, workflow_payload
from core.catalog import build_registry
from core.errors import ConfigError
from tools import mcp_server


@pytest.fixture
def server_client(monkeypatch):
    client = StubWorkflowClient(workflows=[workflow_payload("w1", "Orders", tags=("API",))])
    registry = build_registry(client)
    monkeypatch.setattr(mcp_server, "get_registry", lambda: registry)
    monkeypatch.setattr(mcp_server, "get_client", lambda: client)
    return client


class TestDispatch:

    @pytest.mark.asyncio
    async def test_unset_arguments_are_dropped(self, server_client):
        result = await mcp_server._dispatch("list_workflows", limit=5, cursor=None, tags=None)

        assert result["ok"] is True
        assert result["data"]["count"] == 1
        call = server_client.calls_to("get_workflows")[0]
        assert call["limit"] == 5
        assert call["tags"] is None

    @pytest.mark.asyncio
    async def test_failure_is_serialized(self, server_client):
        result = await mcp_server._dispatch("get_workflow", workflow_id="nope")

        assert result["ok"] is False
        assert result["error"]["kind"] == "RemoteRejected"
        json.dumps(result)

    @pytest.mark.asyncio
    async def test_missing_configuration(self, monkeypatch):
        def unconfigured():
            raise ConfigError("N8N_API_URL is required")

        monkeypatch.setattr(mcp_server, "get_registry", unconfigured)

        result = await mcp_server._dispatch("list_workflows")

        assert result == {
            "ok": False,
            "error": {
                "kind": "Internal",
                "message": "Failed to list_workflows: server is not configured: N8N_API_URL is required",
            },
        }


class TestResources:

    @pytest.mark.asyncio
    async def test_tagged_document(self, server_client, monkeypatch):
        monkeypatch.setattr(mcp_server, "get_settings", lambda: SimpleNamespace(max_pages=10))

        document = json.loads(await mcp_server._tagged_document("API", "API workflow"))

        assert document["summary"] == "Found 1 API workflow(s)"
        assert document["workflows"][0]["id"] == "w1"

    @pytest.mark.asyncio
    async def test_tagged_document_error(self, monkeypatch):
        def unconfigured():
            raise ConfigError("N8N_API_KEY is required")

        monkeypatch.setattr(mcp_server, "get_settings", unconfigured)

        document = json.loads(await mcp_server._tagged_document("tool", "tool workflow"))

        assert document["error"] == "Failed to fetch tool workflow"
        assert "N8N_API_KEY" in document["message"]
