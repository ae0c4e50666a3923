"""
Execution and webhook tool tests
"""

import pytest

from conftest import StubWorkflowClient, execution_payload
from core.catalog import build_registry
from core.errors import RemoteRejected


@pytest.fixture
def exec_client():
    return StubWorkflowClient(executions=[
        execution_payload("e1", "w1", "success"),
        execution_payload("e2", "w1", "error"),
        execution_payload("e3", "w2", "success"),
    ])


@pytest.fixture
def exec_registry(exec_client):
    return build_registry(exec_client)


class TestListExecutions:

    @pytest.mark.asyncio
    async def test_filters(self, exec_registry, exec_client):
        envelope = await exec_registry.dispatch(
            "list_executions", {"workflow_id": "w1", "status": "error"}
        )

        assert [e["id"] for e in envelope.data["executions"]] == ["e2"]
        assert envelope.data["has_more"] is False
        call = exec_client.calls_to("get_executions")[0]
        assert call["limit"] == 10
        assert call["status"] == "error"

    @pytest.mark.asyncio
    async def test_paging(self, exec_registry):
        envelope = await exec_registry.dispatch("list_executions", {"limit": 2})

        assert envelope.data["count"] == 2
        assert envelope.data["next_cursor"] == "2"
        assert envelope.message == "Found 2 execution(s) (more available)"

    @pytest.mark.asyncio
    async def test_unknown_status(self, exec_registry, exec_client):
        envelope = await exec_registry.dispatch("list_executions", {"status": "crashed"})

        assert envelope.error.kind == "InvalidArguments"
        assert exec_client.calls == []


class TestGetExecution:

    @pytest.mark.asyncio
    async def test_without_data(self, exec_registry):
        envelope = await exec_registry.dispatch("get_execution", {"execution_id": "e1"})

        assert envelope.data["status"] == "success"
        assert "data" not in envelope.data
        assert envelope.message == "Retrieved execution e1 (status: success)"

    @pytest.mark.asyncio
    async def test_with_data(self, exec_registry, exec_client):
        envelope = await exec_registry.dispatch(
            "get_execution", {"execution_id": "e2", "include_data": True}
        )

        assert envelope.data["data"] == {"resultData": {"runData": {}}}
        assert exec_client.calls_to("get_execution")[0]["include_data"] is True

    @pytest.mark.asyncio
    async def test_missing(self, exec_registry):
        envelope = await exec_registry.dispatch("get_execution", {"execution_id": "zz"})
        assert envelope.error.kind == "RemoteRejected"


class TestDeleteExecution:

    @pytest.mark.asyncio
    async def test_delete(self, exec_registry, exec_client):
        envelope = await exec_registry.dispatch("delete_execution", {"execution_id": "e3"})

        assert envelope.data == {"id": "e3", "deleted": True}
        assert "e3" not in exec_client.executions


class TestRunWebhook:

    @pytest.mark.asyncio
    async def test_run(self, exec_registry, exec_client):
        envelope = await exec_registry.dispatch(
            "run_webhook",
            {"path": "/customer-support/", "data": {"ticket": 1}, "headers": {"X-Trace": "t"}},
        )

        assert envelope.ok is True
        assert envelope.data == {"path": "customer-support", "response": {"received": True}}
        assert exec_client.calls_to("run_webhook") == [
            {"path": "customer-support", "data": {"ticket": 1}, "headers": {"X-Trace": "t"}}
        ]

    @pytest.mark.asyncio
    async def test_rejected_once(self, exec_registry, exec_client):
        exec_client.fail("run_webhook", RemoteRejected("n8n rejected the request (HTTP 401): Unauthorized"))

        envelope = await exec_registry.dispatch("run_webhook", {"path": "x"})

        assert envelope.error.kind == "RemoteRejected"
        assert len(exec_client.calls_to("run_webhook")) == 1

    @pytest.mark.asyncio
    async def test_data_must_be_object(self, exec_registry, exec_client):
        envelope = await exec_registry.dispatch("run_webhook", {"path": "x", "data": "text"})

        assert envelope.error.kind == "InvalidArguments"
        assert exec_client.calls == []
