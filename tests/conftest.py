"""
Shared fixtures for the n8n tool tests.

StubWorkflowClient stands in for core.client.N8nClient: it keeps workflows
and executions in memory, paginates by `limit` with offset cursors, and
records every call so tests can assert on what was sent to n8n.
"""

from typing import Any, Optional

import pytest

from core.catalog import build_registry
from core.errors import NotFound
from core.models import (
    ExecutionPage,
    ExecutionRecord,
    WorkflowPage,
    WorkflowRecord,
)


# =============================================================================
# Payload builders (n8n API shape)
# =============================================================================


def workflow_payload(
    workflow_id: str,
    name: Optional[str] = None,
    *,
    tags: tuple = (),
    project_id: Optional[str] = None,
    active: bool = False,
    **extra,
) -> dict[str, Any]:
    payload = {
        "id": workflow_id,
        "name": name or f"Workflow {workflow_id}",
        "active": active,
        "createdAt": "2025-01-01T00:00:00.000Z",
        "updatedAt": "2025-01-02T00:00:00.000Z",
        "tags": [{"id": f"tag-{t}", "name": t} for t in tags],
        "nodes": [],
        "connections": {},
        "settings": {"executionOrder": "v1"},
    }
    if project_id:
        payload["shared"] = [{"projectId": project_id, "role": "workflow:owner"}]
    payload.update(extra)
    return payload


def execution_payload(execution_id: str, workflow_id: str = "w1", status: str = "success") -> dict[str, Any]:
    return {
        "id": execution_id,
        "workflowId": workflow_id,
        "status": status,
        "mode": "manual",
        "finished": status == "success",
        "startedAt": "2025-01-03T10:00:00.000Z",
        "stoppedAt": "2025-01-03T10:00:01.000Z",
        "data": {"resultData": {"runData": {}}},
    }


# =============================================================================
# Stub client
# =============================================================================


class StubWorkflowClient:
    """In-memory n8n with call recording."""

    def __init__(self, workflows=None, executions=None):
        self.workflows: dict[str, dict[str, Any]] = {}
        for payload in workflows or []:
            self.workflows[payload["id"]] = payload
        self.executions: dict[str, dict[str, Any]] = {}
        for payload in executions or []:
            self.executions[payload["id"]] = payload
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failures: dict[str, Exception] = {}
        self.stuck_cursor: Optional[str] = None
        self.webhook_response: Any = {"received": True}
        self._next_id = 100

    def fail(self, method: str, exc: Exception) -> None:
        """Make every later call to `method` raise `exc`."""
        self.failures[method] = exc

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        return [kwargs for name, kwargs in self.calls if name == method]

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append((method, kwargs))
        if method in self.failures:
            raise self.failures[method]

    def _workflow(self, workflow_id: str) -> dict[str, Any]:
        try:
            return self.workflows[workflow_id]
        except KeyError:
            raise NotFound(f"Workflow {workflow_id} not found: Not Found", status_code=404) from None

    # -- workflows ------------------------------------------------------------

    async def get_workflows(
        self,
        *,
        active=None,
        tags=None,
        name=None,
        project_id=None,
        exclude_pinned_data=None,
        limit=None,
        cursor=None,
    ) -> WorkflowPage:
        self._record(
            "get_workflows",
            active=active, tags=tags, name=name, project_id=project_id,
            exclude_pinned_data=exclude_pinned_data, limit=limit, cursor=cursor,
        )
        records = [WorkflowRecord.from_api(p) for p in self.workflows.values()]
        if active is not None:
            records = [r for r in records if r.active == active]
        if tags:
            wanted = {t.strip() for t in tags.split(",")}
            records = [r for r in records if wanted & set(r.tags)]
        if name:
            records = [r for r in records if name in r.name]
        if project_id:
            records = [r for r in records if r.project_id == project_id]

        size = limit or 100
        offset = int(cursor) if cursor and cursor.isdigit() else 0
        page = records[offset:offset + size]

        if self.stuck_cursor is not None:
            return WorkflowPage(data=page, next_cursor=self.stuck_cursor)
        next_cursor = str(offset + size) if offset + size < len(records) else None
        return WorkflowPage(data=page, next_cursor=next_cursor)

    async def get_workflow(self, workflow_id: str) -> WorkflowRecord:
        self._record("get_workflow", workflow_id=workflow_id)
        return WorkflowRecord.from_api(self._workflow(workflow_id))

    async def create_workflow(self, spec: dict[str, Any]) -> WorkflowRecord:
        self._record("create_workflow", spec=spec)
        self._next_id += 1
        payload = {
            "id": f"new-{self._next_id}",
            "active": False,
            "createdAt": "2025-02-01T00:00:00.000Z",
            "updatedAt": "2025-02-01T00:00:00.000Z",
            **spec,
        }
        self.workflows[payload["id"]] = payload
        return WorkflowRecord.from_api(payload)

    async def update_workflow(self, workflow_id: str, spec: dict[str, Any]) -> WorkflowRecord:
        self._record("update_workflow", workflow_id=workflow_id, spec=spec)
        payload = {**self._workflow(workflow_id), **spec}
        self.workflows[workflow_id] = payload
        return WorkflowRecord.from_api(payload)

    async def delete_workflow(self, workflow_id: str) -> None:
        self._record("delete_workflow", workflow_id=workflow_id)
        self._workflow(workflow_id)
        del self.workflows[workflow_id]

    async def activate_workflow(self, workflow_id: str) -> WorkflowRecord:
        self._record("activate_workflow", workflow_id=workflow_id)
        self._workflow(workflow_id)["active"] = True
        return WorkflowRecord.from_api(self.workflows[workflow_id])

    async def deactivate_workflow(self, workflow_id: str) -> WorkflowRecord:
        self._record("deactivate_workflow", workflow_id=workflow_id)
        self._workflow(workflow_id)["active"] = False
        return WorkflowRecord.from_api(self.workflows[workflow_id])

    # -- executions -----------------------------------------------------------

    async def get_executions(
        self, *, workflow_id=None, status=None, include_data=None, limit=None, cursor=None
    ) -> ExecutionPage:
        self._record(
            "get_executions",
            workflow_id=workflow_id, status=status, include_data=include_data,
            limit=limit, cursor=cursor,
        )
        records = [ExecutionRecord.from_api(p) for p in self.executions.values()]
        if workflow_id:
            records = [r for r in records if r.workflow_id == workflow_id]
        if status:
            records = [r for r in records if r.status == status]
        size = limit or 100
        offset = int(cursor) if cursor else 0
        next_cursor = str(offset + size) if offset + size < len(records) else None
        return ExecutionPage(data=records[offset:offset + size], next_cursor=next_cursor)

    async def get_execution(self, execution_id: str, include_data: bool = False) -> ExecutionRecord:
        self._record("get_execution", execution_id=execution_id, include_data=include_data)
        if execution_id not in self.executions:
            raise NotFound(f"Execution {execution_id} not found: Not Found", status_code=404)
        return ExecutionRecord.from_api(self.executions[execution_id])

    async def delete_execution(self, execution_id: str) -> None:
        self._record("delete_execution", execution_id=execution_id)
        self.executions.pop(execution_id, None)

    async def run_webhook(self, path: str, data=None, headers=None) -> Any:
        self._record("run_webhook", path=path, data=data, headers=headers)
        return self.webhook_response


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def stub_client():
    """Five untagged workflows, w1..w5."""
    return StubWorkflowClient(workflows=[workflow_payload(f"w{i}") for i in range(1, 6)])


@pytest.fixture
def registry(stub_client):
    return build_registry(stub_client)
