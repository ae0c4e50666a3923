# =============================================================================
# core/client.py  —  n8n public API client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Performs authenticated HTTP calls against the n8n public REST API
#   (`/api/v1`) and the instance's webhook endpoint, returning parsed
#   records from core/models.py.
#
# ERROR MAPPING (every method):
#   httpx timeout / transport error  → RemoteUnavailable
#   HTTP 5xx                         → RemoteUnavailable
#   HTTP 404                         → NotFound
#   any other HTTP 4xx               → RemoteRejected
#
#   The client never retries.  Whether a failed call is worth repeating is
#   the caller's decision.
# =============================================================================

import logging
from typing import Any, Optional

import httpx

from core.config import Settings
from core.errors import NotFound, RemoteRejected, RemoteUnavailable
from core.models import ExecutionPage, ExecutionRecord, WorkflowPage, WorkflowRecord

logger = logging.getLogger(__name__)


def _clean(params: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """Drop unset query parameters."""
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


class N8nClient:
    """Async client for one n8n instance."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        *,
        webhook_url: Optional[str] = None,
        webhook_username: Optional[str] = None,
        webhook_password: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.webhook_url = (webhook_url or "").rstrip("/") or None
        self._webhook_auth = None
        if webhook_username and webhook_password:
            self._webhook_auth = httpx.BasicAuth(webhook_username, webhook_password)

        self._http = httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "X-N8N-API-KEY": api_key,
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )
        # Webhooks may live on another host; they never see the API key.
        self._webhooks = httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "N8nClient":
        return cls(
            settings.api_url,
            settings.api_key,
            webhook_url=settings.webhook_url,
            webhook_username=settings.webhook_username,
            webhook_password=settings.webhook_password,
            timeout=settings.timeout,
            **kwargs,
        )

    async def aclose(self) -> None:
        await self._http.aclose()
        await self._webhooks.aclose()

    async def __aenter__(self) -> "N8nClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------
    async def _request(
        self,
        method: str,
        url: str,
        *,
        subject: str = "Resource",
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        http: Optional[httpx.AsyncClient] = None,
        **kwargs,
    ) -> Any:
        http = http or self._http
        try:
            response = await http.request(
                method, url, params=_clean(params), json=json, **kwargs
            )
        except httpx.TimeoutException as exc:
            raise RemoteUnavailable(f"n8n request timed out: {method} {url}") from exc
        except httpx.TransportError as exc:
            raise RemoteUnavailable(f"Could not reach n8n at {self.api_url}: {exc}") from exc

        status = response.status_code
        if status >= 400:
            detail = _error_detail(response)
            logger.warning("n8n %s %s returned HTTP %d: %s", method, url, status, detail)
            if status == 404:
                raise NotFound(f"{subject} not found: {detail}", status_code=status)
            if status >= 500:
                raise RemoteUnavailable(f"n8n returned HTTP {status}: {detail}")
            raise RemoteRejected(f"n8n rejected the request (HTTP {status}): {detail}", status_code=status)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    # -------------------------------------------------------------------------
    # Workflows
    # -------------------------------------------------------------------------
    async def get_workflows(
        self,
        *,
        active: Optional[bool] = None,
        tags: Optional[str] = None,
        name: Optional[str] = None,
        project_id: Optional[str] = None,
        exclude_pinned_data: Optional[bool] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> WorkflowPage:
        body = await self._request(
            "GET",
            "/workflows",
            subject="Workflows",
            params={
                "active": active,
                "tags": tags,
                "name": name,
                "projectId": project_id,
                "excludePinnedData": exclude_pinned_data,
                "limit": limit,
                "cursor": cursor,
            },
        )
        body = body or {}
        return WorkflowPage(
            data=[WorkflowRecord.from_api(item) for item in body.get("data", [])],
            next_cursor=body.get("nextCursor") or None,
        )

    async def get_workflow(self, workflow_id: str) -> WorkflowRecord:
        body = await self._request(
            "GET", f"/workflows/{workflow_id}", subject=f"Workflow {workflow_id}"
        )
        return WorkflowRecord.from_api(body)

    async def create_workflow(self, spec: dict[str, Any]) -> WorkflowRecord:
        body = await self._request("POST", "/workflows", subject="Workflow", json=spec)
        return WorkflowRecord.from_api(body)

    async def update_workflow(self, workflow_id: str, spec: dict[str, Any]) -> WorkflowRecord:
        body = await self._request(
            "PUT", f"/workflows/{workflow_id}", subject=f"Workflow {workflow_id}", json=spec
        )
        return WorkflowRecord.from_api(body)

    async def delete_workflow(self, workflow_id: str) -> None:
        await self._request(
            "DELETE", f"/workflows/{workflow_id}", subject=f"Workflow {workflow_id}"
        )

    async def activate_workflow(self, workflow_id: str) -> WorkflowRecord:
        body = await self._request(
            "POST", f"/workflows/{workflow_id}/activate", subject=f"Workflow {workflow_id}"
        )
        return WorkflowRecord.from_api(body)

    async def deactivate_workflow(self, workflow_id: str) -> WorkflowRecord:
        body = await self._request(
            "POST", f"/workflows/{workflow_id}/deactivate", subject=f"Workflow {workflow_id}"
        )
        return WorkflowRecord.from_api(body)

    # -------------------------------------------------------------------------
    # Executions
    # -------------------------------------------------------------------------
    async def get_executions(
        self,
        *,
        workflow_id: Optional[str] = None,
        status: Optional[str] = None,
        include_data: Optional[bool] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> ExecutionPage:
        body = await self._request(
            "GET",
            "/executions",
            subject="Executions",
            params={
                "workflowId": workflow_id,
                "status": status,
                "includeData": include_data,
                "limit": limit,
                "cursor": cursor,
            },
        )
        body = body or {}
        return ExecutionPage(
            data=[ExecutionRecord.from_api(item) for item in body.get("data", [])],
            next_cursor=body.get("nextCursor") or None,
        )

    async def get_execution(self, execution_id: str, include_data: bool = False) -> ExecutionRecord:
        body = await self._request(
            "GET",
            f"/executions/{execution_id}",
            subject=f"Execution {execution_id}",
            params={"includeData": include_data},
        )
        return ExecutionRecord.from_api(body)

    async def delete_execution(self, execution_id: str) -> None:
        await self._request(
            "DELETE", f"/executions/{execution_id}", subject=f"Execution {execution_id}"
        )

    # -------------------------------------------------------------------------
    # Webhooks & health
    # -------------------------------------------------------------------------
    async def run_webhook(
        self,
        path: str,
        data: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        if not self.webhook_url:
            raise RemoteRejected("No webhook URL configured (set N8N_WEBHOOK_URL)")
        url = f"{self.webhook_url}/{path.lstrip('/')}"
        kwargs: dict[str, Any] = {}
        if self._webhook_auth is not None:
            kwargs["auth"] = self._webhook_auth
        return await self._request(
            "POST",
            url,
            subject=f"Webhook '{path}'",
            json=data or {},
            headers=headers,
            http=self._webhooks,
            **kwargs,
        )

    async def check_connectivity(self) -> None:
        await self._request("GET", "/workflows", subject="Workflows", params={"limit": 1})
