# =============================================================================
# core/config.py  —  Environment configuration
# =============================================================================
#
# All settings come from environment variables.  A `.env` file in the
# working directory is loaded first (python-dotenv), so local development
# only needs:
#
#   N8N_API_URL=http://localhost:5678/api/v1
#   N8N_API_KEY=<key from n8n Settings > n8n API>
#
# Everything else has a default.
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from core.errors import ConfigError
from core.pagination import DEFAULT_MAX_PAGES

# Defaults for the "API tool" aggregation (get_api_tool)
DEFAULT_API_TOOL_TAGS = ("API", "Tool", "Admin API Tool")
DEFAULT_API_PROJECT_ID = "eLrt0vDtupnZfKuD"
DEFAULT_API_PROJECT_LABEL = "Yogi"
DEFAULT_TOOLS_FOLDER_ID = "aqy20HQpJ9m7DIFH"
DEFAULT_AGENT_MODEL = "openrouter/openai/gpt-4o"


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _derive_webhook_url(api_url: str) -> str:
    """`http://host:5678/api/v1` → `http://host:5678/webhook`."""
    base = api_url.rstrip("/")
    if base.endswith("/api/v1"):
        base = base[: -len("/api/v1")]
    return f"{base}/webhook"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one server process."""

    api_url: str
    api_key: str
    webhook_url: str
    webhook_username: Optional[str] = None
    webhook_password: Optional[str] = None
    timeout: float = 30.0
    max_pages: int = DEFAULT_MAX_PAGES
    api_tool_tags: tuple[str, ...] = field(default=DEFAULT_API_TOOL_TAGS)
    api_project_id: Optional[str] = DEFAULT_API_PROJECT_ID
    api_project_label: str = DEFAULT_API_PROJECT_LABEL
    tools_folder_id: Optional[str] = DEFAULT_TOOLS_FOLDER_ID
    agent_model: str = DEFAULT_AGENT_MODEL
    debug: bool = False


def load_settings(env: Optional[dict[str, str]] = None) -> Settings:
    """Read Settings from `env` (defaults to os.environ after load_dotenv)."""
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    api_url = (env.get("N8N_API_URL") or "").strip()
    if not api_url:
        raise ConfigError("N8N_API_URL is required (e.g. http://localhost:5678/api/v1)")
    api_key = (env.get("N8N_API_KEY") or "").strip()
    if not api_key:
        raise ConfigError("N8N_API_KEY is required (n8n Settings > n8n API)")

    try:
        timeout = float(env.get("N8N_TIMEOUT") or 30)
        max_pages = int(env.get("N8N_MAX_PAGES") or DEFAULT_MAX_PAGES)
    except ValueError as exc:
        raise ConfigError(f"Invalid numeric setting: {exc}") from exc
    if max_pages < 1:
        raise ConfigError("N8N_MAX_PAGES must be at least 1")

    raw_tags = env.get("N8N_API_TOOL_TAGS")
    if raw_tags:
        tags = tuple(t.strip() for t in raw_tags.split(",") if t.strip())
    else:
        tags = DEFAULT_API_TOOL_TAGS

    project_id = env.get("N8N_API_PROJECT_ID", DEFAULT_API_PROJECT_ID).strip()
    tools_folder_id = env.get("N8N_API_TOOLS_FOLDER_ID", DEFAULT_TOOLS_FOLDER_ID).strip()

    return Settings(
        api_url=api_url.rstrip("/"),
        api_key=api_key,
        webhook_url=(env.get("N8N_WEBHOOK_URL") or _derive_webhook_url(api_url)).rstrip("/"),
        webhook_username=env.get("N8N_WEBHOOK_USERNAME") or None,
        webhook_password=env.get("N8N_WEBHOOK_PASSWORD") or None,
        timeout=timeout,
        max_pages=max_pages,
        api_tool_tags=tags,
        api_project_id=project_id or None,
        api_project_label=env.get("N8N_API_PROJECT_LABEL") or DEFAULT_API_PROJECT_LABEL,
        tools_folder_id=tools_folder_id or None,
        agent_model=env.get("SOP_AGENT_MODEL") or DEFAULT_AGENT_MODEL,
        debug=_flag(env.get("DEBUG")),
    )
