# =============================================================================
# main.py  —  Entry Point for the n8n SOP Assistant
# =============================================================================
#
# HOW TO RUN:
#   python main.py                 interactive assistant (needs an LLM key)
#   python main.py --check         only verify the n8n connection
#
# WHAT HAPPENS:
#   1. Loads .env and checks that n8n answers (core/client.py)
#   2. Creates the Google ADK agent (agent/sop_agent.py), which spawns the
#      FastMCP tool server as a subprocess
#   3. Sends each user message to the agent and streams its tool calls
#   4. Displays the final answer
#
# GOOGLE ADK CONCEPTS USED:
#   - Runner: Manages the agent's execution lifecycle
#   - SessionService: Tracks conversation state across turns
#   - Content/Part: ADK's message format
#   - Event stream: Real-time updates as the agent thinks and acts
# =============================================================================

import argparse
import asyncio
import sys

from dotenv import load_dotenv

# Must happen BEFORE creating the agent: LiteLlm and the tool server
# subprocess both read their keys from the environment.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.sop_agent import create_agent
from core.client import N8nClient
from core.config import load_settings
from core.errors import ConfigError, ToolError

APP_NAME = "n8n_sop_assistant"
USER_ID = "local_user"


async def check_n8n() -> bool:
    """Verify configuration and that the n8n API accepts our key."""
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"❌ Configuration error: {exc}")
        return False

    async with N8nClient.from_settings(settings) as client:
        try:
            await client.check_connectivity()
        except ToolError as exc:
            print(f"❌ n8n is not reachable at {settings.api_url}: {exc}")
            return False

    print(f"✅ Connected to n8n at {settings.api_url}")
    return True


async def run_agent() -> None:
    """Run the SOP assistant interactively."""
    print("=" * 70)
    print("  N8N SOP ASSISTANT")
    print("  Powered by Google ADK + FastMCP + the n8n public API")
    print("=" * 70)

    if not await check_n8n():
        return

    print("\n🔧 Initializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(
        app_name=APP_NAME,
        user_id=USER_ID,
    )

    print("✅ Agent initialized and ready!\n")
    print("💬 Ask about your workflows, or paste an SOP to automate.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(
            role="user",
            parts=[types.Part(text=user_input)],
        )

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)

        final_response = ""
        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text
                    if getattr(part, "function_call", None):
                        print(f"  🔧 Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


def main() -> None:
    parser = argparse.ArgumentParser(description="n8n SOP assistant")
    parser.add_argument(
        "--check",
        action="store_true",
        help="only verify the n8n connection and exit",
    )
    args = parser.parse_args()

    if args.check:
        sys.exit(0 if asyncio.run(check_n8n()) else 1)
    asyncio.run(run_agent())


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
