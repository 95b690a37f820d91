"""
Thoughtful AI Support Agent - Server Entry Point

Starts the HTTP API or an interactive console session against the same
knowledge base and response router.

Usage:
    python cmd/server.py --mode api

Or to ask questions from the terminal:
    python cmd/server.py --mode interactive --refresh
"""

import asyncio
import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

import uvicorn

from support_agent.agents.models import ChatMessage
from support_agent.config.settings import get_settings
from support_agent.main import build_components


class SupportAgentConsole:
    """Console front end for the support agent."""

    def __init__(self):
        self.coordinator, self.response_router = build_components()
        self.history = []

    async def initialize(self, force: bool = False):
        """Build the knowledge base before taking questions."""
        print("🔧 Initializing Thoughtful AI Support Agent...")

        try:
            result = await self.coordinator.initialize(force=force)
            print(f"✅ {result.message}")
        except Exception as e:
            print(f"⚠️ Knowledge base initialization failed: {str(e)}")
            print("📝 Answers will not use scraped content")

    async def process_query(self, query: str) -> str:
        """Answer a question and remember the exchange."""
        response = await self.response_router.resolve(query, self.history)
        self.history.extend([
            ChatMessage(role="user", content=query),
            ChatMessage(role="assistant", content=response.answer),
        ])
        return f"[{response.source.value}] {response.answer}"


async def interactive_mode(console: SupportAgentConsole):
    """Run in interactive mode for testing."""
    print("🎯 Interactive Mode - Type 'exit' to quit")
    print("💡 Try asking: 'What does EVA do?' or 'How does prior authorization work?'")

    while True:
        try:
            query = input("\n🤖 Enter your question: ").strip()
            if query.lower() in ['exit', 'quit', 'q']:
                break

            if not query:
                continue

            print("🔄 Processing...")
            print(await console.process_query(query))

        except (KeyboardInterrupt, EOFError):
            break
        except Exception as e:
            print(f"❌ Error: {str(e)}")


def main():
    """Main application entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Thoughtful AI Support Agent")
    parser.add_argument("--mode", choices=["api", "interactive"], default="api", help="Run mode")
    parser.add_argument("--host", default=settings.service.host, help="API host")
    parser.add_argument("--port", type=int, default=settings.service.port, help="API port")
    parser.add_argument("--refresh", action="store_true", help="Force re-ingestion of every page")

    args = parser.parse_args()

    if args.mode == "api":
        print(f"🌐 Starting API server on {args.host}:{args.port}")
        uvicorn.run("support_agent.main:app", host=args.host, port=args.port)
        return

    async def run():
        console = SupportAgentConsole()
        await console.initialize(force=args.refresh)
        await interactive_mode(console)

    try:
        asyncio.run(run())
    except Exception as e:
        print(f"❌ Failed to start: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
