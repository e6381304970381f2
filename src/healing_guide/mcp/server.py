"""MCP server exposing the healing-guide pipeline as tools."""

import asyncio
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

from loguru import logger
from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, ServerCapabilities, Tool

from .. import __version__
from ..core.exceptions import ProviderError
from ..core.local_search import search_local
from ..core.models import RegenerationStatus
from .services import ProtocolService, SessionService

ToolHandler = Callable[[dict[str, Any]], Awaitable[CallToolResult]]

_QUERY_SCHEMA = {
    "type": "object",
    "properties": {
        "query": {"type": "string", "description": "Symptom as described by the user"},
    },
    "required": ["query"],
}


class HealingGuideServer:
    """Routes MCP tool calls to the session's resolvers."""

    def __init__(self, session_service: SessionService | None = None, config_dir: Path | None = None):
        self.session_service = session_service or SessionService(config_dir=config_dir)
        self.protocol_service = ProtocolService()
        self._handlers: dict[str, ToolHandler] = {
            "get_symptom_details": self._get_symptom_details,
            "search_symptoms": self._search_symptoms,
            "suggest_symptoms": self._suggest_symptoms,
            "chat": self._chat,
            "regenerate_symptom": self._regenerate_symptom,
        }

    def get_tools(self) -> list[Tool]:
        return [
            Tool(
                name="get_symptom_details",
                description="Full healing guide for a symptom (catalog, cache, then generated)",
                inputSchema=_QUERY_SCHEMA,
            ),
            Tool(
                name="search_symptoms",
                description="Candidate symptoms matching a free-text query",
                inputSchema=_QUERY_SCHEMA,
            ),
            Tool(
                name="suggest_symptoms",
                description="Offline autocomplete over known symptom names",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {"type": "string"},
                        "limit": {"type": "number", "description": "Maximum suggestions (default 5)"},
                    },
                    "required": ["query"],
                },
            ),
            Tool(
                name="chat",
                description="Talk to the healer assistant",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "message": {"type": "string"},
                        "history": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "role": {"type": "string", "enum": ["user", "assistant"]},
                                    "content": {"type": "string"},
                                },
                            },
                        },
                    },
                    "required": ["message"],
                },
            ),
            Tool(
                name="regenerate_symptom",
                description="Admin: regenerate the cached healing guide for a symptom",
                inputSchema=_QUERY_SCHEMA,
            ),
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        handler = self._handlers.get(name)
        if handler is None:
            return self.protocol_service.build_error_response(f"Unknown tool: {name}")

        if not self.session_service.is_initialized:
            await self.session_service.initialize()

        try:
            return await handler(arguments or {})
        except Exception as e:
            logger.error(f"Tool call failed: {e}")
            return self.protocol_service.build_error_response(f"Tool execution failed: {str(e)}")

    async def cleanup(self) -> None:
        await self.session_service.cleanup()

    # ========== Tool Handlers ==========

    async def _get_symptom_details(self, args: dict[str, Any]) -> CallToolResult:
        query = str(args.get("query", "")).strip()
        if not query:
            return self.protocol_service.build_error_response("Query parameter is required")
        try:
            document = await self.session_service.document_resolver.resolve(query)
        except ProviderError as e:
            logger.error(f"Healing guide generation failed for '{query}': {e}")
            return self.protocol_service.build_error_response(
                f"Could not generate the healing guide right now, please try again: {e}"
            )
        return self.protocol_service.build_text_response(self.protocol_service.format_document(document))

    async def _search_symptoms(self, args: dict[str, Any]) -> CallToolResult:
        query = str(args.get("query", "")).strip()
        if not query:
            return self.protocol_service.build_error_response("Query parameter is required")
        outcome = await self.session_service.candidate_resolver.search(query)
        return self.protocol_service.build_text_response(
            self.protocol_service.format_search_outcome(query, outcome)
        )

    async def _suggest_symptoms(self, args: dict[str, Any]) -> CallToolResult:
        limit = max(1, int(args.get("limit", 5)))
        suggestions = search_local(str(args.get("query", "")), limit=limit)
        if not suggestions:
            return self.protocol_service.build_text_response("No suggestions")
        return self.protocol_service.build_text_response("\n".join(suggestions))

    async def _chat(self, args: dict[str, Any]) -> CallToolResult:
        message = str(args.get("message", "")).strip()
        if not message:
            return self.protocol_service.build_error_response("Message parameter is required")
        reply = await self.session_service.chat_service.send_message(args.get("history") or [], message)
        return self.protocol_service.build_text_response(reply)

    async def _regenerate_symptom(self, args: dict[str, Any]) -> CallToolResult:
        query = str(args.get("query", "")).strip()
        if not query:
            return self.protocol_service.build_error_response("Query parameter is required")
        status = await self.session_service.document_resolver.regenerate(query)
        if status is RegenerationStatus.FAILED:
            return self.protocol_service.build_error_response(f"Regeneration failed for '{query}'")
        if status is RegenerationStatus.CATALOG:
            return self.protocol_service.build_text_response(
                f"'{query}' is served from the curated catalog; nothing regenerated"
            )
        return self.protocol_service.build_text_response(f"Regenerated '{query}' successfully")


def create_mcp_server(config_dir: Path | None = None) -> Server:
    """Create and configure the MCP server."""
    server = Server("healing-guide")
    guide_server = HealingGuideServer(config_dir=config_dir)

    @server.list_tools()
    async def handle_list_tools() -> list[Tool]:
        return guide_server.get_tools()

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict | None):
        result = await guide_server.call_tool(name, arguments)
        if result.isError:
            raise RuntimeError(result.content[0].text)
        return result.content

    server._guide_server = guide_server
    return server


async def run_mcp_server(config_dir: Path | None = None) -> None:
    """Run the MCP server using stdio transport."""
    server = create_mcp_server(config_dir)

    init_options = InitializationOptions(
        server_name="healing-guide",
        server_version=__version__,
        capabilities=ServerCapabilities(tools={"listChanged": False}),
    )

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, init_options)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
    except Exception as e:
        logger.error(f"MCP server error: {e}")
        raise
    finally:
        logger.info("Performing server cleanup...")
        await server._guide_server.cleanup()


if __name__ == "__main__":
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    asyncio.run(run_mcp_server(config_dir))
