import contextlib
import logging
import os
import sys
from collections.abc import AsyncIterator

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route
from starlette.types import Receive, Scope, Send

from evm_api_mcp.config import Config
from evm_api_mcp.connection import ConnectionState
from evm_api_mcp.core import build_mcp_server
from evm_api_mcp.endpoints import DEFAULT_ENDPOINTS
from evm_api_mcp.manager import ResolverManager

logging.basicConfig(stream=sys.stderr, level=logging.INFO, format='[%(levelname)s] %(message)s')


def build_resolver_manager() -> ResolverManager:
    """Create a ResolverManager with every default operation registered"""
    manager = ResolverManager(config=Config(), connection=ConnectionState.from_env())
    manager.add_resolvers(DEFAULT_ENDPOINTS)
    return manager


def build_app(manager: ResolverManager) -> Starlette:
    """Build the Starlette app serving health, resolver listing and MCP"""
    mcp_server = build_mcp_server(manager)

    session_manager = StreamableHTTPSessionManager(
        app=mcp_server,
        event_store=None,
        json_response=True,
        stateless=True,
    )

    async def handle_streamable_http(scope: Scope, receive: Receive, send: Send) -> None:
        await session_manager.handle_request(scope, receive, send)

    async def health_handler(request: Request) -> JSONResponse:
        return JSONResponse({
            "status": "healthy",
            "server": "evm-api-mcp",
            "resolvers_count": len(manager.resolvers),
            "connected": manager.connection.snapshot().is_connected,
            "mode": "api" if manager.config.get("apiKey") else "server",
        })

    async def list_resolvers_handler(request: Request) -> JSONResponse:
        resolvers = manager.list_resolvers()
        return JSONResponse({
            "success": True,
            "resolvers": resolvers,
            "count": len(resolvers),
        })

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        """Context manager for session manager lifecycle."""
        async with session_manager.run():
            logging.info("[EvmApiHTTP] EVM API MCP Server started")
            logging.info(f"[EvmApiHTTP]   - Tools: {list(manager.tools.keys())}")
            try:
                yield
            finally:
                logging.info("[EvmApiHTTP] EVM API MCP Server shutting down...")

    return Starlette(
        routes=[
            Route("/health", health_handler, methods=["GET"]),
            Route("/api/resolvers", list_resolvers_handler, methods=["GET"]),
            Mount("/", app=handle_streamable_http),
        ],
        lifespan=lifespan,
    )


def main() -> None:
    """Main function to start the EVM API MCP HTTP server"""
    port = int(os.getenv("PORT", 8080))
    host = os.getenv("HOST", "0.0.0.0")

    starlette_app = build_app(build_resolver_manager())
    logging.info(f"[EvmApiHTTP] Listening on {host}:{port}")

    import uvicorn
    uvicorn.run(starlette_app, host=host, port=port)


if __name__ == "__main__":
    main()
