"""Resolver registry and its ADK tools.

Every registered operation gets one EvmResolver, sharing config, connection
state and transport, and one ResolverTool that publishes the operation to
MCP clients.
"""

import logging
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

import aiohttp
from google.adk.tools.base_tool import BaseTool
from google.genai import types

from .config import Config
from .connection import ConnectionState
from .errors import EvmApiError
from .resolvers import EvmResolver, ResolverOptions
from .transport import RequestController

# Filled in by EvmResolver.resolve_default_params while connected
CONNECTION_DEFAULTS = {"chain", "address"}


class ResolverTool(BaseTool):
    """ADK tool running one EvmResolver

    The tool result always carries the transport `mode` ("api" or "server").
    Resolver and HTTP status errors are reported in the result; anything else
    propagates.
    """

    def __init__(self, resolver: EvmResolver):
        super().__init__(name=resolver.name, description=resolver.options.description or resolver.name)
        self.resolver = resolver

    def required_params(self) -> List[str]:
        """Required logical params; chain and address are optional while connected"""
        required = [param.name for param in self.resolver.options.parameters if param.required]
        if self.resolver.connection.snapshot().is_connected:
            required = [name for name in required if name not in CONNECTION_DEFAULTS]
        return required

    def _get_declaration(self) -> types.FunctionDeclaration:
        properties = {
            param.name: types.Schema(type=types.Type(param.type.upper()), description=param.description)
            for param in self.resolver.options.parameters
        }
        return types.FunctionDeclaration(
            name=self.name,
            description=self.description,
            parameters=types.Schema(type=types.Type.OBJECT, properties=properties, required=self.required_params()),
        )

    async def run_async(self, *, args: Dict[str, Any], tool_context=None) -> dict:
        mode = "server" if self.resolver.uses_server() else "api"
        try:
            adapter = await self.resolver.fetch(dict(args))
        except EvmApiError as e:
            logging.warning(f"[ResolverTool] {self.name} failed: {e}")
            return {"success": False, "mode": mode, "code": e.code.value, "message": e.message}
        except aiohttp.ClientResponseError as e:
            logging.warning(f"[ResolverTool] {self.name} got HTTP {e.status}: {e.message}")
            return {"success": False, "mode": mode, "status": e.status, "message": e.message}

        return {"success": True, "mode": mode, "data": adapter.to_json()}


class ResolverManager:
    """Registry of resolvers and their tools

    Args:
        config: Configuration provider (apiKey, serverUrl)
        connection: Ambient connection state read for default params
        requests: Transport used by every resolver
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        connection: Optional[ConnectionState] = None,
        requests: Optional[RequestController] = None,
    ):
        self.config = config or Config()
        self.connection = connection or ConnectionState()
        self.requests = requests or RequestController()
        self.resolvers: Dict[str, EvmResolver] = {}
        self.tools: Dict[str, ResolverTool] = {}

    def add_resolver(self, options: ResolverOptions) -> EvmResolver:
        """Register an operation

        Raises:
            ValueError: If an operation with the same name is registered
        """
        if options.name in self.resolvers:
            raise ValueError(f"Resolver '{options.name}' already exists")

        resolver = EvmResolver(options, config=self.config, connection=self.connection, requests=self.requests)
        self.resolvers[options.name] = resolver
        self.tools[options.name] = ResolverTool(resolver)
        logging.info(f"[ResolverManager] Added '{options.name}' ({options.method.value}, body {options.body_type.value})")
        return resolver

    def add_resolvers(self, options_list: Iterable[ResolverOptions]) -> None:
        for options in options_list:
            self.add_resolver(options)

    async def call(self, resolver_name: str, params: Dict[str, Any]) -> dict:
        if resolver_name not in self.tools:
            logging.warning(f"[ResolverManager] Resolver '{resolver_name}' not found")
            return {"success": False, "message": f"Resolver '{resolver_name}' not found"}
        return await self.tools[resolver_name].run_async(args=params, tool_context=None)

    def list_resolvers(self) -> List[dict]:
        result = []
        for name, resolver in self.resolvers.items():
            options = resolver.options
            result.append({
                "name": name,
                "description": options.description,
                "method": options.method.value,
                "body_params": list(options.body_params),
                "body_type": options.body_type.value,
                "required": self.tools[name].required_params(),
                "parameters": [asdict(param) for param in options.parameters],
            })
        return result


__all__ = [
    "ResolverManager",
    "ResolverTool",
]
