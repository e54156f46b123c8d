"""Request resolution for EVM API operations.

EvmResolver turns the logical params of one operation into an HTTP request,
picks the transport and wraps the response in an EvmApiResultAdapter:

    fetch(params)
      -> no apiKey configured:  POST {serverUrl}/functions/{name}, unwrap {"result": ...}
      -> method GET:            GET  {base_url}/{path} with x-api-key
      -> method POST:           POST {base_url}/{path} with x-api-key

Every path builds the url from the logical params, parses them into wire
params, fills chain/address defaults from the connection and splits the wire
params into query and body.
"""

import logging
from typing import Any, Dict, Optional

from evm_api_mcp.config import Config
from evm_api_mcp.connection import ConnectionState
from evm_api_mcp.errors import ApiErrorCode, EvmApiError
from evm_api_mcp.formatting import address_to_lowercase, chain_to_api_hex
from evm_api_mcp.transport import RequestController

from .models import BodyType, HTTPMethod, ResolverOptions, ServerResponse
from .result_adapter import EvmApiResultAdapter

BASE_URL = "https://deep-index.moralis.io/api/v2"


class EvmResolver:
    """Resolves and dispatches one EVM API operation

    Args:
        options: ResolverOptions describing the operation
        config: Provides `apiKey` and `serverUrl`
        connection: Provides the connection snapshot used for default params
        requests: Transport performing the HTTP calls
        base_url: Base url of the API for direct calls
    """

    def __init__(
        self,
        options: ResolverOptions,
        config: Optional[Config] = None,
        connection: Optional[ConnectionState] = None,
        requests: Optional[RequestController] = None,
        base_url: str = BASE_URL,
    ):
        self.options = options
        self.config = config or Config()
        self.connection = connection or ConnectionState()
        self.requests = requests or RequestController()
        self.base_url = base_url

    @property
    def name(self) -> str:
        return self.options.name

    def get_url(self, params: Dict[str, Any]) -> str:
        return f"{self.base_url}/{self.options.get_path(params)}"

    def is_body_param(self, param: str) -> bool:
        if self.options.method == HTTPMethod.GET:
            return False
        return param in self.options.body_params

    def get_search_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        # Falsy values (0, False, "") are dropped along with None
        return {key: value for key, value in params.items() if value and not self.is_body_param(key)}

    def get_body_params(self, params: Dict[str, Any]) -> Any:
        body: Any = {}
        for key, value in params.items():
            if not value or not self.is_body_param(key):
                continue
            if self.options.body_type == BodyType.PROPERTY:
                body[key] = value
            else:
                body = value
        return body

    def resolve_default_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Fill chain and address from the connection when not supplied

        Args:
            params: Wire params; left unchanged, a resolved copy is returned

        Returns:
            The resolved wire params

        Raises:
            EvmApiError: If unconnected and the params carry an empty address
        """
        context = self.connection.snapshot()
        resolved = dict(params)

        if not context.is_connected and "address" in resolved and not resolved["address"]:
            raise EvmApiError(ApiErrorCode.GENERIC_API_ERROR, "EvmApi failed: address is required")

        if context.is_connected:
            if resolved.get("chain") is None:
                resolved["chain"] = chain_to_api_hex(context.chain)
            if resolved.get("address") is None:
                resolved["address"] = address_to_lowercase(context.account)
        return resolved

    def uses_server(self) -> bool:
        """Whether calls go through the proxy server rather than the API"""
        return not self.config.get("apiKey")

    def get_server_url(self) -> str:
        server_url = self.config.get("serverUrl")
        if not server_url:
            raise EvmApiError(ApiErrorCode.GENERIC_API_ERROR, "EvmApi failed: start with apiKey or serverUrl")
        return f"{server_url}/functions/{self.name}"

    def _prepare(self, params: Dict[str, Any]) -> Dict[str, Any]:
        api_params = self.options.parse_params(params)
        return self.resolve_default_params(api_params)

    async def _api_get(self, params: Dict[str, Any], api_key: str) -> EvmApiResultAdapter:
        url = self.get_url(params)
        logging.info(f"[EvmResolver] {self.name}: GET {url}")
        api_params = self._prepare(params)
        search_params = self.get_search_params(api_params)

        result = await self.requests.get(url, search_params, headers={"x-api-key": api_key})
        return EvmApiResultAdapter(result, self.options.api_to_result, self.options.result_to_json, params)

    async def _api_post(self, params: Dict[str, Any], api_key: str) -> EvmApiResultAdapter:
        url = self.get_url(params)
        logging.info(f"[EvmResolver] {self.name}: POST {url}")
        api_params = self._prepare(params)
        search_params = self.get_search_params(api_params)
        body_params = self.get_body_params(api_params)

        result = await self.requests.post(url, search_params, body_params, headers={"x-api-key": api_key})
        return EvmApiResultAdapter(result, self.options.api_to_result, self.options.result_to_json, params)

    async def _server_request(self, params: Dict[str, Any]) -> EvmApiResultAdapter:
        url = self.get_server_url()
        api_params = self._prepare(params)
        search_params = self.get_search_params(api_params)
        body_params = self.get_body_params(api_params)

        response: ServerResponse = await self.requests.post(url, search_params, body_params)
        return EvmApiResultAdapter(response["result"], self.options.api_to_result, self.options.result_to_json, params)

    async def fetch(self, params: Optional[Dict[str, Any]] = None) -> EvmApiResultAdapter:
        """Resolve and send the request for the given logical params

        Args:
            params: Logical params of the operation

        Returns:
            EvmApiResultAdapter wrapping the API result

        Raises:
            EvmApiError: On missing configuration or a missing required address
        """
        params = params or {}
        api_key = self.config.get("apiKey")
        if not api_key:
            logging.info(f"[EvmResolver] {self.name}: no apiKey, calling through server")
            return await self._server_request(params)
        if self.options.method == HTTPMethod.POST:
            return await self._api_post(params, api_key)
        return await self._api_get(params, api_key)


__all__ = ["EvmResolver", "BASE_URL"]
