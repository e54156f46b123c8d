"""Data models for EVM API resolvers.

This module contains the configuration bundle that turns the single
EvmResolver class into one concrete API operation, plus the enums that
control how wire parameters are split between query string and body.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, TypedDict


class HTTPMethod(Enum):
    """HTTP methods used by the EVM API"""
    GET = "get"
    POST = "post"


class BodyType(Enum):
    """How body parameters are combined into the request body

    PROPERTY merges every body parameter as its own key, BODY makes the
    value of the (single) body parameter the whole request body.
    """
    PROPERTY = "property"
    BODY = "set body"


@dataclass
class APIParameter:
    """Configuration for a logical parameter of a resolver

    Args:
        name: Parameter name
        type: Parameter type ("string", "number", "boolean", "object", "array")
        description: Parameter description for tool documentation
        required: Whether parameter is required (default: True)
        default: Default value for optional parameters
    """
    name: str
    type: str
    description: str
    required: bool = True
    default: Optional[Any] = None


@dataclass(frozen=True)
class ResolverOptions:
    """Configuration for one EVM API operation

    Args:
        name: Operation name, also used for the proxy path `/functions/{name}`
        get_path: Builds the endpoint path from the logical params
        parse_params: Converts logical params into wire params
        api_to_result: Maps the raw API result to the domain result
        result_to_json: Maps the domain result to a JSON-serializable value
        method: HTTP method for direct API calls (default: GET)
        body_params: Wire parameter names sent in the body (POST only)
        body_type: How body parameters are combined (default: PROPERTY)
        description: Human readable description, used for tool publication
        parameters: Logical parameter descriptions, used for tool publication
    """
    name: str
    get_path: Callable[[Dict[str, Any]], str]
    parse_params: Callable[[Dict[str, Any]], Dict[str, Any]]
    api_to_result: Callable[[Any], Any]
    result_to_json: Callable[[Any], Any]
    method: HTTPMethod = HTTPMethod.GET
    body_params: Sequence[str] = ()
    body_type: BodyType = BodyType.PROPERTY
    description: str = ""
    parameters: Sequence[APIParameter] = ()


class ServerResponse(TypedDict):
    """Envelope returned by the proxy server path"""
    result: Any


__all__ = [
    "HTTPMethod",
    "BodyType",
    "APIParameter",
    "ResolverOptions",
    "ServerResponse",
]
