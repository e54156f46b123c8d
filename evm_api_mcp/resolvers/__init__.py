"""EVM API resolver package.

This package provides the EvmResolver, which resolves a logical API operation
into an HTTP request, dispatches it and adapts the result.
"""

from .models import APIParameter, BodyType, HTTPMethod, ResolverOptions, ServerResponse
from .resolver import BASE_URL, EvmResolver
from .result_adapter import EvmApiResultAdapter

__all__ = [
    "EvmResolver",
    "EvmApiResultAdapter",
    "ResolverOptions",
    "APIParameter",
    "BodyType",
    "HTTPMethod",
    "ServerResponse",
    "BASE_URL",
]
