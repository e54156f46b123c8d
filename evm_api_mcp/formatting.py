"""Canonical forms of EVM values as expected by the API."""

from typing import Union

from evm_api_mcp.errors import ApiErrorCode, EvmApiError


def chain_to_api_hex(chain: Union[int, str]) -> str:
    """Convert a chain id (int, decimal string or 0x-hex string) to API hex

    Raises:
        EvmApiError: If the value is not a positive chain id
    """
    try:
        if isinstance(chain, bool):
            raise ValueError(chain)
        if isinstance(chain, int):
            chain_id = chain
        elif chain.lower().startswith("0x"):
            chain_id = int(chain, 16)
        else:
            chain_id = int(chain, 10)
    except (AttributeError, ValueError):
        raise EvmApiError(ApiErrorCode.INVALID_ARGUMENT, f"Invalid chain: {chain!r}")

    if chain_id <= 0:
        raise EvmApiError(ApiErrorCode.INVALID_ARGUMENT, f"Invalid chain: {chain!r}")
    return hex(chain_id)


def address_to_lowercase(address: str) -> str:
    return str(address).lower()


__all__ = ["chain_to_api_hex", "address_to_lowercase"]
