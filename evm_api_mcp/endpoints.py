"""EVM API operations available to the client.

Each operation is one ResolverOptions bundle: path builder, param parser and
result adapters. Params and results are plain dicts on the wire side and
dataclasses on the domain side.
"""

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from evm_api_mcp.formatting import address_to_lowercase, chain_to_api_hex
from evm_api_mcp.resolvers.models import APIParameter, BodyType, HTTPMethod, ResolverOptions


@dataclass
class NativeBalance:
    balance: int


@dataclass
class Erc20Balance:
    token_address: str
    name: str
    symbol: str
    decimals: int
    balance: int
    logo: Optional[str] = None
    thumbnail: Optional[str] = None

    @property
    def value(self) -> Decimal:
        """Balance in token units"""
        return Decimal(self.balance).scaleb(-self.decimals)


@dataclass
class Erc20Price:
    usd_price: float
    native_price: Optional[Dict[str, Any]] = None
    exchange_address: Optional[str] = None
    exchange_name: Optional[str] = None


# ──────────────────────────────────────────────────────────────────────────────
# Param helpers
# ──────────────────────────────────────────────────────────────────────────────

def _chain(params: Dict[str, Any]) -> Optional[str]:
    chain = params.get("chain")
    return chain_to_api_hex(chain) if chain else None


def _address(params: Dict[str, Any]) -> Optional[str]:
    address = params.get("address")
    return address_to_lowercase(address) if address else address


CHAIN_PARAM = APIParameter("chain", "string", "Chain id, e.g. 1 or 0x89", required=False)
ADDRESS_PARAM = APIParameter("address", "string", "Wallet or contract address", required=False)
TO_BLOCK_PARAM = APIParameter("to_block", "number", "Block number to query at", required=False)


# ──────────────────────────────────────────────────────────────────────────────
# getNativeBalance
# ──────────────────────────────────────────────────────────────────────────────

GET_NATIVE_BALANCE = ResolverOptions(
    name="getNativeBalance",
    description="Get the native balance of an address",
    get_path=lambda params: f"{params.get('address') or ''}/balance",
    parse_params=lambda params: {
        "chain": _chain(params),
        "to_block": params.get("to_block"),
        "address": _address(params),
    },
    api_to_result=lambda data: NativeBalance(balance=int(data["balance"])),
    result_to_json=lambda result: {"balance": str(result.balance)},
    parameters=(ADDRESS_PARAM, CHAIN_PARAM, TO_BLOCK_PARAM),
)


# ──────────────────────────────────────────────────────────────────────────────
# getTokenBalances
# ──────────────────────────────────────────────────────────────────────────────

def _to_erc20_balances(data: List[Dict[str, Any]]) -> List[Erc20Balance]:
    return [
        Erc20Balance(
            token_address=address_to_lowercase(item["token_address"]),
            name=item["name"],
            symbol=item["symbol"],
            decimals=int(item["decimals"]),
            balance=int(item["balance"]),
            logo=item.get("logo"),
            thumbnail=item.get("thumbnail"),
        )
        for item in data
    ]


def _erc20_balances_to_json(balances: List[Erc20Balance]) -> List[Dict[str, Any]]:
    result = []
    for balance in balances:
        item = asdict(balance)
        item["balance"] = str(balance.balance)
        item["value"] = str(balance.value)
        result.append(item)
    return result


GET_TOKEN_BALANCES = ResolverOptions(
    name="getTokenBalances",
    description="Get the ERC20 token balances of an address",
    get_path=lambda params: f"{params.get('address') or ''}/erc20",
    parse_params=lambda params: {
        "chain": _chain(params),
        "to_block": params.get("to_block"),
        "token_addresses": [address_to_lowercase(a) for a in params.get("token_addresses") or []],
        "address": _address(params),
    },
    api_to_result=_to_erc20_balances,
    result_to_json=_erc20_balances_to_json,
    parameters=(
        ADDRESS_PARAM,
        CHAIN_PARAM,
        TO_BLOCK_PARAM,
        APIParameter("token_addresses", "array", "Only return balances of these tokens", required=False),
    ),
)


# ──────────────────────────────────────────────────────────────────────────────
# getTokenPrice
# ──────────────────────────────────────────────────────────────────────────────

GET_TOKEN_PRICE = ResolverOptions(
    name="getTokenPrice",
    description="Get the price of an ERC20 token",
    get_path=lambda params: f"erc20/{params.get('address') or ''}/price",
    parse_params=lambda params: {
        "chain": _chain(params),
        "exchange": params.get("exchange"),
        "to_block": params.get("to_block"),
        "address": _address(params),
    },
    api_to_result=lambda data: Erc20Price(
        usd_price=float(data["usdPrice"]),
        native_price=data.get("nativePrice"),
        exchange_address=data.get("exchangeAddress"),
        exchange_name=data.get("exchangeName"),
    ),
    result_to_json=asdict,
    parameters=(
        APIParameter("address", "string", "Token contract address"),
        CHAIN_PARAM,
        APIParameter("exchange", "string", "Exchange to price against", required=False),
        TO_BLOCK_PARAM,
    ),
)


# ──────────────────────────────────────────────────────────────────────────────
# runContractFunction (POST, body properties)
# ──────────────────────────────────────────────────────────────────────────────

RUN_CONTRACT_FUNCTION = ResolverOptions(
    name="runContractFunction",
    description="Run a read-only function of a contract",
    get_path=lambda params: f"{params.get('address') or ''}/function",
    parse_params=lambda params: {
        "chain": _chain(params),
        "function_name": params.get("function_name"),
        "address": _address(params),
        "abi": params.get("abi"),
        "params": params.get("params"),
    },
    api_to_result=lambda data: data,
    result_to_json=lambda result: result,
    method=HTTPMethod.POST,
    body_params=("abi", "params"),
    parameters=(
        APIParameter("address", "string", "Contract address"),
        APIParameter("function_name", "string", "Name of the function to run"),
        APIParameter("abi", "array", "Contract ABI"),
        CHAIN_PARAM,
        APIParameter("params", "object", "Function arguments by name", required=False),
    ),
)


# ──────────────────────────────────────────────────────────────────────────────
# uploadFolder (POST, whole body is the file list)
# ──────────────────────────────────────────────────────────────────────────────

UPLOAD_FOLDER = ResolverOptions(
    name="uploadFolder",
    description="Upload files to IPFS",
    get_path=lambda params: "ipfs/uploadFolder",
    parse_params=lambda params: {"abi": params.get("abi")},
    api_to_result=lambda data: [item["path"] for item in data],
    result_to_json=lambda paths: [{"path": path} for path in paths],
    method=HTTPMethod.POST,
    body_params=("abi",),
    body_type=BodyType.BODY,
    parameters=(
        APIParameter("abi", "array", "Files to upload as a list of {path, content}"),
    ),
)


DEFAULT_ENDPOINTS = [
    GET_NATIVE_BALANCE,
    GET_TOKEN_BALANCES,
    GET_TOKEN_PRICE,
    RUN_CONTRACT_FUNCTION,
    UPLOAD_FOLDER,
]


__all__ = [
    "NativeBalance",
    "Erc20Balance",
    "Erc20Price",
    "GET_NATIVE_BALANCE",
    "GET_TOKEN_BALANCES",
    "GET_TOKEN_PRICE",
    "RUN_CONTRACT_FUNCTION",
    "UPLOAD_FOLDER",
    "DEFAULT_ENDPOINTS",
]
