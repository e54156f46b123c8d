"""Ambient EVM connection state.

The resolvers read a ConnectionContext snapshot once per call to fill in
default chain and address parameters. They never change the state.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class ConnectionContext:
    """Read-only view of the connected chain and account"""
    is_connected: bool
    chain: Optional[Union[int, str]] = None
    account: Optional[str] = None


UNCONNECTED = ConnectionContext(is_connected=False)


class ConnectionState:
    """Holds the current connection; hands out immutable snapshots"""

    def __init__(self, context: ConnectionContext = UNCONNECTED):
        self._context = context

    @classmethod
    def from_env(cls) -> "ConnectionState":
        """Build the state from EVM_CHAIN / EVM_ACCOUNT, unconnected if either is missing"""
        state = cls()
        chain = os.getenv("EVM_CHAIN")
        account = os.getenv("EVM_ACCOUNT")
        if chain and account:
            state.connect(chain, account)
        return state

    def connect(self, chain: Union[int, str], account: str) -> None:
        self._context = ConnectionContext(is_connected=True, chain=chain, account=account)
        logging.info(f"[Connection] Connected to chain {chain} as {account}")

    def disconnect(self) -> None:
        self._context = UNCONNECTED
        logging.info("[Connection] Disconnected")

    def snapshot(self) -> ConnectionContext:
        return self._context


__all__ = ["ConnectionContext", "ConnectionState", "UNCONNECTED"]
