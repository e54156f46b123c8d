"""Lazy wrapper around a raw EVM API result."""

from functools import cached_property
from typing import Any, Callable, Dict, Optional


class EvmApiResultAdapter:
    """Gives access to the raw, domain and JSON shapes of one API result

    The domain result is computed on first access and cached.

    Args:
        data: Raw API result
        api_to_result: Maps the raw result to the domain result
        result_to_json: Maps the domain result to a JSON-serializable value
        params: Logical params of the call that produced the result
    """

    def __init__(
        self,
        data: Any,
        api_to_result: Callable[[Any], Any],
        result_to_json: Callable[[Any], Any],
        params: Optional[Dict[str, Any]] = None,
    ):
        self._data = data
        self._api_to_result = api_to_result
        self._result_to_json = result_to_json
        self.params = params

    @property
    def raw(self) -> Any:
        return self._data

    @cached_property
    def result(self) -> Any:
        return self._api_to_result(self._data)

    def to_json(self) -> Any:
        return self._result_to_json(self.result)

    def format(self) -> Any:
        return self.to_json()

    def __repr__(self) -> str:
        return f"EvmApiResultAdapter(raw={self._data!r})"


__all__ = ["EvmApiResultAdapter"]
