"""Configuration provider for the EVM API client.

Values are looked up per key in this order: explicit overrides, environment
variables, then (for the API key only) the OS keyring.
"""

import logging
import os
from typing import Dict, Optional

import keyring
from keyring.errors import KeyringError

SERVICE_NAME = "evm-api-mcp"
KEY_NAME = "api-key"

ENV_VARS = {
    "apiKey": "EVM_API_KEY",
    "serverUrl": "EVM_API_SERVER_URL",
}


class Config:
    """Read-only key-value access to `apiKey` and `serverUrl`

    Args:
        overrides: Values that take precedence over the environment; a None
            value marks the key as absent
        use_keyring: Whether to fall back to the OS keyring for the API key
    """

    def __init__(self, overrides: Optional[Dict[str, Optional[str]]] = None, use_keyring: bool = True):
        self.overrides = dict(overrides or {})
        self.use_keyring = use_keyring
        self._keyring_loaded = False
        self._keyring_value: Optional[str] = None
        unknown = set(self.overrides) - set(ENV_VARS)
        if unknown:
            raise KeyError(f"Unknown config keys: {sorted(unknown)}")

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value

        Args:
            key: "apiKey" or "serverUrl"

        Returns:
            The configured value, or None when absent

        Raises:
            KeyError: If the key is not a known configuration key
        """
        if key not in ENV_VARS:
            raise KeyError(f"Unknown config key: {key}")

        if key in self.overrides:
            return self.overrides[key] or None

        value = os.getenv(ENV_VARS[key])
        if value:
            return value

        if key == "apiKey" and self.use_keyring:
            return self._api_key_from_keyring()
        return None

    def _api_key_from_keyring(self) -> Optional[str]:
        # Read once per Config; the backend call blocks
        if self._keyring_loaded:
            return self._keyring_value
        self._keyring_loaded = True
        try:
            value = keyring.get_password(SERVICE_NAME, KEY_NAME)
        except KeyringError as e:
            logging.warning(f"[Config] Keyring unavailable, no API key loaded: {e}")
            return None
        if value:
            logging.info("[Config] Loaded API key from keyring.")
        self._keyring_value = value or None
        return self._keyring_value


__all__ = ["Config", "SERVICE_NAME", "KEY_NAME"]
