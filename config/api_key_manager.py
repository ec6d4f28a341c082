import os
from typing import Dict, List, Optional


class APIKeyManager:
    """
    Unified API Key Manager.
    Parses comma-separated keys from the environment and picks one key per
    provider from the key set selected by KEY_SET_INDEX.
    """

    def __init__(self):
        # Key set index can be handed down to subprocesses via the environment
        try:
            self._index = int(os.getenv('KEY_SET_INDEX', '0'))
        except ValueError:
            self._index = 0

        self._keys: Dict[str, List[str]] = {}

    def register(self, name: str, raw_value: Optional[str]) -> None:
        """
        Register an API key variable, supporting comma-separated values.

        Args:
            name: Internal identifier for the key (e.g., 'FINNHUB')
            raw_value: Raw string from environment (e.g., 'key1,key2')
        """
        if not raw_value:
            self._keys[name] = []
            return

        # "key1, key2" -> ["key1", "key2"]
        self._keys[name] = [k.strip() for k in raw_value.split(',') if k.strip()]

    def get(self, name: str) -> Optional[str]:
        """Get the key for the given name from the selected key set."""
        candidates = self._keys.get(name, [])
        if not candidates:
            return None
        return candidates[self._index % len(candidates)]

    def validate_has_key(self, name: str) -> bool:
        """Check if at least one key exists for the given name."""
        return len(self._keys.get(name, [])) > 0

    def get_key_count(self, name: str) -> int:
        """Get number of keys configured for a specific provider."""
        return len(self._keys.get(name, []))
