"""
Configuration settings loader with secure API key management.
Loads environment variables from .env file and provides masked logging.
Supports several API keys per provider via APIKeyManager (KEY_SET_INDEX picks one).
"""

import os
from pathlib import Path
from dotenv import load_dotenv
from .api_key_manager import APIKeyManager
from .constants import DATA_STORE

# Load environment variables from .env
project_root = Path(__file__).parent.parent
env_path = project_root / '.env'
load_dotenv(dotenv_path=env_path)


class Settings:
    """Application settings with secure API key handling."""

    def __init__(self):
        self.manager = APIKeyManager()

        # The manager handles parsing comma-separated strings
        self.manager.register('FINNHUB', os.getenv('FINNHUB_API_KEY'))
        self.manager.register('HUGGINGFACE', os.getenv('HUGGINGFACE_TOKEN'))

        # Both keys are optional: Finnhub only backs up Yahoo, and without a
        # Hugging Face token the commentary falls back to static templates.
        self.missing_keys = [
            name for name in ('FINNHUB', 'HUGGINGFACE')
            if not self.manager.validate_has_key(name)
        ]

        self.primary_provider = os.getenv('PRIMARY_PROVIDER', 'yahoo').lower()
        self.secondary_provider = os.getenv('SECONDARY_PROVIDER', 'finnhub').lower()
        self.store_dir = os.getenv('STORE_DIR', str(project_root / DATA_STORE))

    # --- Keys ---

    @property
    def FINNHUB_API_KEY(self) -> str | None:
        return self.manager.get('FINNHUB')

    @property
    def HUGGINGFACE_TOKEN(self) -> str | None:
        return self.manager.get('HUGGINGFACE')

    def get_key_count(self, provider: str) -> int:
        """Get number of keys configured for a specific provider."""
        return self.manager.get_key_count(provider)

    # --- Helpers ---

    @staticmethod
    def mask_api_key(api_key: str) -> str:
        """
        Mask API key for secure logging.
        Shows only first 4 and last 4 characters.

        Args:
            api_key: The API key to mask

        Returns:
            Masked API key (e.g., 'ltwM...I4ha')
        """
        if not api_key or len(api_key) < 8:
            return "****"
        return f"{api_key[:4]}...{api_key[-4:]}"

    def get_masked_finnhub_key(self) -> str:
        """Get masked Finnhub API key for logging."""
        return self.mask_api_key(self.FINNHUB_API_KEY)


# Global settings instance
settings = Settings()
