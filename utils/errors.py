"""
Error hierarchy shared by providers, fusion, indicators and the LLM client.

Quote and series lookups raise these; profile, news and search never do.
"""

from typing import Optional


class MarketDataError(Exception):
    """Base class for market data failures."""

    def __init__(self, message: str, symbol: Optional[str] = None):
        super().__init__(message)
        self.symbol = symbol


class NotFoundError(MarketDataError):
    """Upstream reports no data for the symbol."""

    def __init__(self, symbol: str, message: Optional[str] = None):
        super().__init__(message or f"No data found for {symbol}", symbol)


class UpstreamError(MarketDataError):
    """Transport failure, timeout or malformed payload from a provider."""

    def __init__(self, source: str, message: str, symbol: Optional[str] = None):
        prefix = f"[{source}] {symbol}: " if symbol else f"[{source}] "
        super().__init__(prefix + message, symbol)
        self.source = source


class InsufficientDataError(MarketDataError):
    """Not enough history to compute the requested indicators."""

    def __init__(self, symbol: str, required: int, available: int):
        super().__init__(
            f"Insufficient history for {symbol}: need {required} daily closes, got {available}",
            symbol,
        )
        self.required = required
        self.available = available


class LLMError(Exception):
    """Base exception for the text-generation collaborator."""
    pass


class ModelUnavailableError(LLMError):
    """Raised when a single model call fails (HTTP error, timeout, empty answer)."""

    def __init__(self, model: str, reason: str):
        super().__init__(f"Model {model} unavailable: {reason}")
        self.model = model
