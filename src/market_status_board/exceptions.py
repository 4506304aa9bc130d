"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class ConversionFailure(Exception):
    """Raised inside the normalizer when trading hours cannot be converted."""


class MarketDataError(Exception):
    """Raised when a market-status payload is missing or malformed."""


class TimeSeriesError(Exception):
    """Raised when a price time-series payload cannot be prepared for charting."""
