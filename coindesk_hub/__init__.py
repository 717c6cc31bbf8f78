"""
Клиент Coindesk Bitcoin Price Index API
"""

__version__ = "1.0.0"

from .api import (CoindeskAPIClient, CoindeskAPIResponse, CoindeskHttpRequest,
                  RequestConfig, build_endpoint)
from .core.currencies import CurrencyStorage, SupportedCurrency
from .core.exceptions import (CoindeskHubError, PersistenceError, ResponseValidationError,
                              SchemaLookupError, TransportError, ValidationError)
from .logging_config import setup_logging

__all__ = [
    'CoindeskAPIClient', 'CoindeskAPIResponse', 'CoindeskHttpRequest', 'RequestConfig',
    'build_endpoint', 'CurrencyStorage', 'SupportedCurrency', 'CoindeskHubError',
    'PersistenceError', 'ResponseValidationError', 'SchemaLookupError', 'TransportError',
    'ValidationError', 'setup_logging',
]
