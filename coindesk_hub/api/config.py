from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .. import __version__

CURRENTPRICE_DATA_TYPE = "currentprice"
HISTORICAL_DATA_TYPE = "historical"
SUPPORTED_CURRENCIES_DATA_TYPE = "supported-currencies"

@dataclass
class APIConfig:
    """Конфигурация Coindesk API endpoints и параметров"""
    API_PROTOCOL: str = "https"
    API_HOST: str = "api.coindesk.com"
    API_PATH: str = "/v1/bpi/"

    API_ENDPOINTS: Dict[str, str] = field(default_factory=lambda: {
        CURRENTPRICE_DATA_TYPE: "currentprice.json",
        HISTORICAL_DATA_TYPE: "historical/close.json",
        SUPPORTED_CURRENCIES_DATA_TYPE: "supported-currencies.json",
    })

    VALID_DATA_TYPES: List[str] = field(default_factory=lambda: [
        CURRENTPRICE_DATA_TYPE,
        HISTORICAL_DATA_TYPE,
    ])

    CURRENCY_PARAM: str = "currency"
    INDEX_PARAM: str = "index"
    START_PARAM: str = "start"
    END_PARAM: str = "end"
    FOR_PARAM: str = "for"

    VALID_CURRENTPRICE_PARAMS: List[str] = field(default_factory=lambda: ["currency"])
    VALID_HISTORICAL_PARAMS: List[str] = field(default_factory=lambda: [
        "index", "currency", "start", "end", "for"
    ])

    VALID_INDEX: List[str] = field(default_factory=lambda: ["USD", "CNY"])
    VALID_FOR: List[str] = field(default_factory=lambda: ["yesterday"])

@dataclass
class HttpConfig:
    """Конфигурация HTTP запросов"""
    DEFAULT_RETRIES: int = 10
    DEFAULT_REDIRECTS: int = 5
    DEFAULT_TIMEOUT_MS: int = 5000
    DEFAULT_BACKOFF: bool = True

    REQUEST_MAX_RETRIES: int = 10
    REQUEST_MAX_REDIRECTS: int = 10
    REQUEST_MAX_TIMEOUT_MS: int = 60000

    CLIENT_ERROR_STATUS_CODES: Tuple[int, ...] = (403, 404)
    SERVER_ERROR_STATUS_CODES: Tuple[int, ...] = (500,)

    REQUEST_HEADERS: Dict[str, str] = field(default_factory=lambda: {
        'Accept': 'application/json',
        'Accept-Language': 'en-US,en;q=0.9',
        'Cache-Control': 'no-cache',
        'Connection': 'close',
        'User-Agent': f'CoindeskHub/{__version__}',
        'X-Client-Version': __version__,
    })

api_config = APIConfig()
http_config = HttpConfig()
