import logging
from typing import Dict, Iterable, Optional
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from .config import api_config, CURRENTPRICE_DATA_TYPE
from ..core.validators import validate_url

logger = logging.getLogger(__name__)

# Символы, которые encodeURIComponent оставляет без кодирования
_UNRESERVED = "-_.!~*'()"


def encode_params(params: Dict[str, str]) -> str:
    """Кодирует параметры в query string вида key=value&..."""
    return '&'.join(
        f"{quote(str(key), safe=_UNRESERVED)}={quote(str(value), safe=_UNRESERVED)}"
        for key, value in params.items()
    )


def get_api_path() -> str:
    """Базовый путь API без завершающих слешей"""
    api_path = f"{api_config.API_PROTOCOL}://{api_config.API_HOST}{api_config.API_PATH}"
    return api_path.rstrip('/')


def get_resource(data_type: Optional[str]) -> str:
    if data_type is None:
        return ''
    return api_config.API_ENDPOINTS.get(data_type, '')


class ApiEndpoint:
    """Изменяемое представление URL: базовый адрес, путь и параметры"""

    def __init__(self, url: str):
        validate_url(url)
        parts = urlsplit(url)
        self._scheme = parts.scheme
        self._netloc = parts.netloc
        self._path = parts.path
        self._params: Dict[str, str] = dict(parse_qsl(parts.query, keep_blank_values=True))

    @property
    def base_url(self) -> str:
        return f"{self._scheme}://{self._netloc}"

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, path: str):
        # Старые параметры могут не подходить для нового пути
        path = path if path.startswith('/') else f"/{path}"
        validate_url(urlunsplit((self._scheme, self._netloc, path, '', '')))
        self._path = path
        self.delete_all_params()

    @property
    def params(self) -> Dict[str, str]:
        return dict(self._params)

    @property
    def query(self) -> str:
        return encode_params(self._params)

    @property
    def href(self) -> str:
        return urlunsplit((self._scheme, self._netloc, self._path, self.query, ''))

    def get_param(self, key: str) -> Optional[str]:
        return self._params.get(key)

    def update_params(self, params: Dict[str, str]) -> None:
        for key, value in params.items():
            self._params[key] = str(value)

    def delete_param(self, key: str) -> None:
        self._params.pop(key, None)

    def delete_many_params(self, keys: Iterable[str]) -> None:
        for key in list(keys):
            self.delete_param(key)

    def delete_all_params(self) -> None:
        self._params.clear()

    def __str__(self):
        return self.href

    def __repr__(self):
        return f"ApiEndpoint({self.href!r})"


def build_endpoint(data_type: Optional[str], params: Optional[Dict[str, str]] = None) -> ApiEndpoint:
    """
    Строит endpoint Coindesk API для типа данных

    Для currentprice валюта встраивается в путь:
    currentprice.json -> currentprice/EUR.json
    """
    params = dict(params or {})
    resource = get_resource(data_type)

    if data_type == CURRENTPRICE_DATA_TYPE:
        currency = params.pop(api_config.CURRENCY_PARAM, None) or ''
        if currency:
            name, dot, extension = resource.rpartition('.')
            resource = f"{name}/{currency}{dot}{extension}"

    url = f"{get_api_path()}/{resource}"
    encoded_params = encode_params(params)
    if encoded_params:
        url = f"{url}?{encoded_params}"

    logger.debug(f"[CoindeskAPIClient] Built endpoint {url}")
    return ApiEndpoint(url)
