import logging
from typing import Any, Dict, Iterable, List, Optional

from .config import (api_config, http_config, CURRENTPRICE_DATA_TYPE,
                     HISTORICAL_DATA_TYPE, SUPPORTED_CURRENCIES_DATA_TYPE)
from .endpoint import ApiEndpoint, build_endpoint, get_api_path
from .http_client import CoindeskHttpRequest, RequestConfig
from .response import CoindeskAPIResponse
from ..core.currencies import (CurrencyStorage, SupportedCurrency, get_supported_currencies,
                               parse_currency_records, register_currencies)
from ..core.exceptions import (PersistenceError, ResponseValidationError,
                               TransportError, ValidationError)
from ..core.validators import validate_data_type, validate_params, validate_url
from ..decorators import log_action

logger = logging.getLogger(__name__)

class CoindeskAPIClient:
    """
    Клиент Coindesk BPI API

    Хранит endpoint для выбранного типа данных и использует
    CoindeskHttpRequest для выполнения запросов.
    """

    def __init__(self,
                 data_type: Optional[str] = None,
                 params: Optional[Dict[str, str]] = None,
                 retries: int = http_config.DEFAULT_RETRIES,
                 redirects: int = http_config.DEFAULT_REDIRECTS,
                 timeout: int = http_config.DEFAULT_TIMEOUT_MS,
                 backoff: bool = http_config.DEFAULT_BACKOFF,
                 http: Optional[CoindeskHttpRequest] = None,
                 storage: Optional[CurrencyStorage] = None):
        if data_type is not None:
            data_type = validate_data_type(data_type)
            params = validate_params(data_type, params)
        elif params:
            message = "Params require a data type."
            logger.error(f"[CoindeskAPIClient] Param error: {message}")
            raise ValidationError(message)

        self._http = http or CoindeskHttpRequest(RequestConfig(retries, redirects, timeout, backoff))
        self._storage = storage or CurrencyStorage()
        self._data_type = data_type
        self._currency: Optional[str] = None
        self._endpoint = self._construct_api_endpoint(data_type, params or {})

    def __repr__(self):
        return f"CoindeskAPIClient(url={self.url!r}, {self._http.config!r})"

    def _construct_api_endpoint(self, data_type: Optional[str], params: Dict[str, str]) -> ApiEndpoint:
        if data_type == CURRENTPRICE_DATA_TYPE:
            self._currency = params.get(api_config.CURRENCY_PARAM)
        return build_endpoint(data_type, params)

    @property
    def data_type(self) -> Optional[str]:
        return self._data_type

    @data_type.setter
    def data_type(self, data_type: str):
        data_type = validate_data_type(data_type)
        if data_type == CURRENTPRICE_DATA_TYPE:
            params = {}
        else:
            params = validate_params(data_type, self.params)

        self._data_type = data_type
        self._currency = None
        self._endpoint = self._construct_api_endpoint(data_type, params)

    @property
    def currency(self) -> Optional[str]:
        """Валюта, встроенная в путь currentprice"""
        return self._currency

    @property
    def http(self) -> CoindeskHttpRequest:
        return self._http

    @property
    def endpoint(self) -> ApiEndpoint:
        return self._endpoint

    @property
    def url(self) -> str:
        return self._endpoint.href

    @property
    def path(self) -> str:
        return self._endpoint.path

    @path.setter
    def path(self, path: str):
        self._endpoint.path = path
        self._currency = None

    @property
    def params(self) -> Dict[str, str]:
        return self._endpoint.params

    def get_param(self, key: str) -> Optional[str]:
        return self._endpoint.get_param(key)

    def set_params(self, params: Dict[str, str]) -> None:
        """Проверяет и добавляет параметры для текущего типа данных"""
        params = validate_params(self._data_type, params)

        if self._data_type == CURRENTPRICE_DATA_TYPE and api_config.CURRENCY_PARAM in params:
            self._endpoint = self._construct_api_endpoint(self._data_type, params)
            return

        self._endpoint.update_params(params)

    def delete_param(self, key: str) -> None:
        self._endpoint.delete_param(key)

    def delete_many_params(self, keys: Iterable[str]) -> None:
        self._endpoint.delete_many_params(keys)

    def delete_all_params(self) -> None:
        self._endpoint.delete_all_params()

    @property
    def valid_params(self) -> Optional[List[str]]:
        if self._data_type == CURRENTPRICE_DATA_TYPE:
            return list(api_config.VALID_CURRENTPRICE_PARAMS)
        elif self._data_type == HISTORICAL_DATA_TYPE:
            return list(api_config.VALID_HISTORICAL_PARAMS)

        logger.warning(f"[CoindeskAPIClient] Data type error: incorrect data type setup for {self._data_type}")
        return None

    # Параметры HTTP запроса
    @property
    def retries(self) -> int:
        return self._http.config.retries

    @retries.setter
    def retries(self, value: int):
        self._http.config.retries = value

    @property
    def redirects(self) -> int:
        return self._http.config.redirects

    @redirects.setter
    def redirects(self, value: int):
        self._http.config.redirects = value

    @property
    def timeout(self) -> int:
        return self._http.config.timeout

    @timeout.setter
    def timeout(self, value: int):
        self._http.config.timeout = value

    @property
    def backoff(self) -> bool:
        return self._http.config.backoff

    @backoff.setter
    def backoff(self, value: bool):
        self._http.config.backoff = value

    @log_action()
    def get(self, raw: bool = False) -> Any:
        """Выполняет запрос к текущему endpoint"""
        try:
            return self._http.get(self.url, raw)
        except TransportError as e:
            message = f"Could not get response. {e}"
            logger.error(f"[CoindeskAPIClient] API call error: {message}")
            raise TransportError(message, e.status_code) from e

    @log_action()
    def fetch(self) -> CoindeskAPIResponse:
        """Выполняет запрос и проверяет ответ по схеме текущего типа данных"""
        payload = self.get()
        return CoindeskAPIResponse.parse(payload, self._data_type, self._currency)

    def _load_local_currencies(self) -> List[SupportedCurrency]:
        try:
            return self._storage.load()
        except PersistenceError as e:
            logger.warning(f"[CoindeskAPIClient] Using in-memory currencies: {e}")
            return get_supported_currencies()

    def _parse_supported_currencies(self, payload: Any) -> List[SupportedCurrency]:
        try:
            return parse_currency_records(payload)
        except ValidationError as e:
            error = ResponseValidationError([('<root>', str(e))])
            logger.error(f"[CoindeskAPIClient] Currencies validation error: {error}")
            raise error from e

    @log_action(verbose=True)
    def get_supported_currencies(self) -> List[SupportedCurrency]:
        """
        Получает список валют из API

        При ошибке запроса возвращает локальный список. Если API вернул
        валюты, которых нет в локальном файле, файл перезаписывается.
        """
        local_currencies = self._load_local_currencies()
        resource = api_config.API_ENDPOINTS[SUPPORTED_CURRENCIES_DATA_TYPE]
        url = f"{get_api_path()}/{resource}"

        try:
            validate_url(url)
            payload = self._http.get(url)
            currencies = self._parse_supported_currencies(payload)
        except (TransportError, ValidationError, ResponseValidationError) as e:
            logger.warning(f"[CoindeskAPIClient] Get currencies error: {e}")
            return local_currencies

        local_codes = {currency.code for currency in local_currencies}
        missing = sorted(currency.code for currency in currencies if currency.code not in local_codes)
        if missing:
            logger.warning(f"[CoindeskAPIClient] Currency error: missing currencies {', '.join(missing)} in settings.")
            try:
                self._storage.save(currencies)
            except PersistenceError as e:
                logger.error(f"[CoindeskAPIClient] Currencies were not persisted: {e}")

        register_currencies(currencies)
        return currencies
