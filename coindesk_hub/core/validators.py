import re
import logging
from datetime import date
from typing import Any, Dict, Iterable, Optional

from .exceptions import ValidationError
from .currencies import get_supported_currency_codes
from ..api.config import api_config, http_config, CURRENTPRICE_DATA_TYPE, HISTORICAL_DATA_TYPE

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$')
URL_PATTERN = re.compile(
    r'^(?P<scheme>https?)://'
    r'(?P<host>[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*)'
    r'(?::\d{1,5})?'
    r'(?P<path>/[^\s?#]*)?'
    r'(?:\?[^\s#]*)?$'
)


def _fail(component: str, kind: str, message: str) -> ValidationError:
    logger.error(f"[{component}] {kind} error: {message}")
    return ValidationError(message)


def validate_data_type(data_type: Any) -> str:
    """Проверяет тип данных API"""
    if data_type not in api_config.VALID_DATA_TYPES:
        message = f"Data type must be {', '.join(api_config.VALID_DATA_TYPES)}, got {data_type!r}."
        raise _fail("CoindeskAPIClient", "Data type", message)
    return data_type


def _check_param_names(data_type: str, params: Dict[str, Any], valid_params: Iterable[str]) -> None:
    for param in params:
        if param not in valid_params:
            message = f"Invalid param {param!r} for {data_type} data type."
            raise _fail("CoindeskAPIClient", "Param", message)


def validate_params(data_type: Optional[str], params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """
    Проверяет параметры запроса для типа данных

    Returns:
        Новый словарь с нормализованными значениями

    Raises:
        ValidationError: неизвестный параметр или недопустимое значение
    """
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise _fail("CoindeskAPIClient", "Param", f"Params must be a mapping, got {type(params).__name__}.")

    validated = dict(params)

    if data_type == CURRENTPRICE_DATA_TYPE:
        _check_param_names(data_type, params, api_config.VALID_CURRENTPRICE_PARAMS)
        if api_config.CURRENCY_PARAM in params:
            validated[api_config.CURRENCY_PARAM] = validate_currency(params[api_config.CURRENCY_PARAM])

    elif data_type == HISTORICAL_DATA_TYPE:
        _check_param_names(data_type, params, api_config.VALID_HISTORICAL_PARAMS)
        if api_config.INDEX_PARAM in params:
            validated[api_config.INDEX_PARAM] = validate_index(params[api_config.INDEX_PARAM])
        if api_config.CURRENCY_PARAM in params:
            validated[api_config.CURRENCY_PARAM] = validate_currency(params[api_config.CURRENCY_PARAM])
        if api_config.START_PARAM in params:
            validated[api_config.START_PARAM] = validate_date(params[api_config.START_PARAM])
        if api_config.END_PARAM in params:
            validated[api_config.END_PARAM] = validate_date(params[api_config.END_PARAM])
        if api_config.FOR_PARAM in params:
            validated[api_config.FOR_PARAM] = validate_for(params[api_config.FOR_PARAM])

    else:
        message = f"Unable to validate params for data type {data_type!r}."
        raise _fail("CoindeskAPIClient", "Data type", message)

    # Параметр currency может быть None (значит "не задан")
    return {key: value for key, value in validated.items() if value is not None}


def validate_index(index: Any) -> str:
    if index not in api_config.VALID_INDEX:
        message = f"'index' must be {', '.join(api_config.VALID_INDEX)}, got {index!r}."
        raise _fail("CoindeskAPIClient", "Index", message)
    return index


def validate_for(for_param: Any) -> str:
    if for_param not in api_config.VALID_FOR:
        message = f"'for' must be {', '.join(api_config.VALID_FOR)}, got {for_param!r}."
        raise _fail("CoindeskAPIClient", "For", message)
    return for_param


def validate_currency(currency: Any, known: Optional[Iterable[str]] = None) -> Optional[str]:
    """Проверяет код валюты по списку поддерживаемых валют"""
    if currency is None:
        return None
    if not isinstance(currency, str):
        message = f"Currency type {type(currency).__name__} must be 'str'."
        raise _fail("CoindeskAPIClient", "Currency", message)

    currencies = set(known) if known is not None else set(get_supported_currency_codes())
    if currency not in currencies:
        message = f"Invalid provided currency {currency!r}."
        raise _fail("CoindeskAPIClient", "Currency", message)
    return currency


def validate_date(value: Any) -> str:
    """Проверяет дату формата YYYY-MM-DD и нормализует ее"""
    match = DATE_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if not match:
        message = f"Date {value!r} must fulfill the pattern YYYY-MM-DD."
        raise _fail("CoindeskAPIClient", "Date", message)

    year, month, day = (int(group) for group in match.groups())
    try:
        parsed = date(year, month, day)
    except ValueError as e:
        message = f"Date {value!r} is not a valid calendar date: {e}."
        raise _fail("CoindeskAPIClient", "Date", message) from e

    return parsed.isoformat()


def _validate_limit(value: Any, name: str, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        message = f"{name.capitalize()} type {type(value).__name__} must be 'int'."
        raise _fail("CoindeskHttpRequest", name.capitalize(), message)
    if value < 0:
        message = f"{name.capitalize()} must be a non-negative integer, got {value}."
        raise _fail("CoindeskHttpRequest", name.capitalize(), message)

    if value > maximum:
        logger.warning(f"[CoindeskHttpRequest] Request max {name}: {maximum}.")
        return maximum
    return value


def validate_retries(retries: Any) -> int:
    return _validate_limit(retries, 'retries', http_config.REQUEST_MAX_RETRIES)


def validate_redirects(redirects: Any) -> int:
    return _validate_limit(redirects, 'redirects', http_config.REQUEST_MAX_REDIRECTS)


def validate_timeout(timeout: Any) -> int:
    return _validate_limit(timeout, 'timeout', http_config.REQUEST_MAX_TIMEOUT_MS)


def validate_backoff(backoff: Any) -> bool:
    if not isinstance(backoff, bool):
        message = f"Backoff type {type(backoff).__name__} must be 'bool'."
        raise _fail("CoindeskHttpRequest", "Backoff", message)
    return backoff


def validate_url(url: Any) -> str:
    """Проверяет, что строка похожа на URL (схема, хост, путь)"""
    if not isinstance(url, str) or not URL_PATTERN.fullmatch(url):
        message = f"Invalid url {url!r}."
        raise _fail("CoindeskAPIClient", "Url", message)
    return url
