import requests
import time
import logging
from typing import Any, Dict, Optional

from .config import http_config
from ..core.exceptions import TransportError
from ..core.validators import (validate_backoff, validate_redirects,
                               validate_retries, validate_timeout)

logger = logging.getLogger(__name__)

class RequestConfig:
    """Параметры HTTP запроса: повторы, редиректы, таймаут и backoff"""

    def __init__(self,
                 retries: int = http_config.DEFAULT_RETRIES,
                 redirects: int = http_config.DEFAULT_REDIRECTS,
                 timeout: int = http_config.DEFAULT_TIMEOUT_MS,
                 backoff: bool = http_config.DEFAULT_BACKOFF):
        self._retries = validate_retries(retries)
        self._redirects = validate_redirects(redirects)
        self._timeout = validate_timeout(timeout)
        self._backoff = validate_backoff(backoff)

    @property
    def retries(self) -> int:
        return self._retries

    @retries.setter
    def retries(self, value: int):
        self._retries = validate_retries(value)

    @property
    def redirects(self) -> int:
        return self._redirects

    @redirects.setter
    def redirects(self, value: int):
        self._redirects = validate_redirects(value)

    @property
    def timeout(self) -> int:
        """Таймаут одной попытки в миллисекундах"""
        return self._timeout

    @timeout.setter
    def timeout(self, value: int):
        self._timeout = validate_timeout(value)

    @property
    def backoff(self) -> bool:
        return self._backoff

    @backoff.setter
    def backoff(self, value: bool):
        self._backoff = validate_backoff(value)

    def __repr__(self):
        return (f"RequestConfig(retries={self.retries}, redirects={self.redirects}, "
                f"timeout={self.timeout}, backoff={self.backoff})")


class CoindeskHttpRequest:
    """HTTP транспорт с повторами и экспоненциальным backoff"""

    def __init__(self, config: Optional[RequestConfig] = None,
                 session: Optional[requests.Session] = None):
        self.config = config or RequestConfig()
        self.session = session or requests.Session()

    def __repr__(self):
        return f"CoindeskHttpRequest({self.config!r})"

    def get(self, url: str, raw: bool = False) -> Any:
        """
        Выполняет GET запрос с повторами

        Args:
            url: Полный URL запроса
            raw: Вернуть requests.Response вместо декодированного JSON

        Raises:
            TransportError: нет ответа после всех попыток, статус 403/404/500
                или тело ответа не является JSON
        """
        options = self._get_request_options()
        response = self._http_request(url, options)

        self._check_response_status(response)
        if raw:
            return response

        try:
            return response.json()
        except ValueError as e:
            message = f"Unable to decode JSON response from {url} - {e}"
            logger.error(f"[CoindeskHttpRequest] Response error: {message}")
            raise TransportError(message, response.status_code) from e

    def _get_request_options(self) -> Dict[str, Any]:
        return {
            'headers': self._get_headers(),
            'allow_redirects': self.config.redirects > 0,
            'timeout': self._get_timeout_seconds(),
        }

    def _get_timeout_seconds(self) -> Optional[float]:
        # 0 означает "без таймаута"
        if self.config.timeout == 0:
            return None
        return self.config.timeout / 1000

    def _get_headers(self) -> Dict[str, str]:
        return dict(http_config.REQUEST_HEADERS)

    def _http_request(self, url: str, options: Dict[str, Any]) -> requests.Response:
        self.session.max_redirects = self.config.redirects
        retries = self.config.retries
        error_msg = "no attempts made"

        for attempt in range(1, retries + 1):
            try:
                return self.session.get(url, **options)
            except requests.exceptions.RequestException as e:
                error_msg = str(e)
                logger.error(f"[CoindeskHttpRequest] Retry {attempt} request: {error_msg}")

            if attempt < retries:
                wait_ms = self._get_backoff_delay(attempt)
                logger.error(f"[CoindeskHttpRequest] Waiting {wait_ms} ms")
                self._wait_exponential_backoff(wait_ms)

        message = f"No response from Coindesk API url {url} after {retries} attempts: {error_msg}"
        logger.error(f"[CoindeskHttpRequest] Request error: {message}")
        raise TransportError(message)

    def _get_backoff_delay(self, attempt: int) -> int:
        return 2 ** attempt if self.config.backoff else 0

    def _wait_exponential_backoff(self, wait_ms: int) -> None:
        time.sleep(wait_ms / 1000)

    def _check_response_status(self, response: requests.Response) -> None:
        status_code = response.status_code

        if status_code in http_config.CLIENT_ERROR_STATUS_CODES:
            message = f"Response status code {status_code} - {response.reason} (client error)"
            logger.error(f"[CoindeskHttpRequest] Request error: {message}")
            raise TransportError(message, status_code)
        elif status_code in http_config.SERVER_ERROR_STATUS_CODES:
            message = f"Response status code {status_code} - {response.reason} (server error)"
            logger.error(f"[CoindeskHttpRequest] Request error: {message}")
            raise TransportError(message, status_code)

        logger.info(f"[CoindeskHttpRequest] Request success: status code {status_code}")
