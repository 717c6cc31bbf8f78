import json
import os
import tempfile
import logging
from typing import Any, Dict, List, Optional

from .exceptions import PersistenceError, ValidationError
from ..infra.settings import settings

logger = logging.getLogger(__name__)

SUPPORTED_CURRENCIES_KEY = 'SUPPORTED_CURRENCIES'
BUNDLED_CURRENCIES_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'data', 'currencies.json'
)

class SupportedCurrency:
    """Валюта, поддерживаемая Coindesk API"""

    def __init__(self, code: str, name: str):
        self._validate_code(code)
        self._validate_name(name)

        self._code = code.upper()
        self._name = name.strip()

    def _validate_code(self, code: str):
        """Валидация кода валюты"""
        if not isinstance(code, str):
            raise ValidationError(f"Currency code {code!r} must be a string")
        if not 2 <= len(code) <= 5:
            raise ValidationError(f"Currency code {code!r} must have 2 to 5 characters")
        if not code.isalpha():
            raise ValidationError(f"Currency code {code!r} must contain only letters")

    def _validate_name(self, name: str):
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Currency name must not be empty")

    @property
    def code(self) -> str:
        return self._code

    @property
    def name(self) -> str:
        return self._name

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'SupportedCurrency':
        """Создает валюту из записи {currency, country}"""
        if not isinstance(record, dict) or 'currency' not in record:
            raise ValidationError(f"Invalid currency record {record!r}")
        return cls(record['currency'], record.get('country') or record['currency'])

    def to_record(self) -> Dict[str, str]:
        return {'currency': self.code, 'country': self.name}

    def get_display_info(self) -> str:
        return f"{self.code} — {self.name}"

    def __str__(self):
        return self.get_display_info()

    def __repr__(self):
        return f"SupportedCurrency(code={self.code!r}, name={self.name!r})"

    def __eq__(self, other):
        if not isinstance(other, SupportedCurrency):
            return False
        return self.code == other.code

    def __hash__(self):
        return hash(self.code)


def parse_currency_records(records: Any) -> List[SupportedCurrency]:
    """Преобразует список записей {currency, country} в список валют"""
    if not isinstance(records, list):
        raise ValidationError(f"Currency records must be a list, got {type(records).__name__}")
    return [SupportedCurrency.from_record(record) for record in records]


class CurrencyStorage:
    """Локальный JSON файл со списком поддерживаемых валют"""

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.get_currencies_path()

    def _read_document(self, path: str) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            message = f"Unable to read currencies file - {e}"
            logger.error(f"[CurrencyStorage] File error: {message}")
            raise PersistenceError(path, message) from e

        if not isinstance(document, dict) or not isinstance(document.get(SUPPORTED_CURRENCIES_KEY), list):
            message = f"Currencies file has no {SUPPORTED_CURRENCIES_KEY} list"
            logger.error(f"[CurrencyStorage] File error: {message}")
            raise PersistenceError(path, message)
        return document

    def _load_document(self) -> Dict[str, Any]:
        if os.path.exists(self.path):
            return self._read_document(self.path)
        return self._read_document(BUNDLED_CURRENCIES_PATH)

    def load(self) -> List[SupportedCurrency]:
        """Загружает список валют (локальный файл или встроенный список)"""
        document = self._load_document()
        try:
            return parse_currency_records(document[SUPPORTED_CURRENCIES_KEY])
        except ValidationError as e:
            raise PersistenceError(self.path, f"Invalid currency record - {e}") from e

    def save(self, currencies: List[SupportedCurrency]) -> None:
        """Перезаписывает список валют в локальном файле"""
        document = self._load_document()
        document[SUPPORTED_CURRENCIES_KEY] = [currency.to_record() for currency in currencies]

        temp_path = None
        try:
            directory = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(directory, exist_ok=True)
            with tempfile.NamedTemporaryFile(mode='w',
                                             dir=directory,
                                             delete=False,
                                             encoding='utf-8') as temp_file:
                temp_path = temp_file.name
                json.dump(document, temp_file, indent=2, ensure_ascii=False)

            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
            message = f"Unable to write currencies file - {e}"
            logger.error(f"[CurrencyStorage] File error: {message}")
            raise PersistenceError(self.path, message) from e

        logger.info(f"[CurrencyStorage] Saved {len(currencies)} currencies to {self.path}")


# Реестр валют
_currency_registry: Dict[str, SupportedCurrency] = {}

def register_currencies(currencies: List[SupportedCurrency]) -> None:
    """Заменяет содержимое реестра валют"""
    _currency_registry.clear()
    for currency in currencies:
        _currency_registry[currency.code] = currency

def load_currencies(storage: Optional[CurrencyStorage] = None) -> List[SupportedCurrency]:
    """Загружает валюты из хранилища в реестр"""
    currencies = (storage or CurrencyStorage()).load()
    register_currencies(currencies)
    return currencies

def get_supported_currencies() -> List[SupportedCurrency]:
    """Возвращает копию списка поддерживаемых валют"""
    if not _currency_registry:
        try:
            load_currencies()
        except PersistenceError as e:
            logger.warning(f"[CurrencyStorage] Falling back to bundled currencies: {e}")
            load_currencies(CurrencyStorage(BUNDLED_CURRENCIES_PATH))
    return list(_currency_registry.values())

def get_supported_currency_codes() -> List[str]:
    return [currency.code for currency in get_supported_currencies()]
