from typing import List, Optional, Tuple


class CoindeskHubError(Exception):
    """Базовое исключение клиента Coindesk API"""
    pass

class ValidationError(CoindeskHubError):
    """Ошибка валидации входных данных"""
    pass

class TransportError(CoindeskHubError):
    """Ошибка HTTP запроса к Coindesk API"""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        self.reason = reason
        self.status_code = status_code
        super().__init__(reason)

class SchemaLookupError(CoindeskHubError):
    """Схема ответа не найдена для типа данных"""

    def __init__(self, data_type: Optional[str], currency: Optional[str] = None):
        self.data_type = data_type
        self.currency = currency
        super().__init__(f"Schema not found for data type {data_type} and currency {currency}")

class ResponseValidationError(CoindeskHubError):
    """Ответ API не соответствует схеме"""

    def __init__(self, violations: List[Tuple[str, str]]):
        self.violations = violations
        details = "; ".join(f"{location}: {message}" for location, message in violations)
        super().__init__(f"Response validation failed: {details}")

class PersistenceError(CoindeskHubError):
    """Ошибка чтения или записи локального файла валют"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason} ({path})")
