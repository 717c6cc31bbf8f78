import copy
import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .schemas import get_response_schema
from ..core.exceptions import ResponseValidationError

logger = logging.getLogger(__name__)

class CoindeskAPIResponse:
    """Проверенный ответ Coindesk API (только для чтения)"""

    def __init__(self, response: Dict[str, Any], model: BaseModel,
                 data_type: str, currency: Optional[str] = None):
        self._response = copy.deepcopy(response)
        self._model = model
        self._data_type = data_type
        self._currency = currency

    def __repr__(self):
        return f"CoindeskAPIResponse(data_type={self._data_type!r}, currency={self._currency!r})"

    @classmethod
    def parse(cls, response: Any, data_type: str, currency: Optional[str] = None) -> 'CoindeskAPIResponse':
        """
        Проверяет ответ по схеме и оборачивает его

        Raises:
            SchemaLookupError: нет схемы для типа данных и валюты
            ResponseValidationError: ответ не соответствует схеме
        """
        model = cls.validate(response, data_type, currency)
        return cls(response, model, data_type, currency)

    @staticmethod
    def validate(response: Any, data_type: str, currency: Optional[str] = None) -> BaseModel:
        schema = get_response_schema(data_type, currency)
        try:
            return schema.model_validate(response, context={'currency': currency})
        except PydanticValidationError as e:
            violations = [
                ('.'.join(str(part) for part in error['loc']) or '<root>', error['msg'])
                for error in e.errors()
            ]
            error = ResponseValidationError(violations)
            logger.error(f"[CoindeskAPIResponse] Validation error: {error}")
            raise error from e

    @property
    def data_type(self) -> str:
        return self._data_type

    @property
    def currency(self) -> Optional[str]:
        return self._currency

    @property
    def model(self) -> BaseModel:
        """Типизированная копия ответа"""
        return self._model.model_copy(deep=True)

    @property
    def response(self) -> Dict[str, Any]:
        return copy.deepcopy(self._response)

    @property
    def json_response(self) -> str:
        return json.dumps(self._response)

    @property
    def response_items(self) -> List[str]:
        return list(self._response.keys())

    def get_response_item(self, item: str) -> Any:
        if item not in self._response:
            logger.warning(f"[CoindeskAPIResponse] Response item error: invalid provided response item {item}")
            return None
        return copy.deepcopy(self._response[item])
