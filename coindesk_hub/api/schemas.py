import logging
from datetime import datetime
from typing import Annotated, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, ValidationInfo, field_validator, model_validator

from .config import CURRENTPRICE_DATA_TYPE, HISTORICAL_DATA_TYPE
from ..core.exceptions import SchemaLookupError

logger = logging.getLogger(__name__)

RATE_PATTERN = r'^[0-9.,]+$'
CURRENCY_CODE_PATTERN = r'^[A-Z]{3}$'
DATE_KEY_PATTERN = r'^\d{4}-\d{2}-\d{2}$'

# Блоки фиксированной структуры: лишние ключи запрещены
FIXED_BLOCK_CONFIG = ConfigDict(frozen=True, extra="forbid")

CurrencyCode = Annotated[str, Field(pattern=CURRENCY_CODE_PATTERN)]
DateKey = Annotated[str, Field(pattern=DATE_KEY_PATTERN)]


class TimeBlock(BaseModel):
    model_config = FIXED_BLOCK_CONFIG

    updated: str = Field(min_length=1)
    updatedISO: datetime


class CurrentPriceTime(TimeBlock):
    updateduk: str = Field(min_length=1)


class CurrencyRate(BaseModel):
    """Курс BTC в одной валюте"""
    model_config = FIXED_BLOCK_CONFIG

    code: CurrencyCode
    rate: str = Field(pattern=RATE_PATTERN)
    description: str = Field(min_length=1)
    rate_float: PositiveFloat


class SymbolCurrencyRate(CurrencyRate):
    symbol: str = Field(min_length=1)


class CurrentPriceBpi(BaseModel):
    model_config = FIXED_BLOCK_CONFIG

    USD: SymbolCurrencyRate
    GBP: SymbolCurrencyRate
    EUR: SymbolCurrencyRate

    @model_validator(mode='after')
    def check_codes(self) -> 'CurrentPriceBpi':
        for key in ('USD', 'GBP', 'EUR'):
            if getattr(self, key).code != key:
                raise ValueError(f"bpi.{key}.code must be {key}")
        return self


class CurrentPriceResponse(BaseModel):
    """Ответ currentprice.json"""
    model_config = ConfigDict(frozen=True)

    time: CurrentPriceTime
    chartName: str = Field(pattern=r'^[A-Za-z0-9]+$')
    disclaimer: str
    bpi: CurrentPriceBpi


class CurrentPriceCurrencyResponse(BaseModel):
    """Ответ currentprice/{CUR}.json"""
    model_config = ConfigDict(frozen=True)

    time: CurrentPriceTime
    disclaimer: str
    bpi: Dict[CurrencyCode, CurrencyRate] = Field(min_length=1)

    @field_validator('bpi')
    @classmethod
    def check_bpi(cls, bpi: Dict[str, CurrencyRate], info: ValidationInfo) -> Dict[str, CurrencyRate]:
        for key, rate in bpi.items():
            if rate.code != key:
                raise ValueError(f"bpi.{key}.code must be {key}, got {rate.code}")

        currency = (info.context or {}).get('currency')
        if currency and currency not in bpi:
            raise ValueError(f"bpi has no rate for requested currency {currency}")
        return bpi


class HistoricalResponse(BaseModel):
    """Ответ historical/close.json"""
    model_config = ConfigDict(frozen=True)

    time: TimeBlock
    disclaimer: str
    bpi: Dict[DateKey, PositiveFloat]


def get_response_schema(data_type: Optional[str], currency: Optional[str] = None) -> Type[BaseModel]:
    """Выбирает схему ответа по типу данных и валюте"""
    if data_type == CURRENTPRICE_DATA_TYPE:
        if currency is None:
            return CurrentPriceResponse
        return CurrentPriceCurrencyResponse
    elif data_type == HISTORICAL_DATA_TYPE:
        return HistoricalResponse

    error = SchemaLookupError(data_type, currency)
    logger.error(f"[CoindeskAPIResponse] Schema error: {error}")
    raise error
