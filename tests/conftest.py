import json
import shutil

import pytest
import requests

from coindesk_hub.core.currencies import (BUNDLED_CURRENCIES_PATH, CurrencyStorage,
                                          load_currencies)


@pytest.fixture(autouse=True)
def bundled_currency_registry():
    """Each test starts with the bundled currency list in the registry."""
    load_currencies(CurrencyStorage(BUNDLED_CURRENCIES_PATH))
    yield
    load_currencies(CurrencyStorage(BUNDLED_CURRENCIES_PATH))


@pytest.fixture
def currencies_path(tmp_path):
    """Writable copy of the bundled currency file."""
    path = tmp_path / "currencies.json"
    shutil.copyfile(BUNDLED_CURRENCIES_PATH, path)
    return str(path)


@pytest.fixture
def storage(currencies_path):
    return CurrencyStorage(currencies_path)


@pytest.fixture
def make_response():
    """Factory for canned requests.Response objects."""
    def _make(payload=None, status=200, reason="OK", url="https://api.coindesk.com/v1/bpi/currentprice.json"):
        response = requests.Response()
        response.status_code = status
        response.reason = reason
        response.url = url
        body = payload if isinstance(payload, (bytes, str)) else json.dumps(payload)
        response._content = body.encode("utf-8") if isinstance(body, str) else body
        response.headers["Content-Type"] = "application/json"
        return response

    return _make


@pytest.fixture
def time_block():
    return {
        "updated": "Oct 19, 2026 10:15:00 UTC",
        "updatedISO": "2026-10-19T10:15:00+00:00",
        "updateduk": "Oct 19, 2026 at 11:15 BST",
    }


@pytest.fixture
def currentprice_payload(time_block):
    def rate(code, symbol, description, value):
        return {
            "code": code,
            "symbol": symbol,
            "rate": f"{value:,.4f}",
            "description": description,
            "rate_float": value,
        }

    return {
        "time": time_block,
        "disclaimer": "This data was produced from the CoinDesk Bitcoin Price Index (USD).",
        "chartName": "Bitcoin",
        "bpi": {
            "USD": rate("USD", "&#36;", "United States Dollar", 67321.5012),
            "GBP": rate("GBP", "&pound;", "British Pound Sterling", 51873.2204),
            "EUR": rate("EUR", "&euro;", "Euro", 61934.7781),
        },
    }


@pytest.fixture
def currentprice_currency_payload(time_block):
    return {
        "time": time_block,
        "disclaimer": "This data was produced from the CoinDesk Bitcoin Price Index (USD).",
        "bpi": {
            "USD": {
                "code": "USD",
                "rate": "67,321.5012",
                "description": "United States Dollar",
                "rate_float": 67321.5012,
            },
            "JPY": {
                "code": "JPY",
                "rate": "10,052,418.2000",
                "description": "Japanese Yen",
                "rate_float": 10052418.2,
            },
        },
    }


@pytest.fixture
def historical_payload(time_block):
    return {
        "time": {
            "updated": time_block["updated"],
            "updatedISO": time_block["updatedISO"],
        },
        "disclaimer": "This data was produced from the CoinDesk Bitcoin Price Index.",
        "bpi": {
            "2026-10-01": 63012.44,
            "2026-10-02": 62110.9,
            "2026-10-03": 64005,
        },
    }
