import json
import logging
from unittest.mock import patch

import pytest
import requests

from coindesk_hub.api.client import CoindeskAPIClient
from coindesk_hub.api.http_client import CoindeskHttpRequest, RequestConfig
from coindesk_hub.core.currencies import SupportedCurrency, get_supported_currency_codes
from coindesk_hub.core.exceptions import (ResponseValidationError, TransportError,
                                          ValidationError)

BASE = "https://api.coindesk.com/v1/bpi"


@pytest.fixture
def client(storage):
    return CoindeskAPIClient("historical", {"index": "USD", "start": "2021-1-1", "end": "2021-01-31"},
                             retries=2, storage=storage)


def test_client_builds_historical_url(client):
    assert client.url == f"{BASE}/historical/close.json?index=USD&start=2021-01-01&end=2021-01-31"
    assert client.valid_params == ["index", "currency", "start", "end", "for"]


def test_client_currentprice_currency_url(storage):
    client = CoindeskAPIClient("currentprice", {"currency": "EUR"}, storage=storage)

    assert client.url == f"{BASE}/currentprice/EUR.json"
    assert client.currency == "EUR"
    assert client.params == {}


def test_client_rejects_invalid_params():
    with pytest.raises(ValidationError):
        CoindeskAPIClient("currentprice", {"index": "USD"})
    with pytest.raises(ValidationError):
        CoindeskAPIClient(None, {"index": "USD"})


def test_client_without_data_type(caplog):
    client = CoindeskAPIClient()

    assert client.url == f"{BASE}/"
    with caplog.at_level(logging.WARNING, logger="coindesk_hub"):
        assert client.valid_params is None


def test_switching_to_currentprice_resets_params(client):
    client.data_type = "currentprice"

    assert client.url == f"{BASE}/currentprice.json"
    assert client.params == {}


def test_switching_to_historical_keeps_base(storage):
    client = CoindeskAPIClient("currentprice", {"currency": "EUR"}, storage=storage)

    client.data_type = "historical"

    assert client.url == f"{BASE}/historical/close.json"
    assert client.currency is None


def test_set_params_validates_against_data_type(client):
    client.set_params({"for": "yesterday"})
    assert client.get_param("for") == "yesterday"

    with pytest.raises(ValidationError):
        client.set_params({"for": "tomorrow"})
    with pytest.raises(ValidationError):
        client.set_params({"limit": "5"})


def test_set_params_currentprice_currency_moves_to_path(storage):
    client = CoindeskAPIClient("currentprice", storage=storage)

    client.set_params({"currency": "GBP"})

    assert client.url == f"{BASE}/currentprice/GBP.json"


def test_path_setter_and_delete_params(client):
    client.delete_param("index")
    assert "index" not in client.params

    client.delete_many_params(["start"])
    assert client.params == {"end": "2021-01-31"}

    client.delete_all_params()
    assert client.url == f"{BASE}/historical/close.json"

    client.set_params({"index": "CNY"})
    client.path = "/v1/bpi/currentprice.json"
    assert client.url == f"{BASE}/currentprice.json"


def test_request_config_passthrough(client):
    assert client.retries == 2
    client.timeout = 10 ** 9
    assert client.timeout == 60000
    with pytest.raises(ValidationError):
        client.backoff = None


def test_get_returns_payload(client, make_response, historical_payload):
    with patch.object(client.http.session, "get", return_value=make_response(historical_payload)) as mock_get:
        assert client.get() == historical_payload

    assert mock_get.call_args.args[0] == client.url


def test_get_404_fails_immediately(client, make_response, mocker):
    sleep = mocker.patch("coindesk_hub.api.http_client.time.sleep")
    response = make_response({"message": "missing"}, status=404, reason="Not Found")

    with patch.object(client.http.session, "get", return_value=response) as mock_get:
        with pytest.raises(TransportError) as exc:
            client.get()

    assert mock_get.call_count == 1
    sleep.assert_not_called()
    assert "Could not get response" in str(exc.value)
    assert "404" in str(exc.value)
    assert exc.value.status_code == 404


def test_get_logs_action(client, make_response, historical_payload, caplog):
    with patch.object(client.http.session, "get", return_value=make_response(historical_payload)):
        with caplog.at_level(logging.INFO, logger="coindesk_hub.actions"):
            client.get()

    messages = [r.getMessage() for r in caplog.records if r.name == "coindesk_hub.actions"]
    assert messages and messages[0].startswith("GET url=")
    assert "result=OK" in messages[0]


def test_fetch_parses_with_active_schema(storage, make_response, currentprice_currency_payload):
    client = CoindeskAPIClient("currentprice", {"currency": "JPY"}, storage=storage)

    with patch.object(client.http.session, "get", return_value=make_response(currentprice_currency_payload)):
        response = client.fetch()

    assert response.currency == "JPY"
    assert response.model.bpi["JPY"].rate_float == pytest.approx(10052418.2)


def test_fetch_rejects_invalid_payload(client, make_response, historical_payload):
    historical_payload["bpi"]["2026-10-01"] = -1

    with patch.object(client.http.session, "get", return_value=make_response(historical_payload)):
        with pytest.raises(ResponseValidationError):
            client.fetch()


def test_client_accepts_injected_transport(storage):
    http = CoindeskHttpRequest(RequestConfig(retries=1, backoff=False))
    client = CoindeskAPIClient("historical", http=http, storage=storage)
    assert client.http is http
    assert client.retries == 1


def _currency_records(*codes):
    return [{"currency": code, "country": f"{code} name"} for code in codes]


def test_get_supported_currencies_refreshes_local_file(storage, currencies_path, make_response, caplog):
    """A currency missing locally triggers a rewrite of the local file"""
    client = CoindeskAPIClient(storage=storage)
    payload = _currency_records("USD", "EUR", "XBT")

    with patch.object(client.http.session, "get", return_value=make_response(payload)):
        with caplog.at_level(logging.WARNING, logger="coindesk_hub"):
            currencies = client.get_supported_currencies()

    assert [c.code for c in currencies] == ["USD", "EUR", "XBT"]
    with open(currencies_path, encoding="utf-8") as f:
        saved = json.load(f)
    assert {"currency": "XBT", "country": "XBT name"} in saved["SUPPORTED_CURRENCIES"]
    assert any("XBT" in r.getMessage() for r in caplog.records if r.levelno == logging.WARNING)
    # New code is now accepted by parameter validation
    assert "XBT" in get_supported_currency_codes()
    CoindeskAPIClient("currentprice", {"currency": "XBT"}, storage=storage)


def test_get_supported_currencies_without_new_codes_keeps_file(storage, currencies_path, make_response):
    client = CoindeskAPIClient(storage=storage)
    with open(currencies_path, encoding="utf-8") as f:
        before = f.read()

    with patch.object(client.http.session, "get", return_value=make_response(_currency_records("USD", "EUR"))):
        currencies = client.get_supported_currencies()

    assert currencies == [SupportedCurrency("USD", "x"), SupportedCurrency("EUR", "x")]
    with open(currencies_path, encoding="utf-8") as f:
        assert f.read() == before


def test_get_supported_currencies_falls_back_on_transport_error(storage, mocker):
    mocker.patch("coindesk_hub.api.http_client.time.sleep")
    client = CoindeskAPIClient(retries=2, storage=storage)

    with patch.object(client.http.session, "get", side_effect=requests.exceptions.ConnectionError("down")):
        currencies = client.get_supported_currencies()

    assert SupportedCurrency("USD", "United States Dollar") in currencies
    assert len(currencies) == len(storage.load())


def test_get_supported_currencies_falls_back_on_bad_payload(storage, make_response):
    client = CoindeskAPIClient(storage=storage)

    with patch.object(client.http.session, "get", return_value=make_response({"currency": "USD"})):
        currencies = client.get_supported_currencies()

    assert currencies == storage.load()


def test_get_supported_currencies_returns_fetched_list_when_persist_fails(storage, make_response, mocker, caplog):
    client = CoindeskAPIClient(storage=storage)
    mocker.patch("coindesk_hub.core.currencies.os.replace", side_effect=OSError("read-only"))

    with patch.object(client.http.session, "get", return_value=make_response(_currency_records("XBT"))):
        with caplog.at_level(logging.ERROR, logger="coindesk_hub"):
            currencies = client.get_supported_currencies()

    assert [c.code for c in currencies] == ["XBT"]
    assert "XBT" not in [c.code for c in storage.load()]
    assert any("not persisted" in r.getMessage() for r in caplog.records)
