from unittest import mock

import pytest
import requests

from core.cloud.figma_client import FigmaFileClient
from core.document_reader import DocumentLoadError

FILE_JSON = {
    "name": "Shop",
    "document": {"id": "0:0", "type": "DOCUMENT", "children": [
        {"id": "1:1", "type": "CANVAS", "name": "Home", "children": []},
    ]},
}


def fake_response(status_code=200, payload=None, text=""):
    response = mock.Mock()
    response.status_code = status_code
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def get():
    with mock.patch("core.cloud.figma_client.requests.get") as patched:
        yield patched


def test_missing_token_skips_the_request(get):
    data, error = FigmaFileClient().fetch_file("abc")
    assert data is None
    assert "FIGMA_TOKEN" in error
    get.assert_not_called()


def test_token_is_read_from_environment(monkeypatch):
    monkeypatch.setenv("FIGMA_TOKEN", "env-token")
    assert FigmaFileClient().token == "env-token"


def test_successful_fetch(get):
    get.return_value = fake_response(payload=FILE_JSON)
    data, error = FigmaFileClient("secret", api_base="https://example.test/v1/").fetch_file(" abc ")

    assert error is None
    assert data == FILE_JSON
    args, kwargs = get.call_args
    assert args[0] == "https://example.test/v1/files/abc"
    assert kwargs["headers"] == {"X-Figma-Token": "secret"}
    assert kwargs["params"] == {"geometry": "paths"}


@pytest.mark.parametrize("status, expected", [
    (401, "Access denied"),
    (403, "Access denied"),
    (404, "File not found"),
    (500, "API error 500: boom"),
])
def test_http_errors(get, status, expected):
    get.return_value = fake_response(status_code=status, text="boom")
    data, error = FigmaFileClient("secret").fetch_file("abc")
    assert data is None
    assert error.startswith(expected)


def test_invalid_json(get):
    get.return_value = fake_response(payload=ValueError("no json"))
    data, error = FigmaFileClient("secret").fetch_file("abc")
    assert data is None
    assert error.startswith("Invalid API response")


@pytest.mark.parametrize("exc, expected", [
    (requests.exceptions.Timeout(), "Connection timed out"),
    (requests.exceptions.ConnectionError("refused"), "Request failed: refused"),
])
def test_network_errors(get, exc, expected):
    get.side_effect = exc
    data, error = FigmaFileClient("secret").fetch_file("abc")
    assert data is None
    assert error == expected


def test_empty_key(get):
    assert FigmaFileClient("secret").fetch_file("  ") == (None, "File key is empty")
    get.assert_not_called()


def test_load_document(get):
    get.return_value = fake_response(payload=FILE_JSON)
    doc = FigmaFileClient("secret").load_document("abc")
    assert doc.name == "Shop"
    assert [p.name for p in doc.pages] == ["Home"]


def test_load_document_raises_on_error(get):
    get.return_value = fake_response(status_code=404)
    with pytest.raises(DocumentLoadError, match="File not found"):
        FigmaFileClient("secret").load_document("abc")
