import gzip

import httpx
import pytest

from seasonal_wind.core.exceptions import AppValidationError, UpstreamServiceError
from seasonal_wind.services.ndbc_client import NdbcClient, decode_payload, normalize_station_id

PLAIN_TEXT = "#YY MM DD hh mm WDIR WSPD GST\n2020 01 01 00 00 180 5.0 7.0\n"


class FakeResponse:
    def __init__(self, content, status_code=200):
        self.content = content
        self.status_code = status_code


class FakeHttpClient:
    def __init__(self, responses, requested=None):
        self._responses = responses
        self._idx = 0
        self.requested = requested if requested is not None else []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def get(self, url, **_kwargs):
        self.requested.append(url)
        response = self._responses[self._idx]
        self._idx += 1
        if isinstance(response, Exception):
            raise response
        return response


def _patch_client(monkeypatch, responses, requested=None):
    monkeypatch.setattr(
        "seasonal_wind.services.ndbc_client.httpx.Client",
        lambda timeout, headers: FakeHttpClient(responses, requested),
    )


def _client():
    return NdbcClient(min_request_interval_seconds=0.0)


def test_build_year_url_is_deterministic():
    url = _client().build_year_url("NCDV2", 2019)
    assert url == (
        "https://www.ndbc.noaa.gov/view_text_file.php"
        "?filename=ncdv2h2019.txt.gz&dir=data/historical/stdmet/"
    )


def test_build_year_url_honours_configured_endpoint():
    client = NdbcClient(base_url="https://mirror.test/view", archive_dir="archive/std/", min_request_interval_seconds=0)
    assert client.build_year_url("44013", 2001) == "https://mirror.test/view?filename=44013h2001.txt.gz&dir=archive/std/"


@pytest.mark.parametrize("station_id", ["", "a", "44013/../x", "station-with-dash"])
def test_normalize_station_id_rejects_invalid_ids(station_id):
    with pytest.raises(AppValidationError, match="Invalid NDBC station id"):
        normalize_station_id(station_id)


def test_decode_payload_decompresses_gzip_signature():
    payload = gzip.compress(PLAIN_TEXT.encode("utf-8"))
    assert payload[:2] == b"\x1f\x8b"
    assert decode_payload(payload) == PLAIN_TEXT


def test_decode_payload_passes_plain_text_through_unchanged():
    assert decode_payload(PLAIN_TEXT.encode("utf-8")) == PLAIN_TEXT
    assert decode_payload(b"<html>error</html>") == "<html>error</html>"


def test_decode_payload_raises_on_broken_gzip():
    with pytest.raises(UpstreamServiceError, match="could not be decompressed"):
        decode_payload(b"\x1f\x8b\x08\x00garbage")


def test_fetch_year_returns_decoded_text_for_gzip_response(monkeypatch):
    requested = []
    _patch_client(monkeypatch, [FakeResponse(gzip.compress(PLAIN_TEXT.encode("utf-8")))], requested)

    text = _client().fetch_year("ncdv2", 2020)

    assert text == PLAIN_TEXT
    assert requested == [_client().build_year_url("ncdv2", 2020)]


def test_fetch_year_returns_none_on_non_success_status(monkeypatch, caplog):
    _patch_client(monkeypatch, [FakeResponse(b"Not Found", status_code=404)])

    assert _client().fetch_year("ncdv2", 2018) is None
    assert "Year 2018: status code 404, skipping" in caplog.text


def test_fetch_year_wraps_transport_errors(monkeypatch):
    _patch_client(monkeypatch, [httpx.ConnectError("connection refused")])

    with pytest.raises(UpstreamServiceError, match="failed"):
        _client().fetch_year("ncdv2", 2020)


def test_fetch_year_wraps_timeouts(monkeypatch):
    _patch_client(monkeypatch, [httpx.ReadTimeout("slow archive")])

    with pytest.raises(UpstreamServiceError, match="timed out"):
        _client().fetch_year("ncdv2", 2020)
