from unittest import mock
from urllib.parse import parse_qs, urlsplit

from qnsdk.cdn.anti_leech import create_timestamp_antileech_url

URL = "http://www.example.com/testfile.jpg"
NOW = 1_500_000_000


def _make(url=URL, key="secret", duration=3600):
    with mock.patch("time.time", return_value=NOW):
        return create_timestamp_antileech_url(url, key, duration)


def test_source_case_builds_signed_url():
    result = _make()
    assert result.startswith(URL + "?sign=")
    query = parse_qs(urlsplit(result).query)
    assert int(query["t"][0], 16) == NOW + 3600
    sign = query["sign"][0]
    assert len(sign) == 32
    assert all(ch in "0123456789abcdef" for ch in sign)


def test_existing_query_uses_ampersand():
    result = _make(URL + "?v=1")
    assert result.startswith(URL + "?v=1&sign=")
    assert parse_qs(urlsplit(result).query)["v"] == ["1"]


def test_deterministic_for_same_inputs():
    first = _make()
    second = _make()
    assert first.startswith(URL + "?sign=")
    assert first == second


def test_sign_depends_on_key_and_duration():
    base = parse_qs(urlsplit(_make()).query)["sign"][0]
    other_key = parse_qs(urlsplit(_make(key="other")).query)["sign"][0]
    other_time = parse_qs(urlsplit(_make(duration=60)).query)["sign"][0]
    assert base not in (other_key, other_time)


def test_sign_independent_of_query():
    a = parse_qs(urlsplit(_make(URL)).query)["sign"][0]
    b = parse_qs(urlsplit(_make(URL + "?v=1")).query)["sign"][0]
    assert a == b